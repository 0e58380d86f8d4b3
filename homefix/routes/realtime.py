import asyncio
import logging
from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, status
from typing import Optional

from ..database import Backend, get_db
from ..models.auth import Role
from ..services.realtime import ChangeFeed, RequestBoard
from ..utils.auth import resolve_token

realtime_router = APIRouter(tags=["Realtime"])
logger = logging.getLogger(__name__)

def get_feed(websocket: WebSocket) -> Optional[ChangeFeed]:
    return getattr(websocket.app.state, "feed", None)

async def wait_for_disconnect(websocket: WebSocket) -> None:
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return

@realtime_router.websocket("/ws/service-requests")
async def service_request_updates(
    websocket: WebSocket,
    token: str = Query(...),
    db: Backend = Depends(get_db),
    feed: Optional[ChangeFeed] = Depends(get_feed)
):
    """Push a snapshot of all requests, then one message per changed row."""
    try:
        user = await resolve_token(token, db)
    except HTTPException:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    if user.role not in (Role.ADMIN, Role.TECHNICIAN):
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    if feed is None or not feed.running:
        await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
        return

    await websocket.accept()
    board = RequestBoard(db)
    async with feed.subscribe() as queue:
        snapshot = await board.reconcile()
        await websocket.send_json({
            "type": "snapshot",
            "requests": [r.model_dump(mode="json") for r in snapshot]
        })

        listener = asyncio.create_task(wait_for_disconnect(websocket))
        try:
            while True:
                getter = asyncio.create_task(queue.get())
                done, _ = await asyncio.wait({getter, listener}, return_when=asyncio.FIRST_COMPLETED)
                if listener in done:
                    getter.cancel()
                    break
                event = getter.result()
                request = await board.apply(event)
                await websocket.send_json({
                    "type": event.type.value,
                    "id": str(event.id),
                    "request": request.model_dump(mode="json") if request else None
                })
        finally:
            listener.cancel()
    logger.info(f"{user.role.value} {user.email} left the change feed")

__all__ = ["realtime_router"]
