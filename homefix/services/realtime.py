# homefix/services/realtime.py
"""Row-change events from the backend, applied incrementally to local views."""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Iterable, List, Optional, Set
from uuid import UUID

import asyncpg
from pydantic import ValidationError

from ..database import Backend, connect
from ..models.realtime import ChangeEvent, ChangeType
from ..models.service_request import RequestStatus, ServiceRequestOut
from ..queries.service_request_queries import get_service_request, list_service_requests
from ..schema import CHANGE_CHANNEL

logger = logging.getLogger(__name__)


def parse_event(payload: str) -> Optional[ChangeEvent]:
    try:
        return ChangeEvent.model_validate_json(payload)
    except ValidationError as e:
        logger.warning(f"Dropping malformed change event {payload!r}: {e}")
        return None


class ChangeFeed:
    """Listens on the backend's notification channel and fans events out."""

    def __init__(self, dsn: str, channel: str = CHANGE_CHANNEL):
        self.dsn = dsn
        self.channel = channel
        self._conn: Optional[asyncpg.Connection] = None
        self._subscribers: Set[asyncio.Queue] = set()

    @property
    def running(self) -> bool:
        return self._conn is not None and not self._conn.is_closed()

    async def start(self) -> None:
        self._conn = await connect(self.dsn)
        await self._conn.add_listener(self.channel, self._on_notify)
        logger.info(f"Listening for changes on '{self.channel}'")

    async def stop(self) -> None:
        if self._conn is None:
            return
        try:
            await self._conn.remove_listener(self.channel, self._on_notify)
        finally:
            await self._conn.close()
            self._conn = None

    def _on_notify(self, connection, pid, channel, payload) -> None:
        event = parse_event(payload)
        if event is not None:
            self.publish(event)

    def publish(self, event: ChangeEvent) -> None:
        for queue in self._subscribers:
            queue.put_nowait(event)

    @asynccontextmanager
    async def subscribe(self) -> AsyncIterator[asyncio.Queue]:
        queue: asyncio.Queue = asyncio.Queue()
        self._subscribers.add(queue)
        try:
            yield queue
        finally:
            self._subscribers.discard(queue)


class RequestBoard:
    """Local working set of service requests kept current from change events.

    ``apply`` re-reads only the row an event names; ``reconcile`` re-reads
    the whole set and is the fallback when events may have been missed.
    """

    def __init__(self, db: Backend, statuses: Optional[Iterable[RequestStatus]] = None):
        self.db = db
        self.statuses = frozenset(statuses) if statuses else None
        self.requests: Dict[UUID, ServiceRequestOut] = {}

    def _wanted(self, request: ServiceRequestOut) -> bool:
        return self.statuses is None or request.status in self.statuses

    async def reconcile(self) -> List[ServiceRequestOut]:
        rows = await list_service_requests(self.db, list(self.statuses) if self.statuses else None)
        self.requests = {r.id: r for r in rows}
        return self.snapshot()

    async def apply(self, event: ChangeEvent) -> Optional[ServiceRequestOut]:
        """Apply one event; returns the current row, or None if it left the board."""
        if event.table != "service_requests":
            return None
        if event.type == ChangeType.DELETED:
            self.requests.pop(event.id, None)
            return None

        request = await get_service_request(self.db, event.id)
        if request is None or not self._wanted(request):
            self.requests.pop(event.id, None)
            return None
        self.requests[request.id] = request
        return request

    def snapshot(self) -> List[ServiceRequestOut]:
        return sorted(self.requests.values(), key=lambda r: r.created_at, reverse=True)
