import asyncio
import logging
from typing import Set

from ..models.service_request import RequestStatus, ServiceRequestOut

logger = logging.getLogger(__name__)

# Scheduled hooks; the loop only keeps weak references to tasks
_pending: Set[asyncio.Task] = set()


class Notifier:
    """Customer notification hook called when a request reaches a terminal state."""

    async def request_finished(self, request: ServiceRequestOut, status: RequestStatus) -> None:
        raise NotImplementedError


class LoggingNotifier(Notifier):
    # Delivery (WhatsApp/email) is not wired up; the hook only records intent
    async def request_finished(self, request, status):
        logger.info(
            f"Customer notification queued for request {request.order_reference} "
            f"({request.mobile}): {status.value}"
        )


async def notify_quietly(notifier: Notifier, request: ServiceRequestOut, status: RequestStatus) -> None:
    """Fire the hook; a failing notifier never affects the status write."""
    try:
        await notifier.request_finished(request, status)
    except Exception as e:
        logger.warning(f"Notification for request {request.id} failed: {str(e)}")


def dispatch(notifier: Notifier, request: ServiceRequestOut, status: RequestStatus) -> asyncio.Task:
    """Schedule the hook without waiting for it."""
    task = asyncio.create_task(notify_quietly(notifier, request, status))
    _pending.add(task)
    task.add_done_callback(_pending.discard)
    return task


async def drain() -> None:
    """Wait for every scheduled hook to finish."""
    while _pending:
        await asyncio.gather(*list(_pending))


def get_notifier() -> Notifier:
    return LoggingNotifier()
