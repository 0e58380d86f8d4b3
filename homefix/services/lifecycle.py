# homefix/services/lifecycle.py
import logging
from typing import Dict, FrozenSet, Mapping, Optional
from uuid import UUID

from ..database import Backend
from ..errors import BackendError, InvalidTransition, NotFound
from ..models.service_request import RequestStatus, ServiceRequestOut
from ..models.technician import TechnicianStatus
from ..queries.service_request_queries import get_service_request, update_service_request
from ..queries.technician_queries import update_technician_status
from .notifications import Notifier, dispatch

logger = logging.getLogger(__name__)

S = RequestStatus

TRANSITIONS: Dict[RequestStatus, FrozenSet[RequestStatus]] = {
    S.PENDING: frozenset({S.CONFIRMED, S.CANCELLED}),
    S.CONFIRMED: frozenset({S.IN_PROGRESS, S.CANCELLED}),
    S.IN_PROGRESS: frozenset({S.COMPLETED}),
    S.COMPLETED: frozenset(),
    S.CANCELLED: frozenset(),
}

TERMINAL_STATES = frozenset(s for s, targets in TRANSITIONS.items() if not targets)


class TransitionPolicy:
    """Allowed-transition table consulted before every status write."""

    def __init__(self, table: Mapping[RequestStatus, FrozenSet[RequestStatus]] = TRANSITIONS):
        self.table = table

    def next_states(self, current: RequestStatus) -> FrozenSet[RequestStatus]:
        return self.table.get(current, frozenset())

    def allowed(self, current: RequestStatus, target: RequestStatus) -> bool:
        return target in self.next_states(current)

    def check(self, current: RequestStatus, target: RequestStatus) -> None:
        if not self.allowed(current, target):
            raise InvalidTransition(current.value, target.value)

    def is_terminal(self, status: RequestStatus) -> bool:
        return not self.next_states(status)


default_policy = TransitionPolicy()


async def load_request(db: Backend, request_id: UUID) -> ServiceRequestOut:
    request = await get_service_request(db, request_id)
    if request is None:
        raise NotFound("Service request not found")
    return request


async def transition_status(
    db: Backend,
    request_id: UUID,
    target: RequestStatus,
    *,
    notifier: Optional[Notifier] = None,
    policy: TransitionPolicy = default_policy,
    actor: str = "admin"
) -> ServiceRequestOut:
    """Move a request to ``target`` if the policy allows it.

    Completing a request frees its technician; if that second write fails the
    request stays completed and the failure is logged. Reaching a terminal
    state schedules the notifier in the background, so neither its latency
    nor its failures reach the caller.
    """
    request = await load_request(db, request_id)
    policy.check(request.status, target)

    updated = await update_service_request(db, request_id, {"status": target.value})
    if updated is None:
        raise NotFound("Service request not found")
    logger.info(f"Request {request_id} moved {request.status.value} -> {target.value} by {actor}")

    if target == RequestStatus.COMPLETED and updated.assigned_technician:
        try:
            await update_technician_status(db, updated.assigned_technician, TechnicianStatus.AVAILABLE)
        except BackendError as e:
            logger.error(
                f"Request {request_id} is completed, but freeing technician "
                f"{updated.assigned_technician} failed: {e.detail}"
            )

    if notifier is not None and policy.is_terminal(target):
        dispatch(notifier, updated, target)

    return updated


async def update_admin_notes(
    db: Backend,
    request_id: UUID,
    notes: Optional[str]
) -> ServiceRequestOut:
    await load_request(db, request_id)
    updated = await update_service_request(db, request_id, {"admin_notes": notes})
    if updated is None:
        raise NotFound("Service request not found")
    return updated
