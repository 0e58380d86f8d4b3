# homefix/services/matching.py
"""Ranking available technicians for a request and assigning one of them.

Ranking never picks a winner on its own: the administrator confirms one of
the ranked candidates, then ``assign_technician`` performs two independent
writes (request first, technician second). There is no transaction across
them, so a failure in the second write leaves the request in progress with a
technician that is still marked available. The failure is reported, not
compensated; repeating the same assignment completes the technician write.
"""
import logging
from typing import List
from uuid import UUID

from ..database import Backend
from ..errors import AssignmentFailed, BackendError, InvalidTransition, NotFound
from ..models.service_request import Location, RequestStatus, ServiceType
from ..models.technician import Assignment, TechnicianCandidate, TechnicianStatus
from ..queries.service_request_queries import update_service_request
from ..queries.technician_queries import (
    find_available_technicians,
    get_technician_by_id,
    update_technician_status
)
from ..utils.haversine import haversine
from .lifecycle import load_request

logger = logging.getLogger(__name__)

ASSIGNABLE_STATES = frozenset({RequestStatus.PENDING, RequestStatus.CONFIRMED})


async def rank_candidates(
    db: Backend,
    service_type: ServiceType,
    location: Location
) -> List[TechnicianCandidate]:
    technicians = await find_available_technicians(db, service_type)

    candidates = []
    for tech in technicians:
        if tech.status != TechnicianStatus.AVAILABLE or service_type not in tech.skills:
            continue
        distance = haversine(location.lat, location.lng, tech.location.lat, tech.location.lng)
        candidates.append(TechnicianCandidate(**tech.model_dump(), distance_km=distance))

    # Equal distances fall back to name, then id, so the ranking is stable
    candidates.sort(key=lambda c: (c.distance_km, c.full_name, str(c.id)))
    logger.info(f"Found {len(candidates)} available {service_type.value} technicians")
    return candidates


async def candidates_for_request(db: Backend, request_id: UUID) -> List[TechnicianCandidate]:
    request = await load_request(db, request_id)
    return await rank_candidates(db, request.service_type, request.location)


async def assign_technician(
    db: Backend,
    request_id: UUID,
    technician_id: UUID
) -> Assignment:
    request = await load_request(db, request_id)
    # A previous attempt wrote the request but not the technician
    resuming = (
        request.status == RequestStatus.IN_PROGRESS
        and request.assigned_technician == technician_id
    )
    if request.status not in ASSIGNABLE_STATES and not resuming:
        raise InvalidTransition(request.status.value, RequestStatus.IN_PROGRESS.value)

    technician = await get_technician_by_id(db, technician_id)
    if technician is None:
        raise AssignmentFailed("Technician not found", status_code=404)
    if technician.status != TechnicianStatus.AVAILABLE:
        raise AssignmentFailed("Technician is not available")
    if request.service_type not in technician.skills:
        raise AssignmentFailed(f"Technician does not handle {request.service_type.value} requests")

    if resuming:
        logger.info(f"Retrying technician write for request {request_id}")
        updated = request
    else:
        try:
            updated = await update_service_request(
                db,
                request_id,
                {
                    "assigned_technician": technician_id,
                    "status": RequestStatus.IN_PROGRESS.value,
                }
            )
        except BackendError as e:
            logger.error(f"Assignment of {technician_id} to {request_id} failed on the request write: {e.detail}")
            raise AssignmentFailed("assignment failed", status_code=502) from e
        if updated is None:
            raise NotFound("Service request not found")

    try:
        busy = await update_technician_status(db, technician_id, TechnicianStatus.BUSY)
    except BackendError as e:
        logger.error(
            f"Request {request_id} now points to technician {technician_id}, "
            f"but marking the technician busy failed: {e.detail}"
        )
        raise AssignmentFailed("assignment failed", status_code=502) from e

    logger.info(f"Technician {technician_id} assigned to request {request_id}")
    return Assignment(
        request_id=updated.id,
        technician_id=technician_id,
        request_status=updated.status.value,
        technician_status=busy.status if busy else TechnicianStatus.BUSY
    )
