import logging
from fastapi import APIRouter, Depends, HTTPException
from typing import List
from uuid import UUID

from ..database import Backend, get_db
from ..models.auth import ProfileOut, Role
from ..models.service_request import RequestStatus, ServiceRequestOut, StatusUpdate
from ..models.technician import AvailabilityUpdate, TechnicianOut, TechnicianStatus
from ..queries.service_request_queries import list_service_requests
from ..queries.technician_queries import get_technician_by_profile, update_technician_status
from ..services.lifecycle import load_request, transition_status
from ..services.notifications import Notifier, get_notifier
from ..utils.auth import require_role

technicians_router = APIRouter(prefix="/technician", tags=["Technicians"])
logger = logging.getLogger(__name__)

OPEN_STATES = [RequestStatus.PENDING, RequestStatus.CONFIRMED]

async def get_current_technician(
    current_user: ProfileOut = Depends(require_role(Role.TECHNICIAN)),
    db: Backend = Depends(get_db)
) -> TechnicianOut:
    technician = await get_technician_by_profile(db, current_user.id)
    if technician is None:
        raise HTTPException(status_code=404, detail="No technician record linked to this account")
    return technician

@technicians_router.get("/me", response_model=TechnicianOut)
async def get_my_record(technician: TechnicianOut = Depends(get_current_technician)):
    return technician

@technicians_router.put("/me/status", response_model=TechnicianOut)
async def set_availability(
    payload: AvailabilityUpdate,
    technician: TechnicianOut = Depends(get_current_technician),
    db: Backend = Depends(get_db)
):
    if payload.status == TechnicianStatus.BUSY or technician.status == TechnicianStatus.BUSY:
        raise HTTPException(status_code=409, detail="Busy is managed by assignments")
    return await update_technician_status(db, technician.id, payload.status)

@technicians_router.get("/requests", response_model=List[ServiceRequestOut])
async def get_my_tasks(
    technician: TechnicianOut = Depends(get_current_technician),
    db: Backend = Depends(get_db)
):
    """Requests assigned to me that are still running, plus open requests I could take"""
    assigned = await list_service_requests(
        db, [RequestStatus.IN_PROGRESS], assigned_technician=technician.id
    )
    open_requests = [
        r for r in await list_service_requests(db, OPEN_STATES)
        if r.service_type in technician.skills and r.assigned_technician is None
    ]
    return assigned + open_requests

@technicians_router.put("/requests/{request_id}/status", response_model=ServiceRequestOut)
async def update_task_status(
    request_id: UUID,
    payload: StatusUpdate,
    technician: TechnicianOut = Depends(get_current_technician),
    db: Backend = Depends(get_db),
    notifier: Notifier = Depends(get_notifier)
):
    request = await load_request(db, request_id)

    if request.assigned_technician is not None:
        if request.assigned_technician != technician.id:
            raise HTTPException(status_code=403, detail="Not your request")
    elif payload.status in (RequestStatus.CONFIRMED, RequestStatus.CANCELLED):
        if request.service_type not in technician.skills:
            raise HTTPException(status_code=403, detail="Request is outside your skills")
    else:
        raise HTTPException(status_code=409, detail="Request has not been assigned to you")

    return await transition_status(
        db, request_id, payload.status, notifier=notifier, actor=f"technician {technician.id}"
    )

__all__ = ["technicians_router"]
