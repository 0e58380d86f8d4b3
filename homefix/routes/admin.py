from fastapi import APIRouter, Depends, HTTPException, status
from typing import List, Optional
from uuid import UUID

from ..database import Backend, get_db
from ..errors import NoTechniciansAvailable
from ..models.auth import ProfileOut, Role
from ..models.service_request import (
    AdminNotesUpdate,
    AssignmentIn,
    RequestStatus,
    ServiceRequestOut,
    StatusUpdate
)
from ..models.technician import Assignment, TechnicianCandidate, TechnicianCreate, TechnicianOut
from ..queries.service_request_queries import list_service_requests
from ..queries.technician_queries import create_technician, list_technicians
from ..services.lifecycle import load_request, transition_status, update_admin_notes
from ..services.matching import assign_technician, candidates_for_request
from ..services.notifications import Notifier, get_notifier
from ..utils.auth import require_role

admin_router = APIRouter(prefix="/admin", tags=["Admin"])
admin_only = require_role(Role.ADMIN)

@admin_router.get("/requests", response_model=List[ServiceRequestOut])
async def get_requests(
    status: Optional[RequestStatus] = None,
    current_user: ProfileOut = Depends(admin_only),
    db: Backend = Depends(get_db)
):
    return await list_service_requests(db, [status] if status else None)

@admin_router.get("/requests/{request_id}/candidates", response_model=List[TechnicianCandidate])
async def get_candidates(
    request_id: UUID,
    current_user: ProfileOut = Depends(admin_only),
    db: Backend = Depends(get_db)
):
    candidates = await candidates_for_request(db, request_id)
    if not candidates:
        raise NoTechniciansAvailable()
    return candidates

@admin_router.post("/requests/{request_id}/assign", response_model=Assignment)
async def assign(
    request_id: UUID,
    payload: AssignmentIn,
    current_user: ProfileOut = Depends(admin_only),
    db: Backend = Depends(get_db)
):
    return await assign_technician(db, request_id, payload.technician_id)

@admin_router.put("/requests/{request_id}/status", response_model=ServiceRequestOut)
async def update_status(
    request_id: UUID,
    payload: StatusUpdate,
    current_user: ProfileOut = Depends(admin_only),
    db: Backend = Depends(get_db),
    notifier: Notifier = Depends(get_notifier)
):
    if payload.status == RequestStatus.IN_PROGRESS:
        request = await load_request(db, request_id)
        if request.assigned_technician is None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Assign a technician to start this request"
            )
    return await transition_status(
        db, request_id, payload.status, notifier=notifier, actor=f"admin {current_user.email}"
    )

@admin_router.put("/requests/{request_id}/notes", response_model=ServiceRequestOut)
async def update_notes(
    request_id: UUID,
    payload: AdminNotesUpdate,
    current_user: ProfileOut = Depends(admin_only),
    db: Backend = Depends(get_db)
):
    return await update_admin_notes(db, request_id, payload.admin_notes)

@admin_router.get("/technicians", response_model=List[TechnicianOut])
async def get_technicians(
    current_user: ProfileOut = Depends(admin_only),
    db: Backend = Depends(get_db)
):
    return await list_technicians(db)

@admin_router.post("/technicians", response_model=TechnicianOut, status_code=status.HTTP_201_CREATED)
async def add_technician(
    payload: TechnicianCreate,
    current_user: ProfileOut = Depends(admin_only),
    db: Backend = Depends(get_db)
):
    return await create_technician(db, payload)

__all__ = ["admin_router"]
