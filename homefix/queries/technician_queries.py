# homefix/queries/technician_queries.py
from typing import List, Optional
from uuid import UUID

from ..database import Backend
from ..models.service_request import ServiceType
from ..models.technician import TechnicianCreate, TechnicianOut, TechnicianStatus
from ..utils.models import parse_row, parse_rows, utcnow

TABLE = "technicians"

async def create_technician(
    db: Backend,
    payload: TechnicianCreate
) -> TechnicianOut:
    """Provision a technician record"""
    values = payload.model_dump(mode="json")
    if payload.profile_id is not None:
        values["profile_id"] = payload.profile_id
    values["created_at"] = utcnow()
    return parse_row(TechnicianOut, await db.insert(TABLE, values))

async def get_technician_by_id(
    db: Backend,
    technician_id: UUID
) -> Optional[TechnicianOut]:
    return parse_row(TechnicianOut, await db.get(TABLE, technician_id))

async def get_technician_by_profile(
    db: Backend,
    profile_id: UUID
) -> Optional[TechnicianOut]:
    rows = await db.select(TABLE, eq={"profile_id": profile_id}, limit=1)
    return parse_row(TechnicianOut, rows[0]) if rows else None

async def list_technicians(db: Backend) -> List[TechnicianOut]:
    return parse_rows(TechnicianOut, await db.select(TABLE, order_by="full_name"))

async def find_available_technicians(
    db: Backend,
    service_type: ServiceType
) -> List[TechnicianOut]:
    """Available technicians whose skills include the service type"""
    rows = await db.select(
        TABLE,
        eq={"status": TechnicianStatus.AVAILABLE.value},
        contains={"skills": [service_type.value]},
        order_by="full_name"
    )
    return parse_rows(TechnicianOut, rows)

async def update_technician_status(
    db: Backend,
    technician_id: UUID,
    status: TechnicianStatus
) -> Optional[TechnicianOut]:
    row = await db.update(TABLE, technician_id, {"status": status.value})
    return parse_row(TechnicianOut, row)
