# homefix/queries/service_request_queries.py
from typing import Any, Dict, List, Optional
from uuid import UUID

from ..database import Backend
from ..models.service_request import RequestStatus, ServiceRequestCreate, ServiceRequestOut
from ..utils.models import parse_row, parse_rows, utcnow

TABLE = "service_requests"

async def create_service_request(
    db: Backend,
    payload: ServiceRequestCreate
) -> ServiceRequestOut:
    """Insert a new request in the pending state"""
    values = payload.model_dump(mode="json")
    now = utcnow()
    values.update(status=RequestStatus.PENDING.value, created_at=now, updated_at=now)
    row = await db.insert(TABLE, values)
    return parse_row(ServiceRequestOut, row)

async def get_service_request(
    db: Backend,
    request_id: UUID
) -> Optional[ServiceRequestOut]:
    return parse_row(ServiceRequestOut, await db.get(TABLE, request_id))

async def list_service_requests(
    db: Backend,
    statuses: Optional[List[RequestStatus]] = None,
    assigned_technician: Optional[UUID] = None
) -> List[ServiceRequestOut]:
    """List requests newest first, optionally filtered by status and technician"""
    eq = {}
    in_ = {}
    if statuses:
        in_["status"] = [s.value for s in statuses]
    if assigned_technician:
        eq["assigned_technician"] = assigned_technician
    rows = await db.select(TABLE, eq=eq, in_=in_, order_by="created_at", descending=True)
    return parse_rows(ServiceRequestOut, rows)

async def update_service_request(
    db: Backend,
    request_id: UUID,
    values: Dict[str, Any]
) -> Optional[ServiceRequestOut]:
    """Apply a partial update; updated_at is always refreshed"""
    values = {**values, "updated_at": utcnow()}
    return parse_row(ServiceRequestOut, await db.update(TABLE, request_id, values))
