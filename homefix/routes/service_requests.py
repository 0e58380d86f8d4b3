# homefix/routes/service_requests.py
from fastapi import APIRouter, Depends, status
from uuid import UUID

from ..database import Backend, get_db
from ..models.service_request import ServiceRequestCreate, ServiceRequestCreated, ServiceRequestOut
from ..services.intake import create_service_request
from ..services.lifecycle import load_request

requests_router = APIRouter(prefix="/service-requests", tags=["Service Requests"])

@requests_router.post("/", response_model=ServiceRequestCreated, status_code=status.HTTP_201_CREATED)
async def submit_service_request(
    payload: ServiceRequestCreate,
    db: Backend = Depends(get_db)
):
    request = await create_service_request(db, payload)
    return {"request": request, "order_reference": request.order_reference}

# The confirmation page looks the order up by its id
@requests_router.get("/{request_id}", response_model=ServiceRequestOut)
async def get_service_request(
    request_id: UUID,
    db: Backend = Depends(get_db)
):
    return await load_request(db, request_id)

__all__ = ["requests_router"]
