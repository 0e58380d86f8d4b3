from fastapi import APIRouter, Depends, Query
from typing import List

from ..database import Backend, get_db
from ..models.parts import PartOut
from ..models.service_request import ServiceType
from ..queries.parts_queries import list_parts

parts_router = APIRouter(prefix="/parts", tags=["Parts"])

@parts_router.get("/", response_model=List[PartOut])
async def get_parts(
    service_type: ServiceType = Query(..., description="Service category of the parts"),
    db: Backend = Depends(get_db)
):
    return await list_parts(db, service_type)
