import logging

from ..config import PART_OTHER
from ..database import Backend
from ..errors import ValidationFailed
from ..models.service_request import ServiceRequestCreate, ServiceRequestOut
from ..queries.parts_queries import get_part
from ..queries.service_request_queries import create_service_request as insert_service_request

logger = logging.getLogger(__name__)


async def create_service_request(db: Backend, payload: ServiceRequestCreate) -> ServiceRequestOut:
    """Store a validated customer request as pending."""
    if payload.needs_parts and payload.part_type != PART_OTHER:
        part = await get_part(db, payload.part_type)
        if part is None or not part.is_active:
            raise ValidationFailed("Unknown part type")
        if part.category != payload.service_type:
            raise ValidationFailed(f"Part {part.id} does not belong to {payload.service_type.value} services")

    request = await insert_service_request(db, payload)
    logger.info(f"New {request.service_type.value} request {request.order_reference} received")
    return request
