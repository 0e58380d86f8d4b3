import logging
from typing import Optional
from uuid import UUID

from ..database import Backend
from ..errors import RequestNotCompleted, ValidationFailed
from ..models.review import ReviewOut, SatisfactionLevel
from ..models.service_request import RequestStatus
from ..queries.review_queries import create_review
from .lifecycle import load_request

logger = logging.getLogger(__name__)


def validate_rating(rating: Optional[int], satisfaction: Optional[str]) -> SatisfactionLevel:
    if rating is None or not 1 <= rating <= 5:
        raise ValidationFailed("missing rating")
    if not satisfaction:
        raise ValidationFailed("missing satisfaction")
    try:
        return SatisfactionLevel(satisfaction)
    except ValueError:
        raise ValidationFailed("invalid satisfaction")


async def submit_rating(
    db: Backend,
    request_id: UUID,
    technician_id: UUID,
    rating: Optional[int],
    satisfaction: Optional[str],
    comment: Optional[str] = None
) -> ReviewOut:
    """Record a customer's rating of a completed request.

    Validation happens before any read or write. Only the technician assigned
    to the request can be rated. More than one review per request is accepted.
    """
    level = validate_rating(rating, satisfaction)

    request = await load_request(db, request_id)
    if request.status != RequestStatus.COMPLETED:
        raise RequestNotCompleted("Service must be completed before rating")
    if request.assigned_technician != technician_id:
        raise ValidationFailed("technician did not handle this request")

    review = await create_review(
        db,
        request_id,
        technician_id,
        rating,
        level,
        (comment or "").strip() or None
    )
    logger.info(f"Request {request.order_reference} rated {rating}/5 ({level.value})")
    return review
