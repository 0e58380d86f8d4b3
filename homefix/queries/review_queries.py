# homefix/queries/review_queries.py
from typing import Optional, Dict, Any, List
from uuid import UUID

from ..database import Backend
from ..models.review import ReviewOut, SatisfactionLevel
from ..utils.models import parse_row, parse_rows, utcnow

TABLE = "reviews"

async def create_review(
    db: Backend,
    request_id: UUID,
    technician_id: UUID,
    rating: int,
    satisfaction_level: SatisfactionLevel,
    comment: Optional[str] = None
) -> ReviewOut:
    """Create a new review"""
    row = await db.insert(
        TABLE,
        {
            "request_id": request_id,
            "technician_id": technician_id,
            "rating": rating,
            "satisfaction_level": satisfaction_level.value,
            "comment": comment,
            "created_at": utcnow(),
        }
    )
    return parse_row(ReviewOut, row)

async def get_request_reviews(
    db: Backend,
    request_id: UUID
) -> List[ReviewOut]:
    rows = await db.select(TABLE, eq={"request_id": request_id}, order_by="created_at", descending=True)
    return parse_rows(ReviewOut, rows)

async def get_technician_reviews(
    db: Backend,
    technician_id: UUID
) -> Dict[str, Any]:
    """Get all reviews for a technician with stats"""
    rows = await db.select(TABLE, eq={"technician_id": technician_id}, order_by="created_at", descending=True)
    reviews = parse_rows(ReviewOut, rows)
    avg_rating = sum(r.rating for r in reviews) / len(reviews) if reviews else 0

    return {
        "average_rating": round(avg_rating, 2),
        "total_reviews": len(reviews),
        "reviews": reviews
    }
