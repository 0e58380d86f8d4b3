# homefix/routes/reviews.py
from fastapi import APIRouter, Depends
from typing import List
from uuid import UUID

from ..database import Backend, get_db
from ..models.review import ReviewCreate, ReviewOut, TechnicianReviews
from ..queries.review_queries import get_request_reviews, get_technician_reviews
from ..services.lifecycle import load_request
from ..services.ratings import submit_rating

reviews_router = APIRouter(prefix="/reviews", tags=["Reviews"])

@reviews_router.post("/", response_model=ReviewOut, status_code=201)
async def create_review(
    review: ReviewCreate,
    db: Backend = Depends(get_db)
):
    return await submit_rating(
        db,
        review.request_id,
        review.technician_id,
        review.rating,
        review.satisfaction_level,
        review.comment
    )

@reviews_router.get("/request/{request_id}", response_model=List[ReviewOut])
async def get_reviews_for_request(
    request_id: UUID,
    db: Backend = Depends(get_db)
):
    await load_request(db, request_id)
    return await get_request_reviews(db, request_id)

@reviews_router.get("/technician/{technician_id}", response_model=TechnicianReviews)
async def get_reviews_for_technician(
    technician_id: UUID,
    db: Backend = Depends(get_db)
):
    return await get_technician_reviews(db, technician_id)

__all__ = ["reviews_router"]
