from typing import List, Optional
from pydantic import BaseModel, Field
from datetime import datetime
from enum import Enum
from uuid import UUID

class SatisfactionLevel(str, Enum):
    VERY_SATISFIED = "very_satisfied"
    SATISFIED = "satisfied"
    NEUTRAL = "neutral"
    DISSATISFIED = "dissatisfied"

class ReviewCreate(BaseModel):
    # Left loose so the rating service reports "missing rating" / "missing satisfaction"
    request_id: UUID
    technician_id: UUID
    rating: int = 0
    satisfaction_level: str = ""
    comment: Optional[str] = None

class ReviewOut(BaseModel):
    id: UUID
    request_id: UUID
    technician_id: Optional[UUID]
    rating: int = Field(..., ge=1, le=5)
    satisfaction_level: SatisfactionLevel
    comment: Optional[str] = None
    created_at: datetime

class TechnicianReviews(BaseModel):
    average_rating: float
    total_reviews: int
    reviews: List[ReviewOut]
