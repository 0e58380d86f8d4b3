# homefix/models/technician.py
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime
from enum import Enum
from uuid import UUID

from .service_request import ServiceType

class TechnicianStatus(str, Enum):
    AVAILABLE = "available"
    BUSY = "busy"
    OFFLINE = "offline"

class GeoPoint(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)

class TechnicianCreate(BaseModel):
    full_name: str
    phone: str
    skills: List[ServiceType] = Field(..., min_length=1)
    location: GeoPoint
    status: TechnicianStatus = TechnicianStatus.AVAILABLE
    profile_id: Optional[UUID] = None

class TechnicianOut(BaseModel):
    id: UUID
    full_name: str
    phone: str
    skills: List[ServiceType]
    location: GeoPoint
    status: TechnicianStatus
    profile_id: Optional[UUID] = None
    created_at: Optional[datetime] = None

    @field_validator("skills", mode="before")
    @classmethod
    def default_skills(cls, v):
        return v or []

class TechnicianCandidate(TechnicianOut):
    distance_km: float = Field(..., description="Distance from the request location in km")

class Assignment(BaseModel):
    request_id: UUID
    technician_id: UUID
    request_status: str
    technician_status: TechnicianStatus

class AvailabilityUpdate(BaseModel):
    status: TechnicianStatus
