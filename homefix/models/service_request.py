# homefix/models/service_request.py
import re
from pydantic import BaseModel, Field, field_validator, model_validator
from datetime import datetime
from typing import List, Optional
from enum import Enum
from uuid import UUID

from ..config import MAX_PHOTOS, PART_OTHER

MOBILE_PATTERN = re.compile(r"^(\+966|0)?5\d{8}$")

class ServiceType(str, Enum):
    PLUMBING = "plumbing"
    ELECTRICAL = "electrical"
    AC = "ac"
    OTHER = "other"

class PreferredTime(str, Enum):
    MORNING = "morning"
    EVENING = "evening"

class RequestStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

class Location(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    neighborhood: Optional[str] = None
    address: Optional[str] = None

class ServiceRequestCreate(BaseModel):
    full_name: str
    mobile: str
    service_type: ServiceType
    issue_description: str
    preferred_time: PreferredTime
    location: Location
    is_different_address: bool = False
    needs_parts: bool = False
    part_type: Optional[str] = None
    part_other: Optional[str] = None
    needs_installation: bool = False
    photo_urls: List[str] = Field(default_factory=list, max_length=MAX_PHOTOS)

    @field_validator("full_name", "issue_description")
    @classmethod
    def not_blank(cls, v, info):
        v = v.strip()
        if not v:
            raise ValueError(f"{info.field_name} is required")
        return v

    @field_validator("mobile")
    @classmethod
    def validate_mobile(cls, v):
        v = re.sub(r"\s", "", v)
        if not v:
            raise ValueError("mobile is required")
        if not MOBILE_PATTERN.match(v):
            raise ValueError("invalid mobile number")
        return v

    @model_validator(mode="after")
    def check_parts(self):
        if not self.needs_parts:
            self.part_type = None
            self.part_other = None
            self.needs_installation = False
            return self
        if not (self.part_type or "").strip():
            raise ValueError("part_type is required when parts are needed")
        if self.part_type == PART_OTHER:
            if not (self.part_other or "").strip():
                raise ValueError("part_other is required when part_type is 'other'")
            self.part_other = self.part_other.strip()
        else:
            self.part_other = None
        return self

class ServiceRequestOut(BaseModel):
    id: UUID
    full_name: str
    mobile: str
    service_type: ServiceType
    issue_description: str
    preferred_time: PreferredTime
    location: Location
    is_different_address: bool = False
    needs_parts: bool = False
    part_type: Optional[str] = None
    part_other: Optional[str] = None
    needs_installation: bool = False
    photo_urls: List[str] = Field(default_factory=list)
    status: RequestStatus
    assigned_technician: Optional[UUID] = None
    admin_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        # Technician views used to write "accepted" for a confirmed request
        if v == "accepted":
            return RequestStatus.CONFIRMED
        return v

    @field_validator("photo_urls", mode="before")
    @classmethod
    def default_photos(cls, v):
        return v or []

    @property
    def order_reference(self) -> str:
        return self.id.hex[-8:].upper()

class ServiceRequestCreated(BaseModel):
    request: ServiceRequestOut
    order_reference: str

class StatusUpdate(BaseModel):
    status: RequestStatus

class AdminNotesUpdate(BaseModel):
    admin_notes: Optional[str] = None

class AssignmentIn(BaseModel):
    technician_id: UUID
