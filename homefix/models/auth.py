# homefix/models/auth.py
from uuid import UUID
from pydantic import BaseModel, EmailStr
from datetime import datetime
from enum import Enum
from typing import Optional

class Role(str, Enum):
    ADMIN = "admin"
    TECHNICIAN = "technician"
    USER = "user"

class Token(BaseModel):
    access_token: str
    token_type: str
    role: Role

class ProfileOut(BaseModel):
    id: UUID
    email: EmailStr
    full_name: Optional[str] = None
    role: Role
    created_at: datetime
    updated_at: Optional[datetime] = None
