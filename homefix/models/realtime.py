from pydantic import BaseModel
from enum import Enum
from uuid import UUID

class ChangeType(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"

class ChangeEvent(BaseModel):
    table: str
    type: ChangeType
    id: UUID
