from pydantic import BaseModel
from typing import Optional

from .service_request import ServiceType

class PartOut(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    category: ServiceType
    is_active: bool = True
