from typing import List, Optional

from ..database import Backend
from ..models.parts import PartOut
from ..models.service_request import ServiceType
from ..utils.models import parse_row, parse_rows

TABLE = "parts_catalog"

async def list_parts(db: Backend, category: ServiceType) -> List[PartOut]:
    """Active catalog parts for one service category"""
    rows = await db.select(
        TABLE,
        eq={"category": category.value, "is_active": True},
        order_by="name"
    )
    return parse_rows(PartOut, rows)

async def get_part(db: Backend, part_id: str) -> Optional[PartOut]:
    return parse_row(PartOut, await db.get(TABLE, part_id))
