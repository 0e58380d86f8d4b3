from typing import Any, Dict, List, Optional
from uuid import UUID

from ..database import Backend
from ..models.auth import ProfileOut, Role
from ..utils.models import parse_row, parse_rows, utcnow

TABLE = "profiles"

async def create_profile(
    db: Backend,
    email: str,
    full_name: str,
    password_hash: str,
    role: Role = Role.USER
) -> ProfileOut:
    now = utcnow()
    row = await db.insert(
        TABLE,
        {
            "email": email.strip().lower(),
            "full_name": full_name.strip(),
            "password_hash": password_hash,
            "role": role.value,
            "created_at": now,
            "updated_at": now,
        }
    )
    return parse_row(ProfileOut, row)

async def get_profile_by_id(db: Backend, profile_id: UUID) -> Optional[ProfileOut]:
    return parse_row(ProfileOut, await db.get(TABLE, profile_id))

async def get_credentials(db: Backend, email: str) -> Optional[Dict[str, Any]]:
    """Raw profile row including the password hash, for login only"""
    rows = await db.select(TABLE, eq={"email": email.strip().lower()}, limit=1)
    return rows[0] if rows else None

async def list_profiles(db: Backend) -> List[ProfileOut]:
    return parse_rows(ProfileOut, await db.select(TABLE, order_by="created_at"))
