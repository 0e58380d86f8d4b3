import copy
import uuid
from typing import Any, Dict, List, Optional, Set, Tuple

from homefix.database import Backend
from homefix.errors import BackendError
from homefix.models.service_request import ServiceRequestCreate, ServiceRequestOut
from homefix.models.technician import TechnicianCreate, TechnicianOut
from homefix.queries.service_request_queries import create_service_request
from homefix.queries.technician_queries import create_technician
from homefix.schema import TABLES


class InMemoryBackend(Backend):
    """Dict-backed stand-in for the managed backend."""

    def __init__(self):
        self.tables: Dict[str, Dict[Any, Dict[str, Any]]] = {name: {} for name in TABLES}
        self.failing_updates: Set[Tuple[str, Any]] = set()
        self.calls: List[Tuple[str, str]] = []

    def _check(self, table, columns):
        if table not in TABLES:
            raise BackendError(f"Unknown table: {table}")
        unknown = set(columns) - TABLES[table]
        if unknown:
            raise BackendError(f"Unknown column(s) for {table}: {sorted(unknown)}")

    async def select(self, table, *, eq=None, in_=None, contains=None,
                     order_by=None, descending=False, limit=None):
        eq = eq or {}
        in_ = in_ or {}
        contains = contains or {}
        self._check(table, [*eq, *in_, *contains])
        self.calls.append(("select", table))

        rows = []
        for row in self.tables[table].values():
            if any(row.get(k) != v for k, v in eq.items()):
                continue
            if any(row.get(k) not in list(v) for k, v in in_.items()):
                continue
            if any(not set(v) <= set(row.get(k) or []) for k, v in contains.items()):
                continue
            rows.append(copy.deepcopy(row))

        if order_by:
            rows.sort(key=lambda r: (r.get(order_by) is None, r.get(order_by)), reverse=descending)
        if limit is not None:
            rows = rows[:limit]
        return rows

    async def insert(self, table, values):
        self._check(table, values)
        self.calls.append(("insert", table))
        row = {column: None for column in TABLES[table]}
        row.update(copy.deepcopy(values))
        if row["id"] is None:
            row["id"] = uuid.uuid4()
        self.tables[table][row["id"]] = row
        return copy.deepcopy(row)

    async def update(self, table, row_id, values):
        self._check(table, values)
        self.calls.append(("update", table))
        if (table, row_id) in self.failing_updates:
            raise BackendError("Backend call failed")
        row = self.tables[table].get(row_id)
        if row is None:
            return None
        row.update(copy.deepcopy(values))
        return copy.deepcopy(row)

    def rows(self, table) -> List[Dict[str, Any]]:
        return list(self.tables[table].values())


def request_payload(**overrides) -> Dict[str, Any]:
    payload = {
        "full_name": "Fahad Alqahtani",
        "mobile": "0551234567",
        "service_type": "plumbing",
        "issue_description": "Kitchen sink is leaking",
        "preferred_time": "morning",
        "location": {"lat": 24.7136, "lng": 46.6753, "neighborhood": "Al Olaya", "address": "King Fahd Rd"},
    }
    payload.update(overrides)
    return payload


async def make_request(db: InMemoryBackend, status: Optional[str] = None, **overrides) -> ServiceRequestOut:
    request = await create_service_request(db, ServiceRequestCreate(**request_payload(**overrides)))
    if status is not None:
        db.tables["service_requests"][request.id]["status"] = status
        request = ServiceRequestOut.model_validate(db.tables["service_requests"][request.id])
    return request


async def make_technician(db: InMemoryBackend, full_name="Omar Saleh", skills=("plumbing",),
                          lat=24.7136, lng=46.6753, status="available", profile_id=None) -> TechnicianOut:
    return await create_technician(
        db,
        TechnicianCreate(
            full_name=full_name,
            phone="0509876543",
            skills=list(skills),
            location={"lat": lat, "lng": lng},
            status=status,
            profile_id=profile_id,
        )
    )
