# homefix/database.py
import json
import logging
from typing import Any, AsyncGenerator, Dict, Iterable, List, Optional

import asyncpg

from .config import get_settings
from .errors import BackendError
from .schema import TABLES

logger = logging.getLogger(__name__)


class Backend:
    """Table-like access to the managed backend.

    Every operation receives one of these explicitly; the application builds a
    ``PostgresBackend`` per request and the tests substitute an in-memory one.
    """

    async def select(
        self,
        table: str,
        *,
        eq: Optional[Dict[str, Any]] = None,
        in_: Optional[Dict[str, Iterable[Any]]] = None,
        contains: Optional[Dict[str, List[Any]]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        raise NotImplementedError

    async def get(self, table: str, row_id: Any) -> Optional[Dict[str, Any]]:
        rows = await self.select(table, eq={"id": row_id}, limit=1)
        return rows[0] if rows else None

    async def insert(self, table: str, values: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    async def update(self, table: str, row_id: Any, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        raise NotImplementedError


def _check_columns(table: str, columns: Iterable[str]) -> None:
    if table not in TABLES:
        raise BackendError(f"Unknown table: {table}")
    unknown = set(columns) - TABLES[table]
    if unknown:
        raise BackendError(f"Unknown column(s) for {table}: {', '.join(sorted(unknown))}")


class PostgresBackend(Backend):
    def __init__(self, conn: asyncpg.Connection):
        self.conn = conn

    async def select(
        self,
        table: str,
        *,
        eq=None,
        in_=None,
        contains=None,
        order_by=None,
        descending=False,
        limit=None,
    ):
        eq = eq or {}
        in_ = in_ or {}
        contains = contains or {}
        _check_columns(table, [*eq, *in_, *contains, *([order_by] if order_by else [])])

        query = f"SELECT * FROM public.{table}"
        clauses = []
        params: List[Any] = []
        for column, value in eq.items():
            params.append(value)
            clauses.append(f"{column} = ${len(params)}")
        for column, values in in_.items():
            params.append(list(values))
            clauses.append(f"{column} = ANY(${len(params)})")
        for column, values in contains.items():
            params.append(list(values))
            clauses.append(f"{column} @> ${len(params)}")
        if clauses:
            query += " WHERE " + " AND ".join(clauses)
        if order_by:
            query += f" ORDER BY {order_by} {'DESC' if descending else 'ASC'}"
        if limit is not None:
            params.append(limit)
            query += f" LIMIT ${len(params)}"

        rows = await self._run(self.conn.fetch, query, *params)
        return [dict(row) for row in rows]

    async def insert(self, table, values):
        _check_columns(table, values)
        columns = list(values)
        placeholders = ", ".join(f"${i}" for i in range(1, len(columns) + 1))
        row = await self._run(
            self.conn.fetchrow,
            f"""
            INSERT INTO public.{table} ({", ".join(columns)})
            VALUES ({placeholders})
            RETURNING *
            """,
            *values.values()
        )
        return dict(row)

    async def update(self, table, row_id, values):
        _check_columns(table, values)
        assignments = ", ".join(f"{column} = ${i}" for i, column in enumerate(values, start=1))
        row = await self._run(
            self.conn.fetchrow,
            f"""
            UPDATE public.{table}
            SET {assignments}
            WHERE id = ${len(values) + 1}
            RETURNING *
            """,
            *values.values(), row_id
        )
        return dict(row) if row else None

    async def _run(self, method, query, *params):
        try:
            return await method(query, *params)
        except (asyncpg.PostgresError, OSError) as e:
            logger.error(f"Backend call failed: {str(e)}")
            raise BackendError("Backend call failed") from e


async def connect(dsn: str) -> asyncpg.Connection:
    conn = await asyncpg.connect(dsn=dsn)
    await conn.set_type_codec(
        "jsonb", encoder=json.dumps, decoder=json.loads, schema="pg_catalog"
    )
    return conn


async def get_db() -> AsyncGenerator[Backend, None]:
    settings = get_settings()
    try:
        conn = await connect(settings.backend_url)
    except (asyncpg.PostgresError, OSError) as e:
        logger.error(f"Could not reach backend: {str(e)}")
        raise BackendError("Backend unavailable") from e
    try:
        yield PostgresBackend(conn)
    finally:
        await conn.close()
