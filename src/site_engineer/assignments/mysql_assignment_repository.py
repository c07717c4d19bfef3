from __future__ import annotations

from datetime import date
from typing import Collection, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone, in_clause, new_id
from .model import Assignment
from .repository import AssignmentRepository

_COLUMNS = "id, engineer_id, client_id, site_id, assigned_date, is_active, created_at"


def _to_assignment(r: dict) -> Assignment:
    return Assignment(
        id=str(r["id"]),
        engineer_id=str(r["engineer_id"]),
        client_id=str(r["client_id"]),
        assigned_date=r["assigned_date"],
        created_at=r["created_at"],
        site_id=r.get("site_id"),
        is_active=bool(r["is_active"]),
    )


class MySQLAssignmentRepository(AssignmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, assignment_id: str) -> Optional[Assignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM engineer_assignments WHERE id=%s", (str(assignment_id),))
            r = fetchone(cur)
            return _to_assignment(r) if r else None

    def list(
        self,
        *,
        engineer_ids: Optional[Collection[str]] = None,
        client_ids: Optional[Collection[str]] = None,
        active_only: bool = False,
        limit: int = 500,
    ) -> Sequence[Assignment]:
        filters = []
        if engineer_ids is not None:
            filters.append(in_clause("engineer_id", sorted(engineer_ids)))
        if client_ids is not None:
            filters.append(in_clause("client_id", sorted(client_ids)))
        if active_only:
            filters.append(("is_active=1", []))
        where, params = build_where(filters)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM engineer_assignments
                WHERE {where}
                ORDER BY created_at DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_to_assignment(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        engineer_id: str,
        client_id: str,
        site_id: Optional[str],
        assigned_date: date,
    ) -> Assignment:
        assignment_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO engineer_assignments(id, engineer_id, client_id, site_id, assigned_date, is_active)
                VALUES(%s,%s,%s,%s,%s,1)
                """,
                (assignment_id, str(engineer_id), str(client_id), site_id, assigned_date),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM engineer_assignments WHERE id=%s", (assignment_id,))
            return _to_assignment(fetchone(cur))
