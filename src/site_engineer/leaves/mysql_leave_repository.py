from __future__ import annotations

from datetime import date, datetime
from typing import Collection, Optional, Sequence

from ..core.enums import LeaveStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone, in_clause, new_id
from .model import LeaveRequest
from .repository import LeaveRepository

_COLUMNS = """
    id, engineer_id, start_date, end_date, reason, status,
    backup_engineer_id, approved_by, approved_at, created_at
"""


def _to_leave(r: dict) -> LeaveRequest:
    return LeaveRequest(
        id=str(r["id"]),
        engineer_id=str(r["engineer_id"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        reason=r["reason"],
        status=LeaveStatus(r["status"]),
        created_at=r["created_at"],
        backup_engineer_id=r.get("backup_engineer_id"),
        approved_by=r.get("approved_by"),
        approved_at=r.get("approved_at"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, leave_id: str) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE id=%s", (str(leave_id),))
            r = fetchone(cur)
            return _to_leave(r) if r else None

    def list(
        self,
        *,
        engineer_ids: Optional[Collection[str]] = None,
        statuses: Optional[Collection[LeaveStatus]] = None,
        overlapping: Optional[tuple[date, date]] = None,
        limit: int = 500,
    ) -> Sequence[LeaveRequest]:
        filters = []
        if engineer_ids is not None:
            filters.append(in_clause("engineer_id", sorted(engineer_ids)))
        if statuses is not None:
            filters.append(in_clause("status", sorted(s.value for s in statuses)))
        if overlapping is not None:
            first, last = overlapping
            filters.append(("start_date <= %s AND end_date >= %s", [last, first]))
        where, params = build_where(filters)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM leave_requests WHERE {where} ORDER BY created_at DESC LIMIT %s",
                tuple(params + [int(limit)]),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def create(self, *, engineer_id: str, start_date: date, end_date: date, reason: str) -> LeaveRequest:
        leave_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(id, engineer_id, start_date, end_date, reason, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (leave_id, str(engineer_id), start_date, end_date, reason, LeaveStatus.PENDING.value),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE id=%s", (leave_id,))
            return _to_leave(fetchone(cur))

    def decide(
        self,
        *,
        leave_id: str,
        status: LeaveStatus,
        approved_by: str,
        approved_at: datetime,
        backup_engineer_id: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, approved_by=%s, approved_at=%s,
                    backup_engineer_id=COALESCE(%s, backup_engineer_id)
                WHERE id=%s AND status=%s
                """,
                (
                    status.value,
                    str(approved_by),
                    approved_at,
                    backup_engineer_id,
                    str(leave_id),
                    LeaveStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0
