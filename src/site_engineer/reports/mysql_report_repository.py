from __future__ import annotations

from datetime import date
from typing import Collection, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, build_where, db_cursor, fetchall, fetchone, in_clause, new_id
from .model import DailyReport
from .repository import ReportRepository

_COLUMNS = "id, engineer_id, client_id, site_id, report_date, work_done, issues, hours_worked, created_at, updated_at"


def _to_report(r: dict) -> DailyReport:
    return DailyReport(
        id=str(r["id"]),
        engineer_id=str(r["engineer_id"]),
        client_id=str(r["client_id"]),
        report_date=r["report_date"],
        work_done=r["work_done"],
        created_at=r["created_at"],
        site_id=r.get("site_id"),
        issues=r.get("issues"),
        hours_worked=as_float(r.get("hours_worked")),
        updated_at=r.get("updated_at"),
    )


class MySQLReportRepository(ReportRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, report_id: str) -> Optional[DailyReport]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM daily_reports WHERE id=%s", (str(report_id),))
            r = fetchone(cur)
            return _to_report(r) if r else None

    def list(
        self,
        *,
        engineer_ids: Optional[Collection[str]] = None,
        client_ids: Optional[Collection[str]] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: int = 500,
    ) -> Sequence[DailyReport]:
        filters = []
        if engineer_ids is not None:
            filters.append(in_clause("engineer_id", sorted(engineer_ids)))
        if client_ids is not None:
            filters.append(in_clause("client_id", sorted(client_ids)))
        if start is not None:
            filters.append(("report_date >= %s", [start]))
        if end is not None:
            filters.append(("report_date <= %s", [end]))
        where, params = build_where(filters)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM daily_reports
                WHERE {where}
                ORDER BY report_date DESC, created_at DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_to_report(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        engineer_id: str,
        client_id: str,
        site_id: Optional[str],
        report_date: date,
        work_done: str,
        issues: Optional[str] = None,
        hours_worked: Optional[float] = None,
    ) -> DailyReport:
        report_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO daily_reports(id, engineer_id, client_id, site_id, report_date, work_done, issues, hours_worked)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (report_id, str(engineer_id), str(client_id), site_id, report_date, work_done, issues, hours_worked),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM daily_reports WHERE id=%s", (report_id,))
            return _to_report(fetchone(cur))
