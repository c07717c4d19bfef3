from __future__ import annotations

from datetime import date, datetime
from typing import Collection, Optional, Sequence

from ..database.connection import DatabaseConnection
from mysql.connector.errors import IntegrityError

from ..core.exceptions import ValidationError
from ..database.mysql_base import (
    as_float,
    build_where,
    db_cursor,
    fetchall,
    fetchone,
    in_clause,
    is_duplicate_key,
    new_id,
)
from .model import CheckIn
from .repository import CheckInRepository

_COLUMNS = "id, engineer_id, check_in_time, check_out_time, latitude, longitude, location_name, date, created_at"


def _to_check_in(r: dict) -> CheckIn:
    return CheckIn(
        id=str(r["id"]),
        engineer_id=str(r["engineer_id"]),
        check_in_time=r["check_in_time"],
        date=r["date"],
        created_at=r["created_at"],
        check_out_time=r.get("check_out_time"),
        latitude=as_float(r.get("latitude")),
        longitude=as_float(r.get("longitude")),
        location_name=r.get("location_name"),
    )


class MySQLCheckInRepository(CheckInRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, check_in_id: str) -> Optional[CheckIn]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM check_ins WHERE id=%s", (str(check_in_id),))
            r = fetchone(cur)
            return _to_check_in(r) if r else None

    def list(
        self,
        *,
        engineer_ids: Optional[Collection[str]] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: int = 500,
    ) -> Sequence[CheckIn]:
        filters = []
        if engineer_ids is not None:
            filters.append(in_clause("engineer_id", sorted(engineer_ids)))
        if start is not None:
            filters.append(("date >= %s", [start]))
        if end is not None:
            filters.append(("date <= %s", [end]))
        where, params = build_where(filters)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM check_ins WHERE {where} ORDER BY date DESC, check_in_time DESC LIMIT %s",
                tuple(params + [int(limit)]),
            )
            return [_to_check_in(r) for r in fetchall(cur)]

    def find_for_engineer_on(self, engineer_id: str, day: date) -> Optional[CheckIn]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM check_ins WHERE engineer_id=%s AND date=%s ORDER BY check_in_time LIMIT 1",
                (str(engineer_id), day),
            )
            r = fetchone(cur)
            return _to_check_in(r) if r else None

    def create(
        self,
        *,
        engineer_id: str,
        check_in_time: datetime,
        day: date,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        location_name: Optional[str] = None,
    ) -> CheckIn:
        check_in_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    """
                    INSERT INTO check_ins(id, engineer_id, check_in_time, latitude, longitude, location_name, date)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (check_in_id, str(engineer_id), check_in_time, latitude, longitude, location_name, day),
                )
            except IntegrityError as e:
                # uq_check_ins_engineer_date: a concurrent check-in won the race.
                if is_duplicate_key(e):
                    raise ValidationError("Already checked in today") from e
                raise
            cur.execute(f"SELECT {_COLUMNS} FROM check_ins WHERE id=%s", (check_in_id,))
            return _to_check_in(fetchone(cur))

    def close(self, check_in_id: str, check_out_time: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE check_ins
                SET check_out_time=%s
                WHERE id=%s AND check_out_time IS NULL AND check_in_time <= %s
                """,
                (check_out_time, str(check_in_id), check_out_time),
            )
            return cur.rowcount > 0
