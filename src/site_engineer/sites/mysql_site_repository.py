from __future__ import annotations

from typing import Collection, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone, in_clause, new_id
from .model import Site
from .repository import SiteRepository

_COLUMNS = "id, client_id, name, location, address, created_at"


def _to_site(r: dict) -> Site:
    return Site(
        id=str(r["id"]),
        client_id=str(r["client_id"]),
        name=r["name"],
        created_at=r["created_at"],
        location=r.get("location"),
        address=r.get("address"),
    )


class MySQLSiteRepository(SiteRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, site_id: str) -> Optional[Site]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM sites WHERE id=%s", (str(site_id),))
            r = fetchone(cur)
            return _to_site(r) if r else None

    def list(self, *, client_ids: Optional[Collection[str]] = None, limit: int = 500) -> Sequence[Site]:
        filters = []
        if client_ids is not None:
            filters.append(in_clause("client_id", sorted(client_ids)))
        where, params = build_where(filters)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM sites WHERE {where} ORDER BY created_at DESC LIMIT %s",
                tuple(params + [int(limit)]),
            )
            return [_to_site(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        client_id: str,
        name: str,
        location: Optional[str] = None,
        address: Optional[str] = None,
    ) -> Site:
        site_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO sites(id, client_id, name, location, address) VALUES(%s,%s,%s,%s,%s)",
                (site_id, str(client_id), name, location, address),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM sites WHERE id=%s", (site_id,))
            return _to_site(fetchone(cur))
