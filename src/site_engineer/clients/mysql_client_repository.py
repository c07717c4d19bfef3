from __future__ import annotations

from typing import Collection, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone, in_clause, new_id
from .model import Client
from .repository import ClientRepository

_COLUMNS = "id, name, contact_person, contact_email, contact_phone, address, user_id, created_at, updated_at"


def _to_client(r: dict) -> Client:
    return Client(
        id=str(r["id"]),
        name=r["name"],
        contact_person=r["contact_person"],
        contact_email=r["contact_email"],
        created_at=r["created_at"],
        contact_phone=r.get("contact_phone"),
        address=r.get("address"),
        user_id=r.get("user_id"),
        updated_at=r.get("updated_at"),
    )


class MySQLClientRepository(ClientRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, client_id: str) -> Optional[Client]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM clients WHERE id=%s", (str(client_id),))
            r = fetchone(cur)
            return _to_client(r) if r else None

    def get_by_user_id(self, user_id: str) -> Optional[Client]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM clients WHERE user_id=%s ORDER BY created_at LIMIT 1",
                (str(user_id),),
            )
            r = fetchone(cur)
            return _to_client(r) if r else None

    def list(self, *, ids: Optional[Collection[str]] = None, limit: int = 500) -> Sequence[Client]:
        filters = []
        if ids is not None:
            filters.append(in_clause("id", sorted(ids)))
        where, params = build_where(filters)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM clients WHERE {where} ORDER BY name LIMIT %s",
                tuple(params + [int(limit)]),
            )
            return [_to_client(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        name: str,
        contact_person: str,
        contact_email: str,
        contact_phone: Optional[str] = None,
        address: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> Client:
        client_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO clients(id, name, contact_person, contact_email, contact_phone, address, user_id)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (client_id, name, contact_person, contact_email, contact_phone, address, user_id),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM clients WHERE id=%s", (client_id,))
            return _to_client(fetchone(cur))

    def link_user(self, client_id: str, user_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE clients SET user_id=%s WHERE id=%s AND user_id IS NULL",
                (str(user_id), str(client_id)),
            )
            return cur.rowcount > 0
