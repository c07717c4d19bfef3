from __future__ import annotations

import secrets
from datetime import datetime
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Session
from .repository import SessionRepository


class MySQLSessionRepository(SessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, user_id: str, created_at: datetime, expires_at: datetime) -> Session:
        token = secrets.token_urlsafe(32)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO sessions(token, user_id, created_at, expires_at) VALUES(%s,%s,%s,%s)",
                (token, str(user_id), created_at, expires_at),
            )
        return Session(token=token, user_id=str(user_id), created_at=created_at, expires_at=expires_at)

    def resolve(self, token: str) -> Optional[Session]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT token, user_id, created_at, expires_at FROM sessions WHERE token=%s",
                (token,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Session(
                token=r["token"],
                user_id=str(r["user_id"]),
                created_at=r["created_at"],
                expires_at=r["expires_at"],
            )

    def destroy(self, token: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM sessions WHERE token=%s", (token,))
