from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import Session


class SessionRepository(Protocol):
    def create(self, *, user_id: str, created_at: datetime, expires_at: datetime) -> Session:
        raise NotImplementedError

    def resolve(self, token: str) -> Optional[Session]:
        raise NotImplementedError

    def destroy(self, token: str) -> None:
        raise NotImplementedError
