from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Caller:
    """Authenticated identity passed explicitly into every service call."""

    user_id: str
    role: Role
    full_name: str
    email: str
    # Linked Client for role=client; None for other roles or an unlinked client user.
    client_id: Optional[str] = None


@dataclass(frozen=True)
class Session:
    token: str
    user_id: str
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at
