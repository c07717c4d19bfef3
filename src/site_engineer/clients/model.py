from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Client:
    id: str
    name: str
    contact_person: str
    contact_email: str
    created_at: datetime
    contact_phone: Optional[str] = None
    address: Optional[str] = None
    # Login profile of the client's own user, when one exists.
    user_id: Optional[str] = None
    updated_at: Optional[datetime] = None
