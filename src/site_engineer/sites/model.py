from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Site:
    id: str
    client_id: str
    name: str
    created_at: datetime
    location: Optional[str] = None
    address: Optional[str] = None
