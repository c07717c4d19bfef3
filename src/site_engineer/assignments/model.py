from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class Assignment:
    """Engineer-to-client (optionally to-site) linkage."""

    id: str
    engineer_id: str
    client_id: str
    assigned_date: date
    created_at: datetime
    site_id: Optional[str] = None
    is_active: bool = True
