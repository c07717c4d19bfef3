from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class DailyReport:
    id: str
    engineer_id: str
    client_id: str
    report_date: date
    work_done: str
    created_at: datetime
    site_id: Optional[str] = None
    issues: Optional[str] = None
    hours_worked: Optional[float] = None
    updated_at: Optional[datetime] = None
