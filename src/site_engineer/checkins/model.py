from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class CheckIn:
    id: str
    engineer_id: str
    check_in_time: datetime
    date: date
    created_at: datetime
    check_out_time: Optional[datetime] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    location_name: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.check_out_time is None

    @property
    def hours_worked(self) -> float:
        if self.check_out_time is None:
            return 0.0
        return round((self.check_out_time - self.check_in_time).total_seconds() / 3600.0, 2)
