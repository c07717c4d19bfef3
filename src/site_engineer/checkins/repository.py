from __future__ import annotations

from datetime import date, datetime
from typing import Collection, Optional, Protocol, Sequence

from .model import CheckIn


class CheckInRepository(Protocol):
    def get_by_id(self, check_in_id: str) -> Optional[CheckIn]:
        raise NotImplementedError

    def list(
        self,
        *,
        engineer_ids: Optional[Collection[str]] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: int = 500,
    ) -> Sequence[CheckIn]:
        """Newest first; ``start``/``end`` are inclusive bounds on ``date``."""

        raise NotImplementedError

    def find_for_engineer_on(self, engineer_id: str, day: date) -> Optional[CheckIn]:
        raise NotImplementedError

    def create(
        self,
        *,
        engineer_id: str,
        check_in_time: datetime,
        day: date,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        location_name: Optional[str] = None,
    ) -> CheckIn:
        raise NotImplementedError

    def close(self, check_in_id: str, check_out_time: datetime) -> bool:
        """Set check_out_time only while it is still empty. False when nothing changed."""

        raise NotImplementedError
