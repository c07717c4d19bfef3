from __future__ import annotations

from datetime import date
from typing import Collection, Optional, Protocol, Sequence

from .model import DailyReport


class ReportRepository(Protocol):
    def get_by_id(self, report_id: str) -> Optional[DailyReport]:
        raise NotImplementedError

    def list(
        self,
        *,
        engineer_ids: Optional[Collection[str]] = None,
        client_ids: Optional[Collection[str]] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: int = 500,
    ) -> Sequence[DailyReport]:
        raise NotImplementedError

    def create(
        self,
        *,
        engineer_id: str,
        client_id: str,
        site_id: Optional[str],
        report_date: date,
        work_done: str,
        issues: Optional[str] = None,
        hours_worked: Optional[float] = None,
    ) -> DailyReport:
        raise NotImplementedError
