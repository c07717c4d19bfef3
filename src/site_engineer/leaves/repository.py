from __future__ import annotations

from datetime import date, datetime
from typing import Collection, Optional, Protocol, Sequence

from ..core.enums import LeaveStatus
from .model import LeaveRequest


class LeaveRepository(Protocol):
    def get_by_id(self, leave_id: str) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list(
        self,
        *,
        engineer_ids: Optional[Collection[str]] = None,
        statuses: Optional[Collection[LeaveStatus]] = None,
        overlapping: Optional[tuple[date, date]] = None,
        limit: int = 500,
    ) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def create(self, *, engineer_id: str, start_date: date, end_date: date, reason: str) -> LeaveRequest:
        raise NotImplementedError

    def decide(
        self,
        *,
        leave_id: str,
        status: LeaveStatus,
        approved_by: str,
        approved_at: datetime,
        backup_engineer_id: Optional[str] = None,
    ) -> bool:
        """Move a pending request to ``status``. False when it was not pending (or unknown)."""

        raise NotImplementedError
