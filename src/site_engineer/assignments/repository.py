from __future__ import annotations

from datetime import date
from typing import Collection, Optional, Protocol, Sequence

from .model import Assignment


class AssignmentRepository(Protocol):
    def get_by_id(self, assignment_id: str) -> Optional[Assignment]:
        raise NotImplementedError

    def list(
        self,
        *,
        engineer_ids: Optional[Collection[str]] = None,
        client_ids: Optional[Collection[str]] = None,
        active_only: bool = False,
        limit: int = 500,
    ) -> Sequence[Assignment]:
        raise NotImplementedError

    def create(
        self,
        *,
        engineer_id: str,
        client_id: str,
        site_id: Optional[str],
        assigned_date: date,
    ) -> Assignment:
        raise NotImplementedError
