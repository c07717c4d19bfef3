from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol

from .model import CompanyProfile


class CompanyProfileRepository(Protocol):
    def get(self) -> Optional[CompanyProfile]:
        raise NotImplementedError

    def upsert(self, fields: Mapping[str, Any], *, updated_by: str) -> CompanyProfile:
        """Create the singleton or merge ``fields`` into it."""

        raise NotImplementedError
