from __future__ import annotations

from typing import Collection, Optional, Protocol, Sequence

from .model import Site


class SiteRepository(Protocol):
    def get_by_id(self, site_id: str) -> Optional[Site]:
        raise NotImplementedError

    def list(self, *, client_ids: Optional[Collection[str]] = None, limit: int = 500) -> Sequence[Site]:
        raise NotImplementedError

    def create(
        self,
        *,
        client_id: str,
        name: str,
        location: Optional[str] = None,
        address: Optional[str] = None,
    ) -> Site:
        raise NotImplementedError
