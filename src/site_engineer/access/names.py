from __future__ import annotations

from typing import Optional

from ..clients.repository import ClientRepository
from ..profiles.repository import ProfileRepository
from ..sites.repository import SiteRepository


class NameResolver:
    """Resolves display names by id at read time, memoized for one listing."""

    def __init__(self, profiles: ProfileRepository, clients: ClientRepository, sites: SiteRepository):
        self._profiles = profiles
        self._clients = clients
        self._sites = sites
        self._cache: dict[tuple[str, str], Optional[str]] = {}

    def profile(self, profile_id: Optional[str]) -> Optional[str]:
        if not profile_id:
            return None
        key = ("profile", profile_id)
        if key not in self._cache:
            p = self._profiles.get_by_id(profile_id)
            self._cache[key] = p.full_name if p else None
        return self._cache[key]

    def client(self, client_id: Optional[str]) -> Optional[str]:
        if not client_id:
            return None
        key = ("client", client_id)
        if key not in self._cache:
            c = self._clients.get_by_id(client_id)
            self._cache[key] = c.name if c else None
        return self._cache[key]

    def site(self, site_id: Optional[str]) -> Optional[str]:
        if not site_id:
            return None
        key = ("site", site_id)
        if key not in self._cache:
            s = self._sites.get_by_id(site_id)
            self._cache[key] = s.name if s else None
        return self._cache[key]
