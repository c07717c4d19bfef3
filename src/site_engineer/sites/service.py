from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..access.names import NameResolver
from ..access.scope import build_scope, require_staff
from ..assignments.repository import AssignmentRepository
from ..auth.model import Caller
from ..clients.repository import ClientRepository
from ..common.datetime_utils import iso
from ..common.validators import optional_str, require_non_empty
from ..core.exceptions import ValidationError
from ..profiles.repository import ProfileRepository
from .model import Site
from .repository import SiteRepository

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewSite:
    client_id: str
    name: str
    location: Optional[str] = None
    address: Optional[str] = None


class SiteService:
    def __init__(
        self,
        sites: SiteRepository,
        clients: ClientRepository,
        profiles: ProfileRepository,
        assignments: AssignmentRepository,
    ):
        self._sites = sites
        self._clients = clients
        self._profiles = profiles
        self._assignments = assignments

    def _to_view(self, s: Site, names: NameResolver) -> dict:
        return {
            "id": s.id,
            "clientId": s.client_id,
            "clientName": names.client(s.client_id),
            "name": s.name,
            "location": s.location,
            "address": s.address,
            "status": "active",
            "createdAt": iso(s.created_at),
        }

    def list_sites(self, caller: Caller, *, client_id: Optional[str] = None) -> list[dict]:
        allowed = build_scope(caller, self._assignments).clients.narrow(client_id=client_id).client_ids
        if allowed is not None and not allowed:
            return []
        names = NameResolver(self._profiles, self._clients, self._sites)
        return [self._to_view(s, names) for s in self._sites.list(client_ids=allowed)]

    def create_site(self, caller: Caller, data: NewSite) -> dict:
        require_staff(caller, "create sites")
        client_id = require_non_empty(data.client_id, "clientId")
        if self._clients.get_by_id(client_id) is None:
            raise ValidationError("clientId does not reference an existing client")

        site = self._sites.create(
            client_id=client_id,
            name=require_non_empty(data.name, "name"),
            location=optional_str(data.location),
            address=optional_str(data.address),
        )
        log.info("Site created: id=%s client=%s by=%s", site.id, client_id, caller.user_id)
        return self._to_view(site, NameResolver(self._profiles, self._clients, self._sites))
