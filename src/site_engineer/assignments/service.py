from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Optional

from ..access.names import NameResolver
from ..access.scope import build_scope, require_staff
from ..auth.model import Caller
from ..clients.repository import ClientRepository
from ..common.datetime_utils import iso, now_local, optional_iso_date
from ..common.validators import optional_str, require_non_empty
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..profiles.repository import ProfileRepository
from ..sites.repository import SiteRepository
from .model import Assignment
from .repository import AssignmentRepository

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewAssignment:
    engineer_id: str
    client_id: str
    site_id: Optional[str] = None
    assigned_date: Any = None


class AssignmentService:
    def __init__(
        self,
        assignments: AssignmentRepository,
        profiles: ProfileRepository,
        clients: ClientRepository,
        sites: SiteRepository,
        *,
        clock: Callable = now_local,
    ):
        self._assignments = assignments
        self._profiles = profiles
        self._clients = clients
        self._sites = sites
        self._clock = clock

    def _names(self) -> NameResolver:
        return NameResolver(self._profiles, self._clients, self._sites)

    def _to_view(self, a: Assignment, names: NameResolver) -> dict:
        engineer = self._profiles.get_by_id(a.engineer_id)
        return {
            "id": a.id,
            "engineerId": a.engineer_id,
            "engineerName": engineer.full_name if engineer else None,
            "engineerDesignation": engineer.designation if engineer else None,
            "clientId": a.client_id,
            "clientName": names.client(a.client_id),
            "siteId": a.site_id,
            "siteName": names.site(a.site_id),
            "assignedDate": iso(a.assigned_date),
            "status": "active" if a.is_active else "inactive",
            "createdAt": iso(a.created_at),
        }

    def list_assignments(
        self,
        caller: Caller,
        *,
        engineer_id: Optional[str] = None,
        client_id: Optional[str] = None,
        active_only: bool = False,
    ) -> list[dict]:
        flt = build_scope(caller, self._assignments).assignments.narrow(engineer_id=engineer_id, client_id=client_id)
        rows = self._assignments.list(
            engineer_ids=flt.engineer_ids,
            client_ids=flt.client_ids,
            active_only=active_only,
        )
        names = self._names()
        return [self._to_view(a, names) for a in rows]

    def create_assignment(self, caller: Caller, data: NewAssignment) -> dict:
        require_staff(caller, "create assignments")
        engineer_id = require_non_empty(data.engineer_id, "engineerId")
        client_id = require_non_empty(data.client_id, "clientId")
        site_id = optional_str(data.site_id)

        engineer = self._profiles.get_by_id(engineer_id)
        if engineer is None or engineer.role != Role.ENGINEER:
            raise ValidationError("engineerId must reference an engineer")
        if self._clients.get_by_id(client_id) is None:
            raise ValidationError("clientId does not reference an existing client")
        if site_id:
            site = self._sites.get_by_id(site_id)
            if site is None or site.client_id != client_id:
                raise ValidationError("siteId must reference a site of the same client")

        assigned_date: date = optional_iso_date(data.assigned_date, "assignedDate") or self._clock().date()
        assignment = self._assignments.create(
            engineer_id=engineer_id,
            client_id=client_id,
            site_id=site_id,
            assigned_date=assigned_date,
        )
        log.info(
            "Assignment created: id=%s engineer=%s client=%s by=%s",
            assignment.id, engineer_id, client_id, caller.user_id,
        )
        return self._to_view(assignment, self._names())
