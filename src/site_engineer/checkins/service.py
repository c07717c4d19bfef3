from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from ..access.names import NameResolver
from ..access.scope import build_scope, require_roles
from ..assignments.repository import AssignmentRepository
from ..auth.model import Caller
from ..clients.repository import ClientRepository
from ..common.datetime_utils import iso, now_local, optional_iso_date
from ..common.validators import optional_float, optional_str
from ..core.enums import Role
from ..core.exceptions import AlreadyCheckedOut, AuthorizationError, InternalError, NotFound, ValidationError
from ..notifications.events import Notifier
from ..profiles.repository import ProfileRepository
from ..sites.repository import SiteRepository
from .model import CheckIn
from .repository import CheckInRepository

log = logging.getLogger(__name__)


class CheckInService:
    def __init__(
        self,
        check_ins: CheckInRepository,
        assignments: AssignmentRepository,
        profiles: ProfileRepository,
        clients: ClientRepository,
        sites: SiteRepository,
        notifier: Notifier,
        *,
        clock: Callable = now_local,
    ):
        self._check_ins = check_ins
        self._assignments = assignments
        self._profiles = profiles
        self._clients = clients
        self._sites = sites
        self._notifier = notifier
        self._clock = clock

    def _to_view(self, c: CheckIn, names: NameResolver) -> dict:
        return {
            "id": c.id,
            "engineerId": c.engineer_id,
            "engineerName": names.profile(c.engineer_id),
            "checkInTime": iso(c.check_in_time),
            "checkOutTime": iso(c.check_out_time),
            "latitude": c.latitude,
            "longitude": c.longitude,
            "locationName": c.location_name,
            "date": iso(c.date),
            "createdAt": iso(c.created_at),
        }

    def _names(self) -> NameResolver:
        return NameResolver(self._profiles, self._clients, self._sites)

    def list_check_ins(self, caller: Caller, *, engineer_id: Optional[str] = None, day: Any = None) -> list[dict]:
        flt = build_scope(caller, self._assignments).check_ins.narrow(engineer_id=engineer_id)
        on = optional_iso_date(day, "date")
        rows = self._check_ins.list(engineer_ids=flt.engineer_ids, start=on, end=on)
        names = self._names()
        return [self._to_view(c, names) for c in rows]

    def check_in(
        self,
        caller: Caller,
        *,
        latitude: Any = None,
        longitude: Any = None,
        location_name: Any = None,
    ) -> dict:
        require_roles(caller, Role.ENGINEER, action="check in")
        now = self._clock()
        today = now.date()

        if self._check_ins.find_for_engineer_on(caller.user_id, today) is not None:
            raise ValidationError("Already checked in today")

        check_in = self._check_ins.create(
            engineer_id=caller.user_id,
            check_in_time=now,
            day=today,
            latitude=optional_float(latitude, "latitude"),
            longitude=optional_float(longitude, "longitude"),
            location_name=optional_str(location_name),
        )
        log.info("Check-in: id=%s engineer=%s", check_in.id, caller.user_id)

        # Mail goes out on a worker thread; failures there never reach this response.
        self._notifier.check_in_created(check_in)
        return self._to_view(check_in, self._names())

    def check_out(self, caller: Caller, check_in_id: str) -> dict:
        if caller.role == Role.CLIENT:
            raise AuthorizationError("Clients cannot check out engineers")

        record = self._check_ins.get_by_id(check_in_id)
        if record is None:
            raise NotFound("Check-in not found")
        if caller.role == Role.ENGINEER and record.engineer_id != caller.user_id:
            raise AuthorizationError("You can only check out your own check-in")
        if not record.is_open:
            raise AlreadyCheckedOut("Already checked out")

        closed = self._check_ins.close(check_in_id, self._clock())
        current = self._check_ins.get_by_id(check_in_id)
        if not closed:
            if current is not None and not current.is_open:
                # Lost the race to a concurrent checkout.
                raise AlreadyCheckedOut("Already checked out")
            raise ValidationError("Check-out time cannot be earlier than check-in time")
        if current is None:
            raise InternalError("Check-in disappeared during checkout")

        log.info("Check-out: id=%s engineer=%s", check_in_id, record.engineer_id)
        return self._to_view(current, self._names())
