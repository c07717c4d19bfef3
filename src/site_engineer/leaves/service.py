from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from ..access.names import NameResolver
from ..access.scope import build_scope, require_roles, require_staff
from ..assignments.repository import AssignmentRepository
from ..auth.model import Caller
from ..clients.repository import ClientRepository
from ..common.datetime_utils import iso, now_local, require_iso_date
from ..common.validators import optional_str, require_non_empty
from ..core.enums import LeaveStatus, Role
from ..core.exceptions import InternalError, InvalidStateTransition, NotFound, ValidationError
from ..notifications.events import Notifier
from ..profiles.repository import ProfileRepository
from ..sites.repository import SiteRepository
from .model import LeaveRequest
from .repository import LeaveRepository

log = logging.getLogger(__name__)


def parse_leave_status(value: Any) -> Optional[LeaveStatus]:
    if value is None or value == "":
        return None
    try:
        return LeaveStatus(str(value).strip().lower())
    except ValueError:
        raise ValidationError("status must be one of pending, approved, rejected")


class LeaveService:
    def __init__(
        self,
        leaves: LeaveRepository,
        assignments: AssignmentRepository,
        profiles: ProfileRepository,
        clients: ClientRepository,
        sites: SiteRepository,
        notifier: Notifier,
        *,
        clock: Callable = now_local,
    ):
        self._leaves = leaves
        self._assignments = assignments
        self._profiles = profiles
        self._clients = clients
        self._sites = sites
        self._notifier = notifier
        self._clock = clock

    def _to_view(self, lr: LeaveRequest, names: NameResolver) -> dict:
        return {
            "id": lr.id,
            "engineerId": lr.engineer_id,
            "engineerName": names.profile(lr.engineer_id),
            "startDate": iso(lr.start_date),
            "endDate": iso(lr.end_date),
            "reason": lr.reason,
            "status": lr.status.value,
            "backupEngineerId": lr.backup_engineer_id,
            "backupEngineerName": names.profile(lr.backup_engineer_id),
            "approvedBy": lr.approved_by,
            "approvedByName": names.profile(lr.approved_by),
            "approvedAt": iso(lr.approved_at),
            "createdAt": iso(lr.created_at),
        }

    def _names(self) -> NameResolver:
        return NameResolver(self._profiles, self._clients, self._sites)

    def list_leaves(self, caller: Caller, *, engineer_id: Optional[str] = None, status: Any = None) -> list[dict]:
        flt = build_scope(caller, self._assignments).leaves.narrow(
            engineer_id=engineer_id,
            status=parse_leave_status(status),
        )
        rows = self._leaves.list(engineer_ids=flt.engineer_ids, statuses=flt.statuses)
        names = self._names()
        return [self._to_view(lr, names) for lr in rows]

    def request_leave(self, caller: Caller, *, start_date: Any, end_date: Any, reason: Any) -> dict:
        require_roles(caller, Role.ENGINEER, action="request leave")
        start = require_iso_date(start_date, "startDate")
        end = require_iso_date(end_date, "endDate")
        if end < start:
            raise ValidationError("endDate must be on or after startDate")

        leave = self._leaves.create(
            engineer_id=caller.user_id,
            start_date=start,
            end_date=end,
            reason=require_non_empty(reason, "reason"),
        )
        log.info("Leave requested: id=%s engineer=%s %s..%s", leave.id, caller.user_id, start, end)
        self._notifier.leave_requested(leave)
        return self._to_view(leave, self._names())

    def approve(self, caller: Caller, leave_id: str, *, backup_engineer_id: Any = None) -> dict:
        return self._decide(caller, leave_id, LeaveStatus.APPROVED, backup_engineer_id=optional_str(backup_engineer_id))

    def reject(self, caller: Caller, leave_id: str) -> dict:
        return self._decide(caller, leave_id, LeaveStatus.REJECTED)

    def _decide(
        self,
        caller: Caller,
        leave_id: str,
        status: LeaveStatus,
        *,
        backup_engineer_id: Optional[str] = None,
    ) -> dict:
        require_staff(caller, f"mark leave requests {status.value}")

        leave = self._leaves.get_by_id(leave_id)
        if leave is None:
            raise NotFound("Leave request not found")
        if leave.status != LeaveStatus.PENDING:
            raise InvalidStateTransition(f"Leave request is already {leave.status.value}")

        if backup_engineer_id:
            backup = self._profiles.get_by_id(backup_engineer_id)
            if backup is None or backup.role != Role.ENGINEER:
                raise ValidationError("backupEngineerId must reference an engineer")
            if backup.id == leave.engineer_id:
                raise ValidationError("Backup engineer must differ from the requester")

        decided = self._leaves.decide(
            leave_id=leave_id,
            status=status,
            approved_by=caller.user_id,
            approved_at=self._clock(),
            backup_engineer_id=backup_engineer_id,
        )
        if not decided:
            # Someone else decided it between our read and the conditional update.
            current = self._leaves.get_by_id(leave_id)
            state = current.status.value if current else "gone"
            raise InvalidStateTransition(f"Leave request is already {state}")

        updated = self._leaves.get_by_id(leave_id)
        if updated is None:
            raise InternalError("Leave request disappeared after update")
        log.info("Leave %s: id=%s by=%s", status.value, leave_id, caller.user_id)
        self._notifier.leave_decided(updated)
        return self._to_view(updated, self._names())
