"""Role scoping: which slice of each collection a caller may see.

A ``ListFilter`` uses ``None`` for "unrestricted" and an empty frozenset for
"nothing"; repositories translate an empty set into a query that matches no
rows, so a client user without a linked Client simply sees empty lists.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Optional

from ..assignments.repository import AssignmentRepository
from ..auth.model import Caller
from ..core.enums import LeaveStatus, Role
from ..core.exceptions import AuthorizationError

IdSet = Optional[frozenset[str]]


def _narrow(allowed: IdSet, wanted: Optional[str]) -> IdSet:
    if not wanted:
        return allowed
    if allowed is None:
        return frozenset({wanted})
    return allowed & {wanted}


@dataclass(frozen=True)
class ListFilter:
    engineer_ids: IdSet = None
    client_ids: IdSet = None
    statuses: Optional[frozenset[LeaveStatus]] = None

    def narrow(
        self,
        *,
        engineer_id: Optional[str] = None,
        client_id: Optional[str] = None,
        status: Optional[LeaveStatus] = None,
    ) -> "ListFilter":
        """Apply optional query filters without ever widening the scope."""
        statuses = self.statuses
        if status is not None:
            statuses = frozenset({status}) if statuses is None else statuses & {status}
        return replace(
            self,
            engineer_ids=_narrow(self.engineer_ids, engineer_id),
            client_ids=_narrow(self.client_ids, client_id),
            statuses=statuses,
        )

    def allows(self, *, engineer_id: Optional[str] = None, client_id: Optional[str] = None) -> bool:
        if self.engineer_ids is not None and engineer_id not in self.engineer_ids:
            return False
        if self.client_ids is not None and client_id not in self.client_ids:
            return False
        return True


UNRESTRICTED = ListFilter()


@dataclass(frozen=True)
class Scope:
    role: Role
    assignments: ListFilter
    reports: ListFilter
    check_ins: ListFilter
    leaves: ListFilter
    clients: ListFilter

    @property
    def engineers(self) -> IdSet:
        """Engineer profiles whose activity the caller can see."""
        return self.check_ins.engineer_ids


def _ids(values: Iterable[str]) -> frozenset[str]:
    return frozenset(v for v in values if v)


def build_scope(caller: Caller, assignments: AssignmentRepository) -> Scope:
    role = caller.role

    if role in (Role.ADMIN, Role.HR):
        return Scope(
            role=role,
            assignments=UNRESTRICTED,
            reports=UNRESTRICTED,
            check_ins=UNRESTRICTED,
            leaves=UNRESTRICTED,
            clients=UNRESTRICTED,
        )

    if role == Role.ENGINEER:
        own = frozenset({caller.user_id})
        active = assignments.list(engineer_ids=own, active_only=True)
        return Scope(
            role=role,
            assignments=ListFilter(engineer_ids=own),
            reports=ListFilter(engineer_ids=own),
            check_ins=ListFilter(engineer_ids=own),
            leaves=ListFilter(engineer_ids=own),
            clients=ListFilter(client_ids=_ids(a.client_id for a in active)),
        )

    if role == Role.CLIENT:
        if not caller.client_id:
            nothing = ListFilter(engineer_ids=frozenset(), client_ids=frozenset())
            return Scope(
                role=role,
                assignments=nothing,
                reports=nothing,
                check_ins=nothing,
                leaves=replace(nothing, statuses=frozenset({LeaveStatus.APPROVED})),
                clients=nothing,
            )
        own_client = frozenset({caller.client_id})
        assigned = _ids(
            a.engineer_id for a in assignments.list(client_ids=own_client, active_only=True)
        )
        return Scope(
            role=role,
            assignments=ListFilter(client_ids=own_client),
            reports=ListFilter(client_ids=own_client),
            check_ins=ListFilter(engineer_ids=assigned),
            leaves=ListFilter(engineer_ids=assigned, statuses=frozenset({LeaveStatus.APPROVED})),
            clients=ListFilter(client_ids=own_client),
        )

    raise AuthorizationError(f"Unsupported role: {role}")


def require_roles(caller: Caller, *roles: Role, action: str = "perform this action") -> None:
    if caller.role not in roles:
        raise AuthorizationError(f"Role '{caller.role.value}' may not {action}")


def require_staff(caller: Caller, action: str = "perform this action") -> None:
    require_roles(caller, Role.ADMIN, Role.HR, action=action)
