from __future__ import annotations

from typing import Callable

from ..access.scope import build_scope
from ..assignments.repository import AssignmentRepository
from ..auth.model import Caller
from ..checkins.repository import CheckInRepository
from ..clients.repository import ClientRepository
from ..common.datetime_utils import now_local
from ..core.constants import AGGREGATE_LIMIT
from ..core.enums import LeaveStatus, Role
from ..leaves.repository import LeaveRepository
from ..profiles.repository import ProfileRepository
from ..reports.repository import ReportRepository
from ..sites.repository import SiteRepository


class DashboardService:
    """Counts recomputed on every request from the caller's scoped sets."""

    def __init__(
        self,
        profiles: ProfileRepository,
        clients: ClientRepository,
        sites: SiteRepository,
        assignments: AssignmentRepository,
        check_ins: CheckInRepository,
        reports: ReportRepository,
        leaves: LeaveRepository,
        *,
        clock: Callable = now_local,
    ):
        self._profiles = profiles
        self._clients = clients
        self._sites = sites
        self._assignments = assignments
        self._check_ins = check_ins
        self._reports = reports
        self._leaves = leaves
        self._clock = clock

    def summary(self, caller: Caller) -> dict:
        scope = build_scope(caller, self._assignments)
        today = self._clock().date()
        pending = scope.leaves.narrow(status=LeaveStatus.PENDING)

        return {
            "totalEngineers": len(self._profiles.list(role=Role.ENGINEER, ids=scope.engineers, limit=AGGREGATE_LIMIT)),
            "totalClients": len(self._clients.list(ids=scope.clients.client_ids, limit=AGGREGATE_LIMIT)),
            "totalSites": len(self._sites.list(client_ids=scope.clients.client_ids, limit=AGGREGATE_LIMIT)),
            "activeAssignments": len(
                self._assignments.list(
                    engineer_ids=scope.assignments.engineer_ids,
                    client_ids=scope.assignments.client_ids,
                    active_only=True,
                    limit=AGGREGATE_LIMIT,
                )
            ),
            "todayCheckIns": len(
                self._check_ins.list(
                    engineer_ids=scope.check_ins.engineer_ids,
                    start=today,
                    end=today,
                    limit=AGGREGATE_LIMIT,
                )
            ),
            "todayReports": len(
                self._reports.list(
                    engineer_ids=scope.reports.engineer_ids,
                    client_ids=scope.reports.client_ids,
                    start=today,
                    end=today,
                    limit=AGGREGATE_LIMIT,
                )
            ),
            "pendingLeaves": len(
                self._leaves.list(
                    engineer_ids=pending.engineer_ids,
                    statuses=pending.statuses,
                    limit=AGGREGATE_LIMIT,
                )
            ),
        }
