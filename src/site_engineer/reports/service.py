from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from ..access.names import NameResolver
from ..access.scope import build_scope, require_roles
from ..assignments.repository import AssignmentRepository
from ..auth.model import Caller
from ..clients.repository import ClientRepository
from ..common.csv_export import rows_to_csv
from ..common.datetime_utils import iso, now_local, optional_iso_date
from ..common.validators import optional_float, optional_str, require_email, require_non_empty
from ..core.enums import Role
from ..core.exceptions import NotFound, ValidationError
from ..notifications.events import Notifier
from ..profiles.repository import ProfileRepository
from ..sites.repository import SiteRepository
from .model import DailyReport
from .repository import ReportRepository

log = logging.getLogger(__name__)

REPORT_CSV_FIELDS = [
    "date",
    "engineerName",
    "clientName",
    "siteName",
    "hoursWorked",
    "workDone",
    "issues",
]


@dataclass(frozen=True)
class NewReport:
    client_id: str
    work_done: str
    site_id: Optional[str] = None
    issues: Optional[str] = None
    hours_worked: Any = None
    report_date: Any = None


class ReportService:
    def __init__(
        self,
        reports: ReportRepository,
        assignments: AssignmentRepository,
        profiles: ProfileRepository,
        clients: ClientRepository,
        sites: SiteRepository,
        notifier: Notifier,
        *,
        clock: Callable = now_local,
    ):
        self._reports = reports
        self._assignments = assignments
        self._profiles = profiles
        self._clients = clients
        self._sites = sites
        self._notifier = notifier
        self._clock = clock

    def _names(self) -> NameResolver:
        return NameResolver(self._profiles, self._clients, self._sites)

    def _to_view(self, r: DailyReport, names: NameResolver) -> dict:
        return {
            "id": r.id,
            "engineerId": r.engineer_id,
            "engineerName": names.profile(r.engineer_id),
            "clientId": r.client_id,
            "clientName": names.client(r.client_id),
            "siteId": r.site_id,
            "siteName": names.site(r.site_id),
            "date": iso(r.report_date),
            "workDone": r.work_done,
            "issues": r.issues,
            "hoursWorked": r.hours_worked,
            "createdAt": iso(r.created_at),
        }

    def list_reports(
        self,
        caller: Caller,
        *,
        engineer_id: Optional[str] = None,
        client_id: Optional[str] = None,
        day: Any = None,
    ) -> list[dict]:
        flt = build_scope(caller, self._assignments).reports.narrow(engineer_id=engineer_id, client_id=client_id)
        on = optional_iso_date(day, "date")
        rows = self._reports.list(
            engineer_ids=flt.engineer_ids,
            client_ids=flt.client_ids,
            start=on,
            end=on,
        )
        names = self._names()
        return [self._to_view(r, names) for r in rows]

    def _visible_report(self, caller: Caller, report_id: str) -> DailyReport:
        report = self._reports.get_by_id(report_id)
        scope = build_scope(caller, self._assignments)
        if report is None or not scope.reports.allows(engineer_id=report.engineer_id, client_id=report.client_id):
            raise NotFound("Report not found")
        return report

    def get_report(self, caller: Caller, report_id: str) -> dict:
        return self._to_view(self._visible_report(caller, report_id), self._names())

    def submit_report(self, caller: Caller, data: NewReport) -> dict:
        require_roles(caller, Role.ENGINEER, action="submit daily reports")
        client_id = require_non_empty(data.client_id, "clientId")
        work_done = require_non_empty(data.work_done, "workDone")
        site_id = optional_str(data.site_id)

        if self._clients.get_by_id(client_id) is None:
            raise ValidationError("clientId does not reference an existing client")
        if site_id:
            site = self._sites.get_by_id(site_id)
            if site is None or site.client_id != client_id:
                raise ValidationError("siteId must reference a site of the same client")

        hours = optional_float(data.hours_worked, "hoursWorked")
        if hours is not None and not 0 <= hours <= 24:
            raise ValidationError("hoursWorked must be between 0 and 24")

        report = self._reports.create(
            engineer_id=caller.user_id,
            client_id=client_id,
            site_id=site_id,
            report_date=optional_iso_date(data.report_date, "date") or self._clock().date(),
            work_done=work_done,
            issues=optional_str(data.issues),
            hours_worked=hours,
        )
        log.info("Report submitted: id=%s engineer=%s client=%s", report.id, caller.user_id, client_id)

        view = self._to_view(report, self._names())
        self._notifier.report_submitted(view)
        return view

    def send_report_email(self, caller: Caller, report_id: str, recipients: Optional[Sequence[str]] = None) -> dict:
        """Queue the report (HTML + CSV) for email. Defaults to the client's contact address."""
        report = self._visible_report(caller, report_id)

        if recipients:
            if isinstance(recipients, str):
                recipients = [recipients]
            if not isinstance(recipients, (list, tuple)):
                raise ValidationError("recipients must be an email or a list of emails")
            targets = [require_email(r, "recipients") for r in recipients]
        else:
            client = self._clients.get_by_id(report.client_id)
            if client is None:
                raise ValidationError("Report has no client contact to send to")
            targets = [client.contact_email]

        view = self._to_view(report, self._names())
        self._notifier.report_delivery(view, targets, rows_to_csv([view], REPORT_CSV_FIELDS))
        log.info("Report email queued: id=%s recipients=%d by=%s", report.id, len(targets), caller.user_id)
        return {"message": "Report email queued", "reportId": report.id, "recipients": targets}
