from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..assignments.repository import AssignmentRepository
from ..checkins.model import CheckIn
from ..clients.repository import ClientRepository
from ..company.repository import CompanyProfileRepository
from ..core.enums import LeaveStatus, Role
from ..leaves.model import LeaveRequest
from ..profiles.repository import ProfileRepository
from .dispatcher import NotificationDispatcher
from .model import Attachment, MailMessage
from .templates import EmailRenderer


def _unique(emails: Iterable[Optional[str]]) -> tuple[str, ...]:
    seen: dict[str, str] = {}
    for email in emails:
        if email and email.strip():
            seen.setdefault(email.strip().lower(), email.strip())
    return tuple(seen.values())


class Notifier:
    """Builds transactional emails for workflow events and hands them to the dispatcher."""

    def __init__(
        self,
        dispatcher: NotificationDispatcher,
        renderer: EmailRenderer,
        *,
        profiles: ProfileRepository,
        clients: ClientRepository,
        assignments: AssignmentRepository,
        company: CompanyProfileRepository,
        leave_notify_emails: Sequence[str] = (),
    ):
        self._dispatcher = dispatcher
        self._renderer = renderer
        self._profiles = profiles
        self._clients = clients
        self._assignments = assignments
        self._company = company
        self._leave_notify_emails = tuple(leave_notify_emails)

    def _client_contacts_for_engineer(self, engineer_id: str) -> tuple[str, ...]:
        active = self._assignments.list(engineer_ids=[engineer_id], active_only=True)
        client_ids = sorted({a.client_id for a in active})
        if not client_ids:
            return ()
        return _unique(c.contact_email for c in self._clients.list(ids=client_ids))

    def _staff_emails(self) -> tuple[str, ...]:
        staff = list(self._profiles.list(role=Role.ADMIN)) + list(self._profiles.list(role=Role.HR))
        return _unique([p.email for p in staff] + list(self._leave_notify_emails))

    def _name(self, profile_id: Optional[str]) -> Optional[str]:
        if not profile_id:
            return None
        p = self._profiles.get_by_id(profile_id)
        return p.full_name if p else None

    # -------- Events --------
    def check_in_created(self, check_in: CheckIn) -> None:
        def build() -> Optional[MailMessage]:
            recipients = self._client_contacts_for_engineer(check_in.engineer_id)
            if not recipients:
                return None
            engineer_name = self._name(check_in.engineer_id) or "An engineer"
            subject = f"Check-in: {engineer_name} on {check_in.date.isoformat()}"
            check_in_time = check_in.check_in_time.strftime("%H:%M")
            html = self._renderer.render(
                "check_in.html",
                company=self._company.get(),
                subject=subject,
                engineer_name=engineer_name,
                check_in_time=check_in_time,
                date=check_in.date.isoformat(),
                location_name=check_in.location_name,
                latitude=check_in.latitude,
                longitude=check_in.longitude,
            )
            text = f"{engineer_name} checked in at {check_in_time} on {check_in.date.isoformat()}."
            return MailMessage(subject=subject, recipients=recipients, html=html, text=text)

        self._dispatcher.dispatch("check_in_created", build)

    def report_submitted(self, report: dict) -> None:
        """``report`` is the enriched report view (camelCase keys)."""

        def build() -> Optional[MailMessage]:
            client = self._clients.get_by_id(report["clientId"])
            if client is None:
                return None
            subject = f"Daily report: {report.get('engineerName') or 'Engineer'} ({report['date']})"
            html = self._renderer.render(
                "daily_report.html",
                company=self._company.get(),
                subject=subject,
                report=report,
                note=None,
            )
            return MailMessage(
                subject=subject,
                recipients=_unique([client.contact_email]),
                html=html,
                text=report["workDone"],
            )

        self._dispatcher.dispatch("report_submitted", build)

    def report_delivery(self, report: dict, recipients: Sequence[str], csv_data: bytes) -> None:
        def build() -> Optional[MailMessage]:
            subject = f"Daily report: {report.get('engineerName') or 'Engineer'} ({report['date']})"
            html = self._renderer.render(
                "daily_report.html",
                company=self._company.get(),
                subject=subject,
                report=report,
                note="The report is attached as a CSV file.",
            )
            return MailMessage(
                subject=subject,
                recipients=_unique(recipients),
                html=html,
                text=report["workDone"],
                attachments=(Attachment(f"daily_report_{report['date']}.csv", "text/csv", csv_data),),
            )

        self._dispatcher.dispatch("report_delivery", build)

    def leave_requested(self, leave: LeaveRequest) -> None:
        def build() -> Optional[MailMessage]:
            engineer_name = self._name(leave.engineer_id) or "An engineer"
            subject = f"Leave request from {engineer_name}"
            html = self._renderer.render(
                "leave_requested.html",
                company=self._company.get(),
                subject=subject,
                engineer_name=engineer_name,
                start_date=leave.start_date.isoformat(),
                end_date=leave.end_date.isoformat(),
                reason=leave.reason,
            )
            text = f"{engineer_name} requested leave from {leave.start_date} to {leave.end_date}: {leave.reason}"
            return MailMessage(subject=subject, recipients=self._staff_emails(), html=html, text=text)

        self._dispatcher.dispatch("leave_requested", build)

    def leave_decided(self, leave: LeaveRequest) -> None:
        def build() -> Optional[MailMessage]:
            engineer = self._profiles.get_by_id(leave.engineer_id)
            recipients: list[Optional[str]] = [engineer.email if engineer else None]
            if leave.status == LeaveStatus.APPROVED:
                recipients.extend(self._client_contacts_for_engineer(leave.engineer_id))
            engineer_name = engineer.full_name if engineer else "Engineer"
            subject = f"Leave {leave.status.value}: {engineer_name}"
            html = self._renderer.render(
                "leave_decided.html",
                company=self._company.get(),
                subject=subject,
                engineer_name=engineer_name,
                start_date=leave.start_date.isoformat(),
                end_date=leave.end_date.isoformat(),
                status=leave.status.value,
                approver_name=self._name(leave.approved_by),
                backup_engineer_name=self._name(leave.backup_engineer_id),
            )
            text = f"Leave of {engineer_name} ({leave.start_date} to {leave.end_date}) was {leave.status.value}."
            return MailMessage(subject=subject, recipients=_unique(recipients), html=html, text=text)

        self._dispatcher.dispatch("leave_decided", build)

    def table_report(
        self,
        *,
        subject: str,
        period: str,
        columns: Sequence[dict],
        rows: Sequence[dict],
        csv_data: bytes,
        filename: str,
        recipients: Sequence[str],
    ) -> None:
        def build() -> Optional[MailMessage]:
            html = self._renderer.render(
                "table_report.html",
                company=self._company.get(),
                subject=subject,
                period=period,
                columns=columns,
                rows=rows,
            )
            return MailMessage(
                subject=subject,
                recipients=_unique(recipients),
                html=html,
                text=f"{subject} ({period}). The data is attached as CSV.",
                attachments=(Attachment(filename, "text/csv", csv_data),),
            )

        self._dispatcher.dispatch("table_report", build)
