from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any, Callable, Mapping, Optional, Sequence

from ..access.scope import require_staff
from ..assignments.repository import AssignmentRepository
from ..auth.model import Caller
from ..checkins.model import CheckIn
from ..checkins.repository import CheckInRepository
from ..clients.repository import ClientRepository
from ..common.csv_export import rows_to_csv
from ..common.datetime_utils import month_bounds, now_local, optional_iso_date, require_iso_date
from ..common.validators import require_email
from ..core.constants import AGGREGATE_LIMIT, STANDARD_HOURS_PER_DAY
from ..core.enums import AttendanceMark, LeaveStatus, Role
from ..core.exceptions import ValidationError
from ..leaves.model import LeaveRequest
from ..leaves.repository import LeaveRepository
from ..notifications.events import Notifier
from ..profiles.repository import ProfileRepository
from ..reports.repository import ReportRepository
from ..sites.repository import SiteRepository
from .model import Column, ReportTable

log = logging.getLogger(__name__)

MAX_RANGE_DAYS = 366

REGISTER_COLUMNS = (
    Column("date", "Date"),
    Column("engineerName", "Engineer"),
    Column("status", "Status"),
    Column("checkInTime", "Check-in"),
    Column("checkOutTime", "Check-out"),
    Column("hoursWorked", "Hours"),
    Column("site", "Site / location"),
)
SUMMARY_COLUMNS = (
    Column("engineerName", "Engineer"),
    Column("totalDays", "Days"),
    Column("presentDays", "Present"),
    Column("leaveDays", "Leave"),
    Column("absentDays", "Absent"),
    Column("totalHours", "Total hours"),
    Column("averageHoursPerDay", "Avg hours/day"),
)
CLIENT_COLUMNS = (
    Column("clientName", "Client"),
    Column("totalAssignments", "Assignments"),
    Column("activeEngineers", "Active engineers"),
    Column("totalCheckIns", "Check-ins"),
    Column("totalReports", "Reports"),
    Column("sitesCount", "Sites"),
)
PAYROLL_COLUMNS = (
    Column("engineerName", "Engineer"),
    Column("email", "Email"),
    Column("phone", "Phone"),
    Column("workingDays", "Working days"),
    Column("totalHours", "Total hours"),
    Column("leaveDays", "Leave days"),
    Column("overtimeHours", "Overtime hours"),
)

REPORT_KINDS = ("attendance-register", "engineer-summary", "client-report", "payroll")


def _days(start: date, end: date) -> list[date]:
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]


def _leave_dates(leaves: Sequence[LeaveRequest], start: date, end: date) -> set[date]:
    out: set[date] = set()
    for lr in leaves:
        first = max(lr.start_date, start)
        last = min(lr.end_date, end)
        if first <= last:
            out.update(_days(first, last))
    return out


def _hhmm(value) -> Optional[str]:
    return value.strftime("%H:%M") if value else None


class HRReportService:
    """Attendance register, engineer summary, client and payroll reports (admin/hr)."""

    def __init__(
        self,
        profiles: ProfileRepository,
        clients: ClientRepository,
        sites: SiteRepository,
        assignments: AssignmentRepository,
        check_ins: CheckInRepository,
        reports: ReportRepository,
        leaves: LeaveRepository,
        notifier: Notifier,
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
        self._notifier = notifier
        self._clock = clock

    def _engineers(self):
        return self._profiles.list(role=Role.ENGINEER, limit=AGGREGATE_LIMIT)

    def _approved_leaves(self, start: date, end: date) -> Sequence[LeaveRequest]:
        return self._leaves.list(
            statuses=[LeaveStatus.APPROVED],
            overlapping=(start, end),
            limit=AGGREGATE_LIMIT,
        )

    def _check_ins_by_engineer(self, start: date, end: date) -> dict[str, list[CheckIn]]:
        grouped: dict[str, list[CheckIn]] = {}
        for c in self._check_ins.list(start=start, end=end, limit=AGGREGATE_LIMIT):
            grouped.setdefault(c.engineer_id, []).append(c)
        return grouped

    # -------- Reports --------
    def attendance_register(self, caller: Caller, *, day: Any = None) -> ReportTable:
        require_staff(caller, "view HR reports")
        on = optional_iso_date(day, "date") or self._clock().date()

        check_ins = self._check_ins_by_engineer(on, on)
        on_leave = {lr.engineer_id for lr in self._approved_leaves(on, on) if lr.covers(on)}

        rows: list[dict] = []
        for engineer in self._engineers():
            row = {
                "date": on.isoformat(),
                "engineerId": engineer.id,
                "engineerName": engineer.full_name,
                "status": AttendanceMark.ABSENT.value,
                "checkInTime": None,
                "checkOutTime": None,
                "hoursWorked": None,
                "site": None,
            }
            todays = sorted(check_ins.get(engineer.id, []), key=lambda c: c.check_in_time)
            if todays:
                first = todays[0]
                row.update(
                    status=AttendanceMark.PRESENT.value,
                    checkInTime=_hhmm(first.check_in_time),
                    checkOutTime=_hhmm(first.check_out_time),
                    hoursWorked=round(sum(c.hours_worked for c in todays), 2),
                    site=first.location_name,
                )
            elif engineer.id in on_leave:
                row["status"] = AttendanceMark.LEAVE.value
            rows.append(row)

        rows.sort(key=lambda r: r["engineerName"].lower())
        return ReportTable("attendance-register", "Daily attendance register", on.isoformat(), REGISTER_COLUMNS, rows)

    def _range(self, start: Any, end: Any) -> tuple[date, date]:
        first = require_iso_date(start, "start")
        last = require_iso_date(end, "end")
        if last < first:
            raise ValidationError("end must be on or after start")
        if (last - first).days + 1 > MAX_RANGE_DAYS:
            raise ValidationError(f"Range cannot exceed {MAX_RANGE_DAYS} days")
        return first, last

    def engineer_summary(self, caller: Caller, *, start: Any, end: Any) -> ReportTable:
        require_staff(caller, "view HR reports")
        first, last = self._range(start, end)
        total_days = (last - first).days + 1

        check_ins = self._check_ins_by_engineer(first, last)
        leaves = self._approved_leaves(first, last)

        rows: list[dict] = []
        for engineer in self._engineers():
            mine = check_ins.get(engineer.id, [])
            present = {c.date for c in mine}
            leave = _leave_dates([lr for lr in leaves if lr.engineer_id == engineer.id], first, last) - present
            total_hours = round(sum(c.hours_worked for c in mine), 2)
            rows.append(
                {
                    "engineerId": engineer.id,
                    "engineerName": engineer.full_name,
                    "totalDays": total_days,
                    "presentDays": len(present),
                    "leaveDays": len(leave),
                    "absentDays": max(0, total_days - len(present) - len(leave)),
                    "totalHours": total_hours,
                    "averageHoursPerDay": round(total_hours / len(present), 2) if present else 0,
                }
            )

        rows.sort(key=lambda r: r["engineerName"].lower())
        period = f"{first.isoformat()}..{last.isoformat()}"
        return ReportTable("engineer-summary", "Engineer attendance summary", period, SUMMARY_COLUMNS, rows)

    def client_report(self, caller: Caller, *, month: Any = None) -> ReportTable:
        require_staff(caller, "view HR reports")
        month = str(month or self._clock().strftime("%Y-%m")).strip()
        first, last = month_bounds(month)

        check_ins = self._check_ins_by_engineer(first, last)
        reports = self._reports.list(start=first, end=last, limit=AGGREGATE_LIMIT)
        assignments = self._assignments.list(limit=AGGREGATE_LIMIT)
        sites = self._sites.list(limit=AGGREGATE_LIMIT)

        rows: list[dict] = []
        for client in self._clients.list(limit=AGGREGATE_LIMIT):
            mine = [a for a in assignments if a.client_id == client.id]
            engineers = {a.engineer_id for a in mine}
            rows.append(
                {
                    "clientId": client.id,
                    "clientName": client.name,
                    "totalAssignments": len(mine),
                    "activeEngineers": len({a.engineer_id for a in mine if a.is_active}),
                    "totalCheckIns": sum(len(check_ins.get(e, [])) for e in engineers),
                    "totalReports": sum(1 for r in reports if r.client_id == client.id),
                    "sitesCount": sum(1 for s in sites if s.client_id == client.id),
                }
            )

        return ReportTable("client-report", "Monthly client report", month, CLIENT_COLUMNS, rows)

    def payroll(self, caller: Caller, *, month: Any = None) -> ReportTable:
        require_staff(caller, "view HR reports")
        month = str(month or self._clock().strftime("%Y-%m")).strip()
        first, last = month_bounds(month)

        check_ins = self._check_ins_by_engineer(first, last)
        leaves = self._approved_leaves(first, last)

        rows: list[dict] = []
        for engineer in self._engineers():
            mine = check_ins.get(engineer.id, [])
            working_days = len({c.date for c in mine})
            total_hours = sum(c.hours_worked for c in mine)
            leave_days = _leave_dates([lr for lr in leaves if lr.engineer_id == engineer.id], first, last)
            rows.append(
                {
                    "engineerId": engineer.id,
                    "engineerName": engineer.full_name,
                    "email": engineer.email,
                    "phone": engineer.phone or "",
                    "workingDays": working_days,
                    "totalHours": round(total_hours, 2),
                    "leaveDays": len(leave_days),
                    "overtimeHours": round(max(0.0, total_hours - working_days * STANDARD_HOURS_PER_DAY), 2),
                }
            )

        rows.sort(key=lambda r: r["engineerName"].lower())
        return ReportTable("payroll", "Monthly payroll", month, PAYROLL_COLUMNS, rows)

    # -------- Export / delivery --------
    def build(self, caller: Caller, kind: str, params: Mapping[str, Any]) -> ReportTable:
        if kind == "attendance-register":
            return self.attendance_register(caller, day=params.get("date"))
        if kind == "engineer-summary":
            return self.engineer_summary(caller, start=params.get("start"), end=params.get("end"))
        if kind == "client-report":
            return self.client_report(caller, month=params.get("month"))
        if kind == "payroll":
            return self.payroll(caller, month=params.get("month"))
        raise ValidationError(f"report must be one of {', '.join(REPORT_KINDS)}")

    @staticmethod
    def to_csv(table: ReportTable) -> bytes:
        return rows_to_csv(table.rows, table.fieldnames)

    def send_email(self, caller: Caller, kind: str, params: Mapping[str, Any], recipients: Any) -> dict:
        table = self.build(caller, kind, params)
        if isinstance(recipients, str):
            recipients = [recipients]
        if not recipients:
            recipients = [caller.email]
        if not isinstance(recipients, (list, tuple)):
            raise ValidationError("recipients must be an email or a list of emails")
        targets = [require_email(r, "recipients") for r in recipients]

        self._notifier.table_report(
            subject=f"{table.title} ({table.period})",
            period=table.period,
            columns=[{"key": c.key, "label": c.label} for c in table.columns],
            rows=table.rows,
            csv_data=self.to_csv(table),
            filename=table.filename,
            recipients=targets,
        )
        log.info("HR report %s queued for %d recipient(s) by=%s", kind, len(targets), caller.user_id)
        return {"message": "Report email queued", "report": kind, "period": table.period, "recipients": targets}
