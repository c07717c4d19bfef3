from __future__ import annotations

from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from .assignments.mysql_assignment_repository import MySQLAssignmentRepository
from .assignments.repository import AssignmentRepository
from .assignments.service import AssignmentService
from .auth.mysql_session_repository import MySQLSessionRepository
from .auth.repository import SessionRepository
from .auth.service import AuthService
from .checkins.mysql_checkin_repository import MySQLCheckInRepository
from .checkins.repository import CheckInRepository
from .checkins.service import CheckInService
from .clients.mysql_client_repository import MySQLClientRepository
from .clients.repository import ClientRepository
from .clients.service import ClientService
from .common.datetime_utils import now_local
from .company.mysql_company_repository import MySQLCompanyProfileRepository
from .company.repository import CompanyProfileRepository
from .company.service import CompanyProfileService
from .core.constants import DEFAULT_NOTIFY_WORKERS, DEFAULT_SESSION_DAYS
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .hr.service import HRReportService
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.repository import LeaveRepository
from .leaves.service import LeaveService
from .notifications.dispatcher import NotificationDispatcher
from .notifications.events import Notifier
from .notifications.templates import EmailRenderer
from .notifications.transport import MailTransport
from .profiles.mysql_profile_repository import MySQLProfileRepository
from .profiles.repository import ProfileRepository
from .profiles.service import ProfileService
from .reports.mysql_report_repository import MySQLReportRepository
from .reports.repository import ReportRepository
from .reports.service import ReportService
from .sites.mysql_site_repository import MySQLSiteRepository
from .sites.repository import SiteRepository
from .sites.service import SiteService


@dataclass(frozen=True)
class Container:
    profiles_repo: ProfileRepository
    clients_repo: ClientRepository
    sites_repo: SiteRepository
    assignments_repo: AssignmentRepository
    check_ins_repo: CheckInRepository
    reports_repo: ReportRepository
    leaves_repo: LeaveRepository
    company_repo: CompanyProfileRepository
    sessions_repo: SessionRepository

    dispatcher: NotificationDispatcher
    notifier: Notifier

    auth_service: AuthService
    profile_service: ProfileService
    client_service: ClientService
    site_service: SiteService
    assignment_service: AssignmentService
    check_in_service: CheckInService
    report_service: ReportService
    leave_service: LeaveService
    dashboard_service: DashboardService
    company_service: CompanyProfileService
    hr_service: HRReportService

    conn: Optional[DatabaseConnection] = None


def assemble_container(
    *,
    profiles: ProfileRepository,
    clients: ClientRepository,
    sites: SiteRepository,
    assignments: AssignmentRepository,
    check_ins: CheckInRepository,
    reports: ReportRepository,
    leaves: LeaveRepository,
    company: CompanyProfileRepository,
    sessions: SessionRepository,
    transport: MailTransport,
    executor: Executor,
    session_days: int = DEFAULT_SESSION_DAYS,
    leave_notify_emails: Sequence[str] = (),
    clock: Callable = now_local,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over any set of repositories (MySQL in production, in-memory in tests)."""

    dispatcher = NotificationDispatcher(transport, executor)
    notifier = Notifier(
        dispatcher,
        EmailRenderer(),
        profiles=profiles,
        clients=clients,
        assignments=assignments,
        company=company,
        leave_notify_emails=leave_notify_emails,
    )

    return Container(
        profiles_repo=profiles,
        clients_repo=clients,
        sites_repo=sites,
        assignments_repo=assignments,
        check_ins_repo=check_ins,
        reports_repo=reports,
        leaves_repo=leaves,
        company_repo=company,
        sessions_repo=sessions,
        dispatcher=dispatcher,
        notifier=notifier,
        auth_service=AuthService(profiles, clients, sessions, session_days=session_days, clock=clock),
        profile_service=ProfileService(profiles, clients, assignments),
        client_service=ClientService(clients, profiles, assignments),
        site_service=SiteService(sites, clients, profiles, assignments),
        assignment_service=AssignmentService(assignments, profiles, clients, sites, clock=clock),
        check_in_service=CheckInService(check_ins, assignments, profiles, clients, sites, notifier, clock=clock),
        report_service=ReportService(reports, assignments, profiles, clients, sites, notifier, clock=clock),
        leave_service=LeaveService(leaves, assignments, profiles, clients, sites, notifier, clock=clock),
        dashboard_service=DashboardService(
            profiles, clients, sites, assignments, check_ins, reports, leaves, clock=clock
        ),
        company_service=CompanyProfileService(company),
        hr_service=HRReportService(
            profiles, clients, sites, assignments, check_ins, reports, leaves, notifier, clock=clock
        ),
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    transport: MailTransport,
    notify_workers: int = DEFAULT_NOTIFY_WORKERS,
    session_days: int = DEFAULT_SESSION_DAYS,
    leave_notify_emails: Sequence[str] = (),
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble_container(
        profiles=MySQLProfileRepository(conn),
        clients=MySQLClientRepository(conn),
        sites=MySQLSiteRepository(conn),
        assignments=MySQLAssignmentRepository(conn),
        check_ins=MySQLCheckInRepository(conn),
        reports=MySQLReportRepository(conn),
        leaves=MySQLLeaveRepository(conn),
        company=MySQLCompanyProfileRepository(conn),
        sessions=MySQLSessionRepository(conn),
        transport=transport,
        executor=ThreadPoolExecutor(max_workers=max(1, int(notify_workers)), thread_name_prefix="notify"),
        session_days=session_days,
        leave_notify_emails=leave_notify_emails,
        conn=conn,
    )
