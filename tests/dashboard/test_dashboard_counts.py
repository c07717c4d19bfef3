from __future__ import annotations

from site_engineer.reports.service import NewReport


def test_admin_dashboard_counts_everything(container, world):
    container.check_in_service.check_in(world.caller(container, world.e1))
    container.report_service.submit_report(
        world.caller(container, world.e2), NewReport(client_id=world.c2.id, work_done="Survey")
    )
    container.leave_service.request_leave(
        world.caller(container, world.e1), start_date="2025-03-14", end_date="2025-03-14", reason="Exam"
    )

    summary = container.dashboard_service.summary(world.caller(container, world.admin))

    assert summary == {
        "totalEngineers": 2,
        "totalClients": 2,
        "totalSites": 2,
        "activeAssignments": 2,
        "todayCheckIns": 1,
        "todayReports": 1,
        "pendingLeaves": 1,
    }


def test_client_dashboard_is_scoped(container, world):
    container.check_in_service.check_in(world.caller(container, world.e2))

    summary = container.dashboard_service.summary(world.caller(container, world.client1_user))

    assert summary["totalEngineers"] == 1
    assert summary["totalClients"] == 1
    assert summary["totalSites"] == 1
    assert summary["activeAssignments"] == 1
    assert summary["todayCheckIns"] == 0
    # Clients never see pending leave requests.
    assert summary["pendingLeaves"] == 0


def test_dashboard_reflects_new_writes(container, world):
    admin = world.caller(container, world.admin)
    before = container.dashboard_service.summary(admin)["todayCheckIns"]

    container.check_in_service.check_in(world.caller(container, world.e1))

    assert container.dashboard_service.summary(admin)["todayCheckIns"] == before + 1
