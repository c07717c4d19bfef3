from __future__ import annotations

import pytest

from site_engineer.core.exceptions import AuthorizationError, ValidationError


def _approved_leave(container, world, engineer, start, end):
    leave = container.leave_service.request_leave(
        world.caller(container, engineer), start_date=start, end_date=end, reason="Personal"
    )
    return container.leave_service.approve(world.caller(container, world.hr), leave["id"])


def _work_day(container, world, clock, engineer, hours):
    caller = world.caller(container, engineer)
    created = container.check_in_service.check_in(caller, location_name="Acme Tower")
    clock.advance(hours=hours)
    container.check_in_service.check_out(caller, created["id"])
    clock.advance(hours=-hours)


def test_register_marks_present_leave_and_absent(container, world, repos, clock):
    _work_day(container, world, clock, world.e1, 9)
    _approved_leave(container, world, world.e2, "2025-03-09", "2025-03-11")
    repos.profiles.create(email="e3@example.com", full_name="Zed Engineer", role="engineer", password_hash="x")

    table = container.hr_service.attendance_register(world.caller(container, world.hr), day="2025-03-10")
    by_name = {r["engineerName"]: r for r in table.rows}

    assert by_name["Eli Engineer"]["status"] == "present"
    assert by_name["Eli Engineer"]["checkInTime"] == "09:00"
    assert by_name["Eli Engineer"]["checkOutTime"] == "18:00"
    assert by_name["Eli Engineer"]["hoursWorked"] == 9.0
    assert by_name["Emma Engineer"]["status"] == "leave"
    assert by_name["Zed Engineer"]["status"] == "absent"


def test_pending_leave_does_not_count(container, world):
    container.leave_service.request_leave(
        world.caller(container, world.e2), start_date="2025-03-10", end_date="2025-03-10", reason="Maybe"
    )

    table = container.hr_service.attendance_register(world.caller(container, world.admin), day="2025-03-10")

    assert {r["engineerName"]: r["status"] for r in table.rows}["Emma Engineer"] == "absent"


def test_engineer_summary(container, world, clock):
    _work_day(container, world, clock, world.e1, 9)
    _approved_leave(container, world, world.e2, "2025-03-10", "2025-03-11")

    table = container.hr_service.engineer_summary(
        world.caller(container, world.admin), start="2025-03-10", end="2025-03-12"
    )
    by_name = {r["engineerName"]: r for r in table.rows}

    assert by_name["Eli Engineer"]["presentDays"] == 1
    assert by_name["Eli Engineer"]["absentDays"] == 2
    assert by_name["Eli Engineer"]["averageHoursPerDay"] == 9.0
    assert by_name["Emma Engineer"]["leaveDays"] == 2
    assert by_name["Emma Engineer"]["absentDays"] == 1
    assert table.period == "2025-03-10..2025-03-12"


def test_summary_range_is_validated(container, world):
    admin = world.caller(container, world.admin)
    with pytest.raises(ValidationError):
        container.hr_service.engineer_summary(admin, start="2025-03-12", end="2025-03-10")
    with pytest.raises(ValidationError):
        container.hr_service.engineer_summary(admin, start="2024-01-01", end="2025-03-10")


def test_client_report_and_payroll(container, world, clock):
    _work_day(container, world, clock, world.e1, 9.5)

    clients = container.hr_service.client_report(world.caller(container, world.admin), month="2025-03")
    acme = next(r for r in clients.rows if r["clientName"] == "Acme Builders")
    assert acme["totalAssignments"] == 1
    assert acme["activeEngineers"] == 1
    assert acme["totalCheckIns"] == 1
    assert acme["sitesCount"] == 1

    payroll = container.hr_service.payroll(world.caller(container, world.admin), month="2025-03")
    eli = next(r for r in payroll.rows if r["engineerName"] == "Eli Engineer")
    assert eli["workingDays"] == 1
    assert eli["totalHours"] == 9.5
    assert eli["overtimeHours"] == 1.5


def test_hr_reports_are_staff_only(container, world):
    with pytest.raises(AuthorizationError):
        container.hr_service.payroll(world.caller(container, world.e1), month="2025-03")


def test_csv_export_and_email(container, world, transport):
    hr = world.caller(container, world.hr)
    table = container.hr_service.build(hr, "attendance-register", {"date": "2025-03-10"})

    text = container.hr_service.to_csv(table).decode("utf-8-sig")
    assert text.splitlines()[0] == "date,engineerName,status,checkInTime,checkOutTime,hoursWorked,site"

    queued = container.hr_service.send_email(hr, "payroll", {"month": "2025-03"}, None)
    assert queued["recipients"] == ["hr@example.com"]
    message = transport.sent[-1]
    assert message.attachments[0].filename == "payroll_2025-03.csv"
    assert "Eli Engineer" in message.html


def test_unknown_report_kind(container, world):
    with pytest.raises(ValidationError):
        container.hr_service.build(world.caller(container, world.admin), "timesheet", {})
