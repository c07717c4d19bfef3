from __future__ import annotations

from datetime import date, datetime

from site_engineer.core.enums import LeaveStatus


def test_created_records_read_back_unchanged(container, clock, world):
    report = container.reports_repo.create(
        engineer_id=world.e1.id,
        client_id=world.c1.id,
        site_id=world.site1.id,
        report_date=date(2025, 3, 10),
        work_done="Poured slab",
        issues="Late cement delivery",
        hours_worked=7.5,
    )
    leave = container.leaves_repo.create(
        engineer_id=world.e1.id,
        start_date=date(2025, 3, 12),
        end_date=date(2025, 3, 14),
        reason="Family event",
    )
    check_in = container.check_ins_repo.create(
        engineer_id=world.e2.id,
        check_in_time=datetime(2025, 3, 10, 8, 45),
        day=date(2025, 3, 10),
        latitude=18.52,
        longitude=73.85,
        location_name="Gate 2",
    )
    client = container.clients_repo.create(
        name="Gamma Roads",
        contact_person="Gus",
        contact_email="gus@gamma.test",
        contact_phone="020-111",
        address="Nagpur",
    )

    for created, repo in (
        (report, container.reports_repo),
        (leave, container.leaves_repo),
        (check_in, container.check_ins_repo),
        (client, container.clients_repo),
    ):
        assert created.id
        assert created.created_at == clock.now
        assert repo.get_by_id(created.id) == created

    fetched = container.reports_repo.get_by_id(report.id)
    assert (fetched.engineer_id, fetched.client_id, fetched.site_id) == (world.e1.id, world.c1.id, world.site1.id)
    assert fetched.hours_worked == 7.5
    assert fetched.issues == "Late cement delivery"

    fetched = container.leaves_repo.get_by_id(leave.id)
    assert (fetched.start_date, fetched.end_date) == (date(2025, 3, 12), date(2025, 3, 14))
    assert fetched.status == LeaveStatus.PENDING
    assert fetched.approved_by is None

    fetched = container.check_ins_repo.get_by_id(check_in.id)
    assert fetched.date == date(2025, 3, 10)
    assert (fetched.latitude, fetched.longitude, fetched.location_name) == (18.52, 73.85, "Gate 2")
    assert fetched.is_open

    fetched = container.clients_repo.get_by_id(client.id)
    assert (fetched.name, fetched.contact_email, fetched.address) == ("Gamma Roads", "gus@gamma.test", "Nagpur")
    assert fetched.user_id is None


def test_unknown_ids_read_back_as_none(container):
    assert container.reports_repo.get_by_id("missing") is None
    assert container.leaves_repo.get_by_id("missing") is None
    assert container.check_ins_repo.get_by_id("missing") is None
    assert container.clients_repo.get_by_id("missing") is None
