from __future__ import annotations

import pytest

from site_engineer.core.exceptions import AuthorizationError, NotFound, ValidationError
from site_engineer.reports.service import NewReport


def _submit(container, world, engineer, client, site, **extra):
    return container.report_service.submit_report(
        world.caller(container, engineer),
        NewReport(client_id=client.id, site_id=site.id, work_done="Poured slab", **extra),
    )


def test_submit_enriches_names_and_notifies_client(container, world, transport):
    report = _submit(container, world, world.e1, world.c1, world.site1, hours_worked="7.5")

    assert report["engineerName"] == "Eli Engineer"
    assert report["clientName"] == "Acme Builders"
    assert report["siteName"] == "Acme Tower"
    assert report["hoursWorked"] == 7.5
    assert report["date"] == "2025-03-10"
    assert transport.sent[-1].recipients == ("contact@acme.test",)


def test_site_must_belong_to_client(container, world):
    with pytest.raises(ValidationError):
        _submit(container, world, world.e1, world.c1, world.site2)


def test_hours_must_be_within_a_day(container, world):
    with pytest.raises(ValidationError):
        _submit(container, world, world.e1, world.c1, world.site1, hours_worked=25)


def test_only_engineers_submit(container, world):
    with pytest.raises(AuthorizationError):
        _submit(container, world, world.hr, world.c1, world.site1)


def test_clients_see_only_their_reports(container, world):
    r1 = _submit(container, world, world.e1, world.c1, world.site1)
    r2 = _submit(container, world, world.e2, world.c2, world.site2)

    c1_reports = container.report_service.list_reports(world.caller(container, world.client1_user))
    assert [r["id"] for r in c1_reports] == [r1["id"]]

    # A client asking for another client's rows gets nothing, not an error.
    leaked = container.report_service.list_reports(world.caller(container, world.client1_user), client_id=world.c2.id)
    assert leaked == []

    with pytest.raises(NotFound):
        container.report_service.get_report(world.caller(container, world.client1_user), r2["id"])

    admin_reports = container.report_service.list_reports(world.caller(container, world.admin))
    assert {r["id"] for r in admin_reports} == {r1["id"], r2["id"]}


def test_engineer_sees_only_own_reports(container, world):
    _submit(container, world, world.e1, world.c1, world.site1)
    _submit(container, world, world.e2, world.c2, world.site2)

    mine = container.report_service.list_reports(world.caller(container, world.e1))
    assert {r["engineerId"] for r in mine} == {world.e1.id}


def test_send_report_email_attaches_csv(container, world, transport):
    report = _submit(container, world, world.e1, world.c1, world.site1)
    transport.sent.clear()

    queued = container.report_service.send_report_email(world.caller(container, world.admin), report["id"])

    assert queued["recipients"] == ["contact@acme.test"]
    message = transport.sent[-1]
    assert message.attachments[0].filename == "daily_report_2025-03-10.csv"
    assert message.attachments[0].content_type == "text/csv"
    assert b"Poured slab" in message.attachments[0].data


def test_send_report_email_validates_override(container, world):
    report = _submit(container, world, world.e1, world.c1, world.site1)

    with pytest.raises(ValidationError):
        container.report_service.send_report_email(world.caller(container, world.admin), report["id"], ["not-an-email"])
