from __future__ import annotations

import pytest

from site_engineer.core.exceptions import AlreadyCheckedOut, AuthorizationError, NotFound, ValidationError


def test_check_in_records_location_and_notifies_client(container, world, transport):
    created = container.check_in_service.check_in(
        world.caller(container, world.e1), latitude="18.52", longitude=73.85, location_name="Gate 2"
    )

    assert created["date"] == "2025-03-10"
    assert created["latitude"] == 18.52
    assert created["checkOutTime"] is None
    assert [m.recipients for m in transport.sent] == [("contact@acme.test",)]


def test_second_check_in_same_day_is_rejected(container, world):
    caller = world.caller(container, world.e1)
    container.check_in_service.check_in(caller)

    with pytest.raises(ValidationError):
        container.check_in_service.check_in(caller)


def test_only_engineers_check_in(container, world):
    with pytest.raises(AuthorizationError):
        container.check_in_service.check_in(world.caller(container, world.admin))


def test_check_out_once(container, world, clock):
    caller = world.caller(container, world.e1)
    created = container.check_in_service.check_in(caller)
    clock.advance(hours=8, minutes=30)

    closed = container.check_in_service.check_out(caller, created["id"])
    assert closed["checkOutTime"] == clock.now.isoformat()

    with pytest.raises(AlreadyCheckedOut):
        container.check_in_service.check_out(caller, created["id"])


def test_check_out_unknown_id(container, world):
    with pytest.raises(NotFound):
        container.check_in_service.check_out(world.caller(container, world.e1), "missing")


def test_engineer_cannot_close_someone_elses_check_in(container, world):
    created = container.check_in_service.check_in(world.caller(container, world.e1))

    with pytest.raises(AuthorizationError):
        container.check_in_service.check_out(world.caller(container, world.e2), created["id"])
    with pytest.raises(AuthorizationError):
        container.check_in_service.check_out(world.caller(container, world.client1_user), created["id"])

    closed = container.check_in_service.check_out(world.caller(container, world.hr), created["id"])
    assert closed["checkOutTime"] is not None


def test_check_ins_are_scoped_by_client_assignment(container, world):
    container.check_in_service.check_in(world.caller(container, world.e1))
    container.check_in_service.check_in(world.caller(container, world.e2))

    c1_view = container.check_in_service.list_check_ins(world.caller(container, world.client1_user))
    assert [c["engineerName"] for c in c1_view] == ["Eli Engineer"]

    admin_view = container.check_in_service.list_check_ins(world.caller(container, world.admin), day="2025-03-10")
    assert len(admin_view) == 2
    assert container.check_in_service.list_check_ins(world.caller(container, world.admin), day="2025-03-11") == []
