from __future__ import annotations

import pytest

from site_engineer.core.exceptions import AuthorizationError, InvalidStateTransition, NotFound, ValidationError


def _request(container, world, start="2025-03-12", end="2025-03-13"):
    return container.leave_service.request_leave(
        world.caller(container, world.e1), start_date=start, end_date=end, reason="Family event"
    )


def test_engineer_requests_leave_and_staff_is_notified(container, world, transport):
    leave = _request(container, world)

    assert leave["status"] == "pending"
    assert leave["engineerName"] == "Eli Engineer"
    notified = [m for m in transport.sent if "Leave request" in m.subject]
    assert notified and set(notified[0].recipients) == {"admin@example.com", "hr@example.com"}


def test_end_before_start_is_rejected(container, world):
    with pytest.raises(ValidationError):
        _request(container, world, start="2025-03-13", end="2025-03-12")


def test_approve_sets_approver_backup_and_timestamp(container, world, clock):
    leave = _request(container, world)

    approved = container.leave_service.approve(
        world.caller(container, world.hr), leave["id"], backup_engineer_id=world.e2.id
    )

    assert approved["status"] == "approved"
    assert approved["approvedBy"] == world.hr.id
    assert approved["approvedByName"] == "Harper HR"
    assert approved["backupEngineerName"] == "Emma Engineer"
    assert approved["approvedAt"] == clock.now.isoformat()


def test_second_decision_is_an_invalid_transition(container, world):
    leave = _request(container, world)
    admin = world.caller(container, world.admin)
    container.leave_service.approve(admin, leave["id"])

    with pytest.raises(InvalidStateTransition):
        container.leave_service.approve(admin, leave["id"])
    with pytest.raises(InvalidStateTransition):
        container.leave_service.reject(admin, leave["id"])


def test_engineer_cannot_approve(container, world):
    leave = _request(container, world)

    with pytest.raises(AuthorizationError):
        container.leave_service.approve(world.caller(container, world.e2), leave["id"])


def test_unknown_leave_is_not_found(container, world):
    with pytest.raises(NotFound):
        container.leave_service.reject(world.caller(container, world.admin), "missing")


def test_backup_engineer_must_be_another_engineer(container, world):
    leave = _request(container, world)
    admin = world.caller(container, world.admin)

    with pytest.raises(ValidationError):
        container.leave_service.approve(admin, leave["id"], backup_engineer_id=world.e1.id)
    with pytest.raises(ValidationError):
        container.leave_service.approve(admin, leave["id"], backup_engineer_id=world.hr.id)

    assert container.leave_service.list_leaves(admin, status="pending")[0]["id"] == leave["id"]


def test_client_only_sees_approved_leaves_of_its_engineers(container, world):
    pending = _request(container, world)
    approved = _request(container, world, start="2025-03-20", end="2025-03-20")
    container.leave_service.approve(world.caller(container, world.admin), approved["id"])

    visible = container.leave_service.list_leaves(world.caller(container, world.client1_user))
    assert [lr["id"] for lr in visible] == [approved["id"]]
    assert pending["id"] not in {lr["id"] for lr in visible}

    assert container.leave_service.list_leaves(world.caller(container, world.client2_user)) == []


def test_approval_notifies_engineer_and_assigned_client(container, world, transport):
    leave = _request(container, world)
    transport.sent.clear()

    container.leave_service.approve(world.caller(container, world.admin), leave["id"])

    recipients = {r for m in transport.sent for r in m.recipients}
    assert {"e1@example.com", "contact@acme.test"} <= recipients
    assert "contact@beta.test" not in recipients
