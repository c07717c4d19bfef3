from __future__ import annotations

from site_engineer.access.scope import UNRESTRICTED, ListFilter, build_scope
from site_engineer.auth.model import Caller
from site_engineer.core.enums import LeaveStatus, Role


def test_staff_scope_is_unrestricted(container, repos, world):
    for profile in (world.admin, world.hr):
        scope = build_scope(world.caller(container, profile), repos.assignments)
        assert scope.reports == UNRESTRICTED
        assert scope.leaves == UNRESTRICTED
        assert scope.engineers is None


def test_engineer_sees_own_rows_and_assigned_clients(container, repos, world):
    scope = build_scope(world.caller(container, world.e1), repos.assignments)

    assert scope.assignments.engineer_ids == {world.e1.id}
    assert scope.check_ins.engineer_ids == {world.e1.id}
    assert scope.clients.client_ids == {world.c1.id}


def test_client_scope_follows_linked_client(container, repos, world):
    scope = build_scope(world.caller(container, world.client1_user), repos.assignments)

    assert scope.reports.client_ids == {world.c1.id}
    assert scope.check_ins.engineer_ids == {world.e1.id}
    assert scope.leaves.statuses == {LeaveStatus.APPROVED}
    assert scope.clients.client_ids == {world.c1.id}


def test_unlinked_client_sees_nothing(repos):
    caller = Caller(user_id="u-1", role=Role.CLIENT, full_name="Nobody", email="n@example.com", client_id=None)
    scope = build_scope(caller, repos.assignments)

    assert scope.reports.client_ids == frozenset()
    assert scope.engineers == frozenset()


def test_narrow_never_widens():
    flt = ListFilter(engineer_ids=frozenset({"a"}))

    assert flt.narrow(engineer_id="b").engineer_ids == frozenset()
    assert flt.narrow(engineer_id="a").engineer_ids == {"a"}
    assert UNRESTRICTED.narrow(client_id="c").client_ids == {"c"}

    approved = ListFilter(statuses=frozenset({LeaveStatus.APPROVED}))
    assert approved.narrow(status=LeaveStatus.PENDING).statuses == frozenset()
