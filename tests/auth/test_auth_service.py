from __future__ import annotations

import pytest
from werkzeug.security import generate_password_hash

from conftest import PASSWORD
from site_engineer.core.enums import Role
from site_engineer.core.exceptions import InvalidCredentials, Unauthenticated, ValidationError


def test_login_is_case_insensitive_and_creates_session(container, repos, world):
    session, profile = container.auth_service.login("  E1@Example.COM ", PASSWORD)

    assert profile.id == world.e1.id
    assert repos.sessions.resolve(session.token) is not None
    assert (session.expires_at - session.created_at).days == 7


def test_login_rejects_wrong_password(container, world):
    with pytest.raises(InvalidCredentials):
        container.auth_service.login("e1@example.com", "wrong-password")


def test_login_rejects_unknown_email(container, world):
    with pytest.raises(InvalidCredentials):
        container.auth_service.login("nobody@example.com", PASSWORD)


def test_login_requires_both_fields(container):
    with pytest.raises(ValidationError):
        container.auth_service.login("", "")


@pytest.mark.parametrize("stored_hash", ["", "not-a-real-hash", "password123"])
def test_placeholder_hashes_never_authenticate(container, repos, stored_hash):
    p = repos.profiles.create(email="legacy@example.com", full_name="Legacy", role=Role.ADMIN, password_hash=stored_hash)

    for attempt in ("password123", stored_hash or "x", "admin"):
        with pytest.raises(InvalidCredentials):
            container.auth_service.login(p.email, attempt)


def test_resolve_caller_links_client_record(container, world):
    session, _ = container.auth_service.login("c1@example.com", PASSWORD)

    caller = container.auth_service.resolve_caller(session.token)

    assert caller.role == Role.CLIENT
    assert caller.client_id == world.c1.id


def test_client_without_linked_record_gets_no_client_id(container, repos):
    p = repos.profiles.create(
        email="orphan@example.com",
        full_name="Orphan",
        role=Role.CLIENT,
        password_hash=generate_password_hash(PASSWORD, method="pbkdf2:sha256:1000"),
    )
    assert container.auth_service.caller_for(p).client_id is None


def test_current_user_rejects_missing_and_unknown_tokens(container):
    with pytest.raises(Unauthenticated):
        container.auth_service.current_user(None)
    with pytest.raises(Unauthenticated):
        container.auth_service.current_user("no-such-token")


def test_expired_session_is_destroyed(container, repos, clock, world):
    session, _ = container.auth_service.login("e1@example.com", PASSWORD)
    clock.advance(days=8)

    with pytest.raises(Unauthenticated):
        container.auth_service.current_user(session.token)
    assert repos.sessions.resolve(session.token) is None


def test_logout_destroys_session(container, world):
    session, _ = container.auth_service.login("e1@example.com", PASSWORD)
    container.auth_service.logout(session.token)

    with pytest.raises(Unauthenticated):
        container.auth_service.current_user(session.token)


def test_change_password(container, world):
    caller = world.caller(container, world.e1)

    with pytest.raises(InvalidCredentials):
        container.auth_service.change_password(caller, "wrong", "newpass123")
    with pytest.raises(ValidationError):
        container.auth_service.change_password(caller, PASSWORD, "123")

    container.auth_service.change_password(caller, PASSWORD, "newpass123")
    _, profile = container.auth_service.login("e1@example.com", "newpass123")
    assert profile.id == world.e1.id
    with pytest.raises(InvalidCredentials):
        container.auth_service.login("e1@example.com", PASSWORD)
