from __future__ import annotations

from datetime import date, datetime

import pytest
from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from conftest import login
from site_engineer.checkins.mysql_checkin_repository import MySQLCheckInRepository
from site_engineer.core.enums import Role
from site_engineer.core.exceptions import ValidationError
from site_engineer.profiles.mysql_profile_repository import MySQLProfileRepository


class FakeCursor:
    def __init__(self, error: Exception):
        self.error = error
        self.closed = False

    def execute(self, sql, params=None):
        raise self.error

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, error: Exception):
        self.cur = FakeCursor(error)
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=True):
        return self.cur

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeConnectionFactory:
    def __init__(self, error: Exception):
        self.conn = FakeConnection(error)

    def connect(self):
        return self.conn


def _duplicate() -> IntegrityError:
    return IntegrityError(msg="Duplicate entry for key", errno=errorcode.ER_DUP_ENTRY)


def _missing_parent() -> IntegrityError:
    return IntegrityError(msg="Cannot add or update a child row", errno=errorcode.ER_NO_REFERENCED_ROW_2)


def _check_in(repo: MySQLCheckInRepository):
    return repo.create(engineer_id="e1", check_in_time=datetime(2025, 3, 10, 9, 0), day=date(2025, 3, 10))


def test_duplicate_check_in_becomes_validation_error():
    factory = FakeConnectionFactory(_duplicate())

    with pytest.raises(ValidationError, match="Already checked in today"):
        _check_in(MySQLCheckInRepository(factory))

    assert factory.conn.rolled_back
    assert not factory.conn.committed
    assert factory.conn.closed


def test_other_integrity_errors_propagate_from_check_in():
    factory = FakeConnectionFactory(_missing_parent())

    with pytest.raises(IntegrityError):
        _check_in(MySQLCheckInRepository(factory))

    assert factory.conn.rolled_back


def test_duplicate_email_becomes_validation_error():
    factory = FakeConnectionFactory(_duplicate())
    repo = MySQLProfileRepository(factory)

    with pytest.raises(ValidationError, match="Email already registered"):
        repo.create(email="e1@example.com", full_name="Eli", role=Role.ENGINEER, password_hash="x")

    assert factory.conn.rolled_back


def test_duplicate_email_over_http_is_400(app, repos, world, monkeypatch):
    http = app.test_client()
    login(http, "hr@example.com")
    # The service read misses, then the insert loses the race on the unique email.
    monkeypatch.setattr(repos.profiles, "get_by_email", lambda email: None)

    res = http.post(
        "/engineers",
        json={"email": "e1@example.com", "fullName": "Eli Again", "password": "password1"},
    )

    assert res.status_code == 400
    assert res.get_json()["message"] == "Email already registered"
