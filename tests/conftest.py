from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

import pytest
from werkzeug.security import generate_password_hash

from fakes import (
    FixedClock,
    ImmediateExecutor,
    InMemoryAssignments,
    InMemoryCheckIns,
    InMemoryClients,
    InMemoryCompany,
    InMemoryLeaves,
    InMemoryProfiles,
    InMemoryReports,
    InMemorySessions,
    InMemorySites,
    RecordingTransport,
)
from site_engineer.auth.model import Caller
from site_engineer.clients.model import Client
from site_engineer.container import Container, assemble_container
from site_engineer.core.enums import Role
from site_engineer.profiles.model import Profile
from site_engineer.sites.model import Site

PASSWORD = "secret123"
# Fast hash keeps the fixture cheap; verification works with any werkzeug method.
_HASH = generate_password_hash(PASSWORD, method="pbkdf2:sha256:1000")


@dataclass
class Repos:
    profiles: InMemoryProfiles
    clients: InMemoryClients
    sites: InMemorySites
    assignments: InMemoryAssignments
    check_ins: InMemoryCheckIns
    reports: InMemoryReports
    leaves: InMemoryLeaves
    company: InMemoryCompany
    sessions: InMemorySessions


@dataclass
class World:
    admin: Profile
    hr: Profile
    e1: Profile
    e2: Profile
    client1_user: Profile
    client2_user: Profile
    c1: Client
    c2: Client
    site1: Site
    site2: Site

    def caller(self, container: Container, profile: Profile) -> Caller:
        return container.auth_service.caller_for(profile)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2025, 3, 10, 9, 0, 0))


@pytest.fixture
def repos(clock) -> Repos:
    return Repos(
        profiles=InMemoryProfiles(clock),
        clients=InMemoryClients(clock),
        sites=InMemorySites(clock),
        assignments=InMemoryAssignments(clock),
        check_ins=InMemoryCheckIns(clock),
        reports=InMemoryReports(clock),
        leaves=InMemoryLeaves(clock),
        company=InMemoryCompany(clock),
        sessions=InMemorySessions(),
    )


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def container(repos, transport, clock) -> Container:
    return assemble_container(
        profiles=repos.profiles,
        clients=repos.clients,
        sites=repos.sites,
        assignments=repos.assignments,
        check_ins=repos.check_ins,
        reports=repos.reports,
        leaves=repos.leaves,
        company=repos.company,
        sessions=repos.sessions,
        transport=transport,
        executor=ImmediateExecutor(),
        clock=clock,
    )


def _profile(repos: Repos, email: str, name: str, role: Role) -> Profile:
    return repos.profiles.create(email=email, full_name=name, role=role, password_hash=_HASH)


@pytest.fixture
def world(repos) -> World:
    admin = _profile(repos, "admin@example.com", "Ada Admin", Role.ADMIN)
    hr = _profile(repos, "hr@example.com", "Harper HR", Role.HR)
    e1 = _profile(repos, "e1@example.com", "Eli Engineer", Role.ENGINEER)
    e2 = _profile(repos, "e2@example.com", "Emma Engineer", Role.ENGINEER)
    client1_user = _profile(repos, "c1@example.com", "Carl Client", Role.CLIENT)
    client2_user = _profile(repos, "c2@example.com", "Cora Client", Role.CLIENT)

    c1 = repos.clients.create(
        name="Acme Builders", contact_person="Carl", contact_email="contact@acme.test", user_id=client1_user.id
    )
    c2 = repos.clients.create(
        name="Beta Infra", contact_person="Cora", contact_email="contact@beta.test", user_id=client2_user.id
    )
    site1 = repos.sites.create(client_id=c1.id, name="Acme Tower", location="Pune")
    site2 = repos.sites.create(client_id=c2.id, name="Beta Bridge", location="Mumbai")

    repos.assignments.create(engineer_id=e1.id, client_id=c1.id, site_id=site1.id, assigned_date=date(2025, 3, 1))
    repos.assignments.create(engineer_id=e2.id, client_id=c2.id, site_id=site2.id, assigned_date=date(2025, 3, 1))

    return World(
        admin=admin,
        hr=hr,
        e1=e1,
        e2=e2,
        client1_user=client1_user,
        client2_user=client2_user,
        c1=c1,
        c2=c2,
        site1=site1,
        site2=site2,
    )


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    from site_engineer.main import create_app

    return create_app(container=container)


@pytest.fixture
def client(app):
    return app.test_client()


def login(http_client, email: str, password: str = PASSWORD):
    return http_client.post("/auth/login", json={"email": email, "password": password})
