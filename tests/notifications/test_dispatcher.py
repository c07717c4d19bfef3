from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

from fakes import FailingTransport, ImmediateExecutor, RecordingTransport
from site_engineer.notifications.dispatcher import NotificationDispatcher
from site_engineer.notifications.model import MailMessage
from site_engineer.notifications.templates import EmailRenderer


def _message(*recipients: str) -> MailMessage:
    return MailMessage(subject="Hello", recipients=tuple(recipients), html="<p>hi</p>")


def test_delivers_on_worker_thread():
    transport = RecordingTransport()
    executor = ThreadPoolExecutor(max_workers=1)
    dispatcher = NotificationDispatcher(transport, executor)

    dispatcher.dispatch("greeting", lambda: _message("a@example.com"))
    executor.shutdown(wait=True)

    assert [m.recipients for m in transport.sent] == [("a@example.com",)]


def test_transport_failure_is_swallowed():
    transport = FailingTransport()
    dispatcher = NotificationDispatcher(transport, ImmediateExecutor())

    dispatcher.dispatch("greeting", lambda: _message("a@example.com"))

    assert transport.attempts == 1


def test_builder_failure_is_swallowed():
    transport = RecordingTransport()
    dispatcher = NotificationDispatcher(transport, ImmediateExecutor())

    def broken():
        raise KeyError("template variable")

    dispatcher.dispatch("broken", broken)
    assert transport.sent == []


def test_messages_without_recipients_are_skipped():
    transport = RecordingTransport()
    dispatcher = NotificationDispatcher(transport, ImmediateExecutor())

    dispatcher.dispatch("empty", lambda: _message())
    dispatcher.dispatch("none", lambda: None)

    assert transport.sent == []


def test_shut_down_executor_does_not_raise():
    executor = ThreadPoolExecutor(max_workers=1)
    executor.shutdown(wait=True)
    dispatcher = NotificationDispatcher(RecordingTransport(), executor)

    dispatcher.dispatch("late", lambda: _message("a@example.com"))


def test_templates_escape_user_input():
    html = EmailRenderer().render(
        "check_in.html",
        company=None,
        subject="Check-in",
        engineer_name="<script>alert(1)</script>",
        check_in_time="09:00",
        date="2025-03-10",
        location_name=None,
        latitude=None,
        longitude=None,
    )

    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert "Site Engineer" in html


def test_failing_transport_does_not_affect_check_in(repos, clock, world):
    from site_engineer.container import assemble_container

    transport = FailingTransport()
    container = assemble_container(
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

    created = container.check_in_service.check_in(container.auth_service.caller_for(world.e1))

    assert transport.attempts == 1
    assert repos.check_ins.get_by_id(created["id"]) is not None
