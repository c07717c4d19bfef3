from __future__ import annotations

import logging
from typing import Protocol

from flask import Flask
from flask_mail import Mail, Message

from .model import MailMessage

log = logging.getLogger(__name__)


class MailTransport(Protocol):
    def send(self, message: MailMessage) -> None:
        raise NotImplementedError


class FlaskMailTransport(MailTransport):
    """Sends through Flask-Mail.

    Runs on worker threads, so it pushes its own app context for Flask-Mail's config lookup.
    """

    def __init__(self, app: Flask, mail: Mail):
        self._app = app
        self._mail = mail

    def send(self, message: MailMessage) -> None:
        with self._app.app_context():
            msg = Message(
                subject=message.subject,
                recipients=list(message.recipients),
                html=message.html,
                body=message.text,
            )
            for attachment in message.attachments:
                msg.attach(attachment.filename, attachment.content_type, attachment.data)
            self._mail.send(msg)
        log.info("Mail sent: subject=%r recipients=%d", message.subject, len(message.recipients))
