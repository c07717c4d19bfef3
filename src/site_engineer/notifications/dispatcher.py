from __future__ import annotations

import logging
from concurrent.futures import Executor
from typing import Callable, Optional

from .model import MailMessage
from .transport import MailTransport

log = logging.getLogger(__name__)

MessageBuilder = Callable[[], Optional[MailMessage]]


class NotificationDispatcher:
    """Fire-and-forget mail delivery.

    ``dispatch`` hands a builder to the executor and returns immediately. The
    builder runs off the request path, so recipient lookups and template
    rendering happen there too. Every failure is logged and swallowed; the
    write that triggered the notification is never affected.
    """

    def __init__(self, transport: MailTransport, executor: Executor):
        self._transport = transport
        self._executor = executor

    def dispatch(self, event: str, build: MessageBuilder) -> None:
        try:
            self._executor.submit(self._run, event, build)
        except Exception:
            log.exception("Could not schedule notification %s", event)

    def _run(self, event: str, build: MessageBuilder) -> None:
        try:
            message = build()
            if message is None or not message.recipients:
                log.info("Notification %s skipped: no recipients", event)
                return
            self._transport.send(message)
            log.info("Notification %s delivered to %d recipient(s)", event, len(message.recipients))
        except Exception:
            log.exception("Notification %s failed", event)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False)
