from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Attachment:
    filename: str
    content_type: str
    data: bytes


@dataclass(frozen=True)
class MailMessage:
    subject: str
    recipients: tuple[str, ...]
    html: str
    text: Optional[str] = None
    attachments: tuple[Attachment, ...] = field(default_factory=tuple)
