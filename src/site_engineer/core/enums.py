from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Account roles used for access scoping."""

    ADMIN = "admin"
    HR = "hr"
    ENGINEER = "engineer"
    CLIENT = "client"

    @property
    def is_staff(self) -> bool:
        return self in {Role.ADMIN, Role.HR}


class LeaveStatus(str, Enum):
    """Leave request approval flow."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class AttendanceMark(str, Enum):
    """Per-day attendance outcome in HR registers."""

    PRESENT = "present"
    LEAVE = "leave"
    ABSENT = "absent"
