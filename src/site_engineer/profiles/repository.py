from __future__ import annotations

from typing import Any, Collection, Mapping, Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Profile


class ProfileRepository(Protocol):
    def get_by_id(self, profile_id: str) -> Optional[Profile]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Profile]:
        """Case-insensitive lookup."""

        raise NotImplementedError

    def list(
        self,
        *,
        role: Optional[Role] = None,
        ids: Optional[Collection[str]] = None,
        limit: int = 500,
    ) -> Sequence[Profile]:
        raise NotImplementedError

    def create(
        self,
        *,
        email: str,
        full_name: str,
        role: Role,
        password_hash: str,
        phone: Optional[str] = None,
        designation: Optional[str] = None,
    ) -> Profile:
        raise NotImplementedError

    def update_metadata(self, profile_id: str, patch: Mapping[str, Any]) -> Optional[Profile]:
        """Merge ``patch`` into the stored row atomically; None if the id is unknown."""

        raise NotImplementedError

    def set_password_hash(self, profile_id: str, password_hash: str) -> bool:
        raise NotImplementedError
