from __future__ import annotations

from typing import Collection, Optional, Protocol, Sequence

from .model import Client


class ClientRepository(Protocol):
    def get_by_id(self, client_id: str) -> Optional[Client]:
        raise NotImplementedError

    def get_by_user_id(self, user_id: str) -> Optional[Client]:
        raise NotImplementedError

    def list(self, *, ids: Optional[Collection[str]] = None, limit: int = 500) -> Sequence[Client]:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        contact_person: str,
        contact_email: str,
        contact_phone: Optional[str] = None,
        address: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> Client:
        raise NotImplementedError

    def link_user(self, client_id: str, user_id: str) -> bool:
        raise NotImplementedError
