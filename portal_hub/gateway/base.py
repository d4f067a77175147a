from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterable


@dataclass(frozen=True)
class Account:
    id: str
    email: str


@dataclass(frozen=True)
class Session:
    access_token: str
    account: Account


class Identity(ABC):
    """Resolves, opens and closes sessions for the single portal account."""

    @abstractmethod
    async def resolve(self, token: str) -> Account | None:
        ...

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> Session:
        """Raises InvalidCredentialsError when the pair does not match."""

    @abstractmethod
    async def sign_out(self, token: str) -> None:
        ...

    @abstractmethod
    async def update_password(self, account_id: str, new_password: str) -> None:
        ...


class RecordStore(ABC):
    """Row-level access to the `docs`, `links` and `memos` entities.

    Rows travel as plain dicts holding at least ``id`` and ``created_at``.
    Every call is scoped to an owner; failures raise GatewayError.
    """

    @abstractmethod
    async def list(self, entity: str, owner_id: str) -> list[dict[str, Any]]:
        """Rows owned by ``owner_id``, newest ``created_at`` first."""

    @abstractmethod
    async def insert(self, entity: str, fields: dict[str, Any]) -> dict[str, Any]:
        ...

    @abstractmethod
    async def update(self, entity: str, record_id: str, fields: dict[str, Any], owner_id: str) -> dict[str, Any]:
        ...

    @abstractmethod
    async def delete(self, entity: str, record_id: str, owner_id: str) -> None:
        """Raises RecordNotFoundError when no owned row matches, like update."""


class BlobStore(ABC):
    @abstractmethod
    async def upload(self, path: str, data: bytes, content_type: str) -> None:
        ...

    @abstractmethod
    async def remove(self, paths: Iterable[str]) -> None:
        ...

    @abstractmethod
    async def download(self, path: str) -> bytes:
        ...

    @abstractmethod
    async def create_signed_url(self, path: str, ttl_seconds: int) -> str:
        ...


@dataclass
class Gateway:
    identity: Identity
    records: RecordStore
    blobs: BlobStore
