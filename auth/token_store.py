from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class TokenRecord:
    payload: dict[str, Any] = field(default_factory=dict)
    realm_id: str | None = None

    @property
    def access_token(self) -> str | None:
        return self.payload.get("access_token")

    @property
    def refresh_token(self) -> str | None:
        return self.payload.get("refresh_token")

    @property
    def token_type(self) -> str | None:
        return self.payload.get("token_type")

    @property
    def expires_in(self) -> int | None:
        return self.payload.get("expires_in")

    @property
    def revocable_token(self) -> str | None:
        return self.refresh_token or self.access_token or None

    def to_dict(self) -> dict[str, Any]:
        return {"realmId": self.realm_id, **self.payload}


class TokenStore(ABC):
    @abstractmethod
    async def get(self) -> TokenRecord | None:
        raise NotImplementedError

    @abstractmethod
    async def set(self, record: TokenRecord) -> None:
        raise NotImplementedError

    @abstractmethod
    async def clear(self) -> None:
        raise NotImplementedError


class MemoryTokenStore(TokenStore):
    """Holds a single connected account; lost when the process exits."""

    def __init__(self) -> None:
        self._record: TokenRecord | None = None

    async def get(self) -> TokenRecord | None:
        return self._record

    async def set(self, record: TokenRecord) -> None:
        self._record = record

    async def clear(self) -> None:
        self._record = None
