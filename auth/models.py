from __future__ import annotations

from dataclasses import dataclass


@dataclass
class PendingAuth:
    state: str
    created_at: float
    code_verifier: str | None = None

    def is_expired(self, now: float, ttl_seconds: float) -> bool:
        return now - self.created_at > ttl_seconds


@dataclass(frozen=True)
class ProviderEndpoints:
    authorization_endpoint: str
    token_endpoint: str
    revocation_endpoint: str


FALLBACK_ENDPOINTS = ProviderEndpoints(
    authorization_endpoint="https://appcenter.intuit.com/connect/oauth2",
    token_endpoint="https://oauth.platform.intuit.com/oauth2/v1/tokens/bearer",
    revocation_endpoint="https://developer.api.intuit.com/v2/oauth2/tokens/revoke",
)
