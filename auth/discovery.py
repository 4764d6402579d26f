from __future__ import annotations

import logging
import time
from typing import Callable

import httpx

from auth.models import FALLBACK_ENDPOINTS, ProviderEndpoints

LOGGER = logging.getLogger("bookkeeping.intuit.discovery")


class StaticEndpointResolver:
    def __init__(self, endpoints: ProviderEndpoints = FALLBACK_ENDPOINTS) -> None:
        self.endpoints = endpoints

    async def get_endpoints(self) -> ProviderEndpoints:
        return self.endpoints


class DiscoveryEndpointResolver:
    """Resolve Intuit's OAuth endpoints from its OpenID discovery document.

    A successful lookup is cached for ``ttl_seconds``. Any failure yields the
    static fallback endpoints and is never raised to the caller; fallbacks are
    not cached, so the next call tries the network again.
    """

    def __init__(
        self,
        discovery_url: str,
        *,
        ttl_seconds: float = 600,
        client: httpx.AsyncClient | None = None,
        fallback: ProviderEndpoints = FALLBACK_ENDPOINTS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.discovery_url = discovery_url
        self.ttl_seconds = ttl_seconds
        self.fallback = fallback
        self._client = client
        self._clock = clock

        self.cached: ProviderEndpoints | None = None
        self.fetched_at = 0.0

    async def get_endpoints(self) -> ProviderEndpoints:
        if self.cached is not None and self._clock() - self.fetched_at < self.ttl_seconds:
            return self.cached

        try:
            document = await self._fetch_document()
        except (httpx.HTTPError, ValueError) as error:
            LOGGER.warning(
                "Intuit discovery failed url=%s error=%s; using fallback endpoints",
                self.discovery_url,
                error,
            )
            return self.fallback

        endpoints = ProviderEndpoints(
            authorization_endpoint=self._pick(document, "authorization_endpoint"),
            token_endpoint=self._pick(document, "token_endpoint"),
            revocation_endpoint=self._pick(document, "revocation_endpoint"),
        )
        self.cached = endpoints
        self.fetched_at = self._clock()
        return endpoints

    async def _fetch_document(self) -> dict:
        own_client = self._client is None
        http_client = self._client or httpx.AsyncClient()

        try:
            response = await http_client.get(
                self.discovery_url, headers={"Accept": "application/json"}
            )
        finally:
            if own_client:
                await http_client.aclose()

        if not response.is_success:
            raise ValueError(f"discovery returned status {response.status_code}")
        document = response.json()
        if not isinstance(document, dict):
            raise ValueError("discovery document is not a JSON object")
        return document

    def _pick(self, document: dict, field: str) -> str:
        value = document.get(field)
        if isinstance(value, str) and value:
            return value
        return getattr(self.fallback, field)
