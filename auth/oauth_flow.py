from __future__ import annotations

import logging
import secrets
import time

import httpx
from starlette.requests import Request
from starlette.responses import HTMLResponse, PlainTextResponse, RedirectResponse, Response
from starlette.routing import Route

from auth import intuit_oauth2
from auth.discovery import StaticEndpointResolver
from auth.errors import CallbackValidationError, ConfigurationError, OAuthFlowError, UpstreamError
from auth.models import PendingAuth
from auth.token_store import MemoryTokenStore, TokenRecord, TokenStore
from bookkeeping.constants import PENDING_AUTH_TTL_SECONDS
from bookkeeping.env import Settings
from bookkeeping.pages import CONNECTED_PAGE, DISCONNECTED_PAGE

LOGGER = logging.getLogger("bookkeeping.intuit.oauth")


class OAuthFlow:
    """Authorization-code handshake against Intuit for one connected company.

    Holds the single pending authorization attempt and the token store. A new
    ``/connect`` replaces any attempt still pending; there is no locking, so
    the last write wins.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        token_store: TokenStore | None = None,
        endpoint_resolver=None,
        http_client: httpx.AsyncClient | None = None,
        pending_ttl_seconds: float = PENDING_AUTH_TTL_SECONDS,
    ) -> None:
        self.settings = settings
        self.token_store = token_store or MemoryTokenStore()
        self.endpoint_resolver = endpoint_resolver or StaticEndpointResolver()
        self.http_client = http_client
        self.pending_ttl_seconds = pending_ttl_seconds

        self.pending: PendingAuth | None = None

    # -- flow ------------------------------------------------------------------

    def _require_credentials(self) -> None:
        if not self.settings.has_credentials:
            raise ConfigurationError()

    async def begin_authorization(self, realm_id: str | None = None) -> str:
        self._require_credentials()

        state = intuit_oauth2.generate_state()
        code_verifier = None
        code_challenge = None
        if self.settings.use_pkce:
            code_verifier = intuit_oauth2.generate_code_verifier()
            code_challenge = intuit_oauth2.generate_code_challenge(code_verifier)

        endpoints = await self.endpoint_resolver.get_endpoints()
        self.pending = PendingAuth(
            state=state,
            code_verifier=code_verifier,
            created_at=time.time(),
        )
        LOGGER.info(
            "Starting Intuit authorization pkce=%s realm_hint=%s",
            self.settings.use_pkce,
            bool(realm_id),
        )

        return intuit_oauth2.build_authorization_url(
            authorization_endpoint=endpoints.authorization_endpoint,
            client_id=self.settings.client_id,
            redirect_uri=self.settings.redirect_uri,
            scope=self.settings.scopes,
            state=state,
            code_challenge=code_challenge,
            realm_id=realm_id,
        )

    def _consume_pending(self, state: str | None, code: str | None, error: str | None) -> PendingAuth:
        pending = self.pending
        if (
            pending is None
            or not state
            or not secrets.compare_digest(state.encode(), pending.state.encode())
        ):
            raise CallbackValidationError("Invalid OAuth state.")

        if pending.is_expired(time.time(), self.pending_ttl_seconds):
            self.pending = None
            raise CallbackValidationError("OAuth state expired. Start again from /connect.")

        if not code:
            if self.settings.use_pkce:
                # The verifier is single use even when the callback is unusable.
                self.pending = None
            message = "Missing OAuth code."
            if error:
                message = f"{message} Provider returned: {error}"
            raise CallbackValidationError(message)

        self.pending = None
        return pending

    async def complete_authorization(
        self,
        state: str | None,
        code: str | None,
        realm_id: str | None = None,
        error: str | None = None,
    ) -> TokenRecord:
        self._require_credentials()
        pending = self._consume_pending(state, code, error)

        endpoints = await self.endpoint_resolver.get_endpoints()
        payload = await intuit_oauth2.exchange_code(
            token_endpoint=endpoints.token_endpoint,
            client_id=self.settings.client_id,
            client_secret=self.settings.client_secret,
            code=code,
            redirect_uri=self.settings.redirect_uri,
            code_verifier=pending.code_verifier,
            client=self.http_client,
        )

        record = TokenRecord(payload=payload, realm_id=realm_id or None)
        await self.token_store.set(record)
        LOGGER.info("Stored Intuit token realm_id=%s", record.realm_id)
        return record

    async def revoke(self) -> None:
        self._require_credentials()

        record = await self.token_store.get()
        token = record.revocable_token if record is not None else None
        if not token:
            raise CallbackValidationError("No stored token to revoke. Connect first.")

        endpoints = await self.endpoint_resolver.get_endpoints()
        await intuit_oauth2.revoke_token(
            revocation_endpoint=endpoints.revocation_endpoint,
            client_id=self.settings.client_id,
            client_secret=self.settings.client_secret,
            token=token,
            client=self.http_client,
        )

        await self.token_store.clear()
        LOGGER.info("Revoked Intuit token realm_id=%s", record.realm_id)

    # -- routes ----------------------------------------------------------------

    def routes(self) -> list[Route]:
        return [
            Route("/connect", self._handle_connect, methods=["GET"]),
            Route("/oauth/callback", self._handle_callback, methods=["GET"]),
            Route("/disconnect", self._handle_disconnect, methods=["GET"]),
        ]

    async def _handle_connect(self, request: Request) -> Response:
        try:
            authorize_url = await self.begin_authorization(
                realm_id=request.query_params.get("realmId") or None
            )
        except OAuthFlowError as error:
            return self._error(error.message, error.status_code)
        return RedirectResponse(url=authorize_url, status_code=302)

    async def _handle_callback(self, request: Request) -> Response:
        params = request.query_params
        try:
            await self.complete_authorization(
                state=params.get("state"),
                code=params.get("code"),
                realm_id=params.get("realmId"),
                error=params.get("error"),
            )
        except (ConfigurationError, CallbackValidationError) as error:
            LOGGER.warning("Rejected OAuth callback: %s", error.message)
            return self._error(error.message, error.status_code)
        except UpstreamError as error:
            return self._error(f"Token exchange failed: {error.body}", error.status_code)
        except Exception as error:
            LOGGER.exception("OAuth callback failed")
            return self._error(f"OAuth callback error: {error}", 500)
        return HTMLResponse(CONNECTED_PAGE)

    async def _handle_disconnect(self, request: Request) -> Response:
        del request
        try:
            await self.revoke()
        except (ConfigurationError, CallbackValidationError) as error:
            return self._error(error.message, error.status_code)
        except UpstreamError as error:
            return self._error(f"Token revoke failed: {error.body}", error.status_code)
        except Exception as error:
            LOGGER.exception("Intuit token revoke failed")
            return self._error(f"Disconnect error: {error}", 500)
        return HTMLResponse(DISCONNECTED_PAGE)

    # -- helpers ---------------------------------------------------------------

    def _error(self, message: str, status_code: int) -> Response:
        return PlainTextResponse(message, status_code=status_code)
