from __future__ import annotations

import base64
import hashlib
import secrets
from typing import Any

import httpx

from auth.errors import TransportError, UpstreamError
from auth.urls import append_query_params

STATE_BYTES = 32
CODE_VERIFIER_BYTES = 64


def generate_state() -> str:
    return secrets.token_hex(STATE_BYTES)


def generate_code_verifier() -> str:
    # token_urlsafe is base64url without padding.
    return secrets.token_urlsafe(CODE_VERIFIER_BYTES)


def generate_code_challenge(verifier: str) -> str:
    digest = hashlib.sha256(verifier.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest).decode("utf-8").rstrip("=")


def build_authorization_url(
    authorization_endpoint: str,
    client_id: str,
    redirect_uri: str,
    scope: str,
    state: str,
    code_challenge: str | None = None,
    realm_id: str | None = None,
) -> str:
    query = {
        "client_id": client_id,
        "response_type": "code",
        "scope": scope,
        "redirect_uri": redirect_uri,
        "state": state,
    }
    if code_challenge:
        query["code_challenge"] = code_challenge
        query["code_challenge_method"] = "S256"
    if realm_id:
        query["realmId"] = realm_id
    return append_query_params(authorization_endpoint, query)


async def _post(
    url: str,
    client_id: str,
    client_secret: str,
    *,
    data: dict[str, str] | None = None,
    json: dict[str, str] | None = None,
    client: httpx.AsyncClient | None = None,
) -> httpx.Response:
    own_client = client is None
    http_client = client or httpx.AsyncClient()

    try:
        response = await http_client.post(
            url,
            data=data,
            json=json,
            auth=httpx.BasicAuth(client_id, client_secret),
            headers={"Accept": "application/json"},
        )
    except httpx.HTTPError as error:
        raise TransportError(str(error) or type(error).__name__) from error
    finally:
        if own_client:
            await http_client.aclose()

    if not response.is_success:
        raise UpstreamError(response.status_code, response.text)
    return response


async def exchange_code(
    token_endpoint: str,
    client_id: str,
    client_secret: str,
    code: str,
    redirect_uri: str,
    code_verifier: str | None = None,
    *,
    client: httpx.AsyncClient | None = None,
) -> dict[str, Any]:
    """Trade an authorization code for Intuit's token payload.

    The body is form-encoded and the client authenticates with HTTP Basic.
    The decoded JSON object is returned unchanged.
    """
    payload = {
        "grant_type": "authorization_code",
        "code": code,
        "redirect_uri": redirect_uri,
    }
    if code_verifier:
        payload["code_verifier"] = code_verifier

    response = await _post(token_endpoint, client_id, client_secret, data=payload, client=client)
    try:
        token = response.json()
    except ValueError as error:
        raise TransportError(f"Token response is not valid JSON: {error}") from error
    if not isinstance(token, dict):
        raise TransportError("Token response must be a JSON object.")
    return token


async def revoke_token(
    revocation_endpoint: str,
    client_id: str,
    client_secret: str,
    token: str,
    *,
    client: httpx.AsyncClient | None = None,
) -> None:
    await _post(
        revocation_endpoint,
        client_id,
        client_secret,
        json={"token": token},
        client=client,
    )
