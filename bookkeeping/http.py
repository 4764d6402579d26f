from __future__ import annotations

import logging

import httpx

from .constants import DEFAULT_HTTP_TIMEOUT, LOGGER

MAX_LOGGED_BODY = 1000


def _truncate(text: str, limit: int = MAX_LOGGED_BODY) -> str:
    if len(text) > limit:
        return text[:limit] + "...<truncated>"
    return text


def build_http_client(
    *,
    timeout: float = DEFAULT_HTTP_TIMEOUT,
    debug: bool = True,
    transport: httpx.AsyncBaseTransport | None = None,
    logger: logging.Logger | None = None,
) -> httpx.AsyncClient:
    """Build the client used for every call to the identity provider.

    Provider calls are never retried; a failure is reported to the caller as is.
    """
    log = logger or LOGGER

    async def log_request(request: httpx.Request) -> None:
        if not debug:
            return
        log.info("Intuit request %s %s", request.method, request.url)

    async def log_response(response: httpx.Response) -> None:
        if not debug:
            return
        log.info(
            "Intuit response %s %s -> %s",
            response.request.method,
            response.request.url,
            response.status_code,
        )
        if response.status_code >= 400:
            intuit_tid = response.headers.get("intuit_tid")
            if intuit_tid:
                log.warning("Intuit intuit_tid: %s", intuit_tid)
            body = await response.aread()
            log.warning("Intuit error body: %s", _truncate(body.decode("utf-8", errors="replace")))

    return httpx.AsyncClient(
        timeout=timeout,
        transport=transport,
        headers={"Accept": "application/json"},
        event_hooks={"request": [log_request], "response": [log_response]},
    )
