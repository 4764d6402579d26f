from __future__ import annotations

import contextlib

import httpx
import uvicorn
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import HTMLResponse, JSONResponse, Response
from starlette.routing import Route

from auth.discovery import DiscoveryEndpointResolver, StaticEndpointResolver
from auth.oauth_flow import OAuthFlow
from auth.token_store import TokenStore
from bookkeeping.constants import DISCOVERY_TTL_SECONDS, LOGGER, SERVICE_NAME
from bookkeeping.env import Settings, load_env, load_settings, resolve_version, setup_logging
from bookkeeping.http import build_http_client
from bookkeeping.pages import LANDING_PAGE


def health_payload(version: str) -> dict:
    return {
        "status": "ok",
        "version": version,
        "service": SERVICE_NAME,
        "internalOnly": True,
    }


def build_endpoint_resolver(settings: Settings, client: httpx.AsyncClient):
    if not settings.use_discovery:
        return StaticEndpointResolver()
    return DiscoveryEndpointResolver(
        settings.discovery_url,
        ttl_seconds=DISCOVERY_TTL_SECONDS,
        client=client,
    )


def create_app(
    settings: Settings | None = None,
    *,
    token_store: TokenStore | None = None,
    endpoint_resolver=None,
    http_client: httpx.AsyncClient | None = None,
) -> Starlette:
    settings = settings or load_settings()
    version = resolve_version()

    client = http_client or build_http_client(
        timeout=settings.http_timeout,
        debug=settings.debug,
    )
    oauth_flow = OAuthFlow(
        settings,
        token_store=token_store,
        endpoint_resolver=endpoint_resolver or build_endpoint_resolver(settings, client),
        http_client=client,
    )

    async def landing_route(request: Request) -> Response:
        del request
        return HTMLResponse(LANDING_PAGE)

    async def health_route(request: Request) -> Response:
        del request
        return JSONResponse(health_payload(version))

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette):
        del app
        try:
            yield
        finally:
            await client.aclose()

    app = Starlette(
        routes=[
            Route("/", landing_route, methods=["GET"]),
            Route("/health", health_route, methods=["GET"]),
            *oauth_flow.routes(),
        ],
        lifespan=lifespan,
    )
    app.state.oauth_flow = oauth_flow
    app.state.settings = settings
    app.state.version = version
    return app


def main() -> None:
    load_env()
    setup_logging()
    settings = load_settings()
    app = create_app(settings)
    LOGGER.info(
        "AI Bookkeeping approval app listening on %s (port %s, version %s)",
        settings.base_url,
        settings.port,
        app.state.version,
    )
    if not settings.has_credentials:
        LOGGER.warning("INTUIT_CLIENT_ID or INTUIT_CLIENT_SECRET is not set; OAuth routes will fail.")
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
