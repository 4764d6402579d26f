import logging

import httpx
import pytest

from bookkeeping.http import build_http_client


def _transport(status: int, text: str = "", headers: dict | None = None) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, text=text, headers=headers or {}, request=request)

    return httpx.MockTransport(handler)


@pytest.mark.asyncio
async def test_client_sends_json_accept_header() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["accept"] = request.headers["accept"]
        return httpx.Response(200, json={})

    async with build_http_client(debug=False, transport=httpx.MockTransport(handler)) as client:
        await client.get("https://developer.api.intuit.com/.well-known/openid_configuration")

    assert seen["accept"] == "application/json"


@pytest.mark.asyncio
async def test_client_logs_error_body(caplog) -> None:
    caplog.set_level(logging.INFO, logger="bookkeeping.intuit")
    transport = _transport(400, text='{"error":"invalid_grant"}', headers={"intuit_tid": "tid-1"})

    async with build_http_client(debug=True, transport=transport) as client:
        response = await client.post("https://oauth.platform.intuit.com/oauth2/v1/tokens/bearer")

    assert response.status_code == 400
    assert response.text == '{"error":"invalid_grant"}'
    assert "Intuit intuit_tid: tid-1" in caplog.text
    assert 'Intuit error body: {"error":"invalid_grant"}' in caplog.text


@pytest.mark.asyncio
async def test_client_truncates_long_error_body(caplog) -> None:
    caplog.set_level(logging.INFO, logger="bookkeeping.intuit")
    transport = _transport(500, text="x" * 5000)

    async with build_http_client(debug=True, transport=transport) as client:
        await client.get("https://oauth.platform.intuit.com/")

    assert "...<truncated>" in caplog.text
    assert "x" * 1001 not in caplog.text


@pytest.mark.asyncio
async def test_client_quiet_when_debug_disabled(caplog) -> None:
    caplog.set_level(logging.INFO, logger="bookkeeping.intuit")

    async with build_http_client(debug=False, transport=_transport(500, "boom")) as client:
        await client.get("https://oauth.platform.intuit.com/")

    assert caplog.text == ""
