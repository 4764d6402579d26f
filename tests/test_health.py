from starlette.testclient import TestClient

import server
from tests.oauth_helpers import _build_app


def test_health_returns_200(settings) -> None:
    _, client, _ = _build_app(settings)

    response = client.get("/health")

    assert response.status_code == 200


def test_health_response_format(settings) -> None:
    _, client, provider = _build_app(settings)

    payload = client.get("/health").json()

    assert payload == {
        "status": "ok",
        "version": "test-version",
        "service": "ai-bookkeeping",
        "internalOnly": True,
    }
    assert provider.requests == []


def test_health_available_without_credentials(monkeypatch) -> None:
    monkeypatch.delenv("INTUIT_CLIENT_ID", raising=False)
    monkeypatch.delenv("INTUIT_CLIENT_SECRET", raising=False)
    monkeypatch.setenv("INTUIT_USE_DISCOVERY", "0")

    with TestClient(server.create_app()) as client:
        assert client.get("/health").status_code == 200
        assert client.get("/connect", follow_redirects=False).status_code == 500


def test_landing_page(settings) -> None:
    _, client, _ = _build_app(settings)

    response = client.get("/")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "Company Internal Only" in response.text
    assert 'href="/connect"' in response.text
    assert 'href="/disconnect"' in response.text
