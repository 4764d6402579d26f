import pytest

from bookkeeping.env import Settings


@pytest.fixture
def settings() -> Settings:
    return Settings(
        client_id="intuit-client",
        client_secret="intuit-secret",
        base_url="https://books.example.com",
        redirect_uri="https://books.example.com/oauth/callback",
        use_discovery=False,
        debug=False,
    )


@pytest.fixture(autouse=True)
def _pinned_version(monkeypatch) -> None:
    monkeypatch.setenv("APP_VERSION", "test-version")
