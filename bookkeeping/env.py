from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv
from pydantic import AnyHttpUrl, ValidationError

from .constants import (
    DEFAULT_HOST,
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_PORT,
    DEFAULT_SCOPES,
    INTUIT_ENVIRONMENTS,
    LOGGER,
    UNKNOWN_VERSION,
)


@dataclass(frozen=True)
class Settings:
    client_id: str | None
    client_secret: str | None
    base_url: str
    redirect_uri: str
    scopes: str = DEFAULT_SCOPES
    environment: str = "production"
    api_host: str = INTUIT_ENVIRONMENTS["production"]["api_host"]
    discovery_url: str = INTUIT_ENVIRONMENTS["production"]["discovery_url"]
    use_pkce: bool = True
    use_discovery: bool = True
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    debug: bool = True

    @property
    def has_credentials(self) -> bool:
        return bool(self.client_id and self.client_secret)


def is_truthy(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_env_str(key: str) -> str | None:
    raw = os.getenv(key, "").strip()
    return raw or None


def _get_env_bool(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    return is_truthy(raw)


def _get_env_int(key: str, default: int) -> int:
    raw = os.getenv(key, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{key} must be an integer value.")


def _get_env_float(key: str, default: float) -> float:
    raw = os.getenv(key, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"{key} must be a number.")


def _validate_url(key: str, value: str) -> str:
    try:
        AnyHttpUrl(value)
    except ValidationError:
        raise RuntimeError(f"{key} must be a valid http(s) URL, got {value!r}.")
    return value


def load_env() -> None:
    env_path = Path(__file__).resolve().parent.parent / ".env"
    if not env_path.exists():
        return
    load_dotenv(env_path, override=False)


def load_settings() -> Settings:
    """Resolve the service settings from the process environment.

    Client credentials are optional here; the OAuth routes refuse to run
    without them, while the landing page and health check keep working.
    """
    port = _get_env_int("PORT", DEFAULT_PORT)
    base_url = _validate_url(
        "APP_BASE_URL", _get_env_str("APP_BASE_URL") or f"http://localhost:{port}"
    )
    redirect_uri = _validate_url(
        "INTUIT_REDIRECT_URI",
        _get_env_str("INTUIT_REDIRECT_URI") or f"{base_url.rstrip('/')}/oauth/callback",
    )

    environment = (_get_env_str("INTUIT_ENVIRONMENT") or "production").lower()
    if environment not in INTUIT_ENVIRONMENTS:
        raise RuntimeError(
            f"INTUIT_ENVIRONMENT must be one of: {', '.join(sorted(INTUIT_ENVIRONMENTS))}."
        )
    defaults = INTUIT_ENVIRONMENTS[environment]

    return Settings(
        client_id=_get_env_str("INTUIT_CLIENT_ID"),
        client_secret=_get_env_str("INTUIT_CLIENT_SECRET"),
        base_url=base_url,
        redirect_uri=redirect_uri,
        scopes=_get_env_str("INTUIT_SCOPES") or DEFAULT_SCOPES,
        environment=environment,
        api_host=_validate_url(
            "INTUIT_API_HOST", _get_env_str("INTUIT_API_HOST") or defaults["api_host"]
        ),
        discovery_url=_validate_url(
            "INTUIT_DISCOVERY_URL",
            _get_env_str("INTUIT_DISCOVERY_URL") or defaults["discovery_url"],
        ),
        use_pkce=_get_env_bool("INTUIT_USE_PKCE", True),
        use_discovery=_get_env_bool("INTUIT_USE_DISCOVERY", True),
        http_timeout=_get_env_float("INTUIT_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
        host=_get_env_str("HOST") or DEFAULT_HOST,
        port=port,
        debug=_get_env_bool("APP_DEBUG", True),
    )


def resolve_version() -> str:
    explicit = _get_env_str("APP_VERSION")
    if explicit:
        return explicit
    commit = _get_env_str("GIT_COMMIT")
    if commit:
        return commit

    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            check=True,
            timeout=5,
        )
    except (OSError, subprocess.SubprocessError):
        return UNKNOWN_VERSION
    return result.stdout.strip() or UNKNOWN_VERSION


def setup_logging() -> bool:
    debug_enabled = is_truthy(os.getenv("APP_DEBUG", "1"))
    if debug_enabled:
        logging.basicConfig(level=logging.INFO)
        LOGGER.setLevel(logging.INFO)
    return debug_enabled
