from __future__ import annotations

import logging

LOGGER = logging.getLogger("bookkeeping.intuit")
SERVICE_NAME = "ai-bookkeeping"
UNKNOWN_VERSION = "unknown"

DEFAULT_PORT = 3847
DEFAULT_HOST = "127.0.0.1"
DEFAULT_SCOPES = "com.intuit.quickbooks.accounting"
DEFAULT_HTTP_TIMEOUT = 30.0

PENDING_AUTH_TTL_SECONDS = 10 * 60
DISCOVERY_TTL_SECONDS = 10 * 60

INTUIT_ENVIRONMENTS = {
    "production": {
        "discovery_url": "https://developer.api.intuit.com/.well-known/openid_configuration",
        "api_host": "https://quickbooks.api.intuit.com",
    },
    "sandbox": {
        "discovery_url": "https://developer.api.intuit.com/.well-known/openid_sandbox_configuration",
        "api_host": "https://sandbox-quickbooks.api.intuit.com",
    },
}
