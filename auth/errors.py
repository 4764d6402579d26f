from __future__ import annotations


class OAuthFlowError(RuntimeError):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(OAuthFlowError):
    status_code = 500

    def __init__(
        self,
        message: str = "Missing INTUIT_CLIENT_ID or INTUIT_CLIENT_SECRET in environment.",
    ) -> None:
        super().__init__(message)


class CallbackValidationError(OAuthFlowError):
    """The request cannot proceed; the user has to start again at /connect."""

    status_code = 400


class UpstreamError(OAuthFlowError):
    """Intuit answered with a non-success status."""

    status_code = 502

    def __init__(self, status: int, body: str) -> None:
        super().__init__(f"Intuit request failed with status {status}: {body}")
        self.status = status
        self.body = body


class TransportError(OAuthFlowError):
    """The call to Intuit did not complete or its body could not be decoded."""

    status_code = 500
