"""Error taxonomy for the lookalike request handler.

Every failure that reaches the HTTP caller is a :class:`LookalikeError`.  Each
subclass carries the HTTP status it maps to; ``lookalike.api.main`` renders
them all as ``{"error": message}`` JSON.
"""

from __future__ import annotations


class LookalikeError(Exception):
    """Base exception for errors surfaced to the HTTP caller.

    Attributes:
        message: Human-readable message returned in the ``error`` field.
        status_code: HTTP status used for the response.
    """

    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidBodyError(LookalikeError):
    """Raised when the request body is not parseable JSON."""

    status_code = 400
    default_message = "Invalid JSON body"


class MissingImageError(LookalikeError):
    """Raised when ``imageDataUrl`` is absent or not a ``data:image/`` URL."""

    status_code = 400
    default_message = "imageDataUrl is required and must be a data:image URL"


class PayloadTooLargeError(LookalikeError):
    """Raised when the request body exceeds the configured size ceiling."""

    status_code = 413
    default_message = "Payload too large"


class ConfigError(LookalikeError):
    """Raised when the provider is missing a required credential."""

    default_message = "Provider is not configured"


class AuthError(LookalikeError):
    """Raised when the provider rejects the configured credential."""

    default_message = "Provider authentication failed"


class ProviderError(LookalikeError):
    """Generic upstream failure.

    Attributes:
        status: HTTP status returned by the provider, or ``None`` when the
            request never got a response (connection error, timeout).
        detail: Truncated provider body or structured error message.
    """

    def __init__(self, message: str, *, status: int | None = None, detail: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.detail = detail


class NoImageError(LookalikeError):
    """Raised when a successful provider response carries no image payload."""

    default_message = "No image found in provider response"


class InternalError(LookalikeError):
    """Wraps unexpected exceptions raised while handling a request."""
