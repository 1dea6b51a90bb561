"""Error taxonomy for Kraken API calls.

Every call yields exactly one of: an ``ApiResponse``, a ``TransportError``,
a ``DecodeError`` or a ``SigningPreconditionError``. Application-level errors
reported by the exchange travel inside ``ApiResponse.error`` and only become
an ``ApplicationError`` when the caller asks for it.
"""
from typing import Optional, Sequence


class KrakenAPIError(Exception):
    pass


class TransportError(KrakenAPIError):
    """Raised on connection, TLS or non-2xx HTTP failures."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class DecodeError(KrakenAPIError):
    """Raised when the response body is not a JSON object."""
    pass


class SigningPreconditionError(KrakenAPIError):
    """Raised when a private request cannot be signed (missing secret, bad path or nonce)."""
    pass


class ApplicationError(KrakenAPIError):
    """The exchange answered with a non-empty ``error`` list."""

    def __init__(self, errors: Sequence[str]):
        super().__init__(", ".join(errors))
        self.errors = list(errors)
