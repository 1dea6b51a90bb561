"""Request signing for private Kraken endpoints.

    API-Sign = base64(HMAC-SHA512(secret, path + SHA256(nonce + body)))

where ``secret`` is the base64-decoded API secret, ``nonce`` is the decimal
nonce string and ``body`` is the url-encoded POST body (which itself contains
``nonce=<nonce>``).
"""
import base64
import binascii
import hashlib
import hmac
from dataclasses import dataclass, field
from typing import Optional

from .exceptions import SigningPreconditionError


@dataclass(frozen=True)
class Credentials:
    """API key and decoded secret. The secret never appears in repr()."""
    api_key: str
    api_secret: bytes = field(repr=False)

    @classmethod
    def from_encoded(cls, api_key: Optional[str], api_secret: Optional[str]) -> Optional["Credentials"]:
        """Build from the base64 secret as issued by Kraken.

        Returns None when both values are missing (public-only client).
        """
        if not api_key and not api_secret:
            return None
        if not api_key or not api_secret:
            raise SigningPreconditionError("Both API key and API secret are required")
        try:
            secret = base64.b64decode(api_secret, validate=True)
        except (binascii.Error, ValueError):
            raise SigningPreconditionError("API secret must be base64-encoded")
        return cls(api_key=api_key, api_secret=secret)


def sign(secret: bytes, path: str, nonce: int, body: str) -> bytes:
    """Compute the raw HMAC-SHA512 signature of a private request.

    Args:
        secret: Decoded API secret
        path: Request path, e.g. ``/0/private/Balance``
        nonce: Nonce also present in ``body``
        body: Url-encoded request body

    Returns:
        64 raw signature bytes

    Raises:
        SigningPreconditionError: If the secret is empty or the path/nonce is malformed
    """
    if not secret:
        raise SigningPreconditionError("API secret is required to sign private requests")
    if not path or not path.startswith("/") or not path.isascii() or any(c.isspace() for c in path):
        raise SigningPreconditionError(f"Malformed request path: {path!r}")
    if isinstance(nonce, bool) or not isinstance(nonce, int) or nonce < 0:
        raise SigningPreconditionError(f"Nonce must be a non-negative integer, got {nonce!r}")

    digest = hashlib.sha256((str(nonce) + body).encode("utf-8")).digest()
    return hmac.new(secret, path.encode("ascii") + digest, hashlib.sha512).digest()


def sign_b64(secret: bytes, path: str, nonce: int, body: str) -> str:
    """Signature as sent in the ``API-Sign`` header."""
    return base64.b64encode(sign(secret, path, nonce, body)).decode()
