"""Dispatcher: composes nonce, encoding, signing, transport and decoding.

Call lifecycle:
    PUBLIC:  Building -> Sending -> Decoding -> Done | Failed
    PRIVATE: Building -> Signing -> Sending -> Decoding -> Done | Failed

``TransportError``, ``DecodeError`` and ``SigningPreconditionError`` propagate
to the caller; nothing is retried here.

Example:
    >>> from kraken_api.dispatcher import KrakenDispatcher
    >>> dispatcher = KrakenDispatcher(api_key="...", api_secret="<base64>")
    >>> response = dispatcher.call_private("Balance")
    >>> if response.ok:
    ...     print(response.result)
"""
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .config import KrakenConfig
from .decoding import ApiResponse, decode_response
from .encoding import encode_params
from .exceptions import KrakenAPIError, SigningPreconditionError
from .logging_setup import logger
from .nonce import NonceGenerator
from .secrets import KrakenCredentials
from .signing import Credentials, sign_b64
from .transport import HttpTransport

DEFAULT_BASE_URL = "https://api.kraken.com"
DEFAULT_VERSION = "0"


@dataclass(frozen=True)
class SignedRequest:
    path: str
    body: str
    headers: Dict[str, str]


def _coerce_nonce(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    # the body carries the string verbatim, so it must already be the canonical digits
    if isinstance(value, str) and value.isascii() and value.isdigit() and str(int(value)) == value:
        return int(value)
    raise SigningPreconditionError(f"Nonce must be a non-negative integer, got {value!r}")


class BaseDispatcher:
    """Request building shared by the sync and async dispatchers."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        *,
        base_url: str = DEFAULT_BASE_URL,
        version: str = DEFAULT_VERSION,
        verify_peer: bool = True,
        timeout: float = 10,
        nonce_generator: Optional[NonceGenerator] = None,
    ):
        self._credentials = Credentials.from_encoded(api_key, api_secret)
        self.base_url = base_url.rstrip("/")
        self.version = str(version).strip("/")
        self.verify_peer = verify_peer
        self.timeout = timeout
        self.nonces = nonce_generator or NonceGenerator()

    @property
    def has_credentials(self) -> bool:
        return self._credentials is not None

    def public_path(self, method: str) -> str:
        return f"/{self.version}/public/{method}"

    def private_path(self, method: str) -> str:
        return f"/{self.version}/private/{method}"

    def url_for(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def build_public(self, method: str, params: Optional[Mapping[str, Any]] = None) -> SignedRequest:
        return SignedRequest(path=self.public_path(method), body=encode_params(params), headers={})

    def build_private(self, method: str, params: Optional[Mapping[str, Any]] = None) -> SignedRequest:
        """Merge in a nonce, encode and sign a private request.

        A caller-supplied ``nonce`` is kept and the generator is advanced past it.
        """
        if self._credentials is None:
            raise SigningPreconditionError("API key and secret are required for private calls")

        request: Dict[str, Any] = dict(params or {})
        if request.get("nonce") is None:
            request["nonce"] = self.nonces.next()
            nonce = request["nonce"]
        else:
            nonce = _coerce_nonce(request["nonce"])
            self.nonces.observe(nonce)

        path = self.private_path(method)
        body = encode_params(request)
        signature = sign_b64(self._credentials.api_secret, path, nonce, body)
        logger.debug(f"Signed private call {method} nonce={nonce}")
        headers = {
            "API-Key": self._credentials.api_key,
            "API-Sign": signature,
        }
        return SignedRequest(path=path, body=body, headers=headers)


class KrakenDispatcher(BaseDispatcher):
    """Synchronous entry point for public and private Kraken calls."""

    def __init__(self, api_key: Optional[str] = None, api_secret: Optional[str] = None, *, transport: Optional[HttpTransport] = None, **kwargs):
        super().__init__(api_key, api_secret, **kwargs)
        self.transport = transport or HttpTransport(verify_peer=self.verify_peer, timeout=self.timeout)

    @classmethod
    def from_config(cls, config: KrakenConfig, credentials: Optional[KrakenCredentials] = None, **kwargs) -> "KrakenDispatcher":
        """Create a dispatcher from KrakenConfig and (optionally) loaded credentials."""
        return cls(
            api_key=credentials.api_key if credentials else None,
            api_secret=credentials.api_secret if credentials else None,
            base_url=config.base_url,
            version=config.version,
            verify_peer=config.verify_peer,
            timeout=config.timeout,
            **kwargs
        )

    def _send(self, method: str, request: SignedRequest) -> ApiResponse:
        try:
            raw = self.transport.post(self.url_for(request.path), request.body, request.headers)
            response = decode_response(raw)
        except KrakenAPIError as e:
            logger.warning(f"Kraken call {method} failed: {e}")
            raise
        if not response.ok:
            logger.info(f"Kraken call {method} returned errors: {response.error}")
        return response

    def call_public(self, method: str, params: Optional[Mapping[str, Any]] = None) -> ApiResponse:
        logger.debug(f"Public call {method}")
        return self._send(method, self.build_public(method, params))

    def call_private(self, method: str, params: Optional[Mapping[str, Any]] = None) -> ApiResponse:
        return self._send(method, self.build_private(method, params))

    def dispatch(self, is_private: bool, method: str, params: Optional[Mapping[str, Any]] = None) -> ApiResponse:
        if is_private:
            return self.call_private(method, params)
        return self.call_public(method, params)

    def close(self) -> None:
        self.transport.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
