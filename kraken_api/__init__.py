"""
Kraken REST API client.

Public market-data calls and signed account/trading calls over HTTP:
- Strictly increasing, thread-safe nonces (microsecond clock + counter fallback)
- Deterministic url-encoded request bodies
- API-Sign: HMAC-SHA512 over path + SHA256(nonce + body)
- Pooled requests transport; optional TLS peer verification with mandatory hostname checks
- Async dispatcher on aiohttp with cancellation-safe private calls
- Structured logging via loguru
- Configuration-driven (YAML)

Core Modules:
    nonce: Nonce generation
    encoding: Request body encoding
    signing: Credentials and request signatures
    tls: Certificate hostname verification
    transport: HTTP transport
    decoding: Response envelope decoding
    exceptions: Error taxonomy
    dispatcher: Synchronous call orchestration
    async_dispatcher: Asynchronous call orchestration
    client: Endpoint catalog
    config: Configuration loading
    secrets: Credential management

Example:
    >>> from kraken_api.client import KrakenClient
    >>> from kraken_api.config import KrakenConfig
    >>> from kraken_api.dispatcher import KrakenDispatcher
    >>> from kraken_api.secrets import load_credentials
    >>>
    >>> creds = load_credentials()
    >>> client = KrakenClient(KrakenDispatcher.from_config(KrakenConfig(), creds))
    >>> response = client.get_balances()
    >>> balances = response.raise_for_error()
"""

__version__ = "0.1.0"
__all__ = [
    "nonce",
    "encoding",
    "signing",
    "tls",
    "transport",
    "decoding",
    "exceptions",
    "dispatcher",
    "async_dispatcher",
    "client",
    "config",
    "secrets",
]
