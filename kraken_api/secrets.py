"""Secrets management: load API credentials from environment or config file.

Nothing here runs implicitly; callers load credentials and pass them to a
dispatcher explicitly.

Priority order:
1. Environment variables: KRAKEN_API_KEY, KRAKEN_API_SECRET
2. Config file: ~/.kraken_config.json or custom path via ENV KRAKEN_CONFIG_PATH
"""
import json
import os
from pathlib import Path
from typing import Optional, NamedTuple

from .exceptions import SigningPreconditionError
from .signing import Credentials


class KrakenCredentials(NamedTuple):
    api_key: str
    api_secret: str  # base64, as issued by Kraken

    def __repr__(self) -> str:
        return f"KrakenCredentials(api_key={self.api_key!r}, api_secret='***')"


def _checked(api_key: str, api_secret: str, source: str) -> KrakenCredentials:
    """Reject a secret Kraken would never have issued before it reaches a dispatcher."""
    try:
        Credentials.from_encoded(api_key, api_secret)
    except SigningPreconditionError as e:
        raise ValueError(f"Invalid Kraken credentials from {source}: {e}")
    return KrakenCredentials(api_key=api_key, api_secret=api_secret)


def load_credentials(
    config_path: Optional[str] = None,
) -> KrakenCredentials:
    """Load Kraken credentials from env or config file.

    Args:
        config_path: Optional override path to config file. If not provided,
                     checks KRAKEN_CONFIG_PATH env var, then ~/.kraken_config.json

    Returns:
        KrakenCredentials with api_key, api_secret

    Raises:
        ValueError: If credentials are not found, incomplete, or the secret is not base64
    """
    api_key = os.getenv("KRAKEN_API_KEY")
    api_secret = os.getenv("KRAKEN_API_SECRET")

    if api_key and api_secret:
        return _checked(api_key, api_secret, "environment")

    if config_path is None:
        config_path = os.getenv("KRAKEN_CONFIG_PATH")
    if config_path is None:
        config_path = str(Path.home() / ".kraken_config.json")

    config_file = Path(config_path)
    if config_file.exists():
        try:
            with config_file.open("r") as f:
                cfg = json.load(f)
        except (OSError, ValueError) as e:
            raise ValueError(f"Failed to load config from {config_path}: {e}")
        api_key = cfg.get("api_key") or api_key
        api_secret = cfg.get("api_secret") or api_secret

    if not api_key or not api_secret:
        raise ValueError(
            "Missing Kraken credentials. Provide via:\n"
            "  - Environment: KRAKEN_API_KEY, KRAKEN_API_SECRET\n"
            f"  - Config file: {config_path}\n"
            "  - KRAKEN_CONFIG_PATH env var to override config location"
        )

    return _checked(api_key, api_secret, config_path)


def save_config(
    config_path: str,
    api_key: str,
    api_secret: str,
) -> None:
    """Save credentials to a config file for later use.

    WARNING: Stores secrets in plaintext. The file is restricted to mode 600
    where the platform supports it.
    """
    config = {
        "api_key": api_key,
        "api_secret": api_secret,
    }
    cfg_file = Path(config_path)
    cfg_file.parent.mkdir(parents=True, exist_ok=True)

    with cfg_file.open("w") as f:
        json.dump(config, f, indent=2)

    if os.name == "posix":
        cfg_file.chmod(0o600)
