"""Configuration loader for the Kraken client.

Supports YAML format with environment variable interpolation. Credentials are
not part of this file; see ``kraken_api.secrets``.
"""
import os
from dataclasses import asdict, dataclass
from pathlib import Path

import yaml


@dataclass
class KrakenConfig:
    """Connection settings consumed by the dispatchers."""
    base_url: str = "https://api.kraken.com"
    version: str = "0"
    verify_peer: bool = True  # disable only for non-production hosts
    timeout: float = 10
    log_file: str = "kraken.log"
    log_level: str = "INFO"

    @classmethod
    def from_yaml(cls, config_path: str) -> "KrakenConfig":
        """Load configuration from YAML file with env var interpolation.

        Example YAML:
            base_url: "${KRAKEN_BASE_URL}"
            version: "0"
            verify_peer: false
            timeout: 15
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with config_file.open("r") as f:
            raw = f.read()

        # ${VAR_NAME}
        for key, value in os.environ.items():
            raw = raw.replace(f"${{{key}}}", value)

        data = yaml.safe_load(raw) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a mapping: {config_path}")

        unknown = set(data) - set(cls.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")
        if "version" in data:
            data["version"] = str(data["version"])
        return cls(**data)

    def to_yaml(self, output_path: str) -> None:
        """Save configuration to YAML file."""
        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        with output_file.open("w") as f:
            yaml.dump(asdict(self), f, default_flow_style=False, sort_keys=False)
