#!/usr/bin/env python
"""Issue a single Kraken API call and print the result as JSON.

Usage:
    python scripts/kraken_call.py public Time
    python scripts/kraken_call.py public Ticker pair=XXBTZUSD
    python scripts/kraken_call.py --config kraken.yaml private Balance
    python scripts/kraken_call.py --credentials ~/.kraken_config.json private OpenOrders trades=true
"""
import argparse
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from kraken_api.config import KrakenConfig
from kraken_api.dispatcher import KrakenDispatcher
from kraken_api.exceptions import KrakenAPIError
from kraken_api.logging_setup import setup_logging
from kraken_api.secrets import load_credentials


def parse_params(pairs):
    """Turn ``key=value`` arguments into an ordered parameter dict."""
    params = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Expected key=value, got {pair!r}")
        if value.lower() == "true":
            params[key] = True
        else:
            params[key] = value
    return params


def main(argv=None):
    parser = argparse.ArgumentParser(description="Call a Kraken REST API method")
    parser.add_argument("--config", help="YAML config file")
    parser.add_argument("--credentials", help="JSON credentials file (default: env or ~/.kraken_config.json)")
    parser.add_argument("--log-level", help="Log level (default: config log_level, or WARNING without a config)")
    parser.add_argument("visibility", choices=["public", "private"])
    parser.add_argument("method", help="Kraken method name, e.g. Ticker or Balance")
    parser.add_argument("params", nargs="*", help="key=value parameters")
    args = parser.parse_args(argv)

    if args.config:
        config = KrakenConfig.from_yaml(args.config)
        setup_logging(log_file=config.log_file, level=args.log_level or config.log_level)
    else:
        config = KrakenConfig()
        setup_logging(log_file=None, level=args.log_level or "WARNING")

    try:
        params = parse_params(args.params)
    except ValueError as e:
        parser.error(str(e))

    is_private = args.visibility == "private"
    credentials = None
    if is_private:
        try:
            credentials = load_credentials(args.credentials)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 2

    try:
        with KrakenDispatcher.from_config(config, credentials) as dispatcher:
            response = dispatcher.dispatch(is_private, args.method, params)
    except KrakenAPIError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not response.ok:
        print(f"Kraken error: {', '.join(response.error)}", file=sys.stderr)
        return 1

    print(json.dumps(response.result, indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    sys.exit(main())
