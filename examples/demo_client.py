"""End-to-end demo of the Kraken client.

Shows:
1. Structured logging
2. Loading configuration and credentials explicitly
3. Public market-data calls (no credentials needed)
4. Signed private calls, when credentials are available
5. Checking application errors returned in the envelope
6. The async dispatcher
"""
import asyncio
import sys
from pathlib import Path

# Add parent directory to path so we can import kraken_api
sys.path.insert(0, str(Path(__file__).parent.parent))

from kraken_api.async_dispatcher import AsyncKrakenDispatcher
from kraken_api.client import KrakenClient
from kraken_api.config import KrakenConfig
from kraken_api.dispatcher import KrakenDispatcher
from kraken_api.exceptions import KrakenAPIError
from kraken_api.logging_setup import setup_logging, logger
from kraken_api.secrets import load_credentials


def main():
    setup_logging(log_file="kraken.log", level="DEBUG", enable_console=True)
    logger.info("=== Kraken Client Demo ===")

    config_file = Path(__file__).parent.parent / "kraken.yaml"
    config = KrakenConfig.from_yaml(str(config_file)) if config_file.exists() else KrakenConfig()

    try:
        credentials = load_credentials()
    except ValueError:
        logger.info("No credentials found; private calls will be skipped")
        credentials = None

    with KrakenDispatcher.from_config(config, credentials) as dispatcher:
        client = KrakenClient(dispatcher)
        try:
            server_time = client.get_server_time().raise_for_error()
            logger.info(f"Server time: {server_time}")

            ticker = client.get_tickers(["XXBTZUSD"])
            if ticker.ok:
                logger.info(f"XBT/USD last trade: {ticker.result['XXBTZUSD']['c'][0]}")
            else:
                logger.warning(f"Ticker failed: {ticker.error}")

            if dispatcher.has_credentials:
                balances = client.get_balances()
                if balances.ok:
                    logger.info(f"Assets held: {sorted(balances.result)}")
                else:
                    logger.warning(f"Balance failed: {balances.error}")

                # validate-only order never reaches the book
                order = client.add_order("XXBTZUSD", "buy", "limit", "0.0001", "1000", validate_only=True)
                logger.info(f"Validated order: {order.result or order.error}")
        except KrakenAPIError as e:
            logger.error(f"Kraken call failed: {e}")

    asyncio.run(async_demo(config))


async def async_demo(config: KrakenConfig):
    async with AsyncKrakenDispatcher(base_url=config.base_url, version=config.version, timeout=config.timeout) as kraken:
        responses = await asyncio.gather(
            kraken.call_public("Time"),
            kraken.call_public("Depth", {"pair": "XXBTZUSD", "count": 5}),
        )
        for response in responses:
            logger.info(f"Async result keys: {list(response.result)}")


if __name__ == "__main__":
    main()
