"""Kraken endpoint catalog.

``KrakenClientContract`` lists every supported operation explicitly;
``KrakenClient`` maps each one to its wire method and parameters and hands it
to a dispatcher. Results are returned as ``ApiResponse`` without interpretation.

Example:
    >>> from kraken_api.client import KrakenClient
    >>> from kraken_api.dispatcher import KrakenDispatcher
    >>> from kraken_api.secrets import load_credentials
    >>>
    >>> creds = load_credentials()
    >>> client = KrakenClient(KrakenDispatcher(creds.api_key, creds.api_secret))
    >>> client.get_ohlc("XXBTZUSD", interval=5).result
"""
from abc import ABC, abstractmethod
from typing import Any, Iterable, Mapping, Optional, Protocol, Sequence

from .decoding import ApiResponse
from .encoding import csv, flag


class Dispatcher(Protocol):
    def dispatch(self, is_private: bool, method: str, params: Optional[Mapping[str, Any]] = None) -> ApiResponse:
        ...


class KrakenClientContract(ABC):
    """Every operation the Kraken client supports."""

    # market data

    @abstractmethod
    def get_server_time(self) -> ApiResponse:
        """Server time; useful for approximating clock skew."""

    @abstractmethod
    def get_asset_info(self) -> ApiResponse:
        pass

    @abstractmethod
    def get_asset_pairs(self, pairs: Optional[Sequence[str]] = None, info: str = "info") -> ApiResponse:
        pass

    @abstractmethod
    def get_tickers(self, pairs: Sequence[str]) -> ApiResponse:
        pass

    @abstractmethod
    def get_ohlc(self, pair: str, interval: int = 1, since: Optional[str] = None) -> ApiResponse:
        """OHLC candles for ``pair`` at ``interval`` minutes."""

    @abstractmethod
    def get_order_book(self, pair: str, count: Optional[int] = None) -> ApiResponse:
        pass

    @abstractmethod
    def get_recent_trades(self, pair: str, since: Optional[str] = None) -> ApiResponse:
        pass

    @abstractmethod
    def get_recent_spreads(self, pair: str, since: Optional[str] = None) -> ApiResponse:
        pass

    # account

    @abstractmethod
    def get_balances(self) -> ApiResponse:
        pass

    @abstractmethod
    def get_trade_balance(self, currency: str, base_currency: str, asset_class: Optional[str] = None) -> ApiResponse:
        pass

    @abstractmethod
    def get_open_orders(self, include_trades: bool = False, user_ref: Optional[str] = None) -> ApiResponse:
        pass

    @abstractmethod
    def get_closed_orders(
        self,
        start: Optional[int] = None,
        end: Optional[int] = None,
        offset: Optional[int] = None,
        close_time: str = "both",
        include_trades: bool = False,
        user_ref: Optional[str] = None,
    ) -> ApiResponse:
        pass

    @abstractmethod
    def get_orders_info(self, txids: Sequence[str], include_trades: bool = False, user_ref: Optional[str] = None) -> ApiResponse:
        pass

    @abstractmethod
    def get_trades_history(
        self,
        type: str = "all",
        start: Optional[int] = None,
        end: Optional[int] = None,
        offset: Optional[int] = None,
        include_trades: bool = False,
    ) -> ApiResponse:
        pass

    @abstractmethod
    def get_trades_info(self, txids: Sequence[str], include_related_trades: bool = False) -> ApiResponse:
        pass

    @abstractmethod
    def get_open_positions(self, txids: Sequence[str], calculate_pnl: bool = False) -> ApiResponse:
        pass

    @abstractmethod
    def get_ledgers(
        self,
        currency: str,
        start: Optional[int] = None,
        end: Optional[int] = None,
        offset: Optional[int] = None,
        type: str = "all",
        asset_class: Optional[str] = None,
    ) -> ApiResponse:
        pass

    @abstractmethod
    def get_ledgers_info(self, ledger_ids: Sequence[str]) -> ApiResponse:
        pass

    @abstractmethod
    def get_trade_volume(self, pairs: Optional[Sequence[str]] = None, include_fee_info: bool = False) -> ApiResponse:
        pass

    # trading

    @abstractmethod
    def add_order(
        self,
        pair: str,
        side: str,
        order_type: str,
        volume: str,
        price: str,
        price2: Optional[str] = None,
        leverage: Optional[str] = "none",
        oflags: Iterable[str] = (),
        start_tm: Optional[str] = None,
        expire_tm: Optional[str] = None,
        user_ref: Optional[str] = None,
        validate_only: bool = False,
    ) -> ApiResponse:
        pass

    @abstractmethod
    def cancel_order(self, txid: str) -> ApiResponse:
        pass

    @abstractmethod
    def buy(self, pair: str, quantity: str, rate: str) -> ApiResponse:
        pass

    @abstractmethod
    def sell(self, pair: str, quantity: str, rate: str) -> ApiResponse:
        pass

    # funding

    @abstractmethod
    def get_deposit_methods(self, currency: str, asset_class: Optional[str] = None) -> ApiResponse:
        pass

    @abstractmethod
    def get_deposit_addresses(self, currency: str, method: str, new: bool = False, asset_class: Optional[str] = None) -> ApiResponse:
        pass

    @abstractmethod
    def get_deposit_status(self, currency: str, method: Optional[str] = None, asset_class: Optional[str] = None) -> ApiResponse:
        pass

    @abstractmethod
    def get_withdraw_info(self, currency: str, key: str, amount: str, asset_class: Optional[str] = None) -> ApiResponse:
        pass

    @abstractmethod
    def withdraw(self, currency: str, key: str, amount: str, asset_class: Optional[str] = None) -> ApiResponse:
        pass

    @abstractmethod
    def get_withdrawal_status(self, currency: str, method: Optional[str] = None, asset_class: Optional[str] = None) -> ApiResponse:
        pass

    @abstractmethod
    def cancel_withdrawal(self, currency: str, reference_id: str, asset_class: Optional[str] = None) -> ApiResponse:
        pass


class KrakenClient(KrakenClientContract):
    """Kraken REST client over any dispatcher (``KrakenDispatcher`` or a custom one)."""

    def __init__(self, dispatcher: Dispatcher):
        self.dispatcher = dispatcher

    def _public(self, method: str, params: Optional[Mapping[str, Any]] = None) -> ApiResponse:
        return self.dispatcher.dispatch(False, method, params or {})

    def _private(self, method: str, params: Optional[Mapping[str, Any]] = None) -> ApiResponse:
        return self.dispatcher.dispatch(True, method, params or {})

    def get_server_time(self) -> ApiResponse:
        return self._public("Time")

    def get_asset_info(self) -> ApiResponse:
        return self._public("Assets")

    def get_asset_pairs(self, pairs: Optional[Sequence[str]] = None, info: str = "info") -> ApiResponse:
        return self._public("AssetPairs", {"pair": csv(pairs), "info": info or None})

    def get_tickers(self, pairs: Sequence[str]) -> ApiResponse:
        return self._public("Ticker", {"pair": csv(pairs)})

    def get_ohlc(self, pair: str, interval: int = 1, since: Optional[str] = None) -> ApiResponse:
        return self._public("OHLC", {"pair": pair, "interval": interval or None, "since": since})

    def get_order_book(self, pair: str, count: Optional[int] = None) -> ApiResponse:
        return self._public("Depth", {"pair": pair, "count": count or None})

    def get_recent_trades(self, pair: str, since: Optional[str] = None) -> ApiResponse:
        return self._public("Trades", {"pair": pair, "since": since})

    def get_recent_spreads(self, pair: str, since: Optional[str] = None) -> ApiResponse:
        return self._public("Spread", {"pair": pair, "since": since})

    def get_balances(self) -> ApiResponse:
        return self._private("Balance")

    def get_trade_balance(self, currency: str, base_currency: str, asset_class: Optional[str] = None) -> ApiResponse:
        return self._private("TradeBalance", {"currency": currency, "asset": base_currency, "aclass": asset_class})

    def get_open_orders(self, include_trades: bool = False, user_ref: Optional[str] = None) -> ApiResponse:
        return self._private("OpenOrders", {"trades": flag(include_trades), "userref": user_ref})

    def get_closed_orders(self, start=None, end=None, offset=None, close_time="both", include_trades=False, user_ref=None) -> ApiResponse:
        return self._private("ClosedOrders", {
            "trades": flag(include_trades),
            "userref": user_ref,
            "start": start,
            "end": end,
            "ofs": offset or None,
            "closetime": close_time or None,
        })

    def get_orders_info(self, txids: Sequence[str], include_trades: bool = False, user_ref: Optional[str] = None) -> ApiResponse:
        return self._private("QueryOrders", {"trades": flag(include_trades), "userref": user_ref, "txid": csv(txids)})

    def get_trades_history(self, type="all", start=None, end=None, offset=None, include_trades=False) -> ApiResponse:
        return self._private("TradesHistory", {
            "type": type or None,
            "start": start,
            "end": end,
            "ofs": offset or None,
            "trades": flag(include_trades),
        })

    def get_trades_info(self, txids: Sequence[str], include_related_trades: bool = False) -> ApiResponse:
        return self._private("QueryTrades", {"txid": csv(txids), "trades": flag(include_related_trades)})

    def get_open_positions(self, txids: Sequence[str], calculate_pnl: bool = False) -> ApiResponse:
        return self._private("OpenPositions", {"txid": csv(txids), "docalcs": flag(calculate_pnl)})

    def get_ledgers(self, currency, start=None, end=None, offset=None, type="all", asset_class=None) -> ApiResponse:
        return self._private("Ledgers", {
            "currency": currency,
            "start": start,
            "end": end,
            "ofs": offset or None,
            "type": type or None,
            "aclass": asset_class,
        })

    def get_ledgers_info(self, ledger_ids: Sequence[str]) -> ApiResponse:
        return self._private("QueryLedgers", {"id": csv(ledger_ids)})

    def get_trade_volume(self, pairs: Optional[Sequence[str]] = None, include_fee_info: bool = False) -> ApiResponse:
        return self._private("TradeVolume", {"pair": csv(pairs), "fee-info": flag(include_fee_info)})

    def add_order(self, pair, side, order_type, volume, price, price2=None, leverage="none", oflags=(), start_tm=None,
                  expire_tm=None, user_ref=None, validate_only=False) -> ApiResponse:
        return self._private("AddOrder", {
            "pair": pair,
            "type": side,
            "ordertype": order_type,
            "price": price,
            "price2": price2,
            "volume": volume,
            "leverage": leverage or None,
            "oflags": csv(list(oflags)),
            "starttm": start_tm,
            "expiretm": expire_tm,
            "userref": user_ref,
            "validate": flag(validate_only),
        })

    def cancel_order(self, txid: str) -> ApiResponse:
        return self._private("CancelOrder", {"txid": txid})

    def buy(self, pair: str, quantity: str, rate: str) -> ApiResponse:
        """Limit buy."""
        return self.add_order(pair, "buy", "limit", quantity, rate)

    def sell(self, pair: str, quantity: str, rate: str) -> ApiResponse:
        """Limit sell."""
        return self.add_order(pair, "sell", "limit", quantity, rate)

    def get_deposit_methods(self, currency: str, asset_class: Optional[str] = None) -> ApiResponse:
        return self._private("DepositMethods", {"asset": currency, "aclass": asset_class})

    def get_deposit_addresses(self, currency: str, method: str, new: bool = False, asset_class: Optional[str] = None) -> ApiResponse:
        return self._private("DepositAddresses", {"asset": currency, "aclass": asset_class, "method": method, "new": flag(new)})

    def get_deposit_status(self, currency: str, method: Optional[str] = None, asset_class: Optional[str] = None) -> ApiResponse:
        return self._private("DepositStatus", {"asset": currency, "method": method, "aclass": asset_class})

    def get_withdraw_info(self, currency: str, key: str, amount: str, asset_class: Optional[str] = None) -> ApiResponse:
        return self._private("WithdrawInfo", {"asset": currency, "key": key, "amount": amount, "aclass": asset_class})

    def withdraw(self, currency: str, key: str, amount: str, asset_class: Optional[str] = None) -> ApiResponse:
        return self._private("Withdraw", {"asset": currency, "key": key, "amount": amount, "aclass": asset_class})

    def get_withdrawal_status(self, currency: str, method: Optional[str] = None, asset_class: Optional[str] = None) -> ApiResponse:
        return self._private("WithdrawStatus", {"asset": currency, "method": method, "aclass": asset_class})

    def cancel_withdrawal(self, currency: str, reference_id: str, asset_class: Optional[str] = None) -> ApiResponse:
        return self._private("WithdrawCancel", {"asset": currency, "refid": reference_id, "aclass": asset_class})
