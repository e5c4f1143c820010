"""Descriptors for the operations exposed by the TDF server.

Each :class:`Operation` bundles the argument validator, the path and query
builders and the response policy of one endpoint. The client runs them all
through a single engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from numbers import Integral, Real
from typing import Any, Callable, Mapping
from urllib.parse import quote

from tdfclient.errors import ValidationError

SELECT_VALUES = ("all", "bid", "ask", "last")
DEFAULT_SELECT = "all"
DEFAULT_N = 12


@dataclass(frozen=True)
class Security:
    """A trade leg: positive ``amount`` buys, negative sells."""

    symbol: str
    amount: float


@dataclass(frozen=True)
class Request:
    """Validated arguments of a single call."""

    options: Mapping[str, Any] = field(default_factory=dict)
    agent_id: str | None = None
    api_key: str | None = None
    securities: tuple[Security, ...] = ()
    symbol: str | None = None
    select: str = DEFAULT_SELECT
    n: int = DEFAULT_N


@dataclass(frozen=True)
class Operation:
    name: str
    signature: str
    validate: Callable[..., Request]
    path: Callable[[Request], str]
    query: Callable[[Request], dict[str, Any] | None] = lambda request: None
    check_sentinels: bool = False


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _connection(signature: str, options: Mapping[str, Any]) -> Mapping[str, Any]:
    """Check the per-call protocol, hostname and port overrides."""
    for key in ("protocol", "hostname"):
        value = options.get(key)
        if value is not None and not isinstance(value, str):
            raise ValidationError(signature, f"options.{key}", "Must be a string!")
    port = options.get("port")
    if port is None:
        return options
    if isinstance(port, str):
        if port and not port.isdigit():
            raise ValidationError(signature, "options.port", "Must be an integer!")
    elif not isinstance(port, Integral) or isinstance(port, bool) or port < 0:
        raise ValidationError(signature, "options.port", "Must be an integer!")
    return options


def _options(signature: str, options: Any) -> Mapping[str, Any]:
    if options is None:
        return {}
    if not isinstance(options, Mapping):
        raise ValidationError(signature, "options", "Must be an object!")
    return _connection(signature, options)


def _credentials(signature: str, options: Any) -> Mapping[str, Any]:
    if not isinstance(options, Mapping):
        raise ValidationError(signature, "options", "Must be an object!")
    _connection(signature, options)
    if not isinstance(options.get("agentId"), str):
        raise ValidationError(signature, "options.agentId", "Must be a string!")
    if not isinstance(options.get("apiKey"), str):
        raise ValidationError(signature, "options.apiKey", "Must be a string!")
    return options


def _optional_symbol(signature: str, symbol: Any, field_name: str = "options.symbol") -> str | None:
    if symbol is not None and not isinstance(symbol, str):
        raise ValidationError(signature, field_name, "Must be a string!")
    return symbol


def _security(signature: str, item: Any) -> Security:
    if isinstance(item, Security):
        symbol, amount = item.symbol, item.amount
    elif isinstance(item, Mapping):
        symbol, amount = item.get("symbol"), item.get("amount")
    else:
        raise ValidationError(signature, f"security ({item!r})", "Must be an object!")
    if not isinstance(symbol, str) or not symbol:
        raise ValidationError(signature, f"security.symbol ({item!r})", "Must be a non-empty string!")
    if not _is_number(amount):
        raise ValidationError(signature, f"security.amount ({item!r})", "Must be a number!")
    return Security(symbol, amount)


# Validators ----------------------------------------------------------------

TRADE_SIGNATURE = "tdfclient.trade(securities, options, callback)"
AGENT_STATUS_SIGNATURE = "tdfclient.agent_status(options, callback)"
HISTORY_SIGNATURE = "tdfclient.history(symbol, options, callback)"
CURRENT_STATUS_SIGNATURE = "tdfclient.current_status(options, callback)"
ALL_HISTORIES_SIGNATURE = "tdfclient.all_histories(options, callback)"


def validate_trade(securities: Any, options: Any) -> Request:
    if isinstance(securities, (Security, Mapping)):
        securities = [securities]
    elif not isinstance(securities, (list, tuple)) or not securities:
        raise ValidationError(TRADE_SIGNATURE, "securities", "Must be an object or a non-empty array!")
    options = _credentials(TRADE_SIGNATURE, options)
    legs = tuple(_security(TRADE_SIGNATURE, item) for item in securities)
    seen: set[str] = set()
    for leg in legs:
        # legs share the query string with the credential
        if leg.symbol == "apikey":
            raise ValidationError(TRADE_SIGNATURE, f"security.symbol ({leg.symbol!r})", "Must not be 'apikey'!")
        if leg.symbol in seen:
            raise ValidationError(TRADE_SIGNATURE, f"security.symbol ({leg.symbol!r})", "Must not repeat!")
        seen.add(leg.symbol)
    return Request(options=options, agent_id=options["agentId"], api_key=options["apiKey"], securities=legs)


def validate_agent_status(options: Any) -> Request:
    options = _credentials(AGENT_STATUS_SIGNATURE, options)
    return Request(options=options, agent_id=options["agentId"], api_key=options["apiKey"])


def validate_history(symbol: Any, options: Any) -> Request:
    symbol = _optional_symbol(HISTORY_SIGNATURE, symbol, "symbol")
    return Request(options=_options(HISTORY_SIGNATURE, options), symbol=symbol)


def validate_current_status(options: Any) -> Request:
    options = _options(CURRENT_STATUS_SIGNATURE, options)
    symbol = _optional_symbol(CURRENT_STATUS_SIGNATURE, options.get("symbol"))
    return Request(options=options, symbol=symbol)


def validate_all_histories(options: Any) -> Request:
    options = _options(ALL_HISTORIES_SIGNATURE, options)
    symbol = _optional_symbol(ALL_HISTORIES_SIGNATURE, options.get("symbol"))
    select = options.get("select", DEFAULT_SELECT)
    if select not in SELECT_VALUES:
        raise ValidationError(ALL_HISTORIES_SIGNATURE, "options.select", f"Must be one of {', '.join(SELECT_VALUES)}!")
    n = options.get("n", DEFAULT_N)
    if not isinstance(n, Integral) or isinstance(n, bool) or n <= 0:
        raise ValidationError(ALL_HISTORIES_SIGNATURE, "options.n", "Must be a positive integer!")
    return Request(options=options, symbol=symbol, select=select, n=n)


# Path and query builders ---------------------------------------------------


def _segment(value: str) -> str:
    return quote(value, safe="")


def _trade_query(request: Request) -> dict[str, Any]:
    query: dict[str, Any] = {"apikey": request.api_key}
    for security in request.securities:
        query[security.symbol] = security.amount
    return query


TRADE = Operation(
    name="trade",
    signature=TRADE_SIGNATURE,
    validate=validate_trade,
    path=lambda request: f"/agents/trade/{_segment(request.agent_id)}",
    query=_trade_query,
    check_sentinels=True,
)

AGENT_STATUS = Operation(
    name="agent_status",
    signature=AGENT_STATUS_SIGNATURE,
    validate=validate_agent_status,
    path=lambda request: f"/agents/{_segment(request.agent_id)}/composition",
    query=lambda request: {"apikey": request.api_key},
    check_sentinels=True,
)

HISTORY = Operation(
    name="history",
    signature=HISTORY_SIGNATURE,
    validate=validate_history,
    path=lambda request: f"/history/{_segment(request.symbol)}" if request.symbol else "/history",
)

# symbol is validated but the endpoint always reports every security
CURRENT_STATUS = Operation(
    name="current_status",
    signature=CURRENT_STATUS_SIGNATURE,
    validate=validate_current_status,
    path=lambda request: "/currentstatus",
)

ALL_HISTORIES = Operation(
    name="all_histories",
    signature=ALL_HISTORIES_SIGNATURE,
    validate=validate_all_histories,
    path=lambda request: "/allhistories",
    query=lambda request: {"select": request.select, "n": request.n},
)
