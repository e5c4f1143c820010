"""HTTP client for communicating with a TDF (Tour de Finance) server."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable

from tdfclient import operations
from tdfclient.config import ConnectionSettings
from tdfclient.errors import ValidationError
from tdfclient.operations import Operation, Request
from tdfclient.response import interpret
from tdfclient.transport import RequestsTransport, Transport

log = logging.getLogger(__name__)

Callback = Callable[..., Any]


def _check_callback(signature: str, callback: Any) -> None:
    if callback is not None and not callable(callback):
        raise ValidationError(signature, "callback", "Must be a function!")


def _notify(future: Future, callback: Callback) -> None:
    """Report the outcome of ``future`` to an error-first callback."""

    def done(fut: Future) -> None:
        exc = fut.exception()
        if exc is not None:
            callback(exc)
        else:
            callback(None, fut.result())

    future.add_done_callback(done)


def _redact(params: dict[str, Any] | None) -> dict[str, Any] | None:
    if not params or "apikey" not in params:
        return params
    return {**params, "apikey": "***"}


class TdfClient:
    """Client for the TDF server REST API.

    Every operation returns a :class:`concurrent.futures.Future` resolving to the
    decoded JSON payload. Passing ``callback`` additionally notifies it once the
    request completes, as ``callback(None, result)`` or ``callback(error)``.
    The callback runs on a worker thread (or inline when the future is already
    done); anything it raises is logged by :mod:`concurrent.futures` and
    otherwise dropped, so handle errors inside the callback.

    Argument errors raise :class:`ValidationError` immediately and never reach
    the network.
    """

    def __init__(
        self,
        settings: ConnectionSettings | None = None,
        *,
        transport: Transport | None = None,
        max_workers: int = 4,
        log_parse_errors: bool = False,
    ):
        self.settings = settings or ConnectionSettings()
        self._owns_transport = transport is None
        self.transport = transport or RequestsTransport()
        self.log_parse_errors = log_parse_errors
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="tdfclient")

    def __enter__(self) -> TdfClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Wait for pending requests, then release worker threads and the session."""
        self._executor.shutdown(wait=True)
        if self._owns_transport and hasattr(self.transport, "close"):
            self.transport.close()

    def execute(self, operation: Operation, request: Request, callback: Callback | None = None) -> Future:
        """Send a validated request and return a future for its result."""
        settings = self.settings.merged(request.options)
        url = settings.base_url + operation.path(request)
        params = operation.query(request)
        log.debug("GET %s params=%s", url, _redact(params))

        future = self._executor.submit(self._perform, operation, request, url, params)
        if callback is not None:
            _notify(future, callback)
        return future

    def _perform(self, operation: Operation, request: Request, url: str, params: dict[str, Any] | None) -> Any:
        status, body = self.transport("GET", url, params)
        log.debug("%s -> %s (%d bytes)", operation.name, status, len(body))
        return interpret(
            body,
            check_sentinels=operation.check_sentinels,
            agent_id=request.agent_id,
            log_parse_errors=self.log_parse_errors,
        )

    def _run(self, operation: Operation, args: tuple, callback: Callback | None) -> Future:
        _check_callback(operation.signature, callback)
        return self.execute(operation, operation.validate(*args), callback)

    def trade(self, securities: Any, options: dict[str, Any], callback: Callback | None = None) -> Future:
        """Buy (positive amount) or sell (negative amount) securities for an agent.

        Args:
            securities: A :class:`Security`, a ``{"symbol", "amount"}`` mapping,
                or a non-empty list of either.
            options: ``agentId`` and ``apiKey``, plus optional ``protocol``,
                ``hostname`` and ``port`` overrides.
            callback: Optional error-first callback.
        """
        return self._run(operations.TRADE, (securities, options), callback)

    def agent_status(self, options: dict[str, Any], callback: Callback | None = None) -> Future:
        """Fetch the portfolio composition of an agent."""
        return self._run(operations.AGENT_STATUS, (options,), callback)

    def history(
        self,
        symbol: str | Callback | None = None,
        options: dict[str, Any] | Callback | None = None,
        callback: Callback | None = None,
    ) -> Future:
        """Fetch the price history of ``symbol``, or of every security when omitted."""
        if callable(symbol) and options is None and callback is None:
            symbol, callback = None, symbol
        elif callable(options) and callback is None:
            options, callback = None, options
        return self._run(operations.HISTORY, (symbol, options), callback)

    def current_status(self, options: dict[str, Any] | Callback | None = None, callback: Callback | None = None) -> Future:
        """Fetch the current status of all securities."""
        if callable(options) and callback is None:
            options, callback = None, options
        return self._run(operations.CURRENT_STATUS, (options,), callback)

    def all_histories(self, options: dict[str, Any] | Callback | None = None, callback: Callback | None = None) -> Future:
        """Fetch all price histories.

        Args:
            options: Optional ``select`` (one of ``all``, ``bid``, ``ask``,
                ``last``; default ``all``), ``n`` (number of entries, default 12)
                and connection overrides.
            callback: Optional error-first callback.
        """
        if callable(options) and callback is None:
            options, callback = None, options
        return self._run(operations.ALL_HISTORIES, (options,), callback)
