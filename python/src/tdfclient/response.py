"""Classification of raw TDF server responses."""

from __future__ import annotations

import json
import logging
from typing import Any

from tdfclient.errors import (
    AuthorizationError,
    NotFoundError,
    ResponseFormatError,
    ServerReportedError,
)

log = logging.getLogger(__name__)

NOT_AUTHORIZED = "Not authorized to operate on agent."
AGENT_NOT_FOUND = "Failed to load agent"


def _is_set(value: Any) -> bool:
    """JSON truthiness: empty objects and arrays still count."""
    return isinstance(value, (dict, list)) or bool(value)


def interpret(
    body: str,
    *,
    check_sentinels: bool,
    agent_id: str | None = None,
    log_parse_errors: bool = False,
) -> Any:
    """Turn a response body into a parsed JSON value or raise.

    The checks run in order and the first match wins:

    1. ``NOT_AUTHORIZED`` anywhere in the body -> AuthorizationError
    2. ``AGENT_NOT_FOUND`` anywhere in the body -> NotFoundError
    3. body is not JSON -> ResponseFormatError
    4. JSON object with an ``error`` member -> ServerReportedError

    Steps 1 and 2 only run when ``check_sentinels`` is set. The status code is
    deliberately ignored.
    """
    if check_sentinels:
        if NOT_AUTHORIZED in body:
            raise AuthorizationError()
        if AGENT_NOT_FOUND in body:
            raise NotFoundError(agent_id)

    try:
        payload = json.loads(body)
    except ValueError as exc:
        if log_parse_errors:
            log.exception("unparseable TDF response (%d bytes)", len(body))
        raise ResponseFormatError() from exc

    if isinstance(payload, dict) and _is_set(payload.get("error")):
        error = payload["error"]
        if isinstance(error, dict):
            raise ServerReportedError(error.get("code"), error.get("message"))
        raise ServerReportedError(None, error)

    return payload
