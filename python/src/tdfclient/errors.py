"""Exceptions raised by the TDF client."""

from __future__ import annotations

import requests

# Network-layer failures are not reinterpreted; they surface as raised by requests.
TransportError = requests.RequestException


class TdfError(Exception):
    """Base exception for TDF client errors."""


class ValidationError(TdfError, TypeError):
    """Raised before any request when caller arguments are malformed."""

    def __init__(self, signature: str, field: str, reason: str) -> None:
        super().__init__(f"{signature}: {field}: {reason}")
        self.signature = signature
        self.operation = signature.split("(", 1)[0].rsplit(".", 1)[-1]
        self.field = field


class AuthorizationError(TdfError):
    """Raised when the server rejects the api key for an agent."""

    def __init__(self) -> None:
        super().__init__("Unauthorized. Invalid apiKey.")


class NotFoundError(TdfError):
    """Raised when the requested agent does not exist."""

    def __init__(self, agent_id: str | None) -> None:
        super().__init__(f"Failed to load agent {agent_id}. Agent not found.")
        self.agent_id = agent_id


class ResponseFormatError(TdfError):
    """Raised when the server response is not valid JSON."""

    def __init__(self) -> None:
        super().__init__("Failed to parse TDF server response!")


class ServerReportedError(TdfError):
    """Raised when the server answers with an ``error`` object."""

    def __init__(self, code, message) -> None:
        super().__init__(f"code: {code}. message: {message}")
        self.code = code
        self.message = message
