"""Python client for the Tour de Finance trading simulation platform."""

from tdfclient.client import TdfClient
from tdfclient.config import ConnectionSettings
from tdfclient.errors import (
    AuthorizationError,
    NotFoundError,
    ResponseFormatError,
    ServerReportedError,
    TdfError,
    TransportError,
    ValidationError,
)
from tdfclient.operations import Security

__version__ = "0.1.0"

__all__ = [
    "AuthorizationError",
    "ConnectionSettings",
    "NotFoundError",
    "ResponseFormatError",
    "Security",
    "ServerReportedError",
    "TdfClient",
    "TdfError",
    "TransportError",
    "ValidationError",
]
