"""Typed async client for the Amber Electric public API."""
from amber_api.api.amber import AmberClient
from amber_api.api.errors import (
    AmberError,
    BadRequest,
    ConfigError,
    DecodeError,
    HttpStatusError,
    InvalidRange,
    InvalidResolution,
    LimitExceeded,
    MalformedResponse,
    NotFound,
    ServerError,
    TransportError,
    Unauthorized,
    UnexpectedStatus,
    UnknownVariant,
    UnprocessableEntity,
    ValidationError,
)
from amber_api.core.config import ClientConfig, ConfigBuilder

__version__ = "1.0.0"

__all__ = [
    "AmberClient",
    "AmberError",
    "BadRequest",
    "ClientConfig",
    "ConfigBuilder",
    "ConfigError",
    "DecodeError",
    "HttpStatusError",
    "InvalidRange",
    "InvalidResolution",
    "LimitExceeded",
    "MalformedResponse",
    "NotFound",
    "ServerError",
    "TransportError",
    "Unauthorized",
    "UnexpectedStatus",
    "UnknownVariant",
    "UnprocessableEntity",
    "ValidationError",
]
