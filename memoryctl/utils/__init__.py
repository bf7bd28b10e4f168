"""Utility functions for memoryctl."""

from memoryctl.utils.helpers import get_data_path
from memoryctl.utils.exceptions import (
    MemoryctlError,
    InvalidArgumentError,
    InvalidPathError,
    MissingArgumentError,
    PayloadNotFoundError,
    UnknownCommandError,
    TransportError,
    ProtocolError,
    RemoteError,
    ErrorCategory,
    sanitize_error_message,
    format_error,
)

__all__ = [
    "get_data_path",
    "MemoryctlError",
    "InvalidArgumentError",
    "InvalidPathError",
    "MissingArgumentError",
    "PayloadNotFoundError",
    "UnknownCommandError",
    "TransportError",
    "ProtocolError",
    "RemoteError",
    "ErrorCategory",
    "sanitize_error_message",
    "format_error",
]
