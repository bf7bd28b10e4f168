"""
Exception hierarchy and error formatting utilities for memoryctl.

Provides:
- Custom exception classes with error codes
- Error categorization (recoverable, retryable, fatal)
- Safe error message formatting (no sensitive data leak)
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any

# JSON-RPC error codes the remote engine is known to return.
REMOTE_ERROR_LABELS: dict[int, str] = {
    -32600: "invalid JSON-RPC version",
    -32601: "method not found",
    -32602: "invalid params",
}


class ErrorCategory(Enum):
    """Error categories for classification."""
    RECOVERABLE = "recoverable"
    RETRYABLE = "retryable"
    FATAL = "fatal"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"


class MemoryctlError(Exception):
    """Base exception for all memoryctl errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        category: ErrorCategory = ErrorCategory.FATAL,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "category": self.category.value,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class InvalidArgumentError(MemoryctlError):
    """Local argument validation error."""

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="INVALID_ARGUMENT", category=ErrorCategory.VALIDATION, details=details)


class InvalidPathError(MemoryctlError):
    """Target path does not exist locally."""

    def __init__(self, path: str):
        super().__init__(
            f"Path does not exist: {path}",
            code="INVALID_PATH",
            category=ErrorCategory.VALIDATION,
            details={"path": path},
        )


class MissingArgumentError(MemoryctlError):
    """Required command argument was not supplied."""

    def __init__(self, verb: str, argument: str):
        super().__init__(
            f"'{verb}' requires <{argument}>",
            code="MISSING_ARGUMENT",
            category=ErrorCategory.VALIDATION,
            details={"verb": verb, "argument": argument},
        )


class PayloadNotFoundError(MemoryctlError):
    """Payload bank lookup failed; carries the names that do exist."""

    def __init__(self, name: str, bank_dir: str, available: list[str] | None = None):
        super().__init__(
            f"Payload not found: {name} (bank: {bank_dir})",
            code="NOT_FOUND",
            category=ErrorCategory.NOT_FOUND,
            details={"name": name, "bank_dir": bank_dir},
        )
        self.available = list(available or [])


class UnknownCommandError(MemoryctlError):
    """Verb is not one the dispatcher knows."""

    def __init__(self, verb: str):
        super().__init__(
            f"Unknown command: {verb}",
            code="UNKNOWN_COMMAND",
            category=ErrorCategory.VALIDATION,
            details={"verb": verb},
        )


class TransportError(MemoryctlError):
    """Network or HTTP-level failure talking to an endpoint."""

    def __init__(
        self,
        message: str,
        *,
        url: str,
        status_code: int | None = None,
        body: str = "",
        retryable: bool = False,
    ):
        category = ErrorCategory.RETRYABLE if retryable else ErrorCategory.FATAL
        super().__init__(
            message,
            code="TRANSPORT_ERROR",
            category=category,
            details={"url": url, "status_code": status_code},
        )
        self.url = url
        self.status_code = status_code
        self.body = body
        self.retryable = retryable


class ProtocolError(MemoryctlError):
    """Response body is not a JSON-RPC envelope."""

    def __init__(self, message: str, body: str = ""):
        super().__init__(message, code="PROTOCOL_ERROR", category=ErrorCategory.FATAL)
        self.body = body


class RemoteError(MemoryctlError):
    """Well-formed JSON-RPC error returned by the remote service."""

    def __init__(self, rpc_code: int, rpc_message: str, data: Any = None):
        super().__init__(
            rpc_message,
            code="REMOTE_ERROR",
            category=ErrorCategory.RECOVERABLE,
            details={"rpc_code": rpc_code, "data": data},
        )
        self.rpc_code = rpc_code
        self.rpc_message = rpc_message

    def describe(self) -> str:
        label = REMOTE_ERROR_LABELS.get(self.rpc_code)
        if label:
            return f"code={self.rpc_code} ({label}): {self.rpc_message}"
        return f"code={self.rpc_code}: {self.rpc_message}"


_SENSITIVE_PATTERNS = [
    re.compile(r"(api[_-]?key|token|secret|password|auth)[=:]\s*['\"]?([^\s'\"]+)['\"]?", re.IGNORECASE),
    re.compile(r"bearer\s+[a-zA-Z0-9\-._~+/]+=*", re.IGNORECASE),
    re.compile(r"sk-[a-zA-Z0-9]{20,}"),
]


def sanitize_error_message(message: str, replacement: str = "[REDACTED]") -> str:
    """Remove sensitive information from error messages."""
    sanitized = message
    for pattern in _SENSITIVE_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)
    return sanitized


def format_error(exc: Exception) -> str:
    """Format an exception as a single operator-facing line."""
    if isinstance(exc, RemoteError):
        return f"Error [{exc.code}] {exc.describe()}"
    if isinstance(exc, TransportError):
        status = f" (status={exc.status_code})" if exc.status_code is not None else ""
        body = " ".join(exc.body.split())[:200]
        suffix = f": {sanitize_error_message(body)}" if body else ""
        return f"Error [{exc.code}]{status} {sanitize_error_message(exc.message)}{suffix}"
    if isinstance(exc, MemoryctlError):
        return f"Error [{exc.code}] {sanitize_error_message(exc.message)}"
    return f"Error [INTERNAL_ERROR] {sanitize_error_message(str(exc))}"
