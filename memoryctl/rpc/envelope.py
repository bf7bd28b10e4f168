"""JSON-RPC 2.0 envelope types and builders for the remote tool service."""

from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass, field
from typing import Any

from memoryctl.utils.exceptions import InvalidArgumentError

JSONRPC_VERSION = "2.0"
TOOLS_CALL = "tools/call"
TOOLS_LIST = "tools/list"


class RequestIdCounter:
    """Monotonic request ids, owned by whoever issues requests (no module-global state)."""

    def __init__(self, start: int = 1):
        self._ids = itertools.count(start)
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            return next(self._ids)


@dataclass(frozen=True)
class RpcRequest:
    """A `tools/call` request for one named remote tool."""
    id: int
    tool_name: str
    arguments: dict[str, Any] = field(default_factory=dict)
    method: str = TOOLS_CALL
    version: str = JSONRPC_VERSION

    def to_dict(self) -> dict[str, Any]:
        return {
            "jsonrpc": self.version,
            "id": self.id,
            "method": self.method,
            "params": {"name": self.tool_name, "arguments": dict(self.arguments)},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RpcRequest":
        params = data.get("params") or {}
        return cls(
            id=data.get("id"),
            tool_name=str(params.get("name") or ""),
            arguments=dict(params.get("arguments") or {}),
            method=str(data.get("method") or TOOLS_CALL),
            version=str(data.get("jsonrpc") or JSONRPC_VERSION),
        )


@dataclass(frozen=True)
class ContentBlock:
    """One entry of `result.content`. Only `text` blocks are known; others keep their raw payload."""
    kind: str
    text: str = ""
    raw: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "ContentBlock":
        if not isinstance(data, dict):
            return cls(kind="unknown", raw={"value": data})
        kind = str(data.get("type") or "unknown")
        text = data.get("text")
        return cls(kind=kind, text=text if isinstance(text, str) else "", raw=dict(data))


def build_request(tool_name: str, arguments: dict[str, Any] | None, request_id: int) -> RpcRequest:
    """Build a `tools/call` envelope. Argument values are passed through unvalidated."""
    if not isinstance(tool_name, str) or not tool_name.strip():
        raise InvalidArgumentError("tool name must not be empty", field="tool_name")
    return RpcRequest(id=request_id, tool_name=tool_name, arguments=dict(arguments or {}))


def build_method_request(method: str, params: dict[str, Any] | None, request_id: int) -> dict[str, Any]:
    """Build a raw envelope for a non-tool method such as `tools/list`."""
    if not method:
        raise InvalidArgumentError("method must not be empty", field="method")
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "method": method, "params": dict(params or {})}
