"""Verb dispatcher: turns operator commands into JSON-RPC calls.

Ad-hoc verbs (status/analyze/repair/search) build a `tools/call` envelope and
go to the primary endpoint. Replay verbs (run/edit/workflow/simulation) send
a payload-bank document unmodified; `simulation` targets the simulation
endpoint, everything else the primary one. `list` and `help` never touch the
network.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from loguru import logger

from memoryctl.config.schema import Config
from memoryctl.payloads.bank import PayloadBank
from memoryctl.rpc.client import RpcClient
from memoryctl.rpc.endpoints import EndpointResolver, EndpointTarget
from memoryctl.rpc.envelope import ContentBlock, RequestIdCounter, build_request
from memoryctl.utils.exceptions import (
    InvalidArgumentError,
    InvalidPathError,
    MissingArgumentError,
    UnknownCommandError,
)

# verb -> (positional argument names, one-line description)
VERBS: dict[str, tuple[tuple[str, ...], str]] = {
    "status": ((), "Project overview of the current directory"),
    "analyze": (("path",), "Parallel analysis of a project"),
    "repair": (("path",), "Parallel repair of a project"),
    "search": (("path", "pattern"), "Regex search across a project"),
    "run": (("payload",), "Replay a stored payload on the primary service"),
    "edit": (("payload",), "Replay a stored edit payload"),
    "workflow": (("payload",), "Replay a stored multi-step workflow"),
    "simulation": (("payload",), "Replay a stored payload on the simulation service"),
    "tools": ((), "List tools exposed by the primary service"),
    "list": ((), "List payloads in the bank"),
    "help": ((), "Show this table"),
}


@dataclass
class DispatchResult:
    verb: str
    target: EndpointTarget | None = None
    blocks: list[ContentBlock] = field(default_factory=list)
    lines: list[str] = field(default_factory=list)


def help_lines() -> list[str]:
    rows = []
    for verb, (args, description) in VERBS.items():
        usage = " ".join([verb, *(f"<{a}>" for a in args)])
        rows.append(f"{usage:<28} {description}")
    return rows


class Dispatcher:
    """Stateless per command; only the request id counter persists across calls."""

    def __init__(
        self,
        config: Config | None = None,
        *,
        client: RpcClient | None = None,
        ids: RequestIdCounter | None = None,
    ):
        self.config = config or Config()
        self.resolver = EndpointResolver(self.config.endpoints)
        self.client = client or RpcClient(timeout=self.config.transport.timeout_seconds)
        self.bank = PayloadBank(self.config.bank_path)
        self.ids = ids or RequestIdCounter()
        self._handlers: dict[str, Callable[..., DispatchResult]] = {
            "status": self.status,
            "analyze": self.analyze,
            "repair": self.repair,
            "search": self.search,
            "run": self.run,
            "edit": self.edit,
            "workflow": self.workflow,
            "simulation": self.simulation,
            "tools": self.tools,
            "list": self.list_payloads,
            "help": self.help,
        }

    def dispatch(self, verb: str, *args: str) -> DispatchResult:
        """Run a verb with positional arguments, as typed on the command line."""
        handler = self._handlers.get(verb)
        if handler is None:
            raise UnknownCommandError(verb)
        expected, _ = VERBS[verb]
        if len(args) > len(expected):
            raise InvalidArgumentError(
                f"'{verb}' takes {len(expected)} argument(s), got {len(args)}",
                field=verb,
            )
        return handler(*args)

    # -- ad-hoc tool calls ------------------------------------------------

    def _call_tool(
        self,
        verb: str,
        tool_name: str,
        arguments: dict[str, Any],
        target: EndpointTarget = EndpointTarget.PRIMARY,
    ) -> DispatchResult:
        request = build_request(tool_name, arguments, self.ids.next())
        url = self.resolver.resolve(target)
        logger.debug("{} -> {} tool={} id={}", verb, url, tool_name, request.id)
        blocks = self.client.send(url, request)
        return DispatchResult(verb=verb, target=target, blocks=blocks)

    @staticmethod
    def _resolve_path(verb: str, path: str | None) -> str:
        if not path:
            raise MissingArgumentError(verb, "path")
        try:
            return str(Path(path).expanduser().resolve(strict=True))
        except (OSError, RuntimeError) as exc:
            raise InvalidPathError(path) from exc

    def status(self) -> DispatchResult:
        return self._call_tool("status", "overview", {"path": "."})

    def analyze(
        self,
        path: str | None = None,
        *,
        extension: str | None = None,
        max_threads: int | None = None,
    ) -> DispatchResult:
        resolved = self._resolve_path("analyze", path)
        return self._call_tool(
            "analyze",
            "analyze",
            {
                "extension": self.config.analysis.extension if extension is None else extension,
                "max_threads": self.config.analysis.max_threads if max_threads is None else max_threads,
                "path": resolved,
            },
        )

    def repair(self, path: str | None = None, *, extension: str | None = None) -> DispatchResult:
        resolved = self._resolve_path("repair", path)
        return self._call_tool(
            "repair",
            "repair",
            {"extension": self.config.analysis.extension if extension is None else extension, "path": resolved},
        )

    def search(
        self,
        path: str | None = None,
        pattern: str | None = None,
        *,
        extension: str | None = None,
    ) -> DispatchResult:
        # Pattern is validated before any filesystem or network access.
        if not pattern:
            raise MissingArgumentError("search", "pattern")
        resolved = self._resolve_path("search", path)
        return self._call_tool(
            "search",
            "search",
            {
                "extension": self.config.analysis.extension if extension is None else extension,
                "path": resolved,
                "pattern": pattern,
            },
        )

    def tools(self, target: EndpointTarget = EndpointTarget.PRIMARY) -> DispatchResult:
        url = self.resolver.resolve(target)
        descriptors = self.client.list_tools(url, self.ids.next())
        blocks = []
        for tool in descriptors:
            name = str(tool.get("name") or "?")
            description = str(tool.get("description") or "").strip()
            blocks.append(ContentBlock(kind="text", text=f"{name}: {description}" if description else name))
        return DispatchResult(verb="tools", target=target, blocks=blocks)

    # -- payload replay ---------------------------------------------------

    def _check_tool_name(self, document: dict[str, Any], target: EndpointTarget) -> None:
        params = document.get("params")
        declared = params.get("name") if isinstance(params, dict) else None
        allowed = self.resolver.allowed_tools(target)
        if declared not in allowed:
            raise InvalidArgumentError(
                f"payload declares tool {declared!r} but the {target.value} endpoint accepts: {', '.join(allowed)}",
                field="params.name",
            )

    def _replay(self, verb: str, name: str | None, target: EndpointTarget) -> DispatchResult:
        if not name:
            raise MissingArgumentError(verb, "payload")
        document = self.bank.load(name)
        if self.config.dispatch.strict_tool_names:
            self._check_tool_name(document, target)
        url = self.resolver.resolve(target)
        logger.debug("{} -> {} payload={}", verb, url, name)
        blocks = self.client.send_document(url, document)
        return DispatchResult(verb=verb, target=target, blocks=blocks)

    def run(self, name: str | None = None) -> DispatchResult:
        return self._replay("run", name, EndpointTarget.PRIMARY)

    def edit(self, name: str | None = None) -> DispatchResult:
        return self._replay("edit", name, EndpointTarget.PRIMARY)

    def workflow(self, name: str | None = None) -> DispatchResult:
        return self._replay("workflow", name, EndpointTarget.PRIMARY)

    def simulation(self, name: str | None = None) -> DispatchResult:
        # Sent verbatim: the payload's tool name is not rewritten for the simulation service.
        return self._replay("simulation", name, EndpointTarget.SIMULATION)

    # -- local verbs ------------------------------------------------------

    def list_payloads(self) -> DispatchResult:
        return DispatchResult(verb="list", lines=self.bank.available())

    def help(self) -> DispatchResult:
        return DispatchResult(verb="help", lines=help_lines())
