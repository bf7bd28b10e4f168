"""Pytest hooks and fixtures."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import pytest

import memoryctl.rpc.client as rpc_client
from memoryctl.config.access import clear_config_cache

LIVE_URL_ENV = "MEMORYCTL_LIVE_PRIMARY_URL"


def pytest_configure(config):
    """Register custom markers (also in pyproject.toml)."""
    config.addinivalue_line(
        "markers",
        "requires_service: talks to a running MEMORY_P service (skipped unless MEMORYCTL_LIVE_PRIMARY_URL is set)",
    )


def pytest_collection_modifyitems(config, items):
    """Skip requires_service tests when no live service URL is configured."""
    if os.environ.get(LIVE_URL_ENV):
        return
    skip = pytest.mark.skip(reason=f"Requires a running service ({LIVE_URL_ENV} not set)")
    for item in items:
        if "requires_service" in item.keywords:
            item.add_marker(skip)


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch) -> Path:
    """Point ~ at a temp dir and drop MEMORYCTL_* settings from the environment."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for key in list(os.environ):
        if key.startswith("MEMORYCTL_") and key != LIVE_URL_ENV:
            monkeypatch.delenv(key, raising=False)
    clear_config_cache()
    yield home
    clear_config_cache()


@pytest.fixture
def payload_bank(tmp_path: Path) -> Path:
    """A bank holding `foo.json` (tools/call analyze) and `sim.json` (tools/call simulate)."""
    bank = tmp_path / "payloads"
    bank.mkdir()
    (bank / "foo.json").write_text(
        json.dumps(
            {
                "jsonrpc": "2.0",
                "id": 7,
                "method": "tools/call",
                "params": {"name": "analyze", "arguments": {"path": "."}},
            }
        ),
        encoding="utf-8",
    )
    (bank / "sim.json").write_text(
        json.dumps(
            {
                "jsonrpc": "2.0",
                "id": 8,
                "method": "tools/call",
                "params": {"name": "simulate", "arguments": {"phase": 1}},
            }
        ),
        encoding="utf-8",
    )
    return bank


class FakeResponse:
    def __init__(self, status_code: int, text: str):
        self.status_code = status_code
        self.text = text

    def json(self) -> Any:
        return json.loads(self.text)


class FakeHttp:
    """Stands in for httpx.Client; records every POST and replies with a canned response."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.status_code = 200
        self.text = json.dumps({"jsonrpc": "2.0", "id": 1, "result": {"content": [{"type": "text", "text": "OK"}]}})
        self.raise_exc: Exception | None = None

    def reply(self, body: Any = None, *, status_code: int = 200, text: str | None = None) -> None:
        self.status_code = status_code
        self.text = text if text is not None else json.dumps(body)

    def client_factory(self):
        fake = self

        class FakeClient:
            def __init__(self, timeout: float):
                self.timeout = timeout

            def __enter__(self):
                return self

            def __exit__(self, exc_type, exc, tb):
                return False

            def post(self, url: str, json=None, headers=None):
                fake.calls.append({"url": url, "json": json, "headers": headers, "timeout": self.timeout})
                if fake.raise_exc is not None:
                    raise fake.raise_exc
                return FakeResponse(fake.status_code, fake.text)

        return FakeClient


@pytest.fixture
def fake_http(monkeypatch) -> FakeHttp:
    fake = FakeHttp()
    monkeypatch.setattr(rpc_client.httpx, "Client", fake.client_factory())
    return fake
