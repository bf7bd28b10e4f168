"""Raw config-file helpers for the `config` command group."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def load_config_json(path: Path) -> dict[str, Any]:
    """Read raw config JSON from disk; a missing file reads as empty."""
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"{path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"{path}: config root must be a JSON object")
    return data


def save_config_json(data: dict[str, Any], path: Path) -> Path:
    """Write raw config JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    return path


def parse_value(raw: str) -> Any:
    """Parse CLI input value as JSON if possible; fallback to string."""
    text = raw.strip()
    if text == "":
        return ""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        lowered = text.lower()
        if lowered in {"true", "false"}:
            return lowered == "true"
        return text


def _split_key(dotted_key: str) -> list[str]:
    parts = dotted_key.split(".")
    if any(not part for part in parts):
        raise KeyError(f"malformed key path: {dotted_key!r}")
    return parts


def _parent(data: dict[str, Any], parts: list[str], *, create: bool) -> dict[str, Any] | None:
    """Walk to the section holding the last key; missing sections are created or reported as None."""
    node: Any = data
    for part in parts[:-1]:
        child = node.get(part)
        if not isinstance(child, dict):
            if not create:
                return None
            child = node[part] = {}
        node = child
    return node


def deep_get(data: dict[str, Any], dotted_key: str) -> Any:
    """Value at a dotted path such as `endpoints.primaryPort`."""
    parts = _split_key(dotted_key)
    section = _parent(data, parts, create=False)
    if section is None or parts[-1] not in section:
        raise KeyError(dotted_key)
    return section[parts[-1]]


def deep_set(data: dict[str, Any], dotted_key: str, value: Any) -> None:
    parts = _split_key(dotted_key)
    section = _parent(data, parts, create=True)
    section[parts[-1]] = value


def deep_unset(data: dict[str, Any], dotted_key: str) -> bool:
    """Remove the key at a dotted path; False when nothing was there."""
    parts = _split_key(dotted_key)
    section = _parent(data, parts, create=False)
    if section is None or parts[-1] not in section:
        return False
    del section[parts[-1]]
    return True
