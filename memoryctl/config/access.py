"""Cached configuration access facade with per-invocation overrides."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

from memoryctl.config.loader import get_config_path, load_config
from memoryctl.config.schema import Config

_lock = threading.RLock()
_cache: dict[str, Config] = {}

# CLI option name -> (config section, field)
_OVERRIDE_FIELDS: dict[str, tuple[str, str]] = {
    "primary_url": ("endpoints", "primary_url"),
    "simulation_url": ("endpoints", "simulation_url"),
    "timeout": ("transport", "timeout_seconds"),
    "bank_dir": ("payloads", "bank_dir"),
    "fail_on_remote_error": ("dispatch", "fail_on_remote_error"),
    "strict_tool_names": ("dispatch", "strict_tool_names"),
}


def _cache_key(config_path: Path | None = None) -> str:
    path = Path(config_path).expanduser().resolve() if config_path else get_config_path().expanduser().resolve()
    return str(path)


def get_config(*, config_path: Path | None = None, force_reload: bool = False) -> Config:
    """Get config with process-local cache and optional refresh."""
    key = _cache_key(config_path)
    with _lock:
        if force_reload or key not in _cache:
            _cache[key] = load_config(Path(key))
        return _cache[key]


def clear_config_cache(*, config_path: Path | None = None) -> None:
    """Clear cached config entry (or all cache entries)."""
    with _lock:
        if config_path is None:
            _cache.clear()
            return
        _cache.pop(_cache_key(config_path), None)


def with_overrides(config: Config, **overrides: Any) -> Config:
    """Return a copy of config with non-None CLI overrides applied; the cached object is untouched."""
    updated = config.model_copy(deep=True)
    for name, value in overrides.items():
        if value is None:
            continue
        if name not in _OVERRIDE_FIELDS:
            raise KeyError(f"unknown config override: {name}")
        section, field = _OVERRIDE_FIELDS[name]
        setattr(getattr(updated, section), field, value)
    return updated
