"""Payload bank: a directory of stored request documents replayed by name."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from loguru import logger

from memoryctl.utils.exceptions import InvalidArgumentError, PayloadNotFoundError

PAYLOAD_SUFFIX = ".json"


class PayloadBank:
    """Read-only view over a payload directory. Names may be given with or without `.json`."""

    def __init__(self, directory: Path | str):
        self.directory = Path(directory).expanduser()

    def available(self) -> list[str]:
        """Sorted base names of `*.json` documents; empty when the directory is missing."""
        if not self.directory.is_dir():
            return []
        return sorted(p.stem for p in self.directory.glob(f"*{PAYLOAD_SUFFIX}") if p.is_file())

    def resolve(self, name: str) -> Path:
        if not name or not name.strip():
            raise InvalidArgumentError("payload name must not be empty", field="name")
        exact = self.directory / name
        if exact.is_file():
            return exact
        suffixed = self.directory / f"{name}{PAYLOAD_SUFFIX}"
        if suffixed.is_file():
            return suffixed
        raise PayloadNotFoundError(name, str(self.directory), available=self.available())

    def load(self, name: str) -> dict[str, Any]:
        """Resolve and parse a payload document."""
        path = self.resolve(name)
        logger.debug("Loading payload {} from {}", name, path)
        try:
            document = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise InvalidArgumentError(f"payload {path.name} is not valid JSON: {exc}", field="name") from exc
        except OSError as exc:
            raise InvalidArgumentError(f"payload {path.name} cannot be read: {exc}", field="name") from exc
        if not isinstance(document, dict):
            raise InvalidArgumentError(f"payload {path.name} must be a JSON object", field="name")
        return document
