"""Endpoint targets and URL resolution."""

from __future__ import annotations

from enum import Enum

from memoryctl.config.schema import EndpointsConfig


class EndpointTarget(Enum):
    PRIMARY = "primary"
    SIMULATION = "simulation"


class EndpointResolver:
    """Maps a target to its base URL. Both targets speak the same protocol."""

    def __init__(self, config: EndpointsConfig | None = None):
        self.config = config or EndpointsConfig()

    def _build(self, port: int) -> str:
        path = self.config.path if self.config.path.startswith("/") else f"/{self.config.path}"
        return f"http://{self.config.host}:{port}{path}"

    def resolve(self, target: EndpointTarget) -> str:
        if target is EndpointTarget.PRIMARY:
            return self.config.primary_url.strip() or self._build(self.config.primary_port)
        if target is EndpointTarget.SIMULATION:
            return self.config.simulation_url.strip() or self._build(self.config.simulation_port)
        raise TypeError(f"not an EndpointTarget: {target!r}")

    def allowed_tools(self, target: EndpointTarget) -> list[str]:
        """Tool names the target is configured to accept."""
        if target is EndpointTarget.PRIMARY:
            return list(self.config.primary_tools)
        if target is EndpointTarget.SIMULATION:
            return list(self.config.simulation_tools)
        raise TypeError(f"not an EndpointTarget: {target!r}")
