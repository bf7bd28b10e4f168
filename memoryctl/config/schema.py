"""Configuration schema using Pydantic.

Single data model and defaults for memoryctl, persisted to ~/.memoryctl/config.json.
"""

from pathlib import Path

from pydantic import BaseModel, Field, ConfigDict
from pydantic_settings import BaseSettings


class EndpointsConfig(BaseModel):
    """Remote service endpoints. Both targets share host and path, differing by port."""
    host: str = "127.0.0.1"
    primary_port: int = 4040
    simulation_port: int = 8079
    path: str = "/mcp"
    # Full URL overrides; empty means build from host/port/path.
    primary_url: str = ""
    simulation_url: str = ""
    # Tool names each target accepts (only checked when dispatch.strict_tool_names is on).
    primary_tools: list[str] = Field(
        default_factory=lambda: ["overview", "analyze", "repair", "search", "edit", "workflow", "simulate"]
    )
    simulation_tools: list[str] = Field(default_factory=lambda: ["simulate"])


class TransportConfig(BaseModel):
    """HTTP transport settings."""
    timeout_seconds: float = 30.0


class PayloadsConfig(BaseModel):
    """Payload bank location (relative paths resolve against the working directory)."""
    bank_dir: str = "payloads"


class AnalysisConfig(BaseModel):
    """Fixed parameters merged into analyze/repair/search requests."""
    extension: str = "rs"
    max_threads: int = 16


class SimulationConfig(BaseModel):
    """Local parallel simulation engine settings."""
    max_workers: int = Field(default=0, ge=0)  # 0 = os.cpu_count()
    ordered: bool = False  # sequential fold for bit-exact totals


class DispatchConfig(BaseModel):
    """Dispatcher behavior switches."""
    # Off: a remote tool error is printed and the command still exits 0.
    fail_on_remote_error: bool = False
    # Check payload params.name against the target's tool list before sending.
    strict_tool_names: bool = False


class Config(BaseSettings):
    """Root configuration for memoryctl."""
    endpoints: EndpointsConfig = Field(default_factory=EndpointsConfig)
    transport: TransportConfig = Field(default_factory=TransportConfig)
    payloads: PayloadsConfig = Field(default_factory=PayloadsConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    simulation: SimulationConfig = Field(default_factory=SimulationConfig)
    dispatch: DispatchConfig = Field(default_factory=DispatchConfig)

    @property
    def bank_path(self) -> Path:
        """Expanded payload bank directory."""
        return Path(self.payloads.bank_dir).expanduser()

    model_config = ConfigDict(
        env_prefix="MEMORYCTL_",
        env_nested_delimiter="__"
    )
