"""Configuration module for memoryctl."""

from memoryctl.config.loader import load_config, get_config_path
from memoryctl.config.schema import Config
from memoryctl.config.access import get_config, clear_config_cache, with_overrides

__all__ = ["Config", "load_config", "get_config_path", "get_config", "clear_config_cache", "with_overrides"]
