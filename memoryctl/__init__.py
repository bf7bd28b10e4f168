"""memoryctl - command-and-control client for the MEMORY_P code-intelligence service."""

__version__ = "0.1.0"
__logo__ = "◆"
