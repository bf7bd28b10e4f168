"""CLI module for memoryctl."""
