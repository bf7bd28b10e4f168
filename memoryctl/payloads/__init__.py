"""Stored request documents."""

from memoryctl.payloads.bank import PayloadBank

__all__ = ["PayloadBank"]
