# repopolicy:domain=engine
"""Exceptions raised by the engine for configuration-level faults."""

from __future__ import annotations


class RepoPolicyError(Exception):
    """Base class for repopolicy configuration errors."""


class RulesetLoadError(RepoPolicyError):
    """Raised when a ruleset file cannot be read or parsed."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Failed to load ruleset {path}: {reason}")
        self.path = path
        self.reason = reason


class SchemaLoadError(RepoPolicyError):
    """Raised when a plugin option schema is missing or malformed."""
