"""
Package-level exception hierarchy for pgexplain.

All exceptions inherit from PgExplainError, enabling:
- Catching all pgexplain errors with a single except clause
- Context fields for debugging (argument, config_key, source)
- Structured serialization via to_dict() for JSON error output

Hierarchy:
    PgExplainError
    ├── InvalidArgumentError – Caller misuse (e.g. negative threshold)
    ├── ConfigurationError   – Invalid configuration file or value
    └── PlanSourceError      – Plan text could not be obtained

The analysis engine itself never raises on malformed plan lines; those
are skipped. Only caller misuse reaches this hierarchy.
"""

from __future__ import annotations

from typing import Any


class PgExplainError(Exception):
    """
    Base exception for all pgexplain errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON error output."""
        return {
            "error_type": type(self).__name__,
            "message": self.message,
        }


# ── Argument Errors ──────────────────────────────────────────────────────


class InvalidArgumentError(PgExplainError):
    """
    A caller passed an argument the engine cannot accept.

    Attributes:
        argument: Name of the offending argument (if known).
    """

    def __init__(self, message: str, argument: str | None = None) -> None:
        self.argument = argument
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["argument"] = self.argument
        return result


# ── Configuration Errors ─────────────────────────────────────────────────


class ConfigurationError(PgExplainError):
    """
    Error in pgexplain configuration.

    Attributes:
        config_key: The configuration key that caused the error (if known).
    """

    def __init__(self, message: str, config_key: str | None = None) -> None:
        self.config_key = config_key
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["config_key"] = self.config_key
        return result


# ── Plan Source Errors ───────────────────────────────────────────────────


class PlanSourceError(PgExplainError):
    """
    Plan text could not be read from its source.

    Attributes:
        source: Description of the input source (file path, "stdin", etc.).
    """

    def __init__(self, message: str, source: str | None = None) -> None:
        self.source = source
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["source"] = self.source
        return result


def check_threshold(value: float, argument: str = "threshold") -> float:
    """
    Reject negative and NaN thresholds before they reach the engine.

    Returns the value unchanged so callers can validate inline.
    """
    if not value >= 0:
        raise InvalidArgumentError(
            f"{argument} must be a non-negative number, got {value}",
            argument=argument,
        )
    return value
