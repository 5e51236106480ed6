"""
Compliance Engine Errors
========================

Error kinds raised by the engine. None are retried internally; retry
policy belongs to the caller.
"""

from typing import Any


class ComplianceEngineError(Exception):
    """Base error for the compliance engine."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFoundError(ComplianceEngineError):
    """Organization or record does not exist."""


class InvalidRequestError(ComplianceEngineError):
    """Malformed input such as an unknown section id or a negative year."""


class UpstreamReadError(ComplianceEngineError):
    """A record repository read failed."""
