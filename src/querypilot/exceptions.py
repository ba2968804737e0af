"""
Error taxonomy for querypilot.

All exceptions inherit from ``QueryPilotError`` and provide ``to_dict()``
for API-friendly error responses.

Executor failures are *not* part of this hierarchy: whatever the executor
raises reaches the caller unchanged.
"""

from __future__ import annotations

from typing import Any


class QueryPilotError(Exception):
    """Root exception for the querypilot package."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class InvalidArgumentError(QueryPilotError):
    """A required identifying argument is missing or empty."""

    def __init__(self, argument: str, message: str | None = None) -> None:
        self.argument = argument
        super().__init__(message or f"Argument '{argument}' is required")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "INVALID_ARGUMENT",
            "argument": self.argument,
            "message": str(self),
        }


class NotFoundError(QueryPilotError):
    """Raised when a named resource does not exist."""


class PresetNotFoundError(NotFoundError):
    """Raised when a query preset is looked up by an unknown name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f'Preset "{name}" not found')

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "PRESET_NOT_FOUND",
            "name": self.name,
            "message": str(self),
        }


class WebhookDeliveryError(QueryPilotError):
    """Webhook POST failed. Never surfaced by the fire-and-forget path."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Webhook delivery to {url} failed: {reason}")
