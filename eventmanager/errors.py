from __future__ import annotations

from typing import Any


class EventManagerError(Exception):
    """Base class for errors raised by the dispatch engine itself."""


class InvalidSubscriptionError(EventManagerError, TypeError):
    """Raised at attach time when an event or identifier pattern is malformed."""

    def __init__(self, message: str, value: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.value = value

    def __str__(self) -> str:  # pragma: no cover - formatting
        return f"{self.message} (got {self.value!r})"


class InvalidListenerError(InvalidSubscriptionError):
    """Raised when the listener passed to attach is not callable."""


class ConfigError(EventManagerError, ValueError):
    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:  # pragma: no cover - formatting
        loc = f" ({self.path})" if self.path else ""
        return f"{self.message}{loc}"
