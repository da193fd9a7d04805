"""
Wildscapes Error Hierarchy

All custom exceptions inherit from WildscapesError for easy catching and
filtering. Illegal game actions are NOT errors: the engine rejects them by
returning the unchanged state.

Usage:
    from wildscapes.errors import PersistenceError

    try:
        backend.create_game_stats(stats)
    except PersistenceError as e:
        logger.warning(f"Could not save stats: {e.message}")
"""

from typing import Any

__all__ = [
    "CatalogError",
    "ConfigurationError",
    "InvalidStateError",
    "PersistenceError",
    "WildscapesError",
]


class WildscapesError(Exception):
    """Base exception for all Wildscapes errors.

    Attributes:
        code: Machine-readable error code for categorization
        message: Human-readable error description
        context: Additional context for debugging
    """
    code: str = "WILDSCAPES_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"[{self.code}] {self.message} ({ctx})"
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


class InvalidStateError(WildscapesError):
    """Corrupted or unexpected game state.

    Raised when a board breaks the stacking invariants (gaps in stack
    levels, duplicate levels, height above 3). This indicates a programming
    error; correct use of the stacking rules never produces it.
    """
    code: str = "INVALID_STATE"


class ConfigurationError(WildscapesError):
    """Invalid configuration value."""
    code: str = "CONFIGURATION_ERROR"

    def __init__(
        self,
        message: str,
        key: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        if key:
            self.context["key"] = key


class CatalogError(WildscapesError):
    """Animal card catalog could not be loaded or is malformed."""
    code: str = "CATALOG_ERROR"

    def __init__(
        self,
        message: str,
        path: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        if path:
            self.context["path"] = path


class PersistenceError(WildscapesError):
    """Persistence service request failed.

    Recoverable: callers surface it as a warning and keep the in-memory
    game outcome.

    Attributes:
        operation: Service operation that failed (e.g. "create_game_stats")
        status_code: HTTP status, when the service answered at all
    """
    code: str = "PERSISTENCE_ERROR"

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        status_code: int | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        self.operation = operation
        self.status_code = status_code
        if operation:
            self.context["operation"] = operation
        if status_code is not None:
            self.context["status_code"] = status_code
