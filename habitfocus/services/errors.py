"""Engine error types. All are recoverable; a failed command changes nothing."""

from __future__ import annotations


class EngineError(Exception):
    """Base class for every error the engine raises on purpose."""


class InvalidInput(EngineError, ValueError):
    """Empty name, non-positive minutes, malformed date, missing goal range..."""


class InvalidTransition(EngineError, RuntimeError):
    """Command not allowed in the habit's current timer state."""


class NotFound(EngineError, LookupError):
    """Unknown habit or goal id."""

    def __str__(self) -> str:
        # LookupError would otherwise repr() a lone argument like KeyError does
        return str(self.args[0]) if self.args else ""
