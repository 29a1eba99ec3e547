"""
Exception hierarchy for modgraph.

Every error carries a ``details`` dict so callers (CLI, HTTP layer, the
snapshot pipeline) can report the failing names without parsing messages.
"""

from __future__ import annotations


class ModuleGraphError(Exception):
    """Base exception for all modgraph errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class ProtocolError(ModuleGraphError):
    """An analyzer notification does not match the wire schema."""


class BrokenSnapshotError(ModuleGraphError):
    """A snapshot violates a structural invariant of the module graph."""


class StaleReferenceError(ModuleGraphError):
    """A reference or tree node was issued by a graph that has been replaced."""

    def __init__(self, issued: int, current: int):
        super().__init__(
            f"Reference from graph generation {issued} used against generation {current}",
            details={"issued": issued, "current": current},
        )


class UnknownNodeError(ModuleGraphError):
    """A tree node names nothing the current projection can show."""


class EnumerationError(ModuleGraphError):
    """A workspace folder could not be enumerated."""


class ConfigError(ModuleGraphError):
    """Configuration file is unreadable or contains unknown settings."""
