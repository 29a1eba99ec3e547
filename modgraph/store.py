"""Graph store: holds the current module graph and its status."""

from __future__ import annotations

import enum
import logging
from typing import Callable

from modgraph.events import EventEmitter, Subscription
from modgraph.models import Module, ModuleGraph, ModuleUnit, TranslationUnit

logger = logging.getLogger(__name__)


class GraphStatus(enum.Enum):
    EMPTY = "empty"
    PENDING = "pending"
    VALID = "valid"
    INVALID = "invalid"


class GraphStore:
    """Owns the current ``ModuleGraph``.

    The graph is replaced by a single assignment, so readers see either the
    previous graph or the new one. Subscribers receive the store itself and
    re-read whatever they need.
    """

    def __init__(self):
        self._graph = ModuleGraph.empty()
        self._issued_generation = 0
        self.status = GraphStatus.EMPTY
        self.reason: str | None = None
        self.on_did_change: EventEmitter[GraphStore] = EventEmitter()

    # ── Reads ───────────────────────────────────────────────

    @property
    def graph(self) -> ModuleGraph:
        return self._graph

    @property
    def generation(self) -> int:
        return self._graph.generation

    @property
    def modules(self) -> tuple[Module, ...]:
        return self._graph.modules

    @property
    def module_units(self) -> tuple[ModuleUnit, ...]:
        return self._graph.module_units

    @property
    def translation_units(self) -> tuple[TranslationUnit, ...]:
        return self._graph.translation_units

    @property
    def is_empty(self) -> bool:
        return self._graph.is_empty

    @property
    def is_valid(self) -> bool:
        return self.status is GraphStatus.VALID

    def next_generation(self) -> int:
        """Reserve a generation number for a graph about to be resolved."""
        self._issued_generation = max(self._issued_generation, self._graph.generation) + 1
        return self._issued_generation

    def subscribe(self, listener: Callable[[GraphStore], None]) -> Subscription:
        return self.on_did_change.subscribe(listener)

    # ── Transitions ─────────────────────────────────────────

    def replace(self, graph: ModuleGraph) -> None:
        if graph.generation <= self._graph.generation:
            raise ValueError(
                f"Graph generation {graph.generation} does not supersede "
                f"current generation {self._graph.generation}"
            )
        self._graph = graph
        self.status = GraphStatus.VALID
        self.reason = None
        self.on_did_change.fire(self)

    def mark_pending(self) -> None:
        self.status = GraphStatus.PENDING
        self.reason = None
        self.on_did_change.fire(self)

    def mark_invalid(self, reason: str) -> None:
        logger.debug("Module graph invalidated: %s", reason)
        self.status = GraphStatus.INVALID
        self.reason = reason
        self.on_did_change.fire(self)
