"""Tree node types and the base class shared by all projections."""

from __future__ import annotations

import abc
import enum
import logging
from dataclasses import asdict, dataclass

from modgraph.events import EventEmitter
from modgraph.exceptions import StaleReferenceError, UnknownNodeError
from modgraph.labels import display_name, unit_description, unit_tooltip
from modgraph.models import ModuleGraph, TranslationUnit
from modgraph.store import GraphStore

logger = logging.getLogger(__name__)


class NodeKind(enum.Enum):
    MODULE = "m"
    UNIT = "u"


@dataclass(frozen=True)
class TreeNode:
    """Opaque handle for one position in a projection's tree.

    ``index`` points into the graph's modules (MODULE) or translation units
    (UNIT). ``path`` holds the unit indices of the ancestors so unfolded
    views can tell when a child would repeat one of them.
    """
    kind: NodeKind
    generation: int
    index: int
    path: tuple[int, ...] = ()
    cyclic: bool = False

    def child(self, index: int) -> TreeNode:
        lineage = (*self.path, self.index) if self.kind is NodeKind.UNIT else self.path
        return TreeNode(
            kind=NodeKind.UNIT,
            generation=self.generation,
            index=index,
            path=lineage,
            cyclic=index in lineage,
        )

    def to_token(self) -> str:
        path = ".".join(str(i) for i in self.path)
        return f"{self.kind.value}:{self.generation}:{self.index}:{path}:{int(self.cyclic)}"

    @classmethod
    def from_token(cls, token: str) -> TreeNode:
        parts = token.split(":")
        if len(parts) != 5:
            raise ValueError(f"Malformed tree node token {token!r}")
        kind, generation, index, path, cyclic = parts
        try:
            return cls(
                kind=NodeKind(kind),
                generation=int(generation),
                index=int(index),
                path=tuple(int(i) for i in path.split(".")) if path else (),
                cyclic=bool(int(cyclic)),
            )
        except ValueError as e:
            raise ValueError(f"Malformed tree node token {token!r}") from e


@dataclass
class TreeItem:
    """Displayable form of a tree node."""
    label: str
    collapsible: bool = False
    description: str | None = None
    tooltip: str | None = None
    icon: str | None = None
    uri: str | None = None

    def to_dict(self) -> dict:
        return asdict(self)


class TreeProjection(abc.ABC):
    """Read-only tree over the store's current graph.

    Nothing is cached: every query re-derives children from the live graph,
    so a newly published graph is visible as soon as it is stored.
    """

    name: str = ""
    node_kinds: frozenset[NodeKind] = frozenset({NodeKind.UNIT})

    def __init__(self, store: GraphStore):
        self._store = store
        self.on_did_change: EventEmitter[None] = EventEmitter()
        self._subscription = store.subscribe(lambda _store: self.on_did_change.fire(None))

    def get_children(self, node: TreeNode | None = None) -> list[TreeNode]:
        if not self._store.is_valid:
            return []
        graph = self._store.graph
        if node is None:
            return self._roots(graph)
        if node.generation != graph.generation:
            logger.debug("%s: ignoring node from stale generation %d", self.name, node.generation)
            return []
        self._check_node(graph, node)
        if node.cyclic:
            return []
        return self._children(graph, node)

    def get_node(self, node: TreeNode) -> TreeItem:
        graph = self._store.graph
        if node.generation != graph.generation:
            raise StaleReferenceError(node.generation, graph.generation)
        self._check_node(graph, node)
        return self._item(graph, node)

    def _check_node(self, graph: ModuleGraph, node: TreeNode) -> None:
        """Raise ``UnknownNodeError`` unless ``node`` can belong to this tree."""
        if node.kind not in self.node_kinds:
            raise UnknownNodeError(
                f"{self.name} view has no {node.kind.name.lower()} nodes",
                details={"view": self.name, "kind": node.kind.value, "index": node.index},
            )
        count = len(graph.modules) if node.kind is NodeKind.MODULE else len(graph.translation_units)
        if not 0 <= node.index < count:
            raise UnknownNodeError(
                f"No {node.kind.name.lower()} with index {node.index}",
                details={"view": self.name, "kind": node.kind.value, "index": node.index},
            )

    def dispose(self) -> None:
        self._subscription.dispose()

    @abc.abstractmethod
    def _roots(self, graph: ModuleGraph) -> list[TreeNode]:
        """Top-level nodes of this projection."""

    @abc.abstractmethod
    def _children(self, graph: ModuleGraph, node: TreeNode) -> list[TreeNode]:
        """Children of a non-cyclic node from the current generation."""

    @abc.abstractmethod
    def _item(self, graph: ModuleGraph, node: TreeNode) -> TreeItem:
        """Displayable for a node from the current generation."""

    def _unit_item(self, tu: TranslationUnit, node: TreeNode, expandable: bool) -> TreeItem:
        return TreeItem(
            label=display_name(tu),
            collapsible=expandable and not node.cyclic,
            description="(cycle)" if node.cyclic else unit_description(tu),
            tooltip=unit_tooltip(tu),
            uri=tu.uri,
        )


def unit_node(graph: ModuleGraph, tu: TranslationUnit) -> TreeNode:
    return TreeNode(kind=NodeKind.UNIT, generation=graph.generation, index=tu.index)
