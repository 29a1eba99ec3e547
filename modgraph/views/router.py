"""Router forwarding tree queries to the active projection."""

from __future__ import annotations

from modgraph.events import EventEmitter
from modgraph.views.base import TreeItem, TreeNode, TreeProjection


class ViewRouter:
    """Single display-facing tree whose backing projection can be swapped.

    ``on_did_change`` stays the same emitter for the router's lifetime; only
    the internal forwarding hook is re-subscribed when the projection changes.
    """

    def __init__(self, initial: TreeProjection):
        self.on_did_change: EventEmitter[None] = EventEmitter()
        self._active = initial
        self._forwarding = None
        self._forward()

    @property
    def active(self) -> TreeProjection:
        return self._active

    def set_active(self, projection: TreeProjection) -> None:
        self._active = projection
        self._forward()
        self.refresh()

    def refresh(self) -> None:
        self.on_did_change.fire(None)

    def get_children(self, node: TreeNode | None = None) -> list[TreeNode]:
        return self._active.get_children(node)

    def get_node(self, node: TreeNode) -> TreeItem:
        return self._active.get_node(node)

    def dispose(self) -> None:
        if self._forwarding is not None:
            self._forwarding.dispose()
            self._forwarding = None

    def _forward(self) -> None:
        self.dispose()
        self._forwarding = self._active.on_did_change.subscribe(lambda _: self.refresh())
