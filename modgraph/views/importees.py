"""Reverse-importees projection: who imports each translation unit."""

from __future__ import annotations

from modgraph.models import ModuleGraph
from modgraph.views.base import NodeKind, TreeItem, TreeNode, TreeProjection, unit_node


class ImporteesView(TreeProjection):
    """Roots are units with no imports; children are their importers."""

    name = "importees"

    def _roots(self, graph: ModuleGraph) -> list[TreeNode]:
        return [unit_node(graph, tu) for tu in graph.translation_units if not tu.imports]

    def _children(self, graph: ModuleGraph, node: TreeNode) -> list[TreeNode]:
        if node.kind is not NodeKind.UNIT:
            return []
        tu = graph.unit(node.index)
        return [node.child(importer.index) for importer in graph.importers(tu)]

    def _item(self, graph: ModuleGraph, node: TreeNode) -> TreeItem:
        tu = graph.unit(node.index)
        return self._unit_item(tu, node, expandable=bool(graph.importers(tu)))
