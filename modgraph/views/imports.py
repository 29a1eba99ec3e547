"""Forward-imports projection: what each translation unit imports."""

from __future__ import annotations

from modgraph.models import ModuleGraph
from modgraph.views.base import NodeKind, TreeItem, TreeNode, TreeProjection, unit_node


class ImportsView(TreeProjection):
    """Roots are units nothing imports; children are resolved import targets.

    Shared units are unfolded under every importer that reaches them.
    """

    name = "imports"

    def _roots(self, graph: ModuleGraph) -> list[TreeNode]:
        return [
            unit_node(graph, tu) for tu in graph.translation_units
            if not graph.importers(tu)
        ]

    def _children(self, graph: ModuleGraph, node: TreeNode) -> list[TreeNode]:
        if node.kind is not NodeKind.UNIT:
            return []
        tu = graph.unit(node.index)
        return [node.child(target.index) for target in graph.imported_units(tu)]

    def _item(self, graph: ModuleGraph, node: TreeNode) -> TreeItem:
        tu = graph.unit(node.index)
        return self._unit_item(tu, node, expandable=bool(tu.imports))
