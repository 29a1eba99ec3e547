"""By-module projection: modules and the units they own."""

from __future__ import annotations

from modgraph.exceptions import UnknownNodeError
from modgraph.labels import (
    module_tooltip,
    translation_unit_local_name,
    unit_description,
    unit_tooltip,
)
from modgraph.models import ModuleGraph
from modgraph.views.base import NodeKind, TreeItem, TreeNode, TreeProjection


class ModulesView(TreeProjection):
    name = "modules"
    node_kinds = frozenset({NodeKind.MODULE, NodeKind.UNIT})

    def _check_node(self, graph: ModuleGraph, node: TreeNode) -> None:
        super()._check_node(graph, node)
        if node.kind is NodeKind.UNIT and not graph.unit(node.index).is_module_unit:
            raise UnknownNodeError(
                f"Unit {node.index} belongs to no module",
                details={"view": self.name, "kind": node.kind.value, "index": node.index},
            )

    def _roots(self, graph: ModuleGraph) -> list[TreeNode]:
        return [
            TreeNode(kind=NodeKind.MODULE, generation=graph.generation, index=m.index)
            for m in graph.modules
        ]

    def _children(self, graph: ModuleGraph, node: TreeNode) -> list[TreeNode]:
        if node.kind is not NodeKind.MODULE:
            return []
        return [node.child(mu.index) for mu in graph.units_of(graph.module(node.index))]

    def _item(self, graph: ModuleGraph, node: TreeNode) -> TreeItem:
        if node.kind is NodeKind.MODULE:
            module = graph.module(node.index)
            return TreeItem(
                label=module.name,
                collapsible=True,
                tooltip=module_tooltip(graph, module),
                icon="package",
            )
        mu = graph.unit(node.index)
        return TreeItem(
            label=translation_unit_local_name(mu),
            description=unit_description(mu),
            tooltip=unit_tooltip(mu),
            uri=mu.uri,
        )
