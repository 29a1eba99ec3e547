"""Tree projections over the module graph."""

from modgraph.views.base import NodeKind, TreeItem, TreeNode, TreeProjection
from modgraph.views.importees import ImporteesView
from modgraph.views.imports import ImportsView
from modgraph.views.modules import ModulesView
from modgraph.views.router import ViewRouter

__all__ = [
    "NodeKind",
    "TreeItem",
    "TreeNode",
    "TreeProjection",
    "ModulesView",
    "ImportsView",
    "ImporteesView",
    "ViewRouter",
]
