"""Composition root: store, pipeline, projections and the view router."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Mapping

from modgraph.config import ExplorerConfig
from modgraph.pipeline import NO_DATA_REASON, PipelineResult, SnapshotPipeline
from modgraph.protocol import PublishModulesInfoParams
from modgraph.scanner import enumerate_workspace_folder
from modgraph.store import GraphStatus, GraphStore
from modgraph.views import ImporteesView, ImportsView, ModulesView, TreeProjection, ViewRouter

logger = logging.getLogger(__name__)


class ViewMode(enum.Enum):
    MODULES = "modules"
    IMPORTS = "imports"
    IMPORTEES = "importees"


@dataclass(frozen=True)
class ViewModeInfo:
    display_name: str
    pick_label: str
    pick_description: str


VIEW_MODES: dict[ViewMode, ViewModeInfo] = {
    ViewMode.MODULES: ViewModeInfo("Basic Info", "Modules", "Basic module information"),
    ViewMode.IMPORTS: ViewModeInfo("Imports", "Importers", "Tree of module imports"),
    ViewMode.IMPORTEES: ViewModeInfo("Importees", "Importees", "Tree of module importees"),
}


def status_message(store: GraphStore) -> str | None:
    """Banner shown above the tree; ``None`` when the graph is current."""
    if store.status is GraphStatus.VALID:
        return None
    if store.status is GraphStatus.INVALID:
        if store.reason == NO_DATA_REASON:
            return "⚠️ Modules information is stale. Fix reported build errors to refresh."
        return f"⚠️ Modules information could not be resolved: {store.reason}"
    prefix = "" if store.is_empty else "⚠️ Modules information is out of date. "
    return f"{prefix}Recalculating..."


class ModulesExplorer:
    """Everything a display surface needs: feed notifications in, read trees out."""

    def __init__(self, config: ExplorerConfig | None = None, store: GraphStore | None = None):
        self.config = config or ExplorerConfig()
        self.store = store or GraphStore()
        self.pipeline = SnapshotPipeline(self.store)
        self.views: dict[ViewMode, TreeProjection] = {
            ViewMode.MODULES: ModulesView(self.store),
            ViewMode.IMPORTS: ImportsView(self.store),
            ViewMode.IMPORTEES: ImporteesView(self.store),
        }
        self.mode = ViewMode(self.config.default_view)
        self.router = ViewRouter(self.views[self.mode])

    @property
    def description(self) -> str:
        return VIEW_MODES[self.mode].display_name

    @property
    def message(self) -> str | None:
        return status_message(self.store)

    def activate_view_mode(self, mode: ViewMode) -> bool:
        """Switch the routed projection; returns False if ``mode`` was already active."""
        if mode is self.mode:
            return False
        self.mode = mode
        self.router.set_active(self.views[mode])
        logger.debug("Activated view mode %s", mode.value)
        return True

    def publish_modules_info(self, payload: Mapping[str, Any] | PublishModulesInfoParams) -> PipelineResult:
        return self.pipeline.handle(payload)

    def enumerate_workspace_folder(self, folder_uri: str) -> list[dict[str, str]]:
        return enumerate_workspace_folder(
            folder_uri, extensions=self.config.extensions, skip_dirs=self.config.skip_dirs,
        )

    def dispose(self) -> None:
        self.router.dispose()
        for view in self.views.values():
            view.dispose()
