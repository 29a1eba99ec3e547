"""
modgraph - C++ modules dependency graph explorer.

Turns the flat snapshots published by a C++ modules analyzer into an
immutable, cross-linked module graph and serves it as lazily expanded trees.

Layers:
    protocol / ingest   wire schema and raw record conversion
    resolver            graph construction and invariant checks
    store / pipeline    current graph, status and change notifications
    views               by-module, imports and importees projections + router
    explorer            composition root used by the CLI and the web UI
"""

from modgraph.config import ExplorerConfig, load_config
from modgraph.exceptions import (
    BrokenSnapshotError,
    ConfigError,
    EnumerationError,
    ModuleGraphError,
    ProtocolError,
    StaleReferenceError,
    UnknownNodeError,
)
from modgraph.explorer import ModulesExplorer, ViewMode, status_message
from modgraph.ingest import IngestedSnapshot, ingest_snapshot, parse_notification
from modgraph.models import (
    Import,
    Module,
    ModuleGraph,
    ModuleReference,
    ModuleUnit,
    ModuleUnitKind,
    PartitionReference,
    TranslationUnit,
)
from modgraph.pipeline import PipelineResult, SnapshotPipeline
from modgraph.resolver import GraphResolver
from modgraph.store import GraphStatus, GraphStore

__version__ = "0.1.0"

__all__ = [
    "ExplorerConfig",
    "load_config",
    "BrokenSnapshotError",
    "ConfigError",
    "EnumerationError",
    "ModuleGraphError",
    "ProtocolError",
    "StaleReferenceError",
    "UnknownNodeError",
    "ModulesExplorer",
    "ViewMode",
    "status_message",
    "IngestedSnapshot",
    "ingest_snapshot",
    "parse_notification",
    "Import",
    "Module",
    "ModuleGraph",
    "ModuleReference",
    "ModuleUnit",
    "ModuleUnitKind",
    "PartitionReference",
    "TranslationUnit",
    "PipelineResult",
    "SnapshotPipeline",
    "GraphResolver",
    "GraphStatus",
    "GraphStore",
]
