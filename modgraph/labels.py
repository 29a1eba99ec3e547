"""Display names and descriptions for graph entities."""

from __future__ import annotations

from pathlib import PurePosixPath
from urllib.parse import unquote, urlparse

from modgraph.models import Module, ModuleGraph, ModuleUnit, ModuleUnitKind, TranslationUnit

KIND_NAMES: dict[ModuleUnitKind, str] = {
    ModuleUnitKind.PRIMARY_INTERFACE: "Primary interface unit",
    ModuleUnitKind.INTERFACE_PARTITION: "Interface partition unit",
    ModuleUnitKind.IMPLEMENTATION_PARTITION: "Non-interface partition unit",
    ModuleUnitKind.IMPLEMENTATION: "Implementation unit",
}


def uri_path(uri: str) -> str:
    parsed = urlparse(uri)
    return unquote(parsed.path) if parsed.scheme else uri


def uri_basename(uri: str) -> str:
    return PurePosixPath(uri_path(uri)).name


def qualified_name(mu: ModuleUnit) -> str:
    """``module`` or ``module:partition``. Not unique for implementation units."""
    if mu.partition_name:
        return f"{mu.module_name}:{mu.partition_name}"
    return mu.module_name


def translation_unit_name(tu: TranslationUnit) -> str:
    if not tu.is_module_unit or tu.kind is ModuleUnitKind.IMPLEMENTATION:
        # No module-level name to show, fall back to the source file
        return uri_basename(tu.uri)
    return qualified_name(tu)


def translation_unit_local_name(tu: TranslationUnit) -> str:
    """Name relative to the owning module (``:partition`` for partitions)."""
    if tu.is_module_unit and tu.kind.is_partition:
        return f":{tu.partition_name}"
    return translation_unit_name(tu)


def display_name(tu: TranslationUnit) -> str:
    # A bare colon is hard to spot in most tree fonts
    return translation_unit_name(tu).replace(":", " :", 1)


def unit_description(tu: TranslationUnit) -> str | None:
    if tu.is_module_unit:
        return KIND_NAMES[tu.kind]
    return None


def unit_tooltip(tu: TranslationUnit) -> str:
    if tu.is_module_unit:
        return f"{KIND_NAMES[tu.kind]} at {uri_path(tu.uri)}"
    return f"Non-module unit at {uri_path(tu.uri)}"


def module_tooltip(graph: ModuleGraph, module: Module) -> str:
    count = graph.module_unit_count(module)
    units = f"{count} module units" if count > 1 else "single unit"
    return f"Module {module.name} ({units})"
