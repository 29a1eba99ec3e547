"""Data models for the C++ module dependency graph."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import ClassVar, Mapping, Union

from modgraph.exceptions import StaleReferenceError


class ModuleUnitKind(enum.Enum):
    PRIMARY_INTERFACE = "primary_interface"
    INTERFACE_PARTITION = "interface_partition"
    IMPLEMENTATION_PARTITION = "implementation_partition"
    IMPLEMENTATION = "implementation"

    @property
    def is_partition(self) -> bool:
        return self in (
            ModuleUnitKind.INTERFACE_PARTITION,
            ModuleUnitKind.IMPLEMENTATION_PARTITION,
        )


@dataclass(frozen=True)
class ModuleReference:
    """Resolved target of a module import: an index into ``ModuleGraph.modules``."""
    generation: int
    module_index: int


@dataclass(frozen=True)
class PartitionReference:
    """Resolved target of a partition import: an index into ``ModuleGraph.translation_units``."""
    generation: int
    unit_index: int


ImportReference = Union[ModuleReference, PartitionReference]


@dataclass(frozen=True)
class Import:
    name: str
    is_partition: bool = False
    reference: ImportReference | None = None


@dataclass(frozen=True)
class TranslationUnit:
    """A compiled source file, module unit or not."""
    index: int
    uri: str
    imports: tuple[Import, ...] = ()

    is_module_unit: ClassVar[bool] = False


@dataclass(frozen=True, kw_only=True)
class ModuleUnit(TranslationUnit):
    """A translation unit contributing to a named module."""
    module_name: str
    kind: ModuleUnitKind
    partition_name: str | None = None
    importers: tuple[int, ...] = ()  # indices of importing translation units

    is_module_unit: ClassVar[bool] = True

    def __post_init__(self):
        if self.kind.is_partition != (self.partition_name is not None):
            raise ValueError(
                f"{self.kind.value} unit of module {self.module_name!r} "
                f"has partition name {self.partition_name!r}"
            )


@dataclass(frozen=True)
class Module:
    """A named module; unit fields hold indices into ``ModuleGraph.translation_units``."""
    index: int
    name: str
    primary: int
    interface_partitions: tuple[int, ...] = ()
    implementation_partitions: tuple[int, ...] = ()
    implementation_units: tuple[int, ...] = ()


@dataclass(frozen=True)
class ModuleGraph:
    """Immutable, fully resolved module dependency graph for one snapshot."""
    generation: int
    modules: tuple[Module, ...] = ()
    translation_units: tuple[TranslationUnit, ...] = ()
    module_index: Mapping[str, int] = field(
        default_factory=lambda: MappingProxyType({}), repr=False, compare=False,
    )
    partition_index: Mapping[tuple[str, str], int] = field(
        default_factory=lambda: MappingProxyType({}), repr=False, compare=False,
    )

    @classmethod
    def empty(cls, generation: int = 0) -> ModuleGraph:
        return cls(generation=generation)

    @property
    def is_empty(self) -> bool:
        return not self.translation_units

    @property
    def module_units(self) -> tuple[ModuleUnit, ...]:
        return tuple(tu for tu in self.translation_units if tu.is_module_unit)

    # ── Lookups ─────────────────────────────────────────────

    def unit(self, index: int) -> TranslationUnit:
        return self.translation_units[index]

    def module(self, index: int) -> Module:
        return self.modules[index]

    def module_named(self, name: str) -> Module | None:
        index = self.module_index.get(name)
        return None if index is None else self.modules[index]

    def partition(self, module_name: str, partition_name: str) -> ModuleUnit | None:
        index = self.partition_index.get((module_name, partition_name))
        return None if index is None else self.translation_units[index]

    def primary(self, module: Module) -> ModuleUnit:
        return self.translation_units[module.primary]

    def units_of(self, module: Module) -> list[ModuleUnit]:
        """Module units in display order: primary, interface partitions,
        implementation partitions, implementation units."""
        indices = [
            module.primary,
            *module.interface_partitions,
            *module.implementation_partitions,
            *module.implementation_units,
        ]
        return [self.translation_units[i] for i in indices]

    def module_unit_count(self, module: Module) -> int:
        return (
            1
            + len(module.interface_partitions)
            + len(module.implementation_partitions)
            + len(module.implementation_units)
        )

    # ── Edges ───────────────────────────────────────────────

    def dereference(self, reference: ImportReference) -> Module | ModuleUnit:
        if reference.generation != self.generation:
            raise StaleReferenceError(reference.generation, self.generation)
        if isinstance(reference, ModuleReference):
            return self.modules[reference.module_index]
        return self.translation_units[reference.unit_index]

    def import_target(self, imp: Import) -> ModuleUnit:
        """The unit an import lands on; module imports land on the primary unit."""
        if imp.reference is None:
            raise ValueError(f"Import {imp.name!r} is unresolved")
        target = self.dereference(imp.reference)
        if isinstance(target, Module):
            return self.primary(target)
        return target

    def imported_units(self, tu: TranslationUnit) -> list[ModuleUnit]:
        return [self.import_target(imp) for imp in tu.imports]

    def importers(self, tu: TranslationUnit) -> list[TranslationUnit]:
        if not tu.is_module_unit:
            return []
        return [self.translation_units[i] for i in tu.importers]

    def edges(self) -> frozenset[tuple[str, str]]:
        """(importer uri, target uri) pairs; equal for structurally equal graphs."""
        return frozenset(
            (tu.uri, self.import_target(imp).uri)
            for tu in self.translation_units
            for imp in tu.imports
        )
