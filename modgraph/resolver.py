"""Graph resolver: builds the linked module graph from an ingested snapshot."""

from __future__ import annotations

import logging
from dataclasses import replace
from types import MappingProxyType

from modgraph.exceptions import BrokenSnapshotError
from modgraph.ingest import IngestedSnapshot
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

logger = logging.getLogger(__name__)


class GraphResolver:
    """Resolve imports, back-references and module ownership for one snapshot.

    Resolution is all-or-nothing: any integrity violation raises
    ``BrokenSnapshotError`` and no graph is returned.
    """

    def resolve(self, snapshot: IngestedSnapshot, generation: int = 1) -> ModuleGraph:
        units = snapshot.translation_units
        module_units = [tu for tu in units if tu.is_module_unit]

        # Step 1: one primary interface unit per listed module
        module_index: dict[str, int] = {}
        primaries: list[int] = []
        for name in snapshot.module_names:
            if name in module_index:
                raise BrokenSnapshotError(
                    f"Module '{name}' is listed more than once",
                    details={"module": name},
                )
            candidates = [
                mu.index for mu in module_units
                if mu.kind is ModuleUnitKind.PRIMARY_INTERFACE and mu.module_name == name
            ]
            if len(candidates) != 1:
                raise BrokenSnapshotError(
                    f"Module '{name}' has {len(candidates)} primary interface units",
                    details={"module": name, "candidates": [units[i].uri for i in candidates]},
                )
            module_index[name] = len(primaries)
            primaries.append(candidates[0])

        partition_index = self._index_partitions(module_units)

        # Step 2: drop imports of modules outside the analyzed set
        retained: dict[int, list[Import]] = {}
        for tu in units:
            kept = [imp for imp in tu.imports if imp.is_partition or imp.name in module_index]
            if len(kept) != len(tu.imports):
                logger.debug(
                    "%s: dropped %d external import(s)", tu.uri, len(tu.imports) - len(kept),
                )
            retained[tu.index] = kept

        # Step 3: resolve references and record importers on the target unit
        importers: dict[int, list[int]] = {mu.index: [] for mu in module_units}
        resolved: dict[int, tuple[Import, ...]] = {}
        for tu in units:
            linked: list[Import] = []
            for imp in retained[tu.index]:
                if imp.is_partition:
                    target = self._resolve_partition(tu, imp, partition_index)
                    reference = PartitionReference(generation=generation, unit_index=target)
                else:
                    position = module_index.get(imp.name)
                    if position is None:
                        raise BrokenSnapshotError(
                            f"{tu.uri}: import of unknown module '{imp.name}'",
                            details={"unit": tu.uri, "import": imp.name},
                        )
                    reference = ModuleReference(generation=generation, module_index=position)
                    target = primaries[position]
                if tu.index not in importers[target]:
                    importers[target].append(tu.index)
                linked.append(replace(imp, reference=reference))
            resolved[tu.index] = tuple(linked)

        # Step 4: classify non-primary units into their module's buckets
        buckets: list[dict[ModuleUnitKind, list[int]]] = [
            {kind: [] for kind in ModuleUnitKind} for _ in primaries
        ]
        for mu in module_units:
            if mu.kind is ModuleUnitKind.PRIMARY_INTERFACE:
                continue
            position = module_index.get(mu.module_name)
            if position is None:
                raise BrokenSnapshotError(
                    f"{mu.uri}: unit of unknown module '{mu.module_name}'",
                    details={"unit": mu.uri, "module": mu.module_name},
                )
            buckets[position][mu.kind].append(mu.index)

        # Step 5: freeze
        frozen_units: list[TranslationUnit] = []
        for tu in units:
            if tu.is_module_unit:
                frozen_units.append(replace(
                    tu, imports=resolved[tu.index], importers=tuple(importers[tu.index]),
                ))
            else:
                frozen_units.append(replace(tu, imports=resolved[tu.index]))

        modules = tuple(
            Module(
                index=position,
                name=name,
                primary=primaries[position],
                interface_partitions=tuple(buckets[position][ModuleUnitKind.INTERFACE_PARTITION]),
                implementation_partitions=tuple(buckets[position][ModuleUnitKind.IMPLEMENTATION_PARTITION]),
                implementation_units=tuple(buckets[position][ModuleUnitKind.IMPLEMENTATION]),
            )
            for name, position in module_index.items()
        )

        graph = ModuleGraph(
            generation=generation,
            modules=modules,
            translation_units=tuple(frozen_units),
            module_index=MappingProxyType(dict(module_index)),
            partition_index=MappingProxyType(dict(partition_index)),
        )
        logger.info(
            "Resolved graph generation %d: %d module(s), %d translation unit(s)",
            generation, len(modules), len(frozen_units),
        )
        return graph

    @staticmethod
    def _index_partitions(module_units: list[ModuleUnit]) -> dict[tuple[str, str], int]:
        index: dict[tuple[str, str], int] = {}
        for mu in module_units:
            if mu.partition_name is None:
                continue
            key = (mu.module_name, mu.partition_name)
            if key in index:
                raise BrokenSnapshotError(
                    f"Partition '{mu.module_name}:{mu.partition_name}' is defined more than once",
                    details={"module": mu.module_name, "partition": mu.partition_name},
                )
            index[key] = mu.index
        return index

    @staticmethod
    def _resolve_partition(
        tu: TranslationUnit,
        imp: Import,
        partition_index: dict[tuple[str, str], int],
    ) -> int:
        # Partitions are private to their module, so the lookup is scoped by the importer
        if not tu.is_module_unit:
            raise BrokenSnapshotError(
                f"{tu.uri}: partition import ':{imp.name}' outside a module unit",
                details={"unit": tu.uri, "partition": imp.name},
            )
        target = partition_index.get((tu.module_name, imp.name))
        if target is None:
            raise BrokenSnapshotError(
                f"{tu.uri}: partition '{tu.module_name}:{imp.name}' not found",
                details={"unit": tu.uri, "module": tu.module_name, "partition": imp.name},
            )
        return target
