"""Tests for graph resolution and its invariants."""

import pytest

from modgraph.exceptions import BrokenSnapshotError, StaleReferenceError
from modgraph.ingest import ingest_snapshot, parse_notification
from modgraph.models import Module, ModuleReference, ModuleUnitKind, PartitionReference
from modgraph.resolver import GraphResolver

from builders import (
    app_snapshot,
    imp,
    module,
    module_unit,
    sample_notification,
    unit,
    uri,
)


# ── Helpers ───────────────────────────────────────────────────

def _resolve(payload, generation=1):
    params = parse_notification(payload)
    snapshot = ingest_snapshot(params.modules, params.translation_units)
    return GraphResolver().resolve(snapshot, generation=generation)


def _resolve_raw(modules, units, generation=1):
    return GraphResolver().resolve(ingest_snapshot(modules, units), generation=generation)


def _by_uri(graph, name):
    return next(tu for tu in graph.translation_units if tu.uri == uri(name))


# ── Resolution ────────────────────────────────────────────────

class TestResolve:
    def test_app_snapshot(self):
        graph = _resolve(app_snapshot())
        app = graph.module_named("app")
        primary = graph.primary(app)
        impl = _by_uri(graph, "app.cpp")
        main = _by_uri(graph, "main.cpp")

        assert primary.uri == uri("app.cppm")
        assert app.implementation_units == (impl.index,)
        assert app.interface_partitions == ()
        assert app.implementation_partitions == ()
        assert graph.importers(primary) == [main]
        assert impl.imports == ()  # external import of std dropped

    def test_module_reference_targets_primary(self):
        graph = _resolve(app_snapshot())
        main = _by_uri(graph, "main.cpp")
        reference = main.imports[0].reference
        assert isinstance(reference, ModuleReference)
        assert isinstance(graph.dereference(reference), Module)
        assert graph.import_target(main.imports[0]).uri == uri("app.cppm")

    def test_partition_reference_targets_partition_unit(self):
        graph = _resolve(sample_notification())
        detail = _by_uri(graph, "core/core-detail.cpp")
        reference = detail.imports[0].reference
        assert isinstance(reference, PartitionReference)
        assert graph.dereference(reference).uri == uri("core/core-util.cppm")

    def test_buckets(self):
        graph = _resolve(sample_notification())
        core = graph.module_named("core")
        assert [graph.unit(i).uri for i in core.interface_partitions] == [uri("core/core-util.cppm")]
        assert [graph.unit(i).uri for i in core.implementation_partitions] == [uri("core/core-detail.cpp")]
        assert [graph.unit(i).uri for i in core.implementation_units] == [uri("core/core.cpp")]
        assert graph.module_unit_count(core) == 4
        assert graph.module_unit_count(graph.module_named("app")) == 1

    def test_units_of_order(self):
        graph = _resolve(sample_notification())
        kinds = [mu.kind for mu in graph.units_of(graph.module_named("core"))]
        assert kinds == [
            ModuleUnitKind.PRIMARY_INTERFACE,
            ModuleUnitKind.INTERFACE_PARTITION,
            ModuleUnitKind.IMPLEMENTATION_PARTITION,
            ModuleUnitKind.IMPLEMENTATION,
        ]

    def test_partition_lookup(self):
        graph = _resolve(sample_notification())
        assert graph.partition("core", "util").uri == uri("core/core-util.cppm")
        assert graph.partition("app", "util") is None

    def test_empty_snapshot(self):
        graph = _resolve_raw([], [])
        assert graph.is_empty
        assert graph.modules == ()


class TestInvariants:
    def test_every_module_has_one_primary_and_counts_add_up(self):
        graph = _resolve(sample_notification())
        for m in graph.modules:
            assert graph.primary(m).kind is ModuleUnitKind.PRIMARY_INTERFACE
            assert graph.primary(m).module_name == m.name
            owned = [mu for mu in graph.module_units if mu.module_name == m.name]
            assert graph.module_unit_count(m) == len(owned)

    def test_importers_are_symmetric_with_imports(self):
        graph = _resolve(sample_notification())
        forward = {
            (tu.index, target.index)
            for tu in graph.translation_units
            for target in graph.imported_units(tu)
        }
        backward = {
            (importer, mu.index)
            for mu in graph.module_units
            for importer in mu.importers
        }
        assert forward == backward

    def test_every_retained_import_is_resolved(self):
        graph = _resolve(sample_notification())
        for tu in graph.translation_units:
            for i in tu.imports:
                assert i.reference is not None
                assert i.reference.generation == graph.generation

    def test_re_resolving_is_structurally_equal(self):
        first = _resolve(sample_notification(), generation=1)
        second = _resolve(sample_notification(), generation=2)
        assert first.edges() == second.edges()
        assert [m.name for m in first.modules] == [m.name for m in second.modules]
        assert [tu.uri for tu in first.translation_units] == [tu.uri for tu in second.translation_units]
        assert first != second

    def test_duplicate_import_recorded_once(self):
        graph = _resolve_raw(
            [module("m")],
            [
                module_unit("m.cppm", "m", interface=True),
                unit("main.cpp", imports=[imp("m"), imp("m")]),
            ],
        )
        primary = graph.primary(graph.module_named("m"))
        assert primary.importers == (1,)
        assert len(graph.unit(1).imports) == 2


class TestImportFiltering:
    def test_unknown_module_import_dropped_in_both_directions(self):
        graph = _resolve_raw(
            [module("m")],
            [
                module_unit("m.cppm", "m", interface=True, imports=[imp("fmt")]),
                unit("main.cpp", imports=[imp("m"), imp("std.core")]),
            ],
        )
        assert graph.unit(0).imports == ()
        assert [i.name for i in graph.unit(1).imports] == ["m"]
        assert ("file:///ws/main.cpp", "file:///ws/m.cppm") in graph.edges()
        assert len(graph.edges()) == 1

    def test_unknown_partition_import_fails(self):
        with pytest.raises(BrokenSnapshotError) as excinfo:
            _resolve_raw(
                [module("m")],
                [module_unit("m.cppm", "m", interface=True, imports=[imp("missing", partition=True)])],
            )
        assert excinfo.value.details["partition"] == "missing"

    def test_partition_of_other_module_is_not_visible(self):
        with pytest.raises(BrokenSnapshotError):
            _resolve_raw(
                [module("a"), module("b")],
                [
                    module_unit("a.cppm", "a", interface=True),
                    module_unit("a-p.cppm", "a", interface=True, partition="p"),
                    module_unit("b.cppm", "b", interface=True, imports=[imp("p", partition=True)]),
                ],
            )

    def test_partition_import_from_non_module_unit_fails(self):
        with pytest.raises(BrokenSnapshotError):
            _resolve_raw([], [unit("main.cpp", imports=[imp("p", partition=True)])])


class TestBrokenSnapshots:
    def test_missing_primary(self):
        with pytest.raises(BrokenSnapshotError) as excinfo:
            _resolve_raw([module("m")], [module_unit("m.cpp", "m")])
        assert excinfo.value.details["module"] == "m"

    def test_two_primaries(self):
        with pytest.raises(BrokenSnapshotError):
            _resolve_raw(
                [module("m")],
                [
                    module_unit("m1.cppm", "m", interface=True),
                    module_unit("m2.cppm", "m", interface=True),
                ],
            )

    def test_duplicate_module_name(self):
        with pytest.raises(BrokenSnapshotError):
            _resolve_raw(
                [module("m"), module("m")],
                [module_unit("m.cppm", "m", interface=True)],
            )

    def test_duplicate_partition(self):
        with pytest.raises(BrokenSnapshotError):
            _resolve_raw(
                [module("m")],
                [
                    module_unit("m.cppm", "m", interface=True),
                    module_unit("p1.cppm", "m", interface=True, partition="p"),
                    module_unit("p2.cpp", "m", partition="p"),
                ],
            )

    def test_unit_of_unlisted_module(self):
        with pytest.raises(BrokenSnapshotError):
            _resolve_raw(
                [module("m")],
                [
                    module_unit("m.cppm", "m", interface=True),
                    module_unit("x.cpp", "x"),
                ],
            )


class TestReferences:
    def test_reference_from_other_generation_is_stale(self):
        old = _resolve(app_snapshot(), generation=1)
        new = _resolve(app_snapshot(), generation=2)
        reference = _by_uri(old, "main.cpp").imports[0].reference
        with pytest.raises(StaleReferenceError):
            new.dereference(reference)

    def test_graph_is_frozen(self):
        graph = _resolve(app_snapshot())
        with pytest.raises(AttributeError):
            graph.unit(0).importers = ()
