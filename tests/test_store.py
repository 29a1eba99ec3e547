"""Tests for the graph store, change events and the snapshot pipeline."""

from unittest.mock import MagicMock

import pytest

from modgraph.events import EventEmitter
from modgraph.models import ModuleGraph
from modgraph.pipeline import NO_DATA_REASON, SnapshotPipeline
from modgraph.store import GraphStatus, GraphStore

from builders import app_snapshot, module, module_unit, sample_notification, update


class TestEventEmitter:
    def test_fire_in_subscription_order(self):
        emitter = EventEmitter()
        calls = []
        emitter.subscribe(lambda v: calls.append(("a", v)))
        emitter.subscribe(lambda v: calls.append(("b", v)))
        emitter.fire(1)
        assert calls == [("a", 1), ("b", 1)]

    def test_dispose_is_idempotent(self):
        emitter = EventEmitter()
        listener = MagicMock()
        sub = emitter.subscribe(listener)
        sub.dispose()
        sub.dispose()
        emitter.fire(None)
        listener.assert_not_called()
        assert emitter.listener_count == 0
        assert not sub.active

    def test_failing_listener_does_not_stop_others(self):
        emitter = EventEmitter()
        after = MagicMock()
        emitter.subscribe(MagicMock(side_effect=RuntimeError("boom")))
        emitter.subscribe(after)
        emitter.fire("x")
        after.assert_called_once_with("x")


class TestGraphStore:
    def test_initial_state(self):
        store = GraphStore()
        assert store.status is GraphStatus.EMPTY
        assert store.is_empty
        assert store.modules == ()

    def test_replace_notifies_with_store(self):
        store = GraphStore()
        listener = MagicMock()
        store.subscribe(listener)
        store.replace(ModuleGraph.empty(generation=store.next_generation()))
        listener.assert_called_once_with(store)
        assert store.status is GraphStatus.VALID

    def test_replace_rejects_older_generation(self):
        store = GraphStore()
        store.replace(ModuleGraph.empty(generation=2))
        with pytest.raises(ValueError):
            store.replace(ModuleGraph.empty(generation=2))

    def test_next_generation_is_monotonic(self):
        store = GraphStore()
        first = store.next_generation()
        second = store.next_generation()
        assert second > first

    def test_mark_pending_and_invalid_notify(self):
        store = GraphStore()
        listener = MagicMock()
        store.subscribe(listener)
        store.mark_pending()
        assert store.status is GraphStatus.PENDING
        store.mark_invalid("broken")
        assert store.status is GraphStatus.INVALID
        assert store.reason == "broken"
        assert listener.call_count == 2


class TestSnapshotPipeline:
    def test_update_publishes_valid_graph(self):
        store = GraphStore()
        result = SnapshotPipeline(store).handle(sample_notification())
        assert result.status is GraphStatus.VALID
        assert result.error is None
        assert [m.name for m in store.modules] == ["core", "app"]
        assert len(store.translation_units) == 6
        assert len(store.module_units) == 5

    def test_pending(self):
        store = GraphStore()
        pipeline = SnapshotPipeline(store)
        pipeline.handle(app_snapshot())
        result = pipeline.handle({"event": "pending"})
        assert result.status is GraphStatus.PENDING
        assert not store.is_empty

    def test_update_without_data_marks_invalid(self):
        store = GraphStore()
        result = SnapshotPipeline(store).handle({"event": "update", "modules": None})
        assert result.status is GraphStatus.INVALID
        assert store.reason == NO_DATA_REASON

    def test_broken_snapshot_keeps_is_empty_observable(self):
        store = GraphStore()
        pipeline = SnapshotPipeline(store)
        pipeline.handle(app_snapshot())
        generation = store.generation

        broken = update(
            [module("m")],
            [module_unit("a.cppm", "m", interface=True), module_unit("b.cppm", "m", interface=True)],
        )
        result = pipeline.handle(broken)

        assert result.status is GraphStatus.INVALID
        assert "primary interface" in result.error
        assert not store.is_empty
        assert store.generation == generation

    def test_protocol_error_marks_invalid(self):
        store = GraphStore()
        result = SnapshotPipeline(store).handle({"event": "update", "modules": [{"name": "core"}]})
        assert result.status is GraphStatus.INVALID
        assert result.error

    def test_each_snapshot_supersedes_the_previous(self):
        store = GraphStore()
        pipeline = SnapshotPipeline(store)
        pipeline.handle(sample_notification())
        first = store.graph
        pipeline.handle(app_snapshot())
        assert store.generation > first.generation
        assert [m.name for m in store.modules] == ["app"]

    def test_single_notification_per_snapshot(self):
        store = GraphStore()
        listener = MagicMock()
        store.subscribe(listener)
        SnapshotPipeline(store).handle(sample_notification())
        listener.assert_called_once_with(store)
