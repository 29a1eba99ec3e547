"""Snapshot pipeline: notification -> ingest -> resolve -> store."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from modgraph.exceptions import BrokenSnapshotError, ProtocolError
from modgraph.ingest import ingest_snapshot, parse_notification
from modgraph.protocol import PublishModulesInfoParams
from modgraph.resolver import GraphResolver
from modgraph.store import GraphStatus, GraphStore

logger = logging.getLogger(__name__)

NO_DATA_REASON = "Analyzer has no current modules data"


@dataclass
class PipelineResult:
    status: GraphStatus
    error: str | None = None


class SnapshotPipeline:
    """Feeds analyzer notifications into a ``GraphStore``.

    Runs synchronously to completion. Protocol and integrity failures are
    converted into an ``invalid`` store status; they never propagate.
    """

    def __init__(self, store: GraphStore, resolver: GraphResolver | None = None):
        self.store = store
        self.resolver = resolver or GraphResolver()

    def handle(self, payload: Mapping[str, Any] | PublishModulesInfoParams) -> PipelineResult:
        try:
            params = parse_notification(payload)
        except ProtocolError as e:
            return self._reject(e)

        if params.event == "pending":
            self.store.mark_pending()
            return PipelineResult(status=self.store.status)

        if not params.has_data:
            # Upstream build errors: the analyzer publishes an update without data
            self.store.mark_invalid(NO_DATA_REASON)
            return PipelineResult(status=self.store.status, error=NO_DATA_REASON)

        try:
            snapshot = ingest_snapshot(params.modules, params.translation_units or [])
            graph = self.resolver.resolve(snapshot, generation=self.store.next_generation())
        except (ProtocolError, BrokenSnapshotError) as e:
            return self._reject(e)

        self.store.replace(graph)
        return PipelineResult(status=self.store.status)

    def _reject(self, error: ProtocolError | BrokenSnapshotError) -> PipelineResult:
        kind = "protocol error" if isinstance(error, ProtocolError) else "broken snapshot"
        logger.warning("Rejected modules snapshot (%s): %s", kind, error)
        self.store.mark_invalid(str(error))
        return PipelineResult(status=self.store.status, error=str(error))
