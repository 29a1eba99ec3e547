"""Minimal observer primitive used by the store, projections and router."""

from __future__ import annotations

import logging
from typing import Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Subscription:
    """Handle returned by ``EventEmitter.subscribe``; ``dispose`` is idempotent."""

    def __init__(self, emitter: EventEmitter, listener: Callable):
        self._emitter = emitter
        self._listener = listener

    @property
    def active(self) -> bool:
        return self._emitter is not None

    def dispose(self) -> None:
        if self._emitter is None:
            return
        self._emitter._remove(self._listener)
        self._emitter = None


class EventEmitter(Generic[T]):
    """Synchronous event stream. Listener errors are logged, not propagated."""

    def __init__(self):
        self._listeners: list[Callable[[T], None]] = []

    def subscribe(self, listener: Callable[[T], None]) -> Subscription:
        self._listeners.append(listener)
        return Subscription(self, listener)

    def fire(self, value: T = None) -> None:
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception:
                logger.exception("Error in change listener %r", listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def _remove(self, listener: Callable) -> None:
        for i, existing in enumerate(self._listeners):
            if existing is listener:
                del self._listeners[i]
                return
