#!/usr/bin/env python3
"""Server-sent event broadcaster for canvas updates."""

from __future__ import annotations

import queue
import threading
import time
from typing import Any, Dict


class EventBus:
    """Publish/subscribe helper feeding the SSE endpoint."""

    def __init__(self, max_queue: int = 256) -> None:
        self._listeners: set[queue.Queue] = set()
        self._lock = threading.Lock()
        self._max_queue = max(1, int(max_queue))
        self.dropped = 0

    def listen(self) -> queue.Queue:
        q: queue.Queue = queue.Queue(maxsize=self._max_queue)
        with self._lock:
            self._listeners.add(q)
        return q

    def remove(self, q: queue.Queue) -> None:
        with self._lock:
            self._listeners.discard(q)

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    def publish(self, event_type: str, payload: Dict[str, Any]) -> None:
        message = {
            "type": event_type,
            "payload": payload,
            "ts": time.time(),
        }
        with self._lock:
            listeners = list(self._listeners)
        dropped = 0
        for listener in listeners:
            try:
                listener.put_nowait(message)
            except queue.Full:
                # Slow listener; the canvas writer must never block on it.
                dropped += 1
        if dropped:
            with self._lock:
                self.dropped += dropped


__all__ = ["EventBus"]
