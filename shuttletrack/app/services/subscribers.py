from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SubscriberList(Generic[T]):
    """Thread-safe list of callbacks with fire-and-forget notification.

    Each subscriber gets its own single-worker delivery lane, so a slow or
    hung subscriber only backs up its own deliveries and never the notifier
    or the other subscribers. Within one lane items arrive in notify order.

    Passing `executor` makes every subscriber share it instead of owning a
    lane; tests use this to deliver synchronously.
    """

    def __init__(self, *, name: str, executor: Executor | None = None) -> None:
        self._name = name
        self._lock = threading.Lock()
        self._shared_executor = executor
        self._lanes: list[tuple[Callable[[T], None], Executor]] = []

    def subscribe(self, callback: Callable[[T], None]) -> None:
        lane = self._shared_executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix=f"{self._name}-subscriber"
        )
        with self._lock:
            self._lanes.append((callback, lane))

    def __len__(self) -> int:
        with self._lock:
            return len(self._lanes)

    def notify(self, item: T) -> None:
        with self._lock:
            lanes = list(self._lanes)
        for callback, lane in lanes:
            lane.submit(self._deliver, callback, item)

    def _deliver(self, callback: Callable[[T], None], item: T) -> None:
        try:
            callback(item)
        except Exception:
            logger.exception("%s subscriber %r failed", self._name, callback)
