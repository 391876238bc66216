from __future__ import annotations

import itertools
import logging
import threading
from concurrent.futures import Executor
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Iterator

from shuttletrack.app.config import ReplayConfig, parse_duration
from shuttletrack.app.ports.output import (
    ILocationFeed,
    IModelService,
    IReplaySourceRepository,
    LocationCallback,
)
from shuttletrack.domain.models import Location

from .subscribers import SubscriberList
from .ticker import run_periodically

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ReplayEngine(ILocationFeed):
    """Plays recorded per-vehicle location sequences back as a live feed.

    Every step emits, for each vehicle, the recorded location under its
    cursor re-stamped with the current time and a fresh id, then advances the
    cursor, wrapping to the start at the end of the sequence.
    """

    config: ReplayConfig
    model_service: IModelService
    source_repository: IReplaySourceRepository
    executor: Executor | None = None

    interval: timedelta = field(init=False)
    _subscribers: SubscriberList[Location] = field(init=False, repr=False)
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )
    _stop_event: threading.Event = field(
        default_factory=threading.Event, init=False, repr=False
    )
    _sequences: dict[str, tuple[Location, ...]] = field(
        default_factory=dict, init=False, repr=False
    )
    _cursors: dict[str, int] = field(default_factory=dict, init=False, repr=False)
    _ids: Iterator[int] = field(
        default_factory=lambda: itertools.count(1), init=False, repr=False
    )

    def __post_init__(self) -> None:
        self.interval = parse_duration(self.config.interval)
        self._subscribers = SubscriberList(name="replay", executor=self.executor)

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    def subscribe(self, callback: LocationCallback) -> None:
        self._subscribers.subscribe(callback)

    def load(self) -> int:
        """Load all recorded sources and return the number of vehicles loaded."""

        loaded = 0
        for source in self.source_repository.load_sources():
            if not source.locations:
                logger.error("Replay source %s has no locations", source.name)
                continue
            vehicle_id = source.locations[0].vehicle_id
            if vehicle_id is None:
                logger.error("Missing vehicle ID in replay source %s", source.name)
                continue

            with self._lock:
                self._sequences[vehicle_id] = source.locations
                self._cursors[vehicle_id] = 0
            loaded += 1
            logger.debug(
                "Read %d locations from replay source %s",
                len(source.locations),
                source.name,
            )
        return loaded

    def step(self, now: datetime | None = None) -> list[Location]:
        """Emit the next recorded location of every vehicle."""

        now = now or datetime.now(timezone.utc)
        with self._lock:
            work = [
                (vehicle_id, sequence[self._cursors[vehicle_id]])
                for vehicle_id, sequence in self._sequences.items()
            ]

        emitted: list[Location] = []
        for vehicle_id, recorded in work:
            location = replace(recorded, id=self._next_id(), time=now, created=now)
            try:
                self.model_service.create_location(location)
            except Exception:
                logger.exception(
                    "Could not create replayed location for vehicle %s", vehicle_id
                )
                continue

            logger.debug("Replayed location for vehicle %s", vehicle_id)
            self._subscribers.notify(location)
            self._advance(vehicle_id)
            emitted.append(location)

        return emitted

    def _advance(self, vehicle_id: str) -> None:
        with self._lock:
            cursor = self._cursors[vehicle_id] + 1
            if cursor >= len(self._sequences[vehicle_id]):
                cursor = 0
            self._cursors[vehicle_id] = cursor

    def _next_id(self) -> int:
        with self._lock:
            return next(self._ids)

    def cursor(self, vehicle_id: str) -> int | None:
        """Index of the next record to replay, or None if the vehicle is unknown."""

        with self._lock:
            return self._cursors.get(vehicle_id)

    def run(self) -> None:
        """Load sources, step once, then step every `interval` until stopped."""

        if not self.enabled:
            return
        loaded = self.load()
        logger.info(
            "Replay started for %d vehicles, stepping every %s", loaded, self.interval
        )
        run_periodically(self.interval, self.step, self._stop_event, immediate=True)

    def stop(self) -> None:
        self._stop_event.set()
