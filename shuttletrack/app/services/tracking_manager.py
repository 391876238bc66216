from __future__ import annotations

import itertools
import logging
import threading
from concurrent.futures import Executor
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterator

from shuttletrack.app.config import TrackingConfig, parse_duration
from shuttletrack.app.ports.output import IModelService
from shuttletrack.domain.algorithms.geo_utils import (
    closest_point_index,
    haversine_distance_m,
)
from shuttletrack.domain.exceptions import TrackingError
from shuttletrack.domain.models import Location, Prediction

from .prediction_service import PredictionService
from .subscribers import SubscriberList
from .ticker import run_periodically

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TrackingManager:
    """Keeps per-vehicle state and publishes a predicted position every tick.

    Register `on_location` with an upstream feed. Vehicles whose latest
    location has a route are "active"; `tick` predicts each active vehicle,
    stores the derived location through the model service and notifies
    subscribers with the new Prediction.

    The per-vehicle maps are written by `on_location` (feed threads) and read
    by the tick loop, so every access goes through `_lock`.
    """

    config: TrackingConfig
    model_service: IModelService
    executor: Executor | None = None

    interval: timedelta = field(init=False)
    _prediction_service: PredictionService = field(init=False, repr=False)
    _subscribers: SubscriberList[Prediction] = field(init=False, repr=False)
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )
    _stop_event: threading.Event = field(
        default_factory=threading.Event, init=False, repr=False
    )
    _updates: dict[str, Location] = field(default_factory=dict, init=False, repr=False)
    _predictions: dict[str, Prediction] = field(
        default_factory=dict, init=False, repr=False
    )
    _active: list[str] = field(default_factory=list, init=False, repr=False)
    _ids: Iterator[int] = field(
        default_factory=lambda: itertools.count(1), init=False, repr=False
    )

    def __post_init__(self) -> None:
        self.interval = parse_duration(self.config.interval)
        self._prediction_service = PredictionService(model_service=self.model_service)
        self._subscribers = SubscriberList(name="tracking", executor=self.executor)

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    def subscribe(self, callback: Callable[[Prediction], None]) -> None:
        self._subscribers.subscribe(callback)

    def on_location(self, location: Location) -> None:
        vehicle_id = location.vehicle_id
        if vehicle_id is None:
            return

        with self._lock:
            self._updates[vehicle_id] = location
            try:
                index = self._active.index(vehicle_id)
            except ValueError:
                index = -1

            if location.route_id is not None:
                if index < 0:
                    self._active.append(vehicle_id)
            elif index >= 0:
                # Swap with the last entry and truncate; order is not kept.
                self._active[index] = self._active[-1]
                self._active.pop()

            prediction = self._predictions.get(vehicle_id)

        if prediction is not None and logger.isEnabledFor(logging.DEBUG):
            self._log_prediction_error(prediction, location)

    def _log_prediction_error(self, prediction: Prediction, actual: Location) -> None:
        try:
            diff_m = haversine_distance_m(prediction.point, actual.point)
        except ValueError as exc:
            logger.debug("Cannot compare vehicle %s: %s", actual.vehicle_id, exc)
            return

        actual_index: int | None = None
        if actual.route_id is not None:
            try:
                route = self.model_service.get_route(actual.route_id)
                actual_index = closest_point_index(actual.lat, actual.lon, route)
            except TrackingError as exc:
                logger.debug(
                    "Cannot place vehicle %s on its route: %s", actual.vehicle_id, exc
                )

        logger.debug(
            "Vehicle %s updated: predicted index %d (%f, %f), actual index %s "
            "(%f, %f), off by %.1f m",
            prediction.vehicle_id,
            prediction.index,
            prediction.point.lat,
            prediction.point.lon,
            actual_index,
            actual.lat,
            actual.lon,
            diff_m,
        )

    def tick(self, now: datetime | None = None) -> list[Prediction]:
        """Predict, persist and publish every active vehicle once."""

        now = now or datetime.now(timezone.utc)
        with self._lock:
            vehicle_ids = list(self._active)
            updates = {vid: self._updates.get(vid) for vid in vehicle_ids}

        published: list[Prediction] = []
        for vehicle_id in vehicle_ids:
            last = updates[vehicle_id]
            try:
                result = self._prediction_service.predict(vehicle_id, last, now=now)
            except TrackingError as exc:
                logger.warning(
                    "Skipping prediction for vehicle %s: %s", vehicle_id, exc
                )
                continue
            except Exception:
                logger.exception("Prediction failed for vehicle %s", vehicle_id)
                continue

            prediction = result.prediction
            derived = Location(
                id=self._next_id(),
                tracker_id=last.tracker_id,
                vehicle_id=vehicle_id,
                route_id=result.route.id,
                lat=prediction.point.lat,
                lon=prediction.point.lon,
                heading=last.heading,
                speed=last.speed,
                time=now,
                created=now,
            )
            try:
                self.model_service.create_location(derived)
            except Exception:
                logger.exception(
                    "Could not create location for prediction of vehicle %s",
                    vehicle_id,
                )
                continue

            with self._lock:
                self._predictions[vehicle_id] = prediction
            self._subscribers.notify(prediction)
            published.append(prediction)

        return published

    def _next_id(self) -> int:
        with self._lock:
            return next(self._ids)

    def run(self) -> None:
        """Tick every `interval` until `stop` is called. No-op when disabled."""

        if not self.enabled:
            return
        logger.info("Tracking manager started, predicting every %s", self.interval)
        run_periodically(self.interval, self.tick, self._stop_event)

    def stop(self) -> None:
        self._stop_event.set()

    def current_predictions(self) -> dict[str, Prediction]:
        with self._lock:
            return dict(self._predictions)

    def active_vehicle_ids(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._active)

    def last_location(self, vehicle_id: str) -> Location | None:
        with self._lock:
            return self._updates.get(vehicle_id)
