from __future__ import annotations

import itertools
import logging
import threading
from concurrent.futures import Executor
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Iterator

import httpx
from google.protobuf.message import DecodeError
from google.transit import gtfs_realtime_pb2

from shuttletrack.app.config import LiveFeedConfig, parse_duration
from shuttletrack.app.ports.output import (
    ILocationFeed,
    IModelService,
    LocationCallback,
)
from shuttletrack.app.services.subscribers import SubscriberList
from shuttletrack.app.services.ticker import run_periodically
from shuttletrack.domain.models import Location

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class HttpGtfsRealtimeLocationFeed(ILocationFeed):
    """Polls a GTFS-Realtime VehiclePositions feed over HTTP.

    Every poll turns each reported vehicle position into a Location, stores
    it through the model service and notifies subscribers. Positions whose
    report timestamp did not change since the previous poll are not emitted
    again.

    Notes:
      - If no URL is configured, `run` returns immediately.
      - HTTP and decoding failures are logged; the poll is skipped.
    """

    config: LiveFeedConfig
    model_service: IModelService
    executor: Executor | None = None
    client: httpx.Client | None = None

    interval: timedelta = field(init=False)
    _subscribers: SubscriberList[Location] = field(init=False, repr=False)
    _stop_event: threading.Event = field(
        default_factory=threading.Event, init=False, repr=False
    )
    _last_seen: dict[str, datetime] = field(
        default_factory=dict, init=False, repr=False
    )
    _ids: Iterator[int] = field(
        default_factory=lambda: itertools.count(1), init=False, repr=False
    )

    def __post_init__(self) -> None:
        self.interval = parse_duration(self.config.interval)
        self._subscribers = SubscriberList(name="gtfs-rt", executor=self.executor)

    def _headers(self) -> dict[str, str]:
        raw = (self.config.headers_raw or "").strip()
        if not raw:
            return {}
        headers: dict[str, str] = {}
        for part in raw.split(";"):
            part = part.strip()
            if not part:
                continue
            if ":" not in part:
                continue
            k, v = part.split(":", 1)
            k = k.strip()
            v = v.strip()
            if k:
                headers[k] = v
        return headers

    def subscribe(self, callback: LocationCallback) -> None:
        self._subscribers.subscribe(callback)

    def _fetch(self) -> bytes:
        if self.client is not None:
            resp = self.client.get(self.config.url or "", headers=self._headers())
            resp.raise_for_status()
            return resp.content

        with httpx.Client(timeout=self.config.timeout_s) as client:
            resp = client.get(self.config.url or "", headers=self._headers())
            resp.raise_for_status()
            return resp.content

    def poll(self, now: datetime | None = None) -> list[Location]:
        """Fetch the feed once and emit every new vehicle position."""

        now = now or datetime.now(timezone.utc)
        try:
            content = self._fetch()
            locations = _parse_gtfs_rt_vehicle_positions(content, now=now)
        except httpx.HTTPError as exc:
            logger.error("Could not fetch %s: %s", self.config.url, exc)
            return []
        except DecodeError as exc:
            logger.error(
                "Could not decode VehiclePositions from %s: %s", self.config.url, exc
            )
            return []

        emitted: list[Location] = []
        for location in locations:
            vehicle_id = location.vehicle_id or location.tracker_id
            if self._last_seen.get(vehicle_id) == location.time:
                continue

            location = replace(location, id=next(self._ids))
            try:
                self.model_service.create_location(location)
            except Exception:
                logger.exception(
                    "Could not create live location for vehicle %s", vehicle_id
                )
                continue

            self._last_seen[vehicle_id] = location.time
            self._subscribers.notify(location)
            emitted.append(location)
        return emitted

    def run(self) -> None:
        if not self.config.enabled:
            return
        logger.info("Polling %s every %s", self.config.url, self.interval)
        run_periodically(self.interval, self.poll, self._stop_event, immediate=True)

    def stop(self) -> None:
        self._stop_event.set()


def _parse_gtfs_rt_vehicle_positions(
    content: bytes, *, now: datetime
) -> tuple[Location, ...]:
    feed = gtfs_realtime_pb2.FeedMessage()
    feed.ParseFromString(content)

    out: list[Location] = []

    for ent in feed.entity:
        if not ent.HasField("vehicle"):
            continue

        v = ent.vehicle
        if not v.HasField("position"):
            continue

        vehicle_id = None
        if v.HasField("vehicle"):
            vehicle_id = v.vehicle.id or None
        if vehicle_id is None:
            continue

        route_id = None
        if v.HasField("trip"):
            route_id = v.trip.route_id or None

        pos = v.position
        bearing = float(pos.bearing) if pos.HasField("bearing") else 0.0
        speed = float(pos.speed) if pos.HasField("speed") else 0.0

        timestamp = now
        if v.HasField("timestamp") and int(v.timestamp) > 0:
            timestamp = datetime.fromtimestamp(int(v.timestamp), tz=timezone.utc)

        out.append(
            Location(
                id=0,
                tracker_id=ent.id or vehicle_id,
                vehicle_id=vehicle_id,
                route_id=route_id,
                lat=float(pos.latitude),
                lon=float(pos.longitude),
                heading=bearing,
                speed=speed,
                time=timestamp,
                created=now,
            )
        )

    return tuple(out)
