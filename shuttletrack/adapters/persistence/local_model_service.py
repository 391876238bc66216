from __future__ import annotations

import json
import logging
import os
import threading
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from shuttletrack.app.ports.output import ILocationRepository, IModelService
from shuttletrack.domain.exceptions import RouteNotFound, VehicleNotFound
from shuttletrack.domain.models import Location, Route, Stop, Vehicle

from .records import route_from_record, stop_from_record, vehicle_from_record

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LocalModelService(IModelService):
    """Model service backed by JSON files, with locations kept in memory.

    Reads routes.json, stops.json and vehicles.json (JSON arrays) from a
    directory on first use. Created locations are kept in a bounded in-memory
    history and, when a location repository is configured, mirrored to it.

    Env vars:
      - MODEL_DATA_PATH: directory with the JSON files (default: data/model)
    """

    base_path: str | Path | None = None
    location_repository: ILocationRepository | None = None
    history_size: int = 10_000

    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )
    _loaded: bool = field(default=False, init=False, repr=False)
    _vehicles: dict[str, Vehicle] = field(default_factory=dict, init=False, repr=False)
    _routes: dict[str, Route] = field(default_factory=dict, init=False, repr=False)
    _stops: tuple[Stop, ...] = field(default=(), init=False, repr=False)
    _locations: deque[Location] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._locations = deque(maxlen=self.history_size)

    def _base(self) -> Path:
        value = self.base_path or os.getenv("MODEL_DATA_PATH") or "data/model"
        return Path(value)

    def _read_array(self, name: str) -> list[Any]:
        path = self._base() / name
        if not path.exists():
            logger.warning("Model data file %s not found", path)
            return []
        with path.open("r", encoding="utf-8") as fp:
            rows = json.load(fp)
        if not isinstance(rows, list):
            raise ValueError(f"{path} must contain a JSON array")
        return rows

    def _ensure_loaded(self) -> None:
        with self._lock:
            if self._loaded:
                return
            vehicles = map(vehicle_from_record, self._read_array("vehicles.json"))
            self._vehicles = {v.id: v for v in vehicles}
            self._routes = {
                r.id: r for r in map(route_from_record, self._read_array("routes.json"))
            }
            self._stops = tuple(map(stop_from_record, self._read_array("stops.json")))
            self._loaded = True
            logger.info(
                "Loaded %d vehicles, %d routes and %d stops from %s",
                len(self._vehicles),
                len(self._routes),
                len(self._stops),
                self._base(),
            )

    def create_location(self, location: Location) -> None:
        if self.location_repository is not None:
            self.location_repository.put_location(location)
        with self._lock:
            self._locations.append(location)

    def get_vehicle(self, vehicle_id: str) -> Vehicle:
        self._ensure_loaded()
        vehicle = self._vehicles.get(vehicle_id)
        if vehicle is None:
            raise VehicleNotFound(f"Unknown vehicle {vehicle_id}")
        return vehicle

    def get_route(self, route_id: str) -> Route:
        self._ensure_loaded()
        route = self._routes.get(route_id)
        if route is None:
            raise RouteNotFound(f"Unknown route {route_id}")
        return route

    def get_stops(self) -> tuple[Stop, ...]:
        self._ensure_loaded()
        return self._stops

    def recent_locations(
        self, *, vehicle_id: str | None = None
    ) -> tuple[Location, ...]:
        with self._lock:
            locations = tuple(self._locations)
        if vehicle_id is None:
            return locations
        return tuple(loc for loc in locations if loc.vehicle_id == vehicle_id)
