from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .geo import GeoPoint


@dataclass(frozen=True, slots=True)
class Location:
    """One observed or derived position fix.

    `id` is assigned by the component that produced the fix (replay engine,
    live feed or tracking manager). A missing `vehicle_id` means the tracker
    is not assigned to a vehicle; a missing `route_id` means the vehicle is
    not running a route. Speed is in m/s, heading in degrees.
    """

    id: int
    tracker_id: str
    lat: float
    lon: float
    heading: float
    speed: float
    time: datetime
    created: datetime
    vehicle_id: str | None = None
    route_id: str | None = None

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(lat=self.lat, lon=self.lon)
