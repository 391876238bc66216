from __future__ import annotations

from dataclasses import dataclass

from .geo import GeoPoint


@dataclass(frozen=True, slots=True)
class Prediction:
    vehicle_id: str
    point: GeoPoint
    index: int  # route point index
    angle: float  # degrees, see geo_utils.bearing_deg
