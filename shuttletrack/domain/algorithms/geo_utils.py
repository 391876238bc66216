from __future__ import annotations

import math
from typing import Mapping

from shuttletrack.domain.exceptions import EmptyRouteError
from shuttletrack.domain.models import GeoPoint, Route, Stop

EARTH_RADIUS_M = 6371000.0

# Route headings are drawn rotated on the map; keep the offset in sync with it.
BEARING_OFFSET_DEG = 45.0


def haversine_distance_m(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance in meters."""

    lat1 = math.radians(a.lat)
    lon1 = math.radians(a.lon)
    lat2 = math.radians(b.lat)
    lon2 = math.radians(b.lon)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    s = (
        math.sin(dlat / 2.0) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2.0) ** 2
    )
    return 2.0 * EARTH_RADIUS_M * math.asin(math.sqrt(s))


def bearing_deg(a: GeoPoint, b: GeoPoint) -> float:
    """Forward azimuth from `a` to `b` minus the map offset, in [0, 360)."""

    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    dlon = math.radians(b.lon - a.lon)

    y = math.sin(dlon) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(
        dlon
    )
    azimuth = math.degrees(math.atan2(y, x))
    return (azimuth - BEARING_OFFSET_DEG) % 360.0


def closest_point_index(lat: float, lon: float, route: Route) -> int:
    if not route.points:
        raise EmptyRouteError(f"Route {route.id} has no points")

    target = GeoPoint(lat=lat, lon=lon)
    best_i = 0
    best_d = float("inf")
    for i, p in enumerate(route.points):
        d = haversine_distance_m(p, target)
        if d < best_d:
            best_d = d
            best_i = i
    return best_i


def closest_stop_index(
    current_index: int, route: Route, stops_by_id: Mapping[str, Stop]
) -> int | None:
    """Return the position in `route.stop_ids` of the stop nearest the vehicle.

    Distances are measured from the route point at `current_index`. Stop ids
    that are not in `stops_by_id` are skipped. Returns None if none resolve.
    """

    here = route.points[current_index]
    best_i: int | None = None
    best_d = float("inf")
    for i, stop_id in enumerate(route.stop_ids):
        stop = stops_by_id.get(stop_id)
        if stop is None:
            continue
        d = haversine_distance_m(stop.location, here)
        if d < best_d:
            best_d = d
            best_i = i
    return best_i


def stop_route_index(stop: Stop, route: Route) -> int:
    return closest_point_index(stop.location.lat, stop.location.lon, route)


def is_approaching(
    current_index: int,
    stop_index: int,
    route: Route,
    stops_by_id: Mapping[str, Stop],
) -> bool:
    """Whether the stop lies less than half a lap ahead of `current_index`."""

    stop = stops_by_id.get(route.stop_ids[stop_index])
    if stop is None:
        return False

    target = stop_route_index(stop, route)
    half = len(route.points) // 2
    if current_index <= target:
        return target - current_index < half
    return current_index - target > half


def along_route_distance_m(from_index: int, to_index: int, route: Route) -> float:
    elapsed = 0.0
    index = from_index
    while index != to_index:
        prev = index
        index = route.next_index(index)
        elapsed += haversine_distance_m(route.points[prev], route.points[index])
    return elapsed


def route_length_m(route: Route) -> float:
    if len(route.points) < 2:
        return 0.0
    return sum(
        haversine_distance_m(route.points[i], route.points[route.next_index(i)])
        for i in range(len(route.points))
    )


def braking_acceleration_mps2(speed_mps: float, distance_m: float) -> float:
    """Constant deceleration that brings `speed_mps` to zero over `distance_m`."""

    if distance_m <= 0.0:
        raise ValueError(f"Braking distance must be positive, got {distance_m}")
    return -(speed_mps**2) / (2.0 * distance_m)
