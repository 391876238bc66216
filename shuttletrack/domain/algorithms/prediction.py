from __future__ import annotations

from datetime import datetime
from typing import Mapping

from shuttletrack.domain.models import Location, Prediction, Route, Stop, Vehicle

from .geo_utils import (
    along_route_distance_m,
    bearing_deg,
    braking_acceleration_mps2,
    closest_point_index,
    closest_stop_index,
    haversine_distance_m,
    is_approaching,
    route_length_m,
    stop_route_index,
)

# Below this along-route distance to an approached stop, assume the vehicle brakes.
BRAKING_DISTANCE_M = 30.0


def projected_distance_m(
    last_location: Location,
    route: Route,
    index: int,
    stops_by_id: Mapping[str, Stop],
    *,
    now: datetime,
) -> float:
    """Distance the vehicle is expected to have covered since `last_location`.

    Constant velocity, except when closing in on a stop, where the vehicle is
    assumed to decelerate uniformly to a halt at the stop.
    """

    elapsed_s = (now - last_location.time).total_seconds()
    speed = last_location.speed
    projected = elapsed_s * speed

    stop_index = closest_stop_index(index, route, stops_by_id)
    if stop_index is None or not is_approaching(index, stop_index, route, stops_by_id):
        return projected

    stop = stops_by_id[route.stop_ids[stop_index]]
    distance_to_stop = along_route_distance_m(
        index, stop_route_index(stop, route), route
    )
    if distance_to_stop >= BRAKING_DISTANCE_M:
        return projected
    if distance_to_stop == 0.0:
        # Already at the stop.
        return 0.0

    a = braking_acceleration_mps2(speed, distance_to_stop)
    return speed * elapsed_s + 0.5 * a * elapsed_s**2


def predict_position(
    vehicle: Vehicle,
    last_location: Location,
    route: Route,
    stops_by_id: Mapping[str, Stop],
    *,
    now: datetime,
) -> Prediction:
    """Predict where `vehicle` is on `route` at `now`.

    The vehicle is snapped to the closest route point, then walked forward
    point by point (wrapping at the end of the loop) until the projected
    distance is covered. The angle is the bearing of the last segment walked,
    or 0 when the vehicle did not move.
    """

    index = closest_point_index(last_location.lat, last_location.lon, route)
    projected = projected_distance_m(last_location, route, index, stops_by_id, now=now)

    angle = 0.0
    if projected > 0.0 and route_length_m(route) > 0.0:
        elapsed = 0.0
        while elapsed < projected:
            prev = index
            index = route.next_index(index)
            elapsed += haversine_distance_m(route.points[prev], route.points[index])
            angle = bearing_deg(route.points[prev], route.points[index])

    return Prediction(
        vehicle_id=vehicle.id,
        point=route.points[index],
        index=index,
        angle=angle,
    )
