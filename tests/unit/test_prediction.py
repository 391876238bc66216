from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from shuttletrack.domain.algorithms.geo_utils import haversine_distance_m
from shuttletrack.domain.algorithms.prediction import predict_position
from shuttletrack.domain.models import GeoPoint, Location, Route, Stop, Vehicle

NOW = datetime(2026, 10, 17, 9, 30, tzinfo=timezone.utc)
VEHICLE = Vehicle(id="7")


def _location_at(
    point: GeoPoint, *, speed: float, age_s: float, route_id: str = "R1"
) -> Location:
    observed = NOW - timedelta(seconds=age_s)
    return Location(
        id=1,
        tracker_id="trk-7",
        vehicle_id=VEHICLE.id,
        route_id=route_id,
        lat=point.lat,
        lon=point.lon,
        heading=0.0,
        speed=speed,
        time=observed,
        created=observed,
    )


@pytest.mark.parametrize(("speed", "age_s"), [(0.0, 30.0), (8.0, 0.0)])
def test_zero_projected_distance_keeps_current_point(
    square_route: Route, speed: float, age_s: float
) -> None:
    last = _location_at(square_route.points[2], speed=speed, age_s=age_s)

    p = predict_position(VEHICLE, last, square_route, {}, now=NOW)

    assert p.index == 2
    assert p.point == square_route.points[2]
    assert p.angle == 0.0
    assert p.vehicle_id == "7"


def test_exact_segment_distance_lands_on_next_point(square_route: Route) -> None:
    pts = square_route.points
    first_leg_m = haversine_distance_m(pts[0], pts[1])
    last = _location_at(pts[0], speed=first_leg_m, age_s=1.0)

    p = predict_position(VEHICLE, last, square_route, {}, now=NOW)

    assert p.index == 1
    assert p.point == pts[1]
    assert p.angle == pytest.approx(45.0)  # heading east, minus the map offset


def test_prediction_wraps_past_end_of_route(square_route: Route) -> None:
    pts = square_route.points
    last = _location_at(pts[3], speed=120.0, age_s=1.0)

    p = predict_position(VEHICLE, last, square_route, {}, now=NOW)

    # ~111 m per side: one full side and a bit more from point 3.
    assert p.index == 1


def test_snaps_to_closest_route_point(square_route: Route) -> None:
    off_route = GeoPoint(lat=0.00002, lon=0.00098)
    last = _location_at(off_route, speed=0.0, age_s=10.0)

    p = predict_position(VEHICLE, last, square_route, {}, now=NOW)

    assert p.index == 1


def _route_with_stop(line_route: Route, stop_index: int) -> tuple[Route, dict]:
    route = Route(id=line_route.id, points=line_route.points, stop_ids=("S",))
    stops = {"S": Stop(id="S", location=line_route.points[stop_index])}
    return route, stops


def test_vehicle_brakes_when_close_to_approached_stop(line_route: Route) -> None:
    # Stop two points (~22 m) ahead, 10 m/s for 4 s.
    route, stops = _route_with_stop(line_route, stop_index=3)
    last = _location_at(route.points[1], speed=10.0, age_s=4.0, route_id=route.id)

    braking = predict_position(VEHICLE, last, route, stops, now=NOW)
    cruising = predict_position(VEHICLE, last, line_route, {}, now=NOW)

    assert cruising.index == 5
    assert braking.index == 3


def test_vehicle_at_stop_stays_put(line_route: Route) -> None:
    route, stops = _route_with_stop(line_route, stop_index=3)
    last = _location_at(route.points[3], speed=10.0, age_s=4.0, route_id=route.id)

    p = predict_position(VEHICLE, last, route, stops, now=NOW)

    assert p.index == 3
    assert p.angle == 0.0


def test_stop_behind_vehicle_does_not_brake(line_route: Route) -> None:
    route, stops = _route_with_stop(line_route, stop_index=3)
    last = _location_at(route.points[5], speed=10.0, age_s=2.0, route_id=route.id)

    p = predict_position(VEHICLE, last, route, stops, now=NOW)

    # 20 m projected from point 5: two ~11.1 m segments.
    assert p.index == 7


def test_far_stop_does_not_brake(line_route: Route) -> None:
    route, stops = _route_with_stop(line_route, stop_index=8)
    last = _location_at(route.points[1], speed=10.0, age_s=2.0, route_id=route.id)

    p = predict_position(VEHICLE, last, route, stops, now=NOW)

    assert p.index == 3


def test_degenerate_route_is_not_walked() -> None:
    here = GeoPoint(lat=1.0, lon=1.0)
    route = Route(id="dot", points=(here, here, here))
    last = _location_at(here, speed=10.0, age_s=60.0, route_id="dot")

    p = predict_position(VEHICLE, last, route, {}, now=NOW)

    assert p.index == 0
    assert p.angle == 0.0
