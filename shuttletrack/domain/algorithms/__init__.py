from .geo_utils import (
    along_route_distance_m,
    bearing_deg,
    braking_acceleration_mps2,
    closest_point_index,
    closest_stop_index,
    haversine_distance_m,
    is_approaching,
    stop_route_index,
)
from .prediction import predict_position

__all__ = [
    "along_route_distance_m",
    "bearing_deg",
    "braking_acceleration_mps2",
    "closest_point_index",
    "closest_stop_index",
    "haversine_distance_m",
    "is_approaching",
    "predict_position",
    "stop_route_index",
]
