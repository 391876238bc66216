from .config import ConfigurationError, InvalidDurationError
from .replay import ReplaySourceError
from .tracking import (
    EmptyRouteError,
    NoPriorObservation,
    RouteNotFound,
    TrackingError,
    VehicleNotFound,
    VehicleNotOnRoute,
)

__all__ = [
    "ConfigurationError",
    "EmptyRouteError",
    "InvalidDurationError",
    "NoPriorObservation",
    "ReplaySourceError",
    "RouteNotFound",
    "TrackingError",
    "VehicleNotFound",
    "VehicleNotOnRoute",
]
