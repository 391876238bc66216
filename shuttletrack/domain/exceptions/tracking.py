class TrackingError(Exception):
    """Base exception for per-vehicle tracking failures."""


class VehicleNotFound(TrackingError):
    """Raised when the model service does not know a vehicle id."""


class RouteNotFound(TrackingError):
    """Raised when the model service does not know a route id."""


class NoPriorObservation(TrackingError):
    """Raised when a vehicle has no last known location to predict from."""


class VehicleNotOnRoute(TrackingError):
    """Raised when a vehicle's last known location has no route."""


class EmptyRouteError(TrackingError):
    """Raised when a route has no points to place a vehicle on."""
