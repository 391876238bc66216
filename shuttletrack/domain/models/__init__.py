from .geo import GeoPoint
from .location import Location
from .prediction import Prediction
from .route import Route
from .stop import Stop
from .vehicle import Vehicle

__all__ = [
    "GeoPoint",
    "Location",
    "Prediction",
    "Route",
    "Stop",
    "Vehicle",
]
