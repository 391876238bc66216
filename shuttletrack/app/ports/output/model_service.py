from __future__ import annotations

from abc import ABC, abstractmethod

from shuttletrack.domain.models import Location, Route, Stop, Vehicle


class IModelService(ABC):
    """Port to the store of vehicles, routes, stops and locations."""

    @abstractmethod
    def create_location(self, location: Location) -> None:
        """Persist a location. Raises on failure."""

    @abstractmethod
    def get_vehicle(self, vehicle_id: str) -> Vehicle:
        """Return a vehicle or raise VehicleNotFound."""

    @abstractmethod
    def get_route(self, route_id: str) -> Route:
        """Return a route or raise RouteNotFound."""

    @abstractmethod
    def get_stops(self) -> tuple[Stop, ...]:
        raise NotImplementedError
