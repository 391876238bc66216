from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from shuttletrack.app.ports.output import IModelService
from shuttletrack.domain.algorithms.prediction import predict_position
from shuttletrack.domain.exceptions import NoPriorObservation, VehicleNotOnRoute
from shuttletrack.domain.models import Location, Prediction, Route, Vehicle


@dataclass(frozen=True, slots=True)
class PredictionResult:
    vehicle: Vehicle
    route: Route
    prediction: Prediction


@dataclass(slots=True)
class PredictionService:
    """Resolves a vehicle's context through the model service and predicts.

    Raises a TrackingError subclass when the vehicle, its last location or
    its route cannot be resolved.
    """

    model_service: IModelService

    def predict(
        self, vehicle_id: str, last_location: Location | None, *, now: datetime
    ) -> PredictionResult:
        vehicle = self.model_service.get_vehicle(vehicle_id)
        if last_location is None:
            raise NoPriorObservation(f"No prior location for vehicle {vehicle_id}")
        if last_location.route_id is None:
            raise VehicleNotOnRoute(f"Vehicle {vehicle_id} is not on a route")

        route = self.model_service.get_route(last_location.route_id)
        stops_by_id = {s.id: s for s in self.model_service.get_stops()}

        prediction = predict_position(
            vehicle, last_location, route, stops_by_id, now=now
        )
        return PredictionResult(vehicle=vehicle, route=route, prediction=prediction)
