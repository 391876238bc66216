from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from shuttletrack.adapters.api.dependencies import (
    get_model_service,
    get_tracking_manager,
)
from shuttletrack.adapters.api.schemas.tracking import (
    ActiveVehicleSchema,
    ActiveVehiclesResponseSchema,
    GeoPointSchema,
    LocationHistoryResponseSchema,
    LocationSchema,
    PredictionSchema,
    PredictionsResponseSchema,
)
from shuttletrack.adapters.persistence import LocalModelService
from shuttletrack.app.services.tracking_manager import TrackingManager
from shuttletrack.domain.models import Location, Prediction

router = APIRouter(prefix="/tracking", tags=["tracking"])


def _prediction_to_schema(p: Prediction) -> PredictionSchema:
    return PredictionSchema(
        vehicle_id=p.vehicle_id,
        point=GeoPointSchema(lat=p.point.lat, lon=p.point.lon),
        index=p.index,
        angle=p.angle,
    )


def _location_to_schema(loc: Location) -> LocationSchema:
    return LocationSchema(
        id=loc.id,
        tracker_id=loc.tracker_id,
        vehicle_id=loc.vehicle_id,
        route_id=loc.route_id,
        lat=loc.lat,
        lon=loc.lon,
        heading=loc.heading,
        speed=loc.speed,
        time=loc.time,
        created=loc.created,
    )


@router.get("/predictions", response_model=PredictionsResponseSchema)
def list_predictions(
    manager: TrackingManager = Depends(get_tracking_manager),
) -> PredictionsResponseSchema:
    predictions = manager.current_predictions()
    return PredictionsResponseSchema(
        generated_at=datetime.now(timezone.utc),
        predictions=[
            _prediction_to_schema(predictions[vid]) for vid in sorted(predictions)
        ],
    )


@router.get("/vehicles", response_model=ActiveVehiclesResponseSchema)
def list_active_vehicles(
    manager: TrackingManager = Depends(get_tracking_manager),
) -> ActiveVehiclesResponseSchema:
    vehicles: list[ActiveVehicleSchema] = []
    for vehicle_id in manager.active_vehicle_ids():
        last = manager.last_location(vehicle_id)
        vehicles.append(
            ActiveVehicleSchema(
                vehicle_id=vehicle_id,
                last_location=_location_to_schema(last) if last else None,
            )
        )
    return ActiveVehiclesResponseSchema(
        generated_at=datetime.now(timezone.utc), vehicles=vehicles
    )


@router.get("/vehicles/{vehicle_id}/prediction", response_model=PredictionSchema)
def get_prediction(
    vehicle_id: str,
    manager: TrackingManager = Depends(get_tracking_manager),
) -> PredictionSchema:
    prediction = manager.current_predictions().get(vehicle_id)
    if prediction is None:
        raise HTTPException(status_code=404, detail="No prediction for vehicle")
    return _prediction_to_schema(prediction)


@router.get(
    "/vehicles/{vehicle_id}/locations", response_model=LocationHistoryResponseSchema
)
def get_location_history(
    vehicle_id: str,
    model_service: LocalModelService = Depends(get_model_service),
) -> LocationHistoryResponseSchema:
    """Observed and derived locations of one vehicle, oldest first."""

    history = model_service.recent_locations(vehicle_id=vehicle_id)
    return LocationHistoryResponseSchema(
        vehicle_id=vehicle_id,
        locations=[_location_to_schema(loc) for loc in history],
    )
