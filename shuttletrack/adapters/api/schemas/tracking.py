from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class GeoPointSchema(BaseModel):
    lat: float
    lon: float


class PredictionSchema(BaseModel):
    vehicle_id: str
    point: GeoPointSchema
    index: int
    angle: float


class PredictionsResponseSchema(BaseModel):
    generated_at: datetime
    predictions: list[PredictionSchema]


class LocationSchema(BaseModel):
    id: int
    tracker_id: str
    vehicle_id: str | None = None
    route_id: str | None = None
    lat: float
    lon: float
    heading: float
    speed: float
    time: datetime
    created: datetime


class ActiveVehicleSchema(BaseModel):
    vehicle_id: str
    last_location: LocationSchema | None = None


class ActiveVehiclesResponseSchema(BaseModel):
    generated_at: datetime
    vehicles: list[ActiveVehicleSchema]


class LocationHistoryResponseSchema(BaseModel):
    vehicle_id: str
    locations: list[LocationSchema]
