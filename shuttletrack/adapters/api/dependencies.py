from __future__ import annotations

import os

from fastapi import HTTPException, Request

from shuttletrack.adapters.persistence import (
    DynamoDbLocationRepository,
    LocalModelService,
    LocalReplaySourceRepository,
)
from shuttletrack.adapters.realtime import HttpGtfsRealtimeLocationFeed
from shuttletrack.app.config import LiveFeedConfig, ReplayConfig, TrackingConfig
from shuttletrack.app.ports.output import ILocationFeed, IModelService
from shuttletrack.app.services.replay_engine import ReplayEngine
from shuttletrack.app.services.tracking_manager import TrackingManager


def build_model_service() -> LocalModelService:
    location_repository = None
    if os.getenv("LOCATIONS_TABLE"):
        location_repository = DynamoDbLocationRepository()
    return LocalModelService(location_repository=location_repository)


def build_location_feed(model_service: IModelService) -> ILocationFeed | None:
    """Replay takes precedence over the live feed when both are configured."""

    replay_cfg = ReplayConfig.from_env()
    if replay_cfg.enabled:
        return ReplayEngine(
            config=replay_cfg,
            model_service=model_service,
            source_repository=LocalReplaySourceRepository(
                base_path=replay_cfg.data_path
            ),
        )

    live_cfg = LiveFeedConfig.from_env()
    if live_cfg.enabled:
        return HttpGtfsRealtimeLocationFeed(
            config=live_cfg, model_service=model_service
        )

    return None


def build_tracking_manager(model_service: IModelService) -> TrackingManager:
    return TrackingManager(
        config=TrackingConfig.from_env(), model_service=model_service
    )


def get_tracking_manager(request: Request) -> TrackingManager:
    manager = getattr(request.app.state, "tracking_manager", None)
    if manager is None:
        raise HTTPException(status_code=503, detail="Tracking is not running")
    return manager


def get_model_service(request: Request) -> LocalModelService:
    model_service = getattr(request.app.state, "model_service", None)
    if model_service is None:
        raise HTTPException(status_code=503, detail="Tracking is not running")
    return model_service
