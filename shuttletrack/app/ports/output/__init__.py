from .location_feed import ILocationFeed, LocationCallback
from .location_repository import ILocationRepository
from .model_service import IModelService
from .replay_source_repository import IReplaySourceRepository, ReplaySource

__all__ = [
    "ILocationFeed",
    "ILocationRepository",
    "IModelService",
    "IReplaySourceRepository",
    "LocationCallback",
    "ReplaySource",
]
