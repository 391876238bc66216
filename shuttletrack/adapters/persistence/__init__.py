from .dynamodb_location_repository import DynamoDbLocationRepository
from .local_model_service import LocalModelService
from .local_replay_source_repository import LocalReplaySourceRepository

__all__ = [
    "DynamoDbLocationRepository",
    "LocalModelService",
    "LocalReplaySourceRepository",
]
