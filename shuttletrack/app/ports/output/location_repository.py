from __future__ import annotations

from abc import ABC, abstractmethod

from shuttletrack.domain.models import Location


class ILocationRepository(ABC):
    """Persistence port for the history of created locations."""

    @abstractmethod
    def put_location(self, location: Location) -> None:
        raise NotImplementedError
