from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from shuttletrack.domain.models import Location

LocationCallback = Callable[[Location], None]


class ILocationFeed(ABC):
    """An upstream producer of Location events (live GPS or replay)."""

    @abstractmethod
    def subscribe(self, callback: LocationCallback) -> None:
        """Register a callback invoked with every new location."""

    @abstractmethod
    def run(self) -> None:
        """Produce locations until stopped. Blocks the caller."""

    @abstractmethod
    def stop(self) -> None:
        raise NotImplementedError
