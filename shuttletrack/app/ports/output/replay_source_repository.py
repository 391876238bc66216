from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from shuttletrack.domain.models import Location


@dataclass(frozen=True, slots=True)
class ReplaySource:
    """A recorded, ordered location sequence for one vehicle."""

    name: str
    locations: tuple[Location, ...]


class IReplaySourceRepository(ABC):
    """Port for loading recorded location sequences."""

    @abstractmethod
    def load_sources(self) -> tuple[ReplaySource, ...]:
        raise NotImplementedError
