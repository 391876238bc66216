from __future__ import annotations

from dataclasses import dataclass, field

from .geo import GeoPoint


@dataclass(frozen=True, slots=True)
class Route:
    """A precomputed shuttle route.

    `points` is walked as a loop: the last point connects back to the first.
    `stop_ids` lists the stops served by the route, in service order.
    """

    id: str
    points: tuple[GeoPoint, ...] = field(default_factory=tuple)
    stop_ids: tuple[str, ...] = field(default_factory=tuple)
    name: str | None = None

    def next_index(self, index: int) -> int:
        index += 1
        if index >= len(self.points):
            return 0
        return index
