from __future__ import annotations

from concurrent.futures import Executor, Future
from typing import Any, Callable

import pytest

from shuttletrack.domain.models import GeoPoint, Route


class InlineExecutor(Executor):
    """Runs submitted callables immediately so notifications are deterministic."""

    def submit(self, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Future:
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as exc:
            future.set_exception(exc)
        return future


@pytest.fixture
def inline_executor() -> InlineExecutor:
    return InlineExecutor()


@pytest.fixture
def square_route() -> Route:
    # Roughly 111 m per side, walked counter-clockwise from the origin.
    return Route(
        id="R1",
        points=(
            GeoPoint(lat=0.0, lon=0.0),
            GeoPoint(lat=0.0, lon=0.001),
            GeoPoint(lat=0.001, lon=0.001),
            GeoPoint(lat=0.001, lon=0.0),
        ),
    )


@pytest.fixture
def line_route() -> Route:
    """20 points ~11.1 m apart along the equator, closed back to the start."""

    return Route(
        id="LINE",
        points=tuple(GeoPoint(lat=0.0, lon=i * 0.0001) for i in range(20)),
    )
