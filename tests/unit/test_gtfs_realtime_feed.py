from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

import httpx
import pytest
from google.transit import gtfs_realtime_pb2

from shuttletrack.adapters.realtime import HttpGtfsRealtimeLocationFeed
from shuttletrack.app.config import LiveFeedConfig
from shuttletrack.domain.models import Location

FEED_URL = "http://feed.test/vehicle-positions"
NOW = datetime(2026, 10, 17, 9, 30, tzinfo=timezone.utc)


@dataclass(slots=True)
class RecordingModelService:
    created: list[Location] = field(default_factory=list)

    def create_location(self, location: Location) -> None:
        self.created.append(location)


def _feed_bytes(*positions: tuple[str, str | None, int]) -> bytes:
    msg = gtfs_realtime_pb2.FeedMessage()
    msg.header.gtfs_realtime_version = "2.0"
    for vehicle_id, route_id, timestamp in positions:
        ent = msg.entity.add()
        ent.id = f"ent-{vehicle_id}"
        ent.vehicle.vehicle.id = vehicle_id
        if route_id is not None:
            ent.vehicle.trip.route_id = route_id
        ent.vehicle.position.latitude = 42.73
        ent.vehicle.position.longitude = -73.68
        ent.vehicle.position.bearing = 90.0
        ent.vehicle.position.speed = 6.5
        ent.vehicle.timestamp = timestamp

    # An entity without a position is not a location.
    ent = msg.entity.add()
    ent.id = "alert-only"
    ent.vehicle.vehicle.id = "ghost"
    return msg.SerializeToString()


def _feed(handler, *, headers_raw: str | None = None, executor=None):
    model_service = RecordingModelService()
    client = httpx.Client(transport=httpx.MockTransport(handler))
    feed = HttpGtfsRealtimeLocationFeed(
        config=LiveFeedConfig(url=FEED_URL, headers_raw=headers_raw, interval="1s"),
        model_service=model_service,
        executor=executor,
        client=client,
    )
    return feed, model_service


def test_poll_emits_positions(inline_executor) -> None:
    content = _feed_bytes(("7", "R1", 1_760_000_000), ("8", None, 0))
    seen_headers: list[httpx.Headers] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen_headers.append(request.headers)
        return httpx.Response(200, content=content)

    feed, model_service = _feed(
        handler, headers_raw="x-api-key: secret; junk", executor=inline_executor
    )
    received: list[Location] = []
    feed.subscribe(received.append)

    emitted = feed.poll(now=NOW)

    assert [loc.vehicle_id for loc in emitted] == ["7", "8"]
    assert received == emitted
    assert model_service.created == emitted
    assert seen_headers[0]["x-api-key"] == "secret"

    first, second = emitted
    assert first.route_id == "R1"
    assert first.tracker_id == "ent-7"
    assert first.speed == pytest.approx(6.5)
    assert first.heading == pytest.approx(90.0)
    assert first.time == datetime.fromtimestamp(1_760_000_000, tz=timezone.utc)
    assert second.route_id is None
    assert second.time == NOW
    assert first.id != second.id


def test_unchanged_reports_are_not_emitted_twice() -> None:
    payloads = [
        _feed_bytes(("7", "R1", 100), ("8", "R1", 100)),
        _feed_bytes(("7", "R1", 100), ("8", "R1", 160)),
    ]

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=payloads.pop(0))

    feed, model_service = _feed(handler)

    assert len(feed.poll(now=NOW)) == 2
    second = feed.poll(now=NOW)

    assert [loc.vehicle_id for loc in second] == ["8"]
    assert len(model_service.created) == 3


def test_http_error_skips_the_poll(caplog) -> None:
    feed, model_service = _feed(lambda request: httpx.Response(503))

    assert feed.poll(now=NOW) == []
    assert model_service.created == []
    assert "Could not fetch" in caplog.text


def test_undecodable_body_skips_the_poll(caplog) -> None:
    feed, model_service = _feed(
        lambda request: httpx.Response(200, content=b"\x0f\xff\xff")
    )

    assert feed.poll(now=NOW) == []
    assert model_service.created == []
    assert "Could not decode" in caplog.text


def test_run_without_url_returns_immediately() -> None:
    feed = HttpGtfsRealtimeLocationFeed(
        config=LiveFeedConfig(url=None),
        model_service=RecordingModelService(),
    )

    feed.run()
