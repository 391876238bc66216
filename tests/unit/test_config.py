from __future__ import annotations

from datetime import timedelta

import pytest

from shuttletrack.app.config import (
    LiveFeedConfig,
    ReplayConfig,
    TrackingConfig,
    parse_duration,
)
from shuttletrack.domain.exceptions import ConfigurationError, InvalidDurationError


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("10s", timedelta(seconds=10)),
        ("500ms", timedelta(milliseconds=500)),
        ("1m30s", timedelta(seconds=90)),
        ("1.5h", timedelta(minutes=90)),
        (" 2s ", timedelta(seconds=2)),
    ],
)
def test_parse_duration(raw: str, expected: timedelta) -> None:
    assert parse_duration(raw) == expected


@pytest.mark.parametrize("raw", ["", "10", "ten seconds", "5x", "0s", "1s garbage"])
def test_parse_duration_rejects_invalid_values(raw: str) -> None:
    with pytest.raises(InvalidDurationError):
        parse_duration(raw)


def test_invalid_duration_is_a_configuration_error() -> None:
    with pytest.raises(ConfigurationError):
        parse_duration("soon")


def test_configs_from_env(monkeypatch) -> None:
    monkeypatch.setenv("TRACKING_ENABLED", "yes")
    monkeypatch.setenv("TRACKING_INTERVAL", "2s")
    monkeypatch.setenv("REPLAY_ENABLED", "0")
    monkeypatch.setenv("REPLAY_DATA_PATH", "/tmp/replay")
    monkeypatch.setenv("GTFS_RT_VEHICLE_POSITIONS_URL", "  ")

    assert TrackingConfig.from_env() == TrackingConfig(enabled=True, interval="2s")

    replay = ReplayConfig.from_env()
    assert replay.enabled is False
    assert replay.interval == "10s"
    assert replay.data_path == "/tmp/replay"

    assert LiveFeedConfig.from_env().enabled is False
