from __future__ import annotations

import os
import re
from dataclasses import dataclass
from datetime import timedelta

from shuttletrack.domain.exceptions import InvalidDurationError

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")

_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def parse_duration(raw: str) -> timedelta:
    """Parse a Go-style duration string such as "500ms", "10s" or "1m30s".

    Only positive durations are accepted; anything else raises
    InvalidDurationError.
    """

    text = (raw or "").strip()
    if not text:
        raise InvalidDurationError("Empty duration")

    total_s = 0.0
    pos = 0
    for match in _DURATION_PART.finditer(text):
        if match.start() != pos:
            break
        total_s += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        pos = match.end()

    if pos != len(text):
        raise InvalidDurationError(f"Invalid duration: {raw!r}")
    if total_s <= 0.0:
        raise InvalidDurationError(f"Duration must be positive: {raw!r}")
    return timedelta(seconds=total_s)


def env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


@dataclass(frozen=True, slots=True)
class TrackingConfig:
    enabled: bool = False
    interval: str = "1s"

    @staticmethod
    def from_env() -> "TrackingConfig":
        return TrackingConfig(
            enabled=env_bool("TRACKING_ENABLED", False),
            interval=os.getenv("TRACKING_INTERVAL", "1s"),
        )


@dataclass(frozen=True, slots=True)
class ReplayConfig:
    enabled: bool = False
    interval: str = "10s"
    data_path: str = "spoof_data"

    @staticmethod
    def from_env() -> "ReplayConfig":
        return ReplayConfig(
            enabled=env_bool("REPLAY_ENABLED", False),
            interval=os.getenv("REPLAY_INTERVAL", "10s"),
            data_path=os.getenv("REPLAY_DATA_PATH", "spoof_data"),
        )


@dataclass(frozen=True, slots=True)
class LiveFeedConfig:
    url: str | None = None
    headers_raw: str | None = None
    timeout_s: float = 10.0
    interval: str = "10s"

    @property
    def enabled(self) -> bool:
        return bool(self.url)

    @staticmethod
    def from_env() -> "LiveFeedConfig":
        url = os.getenv("GTFS_RT_VEHICLE_POSITIONS_URL")
        if url is not None:
            url = url.strip() or None

        return LiveFeedConfig(
            url=url,
            headers_raw=os.getenv("GTFS_RT_HEADERS"),
            timeout_s=float(os.getenv("GTFS_RT_TIMEOUT_S", "10")),
            interval=os.getenv("GTFS_RT_INTERVAL", "10s"),
        )
