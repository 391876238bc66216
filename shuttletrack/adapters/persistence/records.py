from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping

from shuttletrack.domain.exceptions import ReplaySourceError
from shuttletrack.domain.models import GeoPoint, Location, Route, Stop, Vehicle


def _parse_time(raw: Any) -> datetime:
    if isinstance(raw, datetime):
        value = raw
    elif isinstance(raw, str) and raw.strip():
        # Python < 3.11 does not accept a trailing 'Z'.
        value = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
    else:
        return datetime.now(timezone.utc)

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def _optional_id(raw: Any) -> str | None:
    if raw is None:
        return None
    value = str(raw).strip()
    return value or None


def location_from_record(row: Mapping[str, Any]) -> Location:
    """Decode one recorded location (the shuttle tracker's JSON layout)."""

    try:
        return Location(
            id=int(row.get("id") or 0),
            tracker_id=str(row.get("tracker_id") or ""),
            vehicle_id=_optional_id(row.get("vehicle_id")),
            route_id=_optional_id(row.get("route_id")),
            lat=float(row["latitude"]),
            lon=float(row["longitude"]),
            heading=float(row.get("heading") or 0.0),
            speed=float(row.get("speed") or 0.0),
            time=_parse_time(row.get("time")),
            created=_parse_time(row.get("created")),
        )
    except (AttributeError, TypeError, ValueError, KeyError) as exc:
        raise ReplaySourceError(f"Invalid location record: {exc}") from exc


def location_to_record(location: Location) -> dict[str, Any]:
    return {
        "id": location.id,
        "tracker_id": location.tracker_id,
        "vehicle_id": location.vehicle_id,
        "route_id": location.route_id,
        "latitude": location.lat,
        "longitude": location.lon,
        "heading": location.heading,
        "speed": location.speed,
        "time": location.time.isoformat(),
        "created": location.created.isoformat(),
    }


def _point(row: Mapping[str, Any]) -> GeoPoint:
    return GeoPoint(lat=float(row["latitude"]), lon=float(row["longitude"]))


def route_from_record(row: Mapping[str, Any]) -> Route:
    return Route(
        id=str(row["id"]),
        name=(row.get("name") or "").strip() or None,
        points=tuple(_point(p) for p in row.get("points") or ()),
        stop_ids=tuple(str(s) for s in row.get("stop_ids") or ()),
    )


def stop_from_record(row: Mapping[str, Any]) -> Stop:
    return Stop(
        id=str(row["id"]),
        name=(row.get("name") or "").strip() or None,
        location=_point(row),
    )


def vehicle_from_record(row: Mapping[str, Any]) -> Vehicle:
    return Vehicle(id=str(row["id"]), name=(row.get("name") or "").strip() or None)
