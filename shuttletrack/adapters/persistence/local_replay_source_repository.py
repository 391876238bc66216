from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from shuttletrack.app.ports.output import IReplaySourceRepository, ReplaySource
from shuttletrack.domain.exceptions import ReplaySourceError

from .records import location_from_record

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LocalReplaySourceRepository(IReplaySourceRepository):
    """Loads recorded location sequences from a directory of .json files.

    Each file holds a JSON array of location records for one vehicle, in
    playback order. Files that cannot be read or decoded are logged and
    skipped.

    Env vars:
      - REPLAY_DATA_PATH: directory holding the files (default: spoof_data)
    """

    base_path: str | Path | None = None

    def _base(self) -> Path:
        value = self.base_path or os.getenv("REPLAY_DATA_PATH") or "spoof_data"
        return Path(value)

    def load_sources(self) -> tuple[ReplaySource, ...]:
        base = self._base()
        if not base.is_dir():
            logger.error("Replay data directory %s not found", base)
            return ()

        sources: list[ReplaySource] = []
        for path in sorted(base.glob("*.json")):
            if not path.is_file():
                continue
            try:
                sources.append(self._load_file(path))
            except (OSError, json.JSONDecodeError, ReplaySourceError) as exc:
                logger.error("Skipping replay file %s: %s", path.name, exc)
        return tuple(sources)

    def _load_file(self, path: Path) -> ReplaySource:
        with path.open("r", encoding="utf-8") as fp:
            rows = json.load(fp)
        if not isinstance(rows, list):
            raise ReplaySourceError("expected a JSON array of locations")
        locations = tuple(location_from_record(row) for row in rows)
        return ReplaySource(name=path.name, locations=locations)
