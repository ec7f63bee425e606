"""On-disk cache of the last detected block start.

The file holds a single JSON object ``{"startTime": "<ISO-8601>"}``. A
missing, empty or garbled file reads as no cache. Writes are unlocked;
two concurrent writers store the same answer.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .transcript import parse_timestamp
from ..util.log import Log

log = Log.create({"service": "usage.block_cache"})


def format_timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


class BlockCache:
    """Reads and writes the cached block start at a fixed path."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def read(self) -> Optional[datetime]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError, UnicodeDecodeError):
            return None
        if not isinstance(data, dict):
            return None
        return parse_timestamp(data.get("startTime"))

    def write(self, start_time: datetime) -> None:
        payload = json.dumps({"startTime": format_timestamp(start_time)})
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(payload, encoding="utf-8")
        except OSError as e:
            log.warn("failed to write block cache", {"path": str(self.path), "error": str(e)})

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            log.warn("failed to clear block cache", {"path": str(self.path), "error": str(e)})
