"""Detection of the current 5-hour usage block.

Usage is billed in fixed windows. A window opens at the UTC hour of the
first request after a quiet period and lasts ``window`` from there; a
request at or after its end opens the next one. Activity is read from the
host's append-only JSON-lines logs under ``<root>/projects``.

Files are visited newest first by modification time, so a lookback horizon
only reads the prefix of files touched inside it. Short horizons are tried
first and widened only when they hold no activity at all.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .block_cache import BlockCache
from .transcript import iter_json_lines, parse_timestamp
from ..util.log import Log

log = Log.create({"service": "usage.blocks"})

BLOCK_DURATION = timedelta(hours=5)
LOOKBACK_HOURS: Tuple[int, ...] = (10, 20, 48)
LOG_GLOB = "projects/**/*.jsonl"


@dataclass(frozen=True)
class ActivityWindow:
    start_time: datetime
    last_activity: datetime
    is_active: bool


@dataclass(frozen=True)
class TimestampedEvent:
    """The fields of one log line that matter for block detection."""
    timestamp: datetime
    has_usage_payload: bool
    is_sidechain: bool

    @property
    def counts_as_activity(self) -> bool:
        return self.has_usage_payload and not self.is_sidechain

    @classmethod
    def from_entry(cls, entry: Dict[str, Any]) -> Optional["TimestampedEvent"]:
        timestamp = parse_timestamp(entry.get("timestamp"))
        if timestamp is None:
            return None
        return cls(
            timestamp=timestamp,
            has_usage_payload=_has_usage_payload(entry),
            is_sidechain=entry.get("isSidechain") is True,
        )


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _has_usage_payload(entry: Dict[str, Any]) -> bool:
    message = entry.get("message")
    if not isinstance(message, dict):
        return False
    usage = message.get("usage")
    if not isinstance(usage, dict):
        return False
    return _is_number(usage.get("input_tokens")) and _is_number(usage.get("output_tokens"))


def activity_timestamps(path: str | Path) -> List[datetime]:
    """Timestamps of the main-chain requests recorded in one log file."""
    result = []
    for entry in iter_json_lines(path):
        event = TimestampedEvent.from_entry(entry)
        if event is not None and event.counts_as_activity:
            result.append(event.timestamp)
    return result


def floor_to_hour(value: datetime) -> datetime:
    return value.astimezone(timezone.utc).replace(minute=0, second=0, microsecond=0)


def find_block_start(timestamps: Sequence[datetime], window: timedelta = BLOCK_DURATION) -> Optional[datetime]:
    """Start of the block holding the latest timestamp.

    Hour buckets are walked back from the latest one while consecutive
    buckets are less than ``window`` apart; that marks where the current
    stretch of work began. From there blocks are laid forward, each new
    one opening at the first bucket at or past the previous block's end.
    """
    buckets = sorted({floor_to_hour(ts) for ts in timestamps})
    if not buckets:
        return None

    first = len(buckets) - 1
    while first > 0 and buckets[first] - buckets[first - 1] < window:
        first -= 1

    block_start = buckets[first]
    for bucket in buckets[first + 1:]:
        if bucket >= block_start + window:
            block_start = bucket
    return block_start


def detect_window(
    timestamps: Sequence[datetime],
    now: datetime,
    window: timedelta = BLOCK_DURATION,
) -> Optional[ActivityWindow]:
    """Resolve the active block for ``now`` from a set of activity timestamps."""
    if not timestamps:
        return None

    most_recent = max(timestamps)
    if now - most_recent >= window:
        return None

    block_start = find_block_start(timestamps, window)
    if block_start is None:
        return None

    block_end = block_start + window
    if now > block_end:
        return None
    if not (block_start <= most_recent <= now):
        return None

    return ActivityWindow(
        start_time=block_start,
        last_activity=most_recent,
        is_active=now < block_end,
    )


class BlockDetector:
    """Finds the active usage block under a host config directory.

    Args:
        root: Directory holding ``projects/**/*.jsonl``.
        cache: Where the last block start is remembered, or None to always scan.
        window: Block duration.
        lookback_hours: Horizons tried in order until one holds activity.
    """

    def __init__(
        self,
        root: str | Path,
        cache: Optional[BlockCache] = None,
        window: timedelta = BLOCK_DURATION,
        lookback_hours: Sequence[int] = LOOKBACK_HOURS,
    ):
        self.root = Path(root)
        self.cache = cache
        self.window = window
        self.lookback_hours = tuple(lookback_hours)

    def discover_files(self) -> List[Tuple[Path, datetime]]:
        """Log files with their modification times, newest first."""
        files = []
        for path in self.root.glob(LOG_GLOB):
            try:
                mtime = path.stat().st_mtime
            except OSError:
                continue
            files.append((path, datetime.fromtimestamp(mtime, tz=timezone.utc)))
        files.sort(key=lambda item: item[1], reverse=True)
        return files

    def scan(self, now: datetime) -> Optional[ActivityWindow]:
        """Compute the active block from the log files, ignoring the cache."""
        files = self.discover_files()
        if not files:
            return None

        parsed: Dict[Path, List[datetime]] = {}
        with log.time("scan activity logs", {"files": len(files)}):
            for hours in self.lookback_hours:
                cutoff = now - timedelta(hours=hours)
                timestamps: List[datetime] = []
                for path, mtime in files:
                    if mtime < cutoff:
                        break
                    if path not in parsed:
                        parsed[path] = activity_timestamps(path)
                    timestamps.extend(ts for ts in parsed[path] if ts >= cutoff)

                if timestamps:
                    log.debug("activity found", {"lookback_hours": hours, "count": len(timestamps)})
                    return detect_window(timestamps, now, self.window)

        return None

    def current(self, now: Optional[datetime] = None) -> Optional[ActivityWindow]:
        """Active block for ``now``, served from the cache while it is fresh."""
        now = now or datetime.now(timezone.utc)

        cached = None
        if self.cache is not None:
            cached = self.cache.read()
            if cached is not None and timedelta(0) <= now - cached < self.window:
                return ActivityWindow(start_time=cached, last_activity=cached, is_active=True)

        result = self.scan(now)
        if self.cache is not None:
            if result is not None:
                self.cache.write(result.start_time)
            elif cached is not None:
                self.cache.clear()
        return result
