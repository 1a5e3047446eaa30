from __future__ import annotations

import logging
from typing import NamedTuple, Optional

from hotspots.record_parser import parse_record

logger = logging.getLogger(__name__)


def _zone_key(zone: str) -> bytes:
    # byte order of the raw file, also for undecodable bytes
    return zone.encode("utf-8", "surrogateescape")


class ZoneCount(NamedTuple):
    zone: str
    count: int


class SlotCount(NamedTuple):
    zone: str
    hour: int
    count: int


class IngestStats(NamedTuple):
    lines_read: int  # data lines after the header, blank ones included
    records_kept: int
    records_skipped: int


class TripAnalyzer:
    """
    Pickup counts per zone and per (zone, hour-of-day) slot for one trip log.

    ingest_file() streams the file once and rebuilds both tables:
      zone_counts[zone]          -> trips picked up in zone
      slot_counts[(zone, hour)]  -> trips picked up in zone during hour

    Nothing here raises on bad input. An unreadable path is a no-op and
    malformed rows are dropped, so callers that care should look at
    ingest_stats or check the path themselves.

    Not thread-safe: one ingestion at a time, and no queries while it runs.
    """

    def __init__(self):
        self._zone_counts: dict[str, int] = {}
        self._slot_counts: dict[tuple[str, int], int] = {}
        self.ingest_stats: Optional[IngestStats] = None

    def reset(self):
        self._zone_counts.clear()
        self._slot_counts.clear()

    def ingest_file(self, path) -> None:
        try:
            f = open(path, "r", encoding="utf-8", errors="surrogateescape", newline="\n")
        except OSError as e:
            logger.warning(f"Could not open {path}: {e}; keeping previous counts")
            return

        self.reset()
        lines_read = kept = 0

        with f:
            try:
                header = f.readline()
                if header:
                    for line in f:
                        lines_read += 1
                        line = line.rstrip("\n")
                        if not line:
                            continue

                        rec = parse_record(line)
                        if rec is None:
                            continue

                        zone, _hour = rec
                        self._zone_counts[zone] = self._zone_counts.get(zone, 0) + 1
                        self._slot_counts[rec] = self._slot_counts.get(rec, 0) + 1
                        kept += 1
            except OSError as e:
                logger.warning(f"Read from {path} failed after {lines_read:,} lines: {e}")

        self.ingest_stats = IngestStats(lines_read, kept, lines_read - kept)
        logger.info(
            f"Ingested {path}: {kept:,} records kept, {lines_read - kept:,} skipped, "
            f"{len(self._zone_counts):,} zones, {len(self._slot_counts):,} slots"
        )

    def top_zones(self, k: int) -> list[ZoneCount]:
        if k <= 0:
            return []
        rows = [ZoneCount(z, c) for z, c in self._zone_counts.items()]
        # count desc, then zone asc
        rows.sort(key=lambda r: (-r.count, _zone_key(r.zone)))
        return rows[:k]

    def top_busy_slots(self, k: int) -> list[SlotCount]:
        if k <= 0:
            return []
        rows = [SlotCount(z, h, c) for (z, h), c in self._slot_counts.items()]
        # count desc, then zone asc, then hour asc
        rows.sort(key=lambda r: (-r.count, _zone_key(r.zone), r.hour))
        return rows[:k]

    def zone_counts(self) -> dict[str, int]:
        return dict(self._zone_counts)

    def slot_counts(self) -> dict[tuple[str, int], int]:
        return dict(self._slot_counts)
