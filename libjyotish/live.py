"""
Live position retrieval.

PositionService answers "where is everything now" with a cached snapshot, a
remote source, or the local models, in that order. Callers always receive a
complete snapshot; ``snapshot.source`` tells which source produced it.

Usage:
    service = PositionService()
    snapshot = service.get_positions()
    print(snapshot.position("moon").nakshatra.display)
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from .cache import SnapshotCache
from .models import AstronomicalSnapshot, EventLike, normalize_events
from .sources import LocalComputationSource, PositionSource, SourceError, default_sources
from .time_utils import to_utc

logger = logging.getLogger(__name__)


class PositionService:
    """
    Cached retrieval over an ordered chain of position sources.

    The default chain includes FreeAstrologyAPI at state.DEFAULT_SECONDARY_URL,
    so a bare ``PositionService()`` makes outbound HTTP requests. Disable it
    with ``set_secondary_url(None)`` or ``LIBJYOTISH_SECONDARY_URL=""``, or
    pass an explicit ``sources`` list.

    Args:
        sources: Ordered source chain; defaults to default_sources()
        cache: Snapshot cache; defaults to a new SnapshotCache
    """

    def __init__(
        self,
        sources: Optional[Iterable[PositionSource]] = None,
        cache: Optional[SnapshotCache] = None,
    ):
        self.sources: List[PositionSource] = (
            list(sources) if sources is not None else default_sources()
        )
        self.cache = cache if cache is not None else SnapshotCache()
        self._fallback = LocalComputationSource()

    def get_positions(
        self,
        instant: Optional[datetime] = None,
        events: Optional[Iterable[EventLike]] = None,
    ) -> AstronomicalSnapshot:
        """
        Snapshot for ``instant`` (default: now).

        Cached snapshots are returned as stored, including the events they
        were computed with.

        Events are parsed once, before any source is tried. Entries that
        cannot be parsed are logged and dropped, so a bad event never fails
        a source.

        Raises:
            Only on local computation defects; source failures are logged
            and the next source is tried.
        """
        instant = to_utc(instant)
        cached = self.cache.get(instant)
        if cached is not None:
            logger.debug("Cache hit for %s (%s)", instant.isoformat(), cached.source)
            return cached

        parsed_events = normalize_events(events)
        snapshot = self._from_sources(instant, parsed_events)
        self.cache.put(instant, snapshot)
        return snapshot

    def _from_sources(self, instant: datetime, events) -> AstronomicalSnapshot:
        for source in self.sources:
            if not source.is_available():
                logger.debug("Skipping unconfigured source %s", source.name)
                continue
            if isinstance(source, LocalComputationSource):
                return source.fetch(instant, events)
            try:
                snapshot = source.fetch(instant, events)
            except SourceError as exc:
                logger.warning("Source %s failed, trying next: %s", source.name, exc)
                continue
            logger.info("Positions for %s from %s", instant.isoformat(), source.name)
            return snapshot

        logger.warning("All sources failed for %s, using local computation", instant.isoformat())
        return self._fallback.fetch(instant, events)
