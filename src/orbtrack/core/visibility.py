"""Which satellites an observer can see."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, Sequence

from orbtrack.core.cache import CacheService, resolve_cache
from orbtrack.core.errors import PropagationError
from orbtrack.core.propagation import SatelliteInfo, Timestamp, get_satellite_info, to_timestamp_ms
from orbtrack.core.tle import TLEInput, parse_tle
from orbtrack.utils.constants import SLOW_MOVING_RATIO

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VisibleSatellite:
    """A TLE paired with its position as seen by the observer."""

    tle: TLEInput
    info: SatelliteInfo


@dataclass(frozen=True)
class SkippedSatellite:
    """A TLE left out of a visibility result because propagation failed.

    Attributes:
        tle: The TLE as given.
        reason: The propagation error message, e.g. ``'Satellite has decayed'``.
        code: The SGP4 error code.
    """

    tle: TLEInput
    reason: str
    code: int


@dataclass
class VisibilityResult:
    """Satellites above the elevation threshold, plus the ones that failed.

    Iterating over the result (or taking its ``len``) covers ``visible`` only.
    """

    visible: list[VisibleSatellite] = field(default_factory=list)
    skipped: list[SkippedSatellite] = field(default_factory=list)

    def __iter__(self) -> Iterator[VisibleSatellite]:
        return iter(self.visible)

    def __len__(self) -> int:
        return len(self.visible)


def get_visible_satellites(
    tles: Sequence[TLEInput],
    observer_lat: float,
    observer_lng: float,
    observer_height: float = 0.0,
    elevation_threshold: float = 0.0,
    timestamp: Timestamp | None = None,
    *,
    slow_moving_ratio: float = SLOW_MOVING_RATIO,
    cache: CacheService | None = None,
) -> VisibilityResult:
    """Satellites at or above ``elevation_threshold`` degrees for an observer.

    Objects that barely move relative to the observer (velocity / range
    below ``slow_moving_ratio``, e.g. geostationary satellites) are
    remembered by their second TLE line and not recomputed on later calls.
    TLEs that fail to propagate (decayed satellites and the like) are
    reported in ``skipped`` instead of aborting the batch.

    Args:
        tles: TLEs in any accepted form.
        observer_lat: Observer latitude in degrees.
        observer_lng: Observer longitude in degrees.
        observer_height: Observer height in km.
        elevation_threshold: Minimum elevation in degrees.
        timestamp: Unix ms or datetime. Defaults to now.
        slow_moving_ratio: Velocity/range ratio (1/s) under which results are reused.
        cache: Cache service to memoize into. Defaults to the shared one.

    Returns:
        The visible satellites, in input order, and the skipped ones.
    """
    cache = resolve_cache(cache)
    timestamp_ms = to_timestamp_ms(timestamp)
    result = VisibilityResult()

    for tle in tles:
        cache_key = parse_tle(tle, cache=cache).line2
        cached = cache.slow_moving.get(cache_key)
        if cached is not None:
            if cached.info.elevation_deg >= elevation_threshold:
                result.visible.append(cached)
            continue

        try:
            info = get_satellite_info(
                tle, timestamp_ms, observer_lat, observer_lng, observer_height, cache=cache
            )
        except PropagationError as e:
            result.skipped.append(SkippedSatellite(tle=tle, reason=str(e), code=e.code))
            continue

        entry = VisibleSatellite(tle=tle, info=info)
        if info.velocity_km_s / info.range_km < slow_moving_ratio:
            cache.slow_moving.put(cache_key, entry)

        if info.elevation_deg >= elevation_threshold:
            result.visible.append(entry)

    logger.info(
        "Visibility: %d/%d above %.1f deg, %d skipped",
        len(result.visible), len(tles), elevation_threshold, len(result.skipped),
    )
    return result


def get_closest_satellite(
    tles: Sequence[TLEInput],
    observer_lat: float,
    observer_lng: float,
    observer_height: float = 0.0,
    timestamp: Timestamp | None = None,
    *,
    cache: CacheService | None = None,
) -> VisibleSatellite | None:
    """The satellite with the shortest range to the observer.

    TLEs that fail to propagate are ignored. Returns ``None`` if no TLE
    could be propagated.
    """
    timestamp_ms = to_timestamp_ms(timestamp)
    closest: VisibleSatellite | None = None

    for tle in tles:
        try:
            info = get_satellite_info(
                tle, timestamp_ms, observer_lat, observer_lng, observer_height, cache=cache
            )
        except PropagationError:
            logger.debug("Skipping unpropagatable TLE in closest-satellite search")
            continue
        if closest is None or info.range_km < closest.info.range_km:
            closest = VisibleSatellite(tle=tle, info=info)

    return closest
