"""Antemeridian crossing detection and search.

Ground tracks are split at the antemeridian (±180° longitude) to avoid
map-wrap artifacts, so the most recent crossing before a time marks the
start of the orbit being drawn.
"""

from __future__ import annotations

import logging

from orbtrack.core.cache import CacheService, resolve_cache
from orbtrack.core.propagation import Timestamp, get_lng_lat, to_timestamp_ms
from orbtrack.core.tle import TLE, TLEInput, get_average_orbit_time_ms, parse_tle
from orbtrack.utils.constants import (
    ANTEMERIDIAN_THRESHOLD_DEG,
    CROSSING_INITIAL_STEP_MS,
    CROSSING_MAX_ITERATIONS,
    CROSSING_MIN_STEP_MS,
    CROSSING_REFINE_STEP_MS,
    NO_CROSSING,
)

logger = logging.getLogger(__name__)


def crosses_antemeridian(
    longitude1: float | None,
    longitude2: float | None,
    threshold_deg: float = ANTEMERIDIAN_THRESHOLD_DEG,
) -> bool:
    """Whether moving between two longitudes crosses the antemeridian.

    The signs must differ and at least one longitude must be further than
    ``threshold_deg`` from the prime meridian, so sign flips near 0° do not
    count.
    """
    if longitude1 is None or longitude2 is None:
        return False
    if (longitude1 >= 0) == (longitude2 >= 0):
        return False
    return abs(longitude1) > threshold_deg or abs(longitude2) > threshold_deg


def _crossing_key(tle: TLE, threshold_deg: float, max_iterations: int) -> tuple:
    return (tle.line1, threshold_deg, max_iterations)


def get_cached_last_antemeridian_crossing_time_ms(
    tle: TLE,
    time_ms: int,
    *,
    threshold_deg: float = ANTEMERIDIAN_THRESHOLD_DEG,
    max_iterations: int = CROSSING_MAX_ITERATIONS,
    cache: CacheService | None = None,
) -> int | None:
    """Cached crossing that starts the orbit containing ``time_ms``.

    Returns the crossing time, :data:`NO_CROSSING` if a previous search with
    the same threshold and budget gave up on this TLE, or ``None`` when
    nothing usable is cached.
    """
    cached = resolve_cache(cache).crossings.get(_crossing_key(tle, threshold_deg, max_iterations))
    if cached is None:
        return None
    if cached == NO_CROSSING:
        return NO_CROSSING

    orbit_ms = get_average_orbit_time_ms(tle)
    for crossing_ms in cached:
        if 0 < time_ms - crossing_ms < orbit_ms:
            return crossing_ms
    return None


def get_last_antemeridian_crossing_time_ms(
    tle: TLEInput,
    timestamp: Timestamp | None = None,
    *,
    threshold_deg: float = ANTEMERIDIAN_THRESHOLD_DEG,
    max_iterations: int = CROSSING_MAX_ITERATIONS,
    cache: CacheService | None = None,
) -> int:
    """Last time (Unix ms) the satellite crossed the antemeridian.

    Walks backwards from ``timestamp`` in 10 minute steps until two samples
    straddle the antemeridian, then narrows in on the crossing by stepping
    forward and halving the step until it drops below 500 ms.

    Args:
        tle: Any accepted TLE form.
        timestamp: Reference time, Unix ms or datetime. Defaults to now.
        threshold_deg: See :func:`crosses_antemeridian`.
        max_iterations: Search budget in propagation samples.
        cache: Cache service to memoize into. Defaults to the shared one.

    Returns:
        The crossing time in Unix ms, or ``-1`` when no crossing was found
        within the budget (typical for geostationary orbits). ``-1`` is
        cached, so later calls for the same TLE, threshold and budget
        return it immediately.
    """
    cache = resolve_cache(cache)
    parsed = parse_tle(tle, cache=cache)
    time_ms = to_timestamp_ms(timestamp)

    cached = get_cached_last_antemeridian_crossing_time_ms(
        parsed, time_ms, threshold_deg=threshold_deg, max_iterations=max_iterations, cache=cache
    )
    if cached is not None:
        logger.debug("Crossing cache hit for %r: %d", parsed.line1[:18], cached)
        return cached

    step: float = CROSSING_INITIAL_STEP_MS
    cur_time_ms: float = time_ms
    last_lng: float | None = None
    found = False

    for _ in range(max_iterations):
        cur_lng, _lat = get_lng_lat(parsed, int(cur_time_ms), cache=cache)

        if crosses_antemeridian(last_lng, cur_lng, threshold_deg):
            # Back up, then keep halving the step until close enough.
            cur_time_ms += step
            step = CROSSING_REFINE_STEP_MS if step > CROSSING_REFINE_STEP_MS else step / 2
        else:
            cur_time_ms -= step
            last_lng = cur_lng

        if step < CROSSING_MIN_STEP_MS:
            found = True
            break

    crossings = cache.crossings
    key = _crossing_key(parsed, threshold_deg, max_iterations)
    if not found:
        logger.warning(
            "No antemeridian crossing for %r within %d iterations", parsed.line1[:18], max_iterations
        )
        crossings.put(key, NO_CROSSING)
        return NO_CROSSING

    crossing_ms = int(cur_time_ms)
    times = crossings.get(key)
    if not isinstance(times, list):
        times = []
    times.append(crossing_ms)
    crossings.put(key, times)
    logger.debug("Antemeridian crossing for %r at %d", parsed.line1[:18], crossing_ms)
    return crossing_ms
