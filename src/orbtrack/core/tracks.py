"""Orbit and ground track generation.

An orbit track is a list of coordinate pairs sampled from a start time
until just before the satellite crosses the antemeridian, which is taken
as the end of the orbit. Pair it with
:func:`~orbtrack.core.crossings.get_last_antemeridian_crossing_time_ms`
to draw whole orbits (see :func:`get_ground_tracks`).
"""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass

from orbtrack.core.cache import CacheService, resolve_cache
from orbtrack.core.crossings import crosses_antemeridian, get_last_antemeridian_crossing_time_ms
from orbtrack.core.propagation import Timestamp, get_lng_lat, to_timestamp_ms
from orbtrack.core.tle import TLE, TLEInput, get_average_orbit_time_ms, parse_tle
from orbtrack.utils.constants import (
    ANTEMERIDIAN_THRESHOLD_DEG,
    BEARING_SAMPLE_MS,
    MS_IN_A_DAY,
    MS_IN_A_MINUTE,
    MS_IN_A_SECOND,
    NEXT_ORBIT_OFFSET_MS,
    NO_CROSSING,
    ORBIT_TRACK_JOB_CHUNK_SIZE,
    ORBIT_TRACK_MAX_TIME_MS,
    ORBIT_TRACK_STEP_MS,
    PREVIOUS_ORBIT_OFFSET_MS,
)

logger = logging.getLogger(__name__)

Coordinate = tuple[float, float]


class PositionStream:
    """Satellite positions sampled at a fixed step.

    Each :meth:`advance` returns ``(timestamp_ms, (lng, lat))`` for the next
    sample; :meth:`seek` restarts the stream at any time.

    Args:
        tle: Any accepted TLE form.
        start_time_ms: Time of the first sample.
        step_ms: Spacing between samples.
        cache: Cache service used for the position lookups.
    """

    def __init__(
        self,
        tle: TLEInput,
        start_time_ms: int,
        step_ms: int = ORBIT_TRACK_STEP_MS,
        *,
        cache: CacheService | None = None,
    ) -> None:
        if step_ms <= 0:
            raise ValueError(f"step_ms must be positive, got {step_ms}")
        self._cache = resolve_cache(cache)
        self.tle = parse_tle(tle, cache=self._cache)
        self.step_ms = step_ms
        self.seek(start_time_ms)

    def seek(self, timestamp_ms: int) -> None:
        """Make the next :meth:`advance` sample ``timestamp_ms``."""
        self._next_time_ms = timestamp_ms

    def advance(self) -> tuple[int, Coordinate]:
        time_ms = self._next_time_ms
        lng_lat = get_lng_lat(self.tle, time_ms, cache=self._cache)
        self._next_time_ms = time_ms + self.step_ms
        return time_ms, lng_lat

    def __iter__(self) -> PositionStream:
        return self

    def __next__(self) -> tuple[int, Coordinate]:
        return self.advance()


def _orbit_track_key(
    tle: TLE,
    start_time_ms: int,
    step_ms: int,
    is_lng_lat_format: bool,
    max_time_ms: int | None,
    threshold_deg: float,
) -> tuple:
    return (
        tle.line1,
        round(start_time_ms / MS_IN_A_SECOND),
        step_ms,
        is_lng_lat_format,
        max_time_ms,
        threshold_deg,
    )


class _TrackBuilder:
    """Accumulates samples until the track crosses the antemeridian or runs out of time."""

    def __init__(self, start_time_ms: int, max_time_ms: int | None, is_lng_lat_format: bool, threshold_deg: float):
        self.start_time_ms = start_time_ms
        self.max_time_ms = max_time_ms
        self.is_lng_lat_format = is_lng_lat_format
        self.threshold_deg = threshold_deg
        self.coords: list[Coordinate] = []
        self._last_lng: float | None = None

    def add(self, time_ms: int, lng_lat: Coordinate) -> bool:
        """Record a sample; returns True once the track is complete."""
        lng, lat = lng_lat
        crossed = crosses_antemeridian(self._last_lng, lng, self.threshold_deg)
        exceeded = bool(self.max_time_ms) and time_ms - self.start_time_ms > self.max_time_ms
        self.coords.append((lng, lat) if self.is_lng_lat_format else (lat, lng))
        self._last_lng = lng
        return crossed or exceeded


async def get_orbit_track(
    tle: TLEInput,
    start_time: Timestamp | None = None,
    step_ms: int = ORBIT_TRACK_STEP_MS,
    *,
    sleep_ms: int = 0,
    job_chunk_size: int = ORBIT_TRACK_JOB_CHUNK_SIZE,
    max_time_ms: int | None = ORBIT_TRACK_MAX_TIME_MS,
    is_lng_lat_format: bool = True,
    threshold_deg: float = ANTEMERIDIAN_THRESHOLD_DEG,
    cache: CacheService | None = None,
) -> list[Coordinate]:
    """Coordinates of one orbit track, yielding to the event loop between chunks.

    Args:
        tle: Any accepted TLE form.
        start_time: First sample time, Unix ms or datetime. Defaults to now.
        step_ms: Time between samples.
        sleep_ms: Pause after every ``job_chunk_size`` samples. 0 never pauses.
        job_chunk_size: Samples processed between pauses.
        max_time_ms: Stop after this much simulated time. Falsy means no limit.
        is_lng_lat_format: ``(lng, lat)`` pairs when True, ``(lat, lng)`` when False.
        threshold_deg: See :func:`~orbtrack.core.crossings.crosses_antemeridian`.
        cache: Cache service to memoize into. Defaults to the shared one.

    Returns:
        The coordinate pairs, including the first sample past the antemeridian.
    """
    cache = resolve_cache(cache)
    parsed = parse_tle(tle, cache=cache)
    start_time_ms = to_timestamp_ms(start_time)
    cache_key = _orbit_track_key(
        parsed, start_time_ms, step_ms, is_lng_lat_format, max_time_ms, threshold_deg
    )
    cached = cache.orbit_tracks.get(cache_key)
    if cached is not None:
        return list(cached)

    stream = PositionStream(parsed, start_time_ms, step_ms, cache=cache)
    builder = _TrackBuilder(start_time_ms, max_time_ms, is_lng_lat_format, threshold_deg)
    step = 0
    done = False

    while not done:
        done = builder.add(*stream.advance())
        if sleep_ms and step % job_chunk_size == 0:
            # Chunk is processed, so let other tasks run.
            await asyncio.sleep(sleep_ms / MS_IN_A_SECOND)
        step += 1

    # Cached as a tuple; callers always get their own list.
    cache.orbit_tracks.put(cache_key, tuple(builder.coords))
    logger.debug("Orbit track for %r: %d points", parsed.line1[:18], len(builder.coords))
    return builder.coords


def get_orbit_track_sync(
    tle: TLEInput,
    start_time: Timestamp | None = None,
    step_ms: int = ORBIT_TRACK_STEP_MS,
    *,
    max_time_ms: int | None = ORBIT_TRACK_MAX_TIME_MS,
    is_lng_lat_format: bool = True,
    threshold_deg: float = ANTEMERIDIAN_THRESHOLD_DEG,
    cache: CacheService | None = None,
) -> list[Coordinate]:
    """Blocking version of :func:`get_orbit_track`."""
    cache = resolve_cache(cache)
    parsed = parse_tle(tle, cache=cache)
    start_time_ms = to_timestamp_ms(start_time)
    cache_key = _orbit_track_key(
        parsed, start_time_ms, step_ms, is_lng_lat_format, max_time_ms, threshold_deg
    )
    cached = cache.orbit_tracks.get(cache_key)
    if cached is not None:
        return list(cached)

    builder = _TrackBuilder(start_time_ms, max_time_ms, is_lng_lat_format, threshold_deg)
    for time_ms, lng_lat in PositionStream(parsed, start_time_ms, step_ms, cache=cache):
        if builder.add(time_ms, lng_lat):
            break

    # Cached as a tuple; callers always get their own list.
    cache.orbit_tracks.put(cache_key, tuple(builder.coords))
    logger.debug("Orbit track for %r: %d points", parsed.line1[:18], len(builder.coords))
    return builder.coords


def _orbit_start_times(parsed: TLE, time_ms: int, threshold_deg: float, cache: CacheService) -> list[int]:
    """Start times of the previous, current and next orbits, or ``[]`` without crossings."""
    cur_orbit_start_ms = get_last_antemeridian_crossing_time_ms(
        parsed, time_ms, threshold_deg=threshold_deg, cache=cache
    )
    if cur_orbit_start_ms == NO_CROSSING:
        return []

    orbit_time_ms = get_average_orbit_time_ms(parsed)
    last_orbit_start_ms = get_last_antemeridian_crossing_time_ms(
        parsed, cur_orbit_start_ms - PREVIOUS_ORBIT_OFFSET_MS, threshold_deg=threshold_deg, cache=cache
    )
    next_orbit_start_ms = get_last_antemeridian_crossing_time_ms(
        parsed,
        cur_orbit_start_ms + orbit_time_ms + NEXT_ORBIT_OFFSET_MS,
        threshold_deg=threshold_deg,
        cache=cache,
    )
    return [last_orbit_start_ms, cur_orbit_start_ms, next_orbit_start_ms]


async def get_ground_tracks(
    tle: TLEInput,
    start_time: Timestamp | None = None,
    step_ms: int = ORBIT_TRACK_STEP_MS,
    *,
    is_lng_lat_format: bool = True,
    threshold_deg: float = ANTEMERIDIAN_THRESHOLD_DEG,
    cache: CacheService | None = None,
) -> list[list[Coordinate]]:
    """Previous, current and next orbit tracks around a time.

    Example::

        await get_ground_tracks(tle_str)
        -> [
             [(-179.93, 45.85), ...],  # previous orbit
             [(-179.94, 51.26), ...],  # current orbit
             [(-179.92, 51.03), ...],  # next orbit
           ]

    Orbits without antemeridian crossings (geostationary and similar) get a
    single partial track instead: one sample per minute for a quarter day.
    """
    cache = resolve_cache(cache)
    parsed = parse_tle(tle, cache=cache)
    time_ms = to_timestamp_ms(start_time)
    start_times = _orbit_start_times(parsed, time_ms, threshold_deg, cache)

    if not start_times:
        partial = await get_orbit_track(
            parsed,
            time_ms,
            MS_IN_A_MINUTE,
            max_time_ms=MS_IN_A_DAY // 4,
            is_lng_lat_format=is_lng_lat_format,
            threshold_deg=threshold_deg,
            cache=cache,
        )
        return [partial]

    tracks = await asyncio.gather(
        *(
            get_orbit_track(
                parsed,
                orbit_start_ms,
                step_ms,
                is_lng_lat_format=is_lng_lat_format,
                threshold_deg=threshold_deg,
                cache=cache,
            )
            for orbit_start_ms in start_times
        )
    )
    return list(tracks)


def get_ground_tracks_sync(
    tle: TLEInput,
    start_time: Timestamp | None = None,
    step_ms: int = ORBIT_TRACK_STEP_MS,
    *,
    is_lng_lat_format: bool = True,
    threshold_deg: float = ANTEMERIDIAN_THRESHOLD_DEG,
    cache: CacheService | None = None,
) -> list[list[Coordinate]]:
    """Blocking version of :func:`get_ground_tracks`."""
    cache = resolve_cache(cache)
    parsed = parse_tle(tle, cache=cache)
    time_ms = to_timestamp_ms(start_time)
    start_times = _orbit_start_times(parsed, time_ms, threshold_deg, cache)

    if not start_times:
        partial = get_orbit_track_sync(
            parsed,
            time_ms,
            MS_IN_A_MINUTE,
            max_time_ms=MS_IN_A_DAY // 4,
            is_lng_lat_format=is_lng_lat_format,
            threshold_deg=threshold_deg,
            cache=cache,
        )
        return [partial]

    return [
        get_orbit_track_sync(
            parsed,
            orbit_start_ms,
            step_ms,
            is_lng_lat_format=is_lng_lat_format,
            threshold_deg=threshold_deg,
            cache=cache,
        )
        for orbit_start_ms in start_times
    ]


@dataclass(frozen=True)
class SatBearing:
    """Compass bearing of a ground track.

    Attributes:
        degrees: Bearing from north in degrees, in (-180, 180].
        compass: Quadrant such as ``'NE'`` or ``'SW'``.
    """

    degrees: float
    compass: str


def get_sat_bearing(
    tle: TLEInput,
    timestamp: Timestamp | None = None,
    *,
    cache: CacheService | None = None,
) -> SatBearing | None:
    """Compass bearing of the satellite's ground track at a time.

    Useful for pitched 3D map perspectives. Returns ``None`` when the
    sampled stretch of track crosses the antemeridian.
    """
    timestamp_ms = to_timestamp_ms(timestamp)
    lng1, lat1 = get_lng_lat(tle, timestamp_ms, cache=cache)
    lng2, lat2 = get_lng_lat(tle, timestamp_ms + BEARING_SAMPLE_MS, cache=cache)

    if crosses_antemeridian(lng1, lng2):
        return None

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    lambda1, lambda2 = math.radians(lng1), math.radians(lng2)

    ns = "S" if phi1 >= phi2 else "N"
    ew = "W" if lambda1 >= lambda2 else "E"

    y = math.sin(lambda2 - lambda1) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(lambda2 - lambda1)
    return SatBearing(degrees=math.degrees(math.atan2(y, x)), compass=f"{ns}{ew}")
