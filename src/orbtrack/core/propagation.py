"""Satellite position engine built on SGP4.

SGP4 (via ``sgp4``) produces the state vectors and reports errors; skyfield
turns them into geodetic positions and look angles from an observer.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Union

import numpy as np

logger = logging.getLogger(__name__)
from numpy.typing import NDArray
from sgp4.api import Satrec, WGS72, jday
from skyfield.api import EarthSatellite, load, wgs84

from orbtrack.core.cache import CacheService, resolve_cache
from orbtrack.core.errors import PropagationError
from orbtrack.core.tle import TLE, TLEInput, get_epoch_timestamp, parse_tle
from orbtrack.utils.constants import (
    DEFAULT_OBSERVER_HEIGHT_KM,
    DEFAULT_OBSERVER_LAT,
    DEFAULT_OBSERVER_LNG,
    MS_IN_A_SECOND,
)

Timestamp = Union[int, float, datetime]

_ts = load.timescale()


@dataclass
class StateVector:
    """Position and velocity in TEME frame.

    Attributes:
        position_km: [x, y, z] position in km.
        velocity_km_s: [vx, vy, vz] velocity in km/s.
        epoch: Time of this state vector.
    """

    position_km: NDArray[np.float64]  # shape (3,)
    velocity_km_s: NDArray[np.float64]  # shape (3,)
    epoch: datetime


@dataclass(frozen=True)
class SatelliteInfo:
    """Satellite position and look angles from an observer.

    Attributes:
        lat: Satellite latitude in degrees [-90, 90].
        lng: Satellite longitude in degrees [-180, 180].
        elevation_deg: Elevation above the observer's horizon (90 is overhead).
        azimuth_deg: Compass heading from the observer [0, 360), 0 = north.
        range_km: Distance from observer to satellite.
        height_km: Satellite altitude.
        velocity_km_s: Inertial speed.
    """

    lat: float
    lng: float
    elevation_deg: float
    azimuth_deg: float
    range_km: float
    height_km: float
    velocity_km_s: float

    @property
    def lng_lat(self) -> tuple[float, float]:
        return (self.lng, self.lat)


def to_timestamp_ms(t: Timestamp | None) -> int:
    """Unix milliseconds for a timestamp, datetime, or ``None`` (now).

    Naive datetimes are taken as UTC.
    """
    if t is None:
        t = datetime.now(timezone.utc)
    if isinstance(t, datetime):
        if t.tzinfo is None:
            t = t.replace(tzinfo=timezone.utc)
        return int(round(t.timestamp() * MS_IN_A_SECOND))
    return int(t)


def to_datetime(timestamp_ms: int) -> datetime:
    return datetime.fromtimestamp(timestamp_ms / MS_IN_A_SECOND, tz=timezone.utc)


def _init_satrec(tle: TLE) -> Satrec:
    satrec = Satrec.twoline2rv(tle.line1, tle.line2, WGS72)
    if satrec.error:
        logger.warning("SGP4 init failed for %r: error code %d", tle.line1[:18], satrec.error)
        raise PropagationError(satrec.error)
    return satrec


def _sgp4(satrec: Satrec, tle: TLE, t: datetime) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    jd, fr = jday(t.year, t.month, t.day, t.hour, t.minute, t.second + t.microsecond / 1e6)
    error_code, pos, vel = satrec.sgp4(jd, fr)
    if error_code != 0:
        logger.warning("SGP4 propagation failed for %r at %s: error code %d", tle.line1[:18], t, error_code)
        raise PropagationError(error_code)
    return np.array(pos, dtype=np.float64), np.array(vel, dtype=np.float64)


def get_satellite_info(
    tle: TLEInput,
    timestamp: Timestamp | None = None,
    observer_lat: float | None = None,
    observer_lng: float | None = None,
    observer_height: float | None = None,
    *,
    cache: CacheService | None = None,
) -> SatelliteInfo:
    """Determine satellite position and look angles from an Earth observer.

    Example::

        get_satellite_info(tle_str, 1501039265000, 34.243889, -116.911389, 0)
        -> SatelliteInfo(lat=34.45, lng=-117.46, elevation_deg=81.63,
                         azimuth_deg=294.57, range_km=406.60,
                         height_km=402.90, velocity_km_s=7.67)

    Args:
        tle: Any accepted TLE form.
        timestamp: Unix ms or datetime. Defaults to now.
        observer_lat: Observer latitude in degrees.
        observer_lng: Observer longitude in degrees.
        observer_height: Observer height in km.
        cache: Cache service to memoize into. Defaults to the shared one.

    Returns:
        The satellite's position and look angles.

    Raises:
        PropagationError: If SGP4 reports an error for this TLE or time.
    """
    timestamp_ms = to_timestamp_ms(timestamp)
    cache = resolve_cache(cache)
    parsed = parse_tle(tle, cache=cache)

    obs_lat = DEFAULT_OBSERVER_LAT if observer_lat is None else observer_lat
    obs_lng = DEFAULT_OBSERVER_LNG if observer_lng is None else observer_lng
    obs_height = DEFAULT_OBSERVER_HEIGHT_KM if observer_height is None else observer_height

    cache_key = (parsed.line1, timestamp_ms, obs_lat, obs_lng, obs_height)
    cached = cache.satellite_info.get(cache_key)
    if cached is not None:
        return cached

    satrec = _init_satrec(parsed)
    when = to_datetime(timestamp_ms)
    _position, velocity = _sgp4(satrec, parsed, when)

    t = _ts.from_datetime(when)
    satellite = EarthSatellite.from_satrec(satrec, _ts)
    geocentric = satellite.at(t)
    lat, lng = wgs84.latlon_of(geocentric)
    observer = wgs84.latlon(obs_lat, obs_lng, elevation_m=obs_height * 1000)
    elevation, azimuth, distance = (satellite - observer).at(t).altaz()

    info = SatelliteInfo(
        lat=float(lat.degrees),
        lng=float(lng.degrees),
        elevation_deg=float(elevation.degrees),
        azimuth_deg=float(azimuth.degrees),
        range_km=float(distance.km),
        height_km=float(wgs84.height_of(geocentric).km),
        velocity_km_s=float(np.linalg.norm(velocity)),
    )
    cache.satellite_info.put(cache_key, info)
    return info


def get_lng_lat(
    tle: TLEInput, timestamp: Timestamp | None = None, *, cache: CacheService | None = None
) -> tuple[float, float]:
    """Satellite ``(lng, lat)`` at a time (default now)."""
    return get_satellite_info(tle, timestamp, cache=cache).lng_lat


def get_lat_lng(
    tle: TLEInput, timestamp: Timestamp | None = None, *, cache: CacheService | None = None
) -> dict[str, float]:
    """Satellite position as ``{"lat": ..., "lng": ...}``."""
    info = get_satellite_info(tle, timestamp, cache=cache)
    return {"lat": info.lat, "lng": info.lng}


def get_lng_lat_at_epoch(tle: TLEInput, *, cache: CacheService | None = None) -> tuple[float, float]:
    """Satellite ``(lng, lat)`` at the moment the TLE was generated."""
    parsed = parse_tle(tle, cache=cache)
    return get_lng_lat(parsed, get_epoch_timestamp(parsed), cache=cache)


def propagate(
    tle: TLEInput, times: list[Timestamp], *, cache: CacheService | None = None
) -> list[StateVector]:
    """Propagate a single TLE to multiple times using SGP4.

    Args:
        tle: Any accepted TLE form.
        times: Unix ms timestamps or UTC datetimes to propagate to.
        cache: Cache service used to parse ``tle``. Defaults to the shared one.

    Returns:
        List of StateVector objects, one per requested time.

    Raises:
        PropagationError: If SGP4 initialization or propagation fails.
    """
    parsed = parse_tle(tle, cache=cache)
    satrec = _init_satrec(parsed)
    result = []

    for t in times:
        when = to_datetime(to_timestamp_ms(t))
        pos, vel = _sgp4(satrec, parsed, when)
        result.append(StateVector(position_km=pos, velocity_km_s=vel, epoch=when))

    logger.debug("Propagated %r to %d times", parsed.line1[:18], len(times))
    return result
