"""orbtrack — satellite positions, ground tracks and visibility from TLEs.

Parses and validates Two-Line Element sets, propagates them with SGP4 to
get positions and look angles from an observer, and derives ground
tracks, antemeridian crossings and visible-satellite sets from them.
"""

from __future__ import annotations

__version__ = "0.1.0-dev"

from orbtrack.core.cache import CacheService, clear_cache, default_cache, get_cache_sizes
from orbtrack.core.crossings import crosses_antemeridian, get_last_antemeridian_crossing_time_ms
from orbtrack.core.errors import (
    EmptyChecksumInputError,
    MalformedInputError,
    OrbtrackError,
    PropagationError,
    UnsupportedTypeError,
)
from orbtrack.core.propagation import (
    SatelliteInfo,
    StateVector,
    get_lat_lng,
    get_lng_lat,
    get_lng_lat_at_epoch,
    get_satellite_info,
    propagate,
)
from orbtrack.core.tle import (
    TLE,
    compute_checksum,
    get_average_orbit_time_mins,
    get_average_orbit_time_ms,
    get_average_orbit_time_s,
    get_bstar_drag,
    get_catalog_number,
    get_catalog_number1,
    get_catalog_number2,
    get_checksum1,
    get_checksum2,
    get_classification,
    get_cospar,
    get_eccentricity,
    get_epoch_day,
    get_epoch_timestamp,
    get_epoch_year,
    get_first_time_derivative,
    get_from_tle,
    get_inclination,
    get_int_designator_launch_number,
    get_int_designator_piece_of_launch,
    get_int_designator_year,
    get_line_number1,
    get_line_number2,
    get_mean_anomaly,
    get_mean_motion,
    get_orbit_model,
    get_perigee,
    get_rev_number_at_epoch,
    get_right_ascension,
    get_satellite_name,
    get_second_time_derivative,
    get_tle_set_number,
    is_valid,
    parse_tle,
)
from orbtrack.core.tracks import (
    PositionStream,
    SatBearing,
    get_ground_tracks,
    get_ground_tracks_sync,
    get_orbit_track,
    get_orbit_track_sync,
    get_sat_bearing,
)
from orbtrack.core.visibility import (
    SkippedSatellite,
    VisibilityResult,
    VisibleSatellite,
    get_closest_satellite,
    get_visible_satellites,
)

__all__ = [
    "__version__",
    "TLE",
    "parse_tle",
    "is_valid",
    "compute_checksum",
    "get_from_tle",
    "get_line_number1",
    "get_catalog_number",
    "get_catalog_number1",
    "get_classification",
    "get_int_designator_year",
    "get_int_designator_launch_number",
    "get_int_designator_piece_of_launch",
    "get_epoch_year",
    "get_epoch_day",
    "get_first_time_derivative",
    "get_second_time_derivative",
    "get_bstar_drag",
    "get_orbit_model",
    "get_tle_set_number",
    "get_checksum1",
    "get_line_number2",
    "get_catalog_number2",
    "get_inclination",
    "get_right_ascension",
    "get_eccentricity",
    "get_perigee",
    "get_mean_anomaly",
    "get_mean_motion",
    "get_rev_number_at_epoch",
    "get_checksum2",
    "get_cospar",
    "get_satellite_name",
    "get_epoch_timestamp",
    "get_average_orbit_time_ms",
    "get_average_orbit_time_mins",
    "get_average_orbit_time_s",
    "SatelliteInfo",
    "StateVector",
    "get_satellite_info",
    "get_lng_lat",
    "get_lat_lng",
    "get_lng_lat_at_epoch",
    "propagate",
    "crosses_antemeridian",
    "get_last_antemeridian_crossing_time_ms",
    "PositionStream",
    "SatBearing",
    "get_orbit_track",
    "get_orbit_track_sync",
    "get_ground_tracks",
    "get_ground_tracks_sync",
    "get_sat_bearing",
    "VisibleSatellite",
    "SkippedSatellite",
    "VisibilityResult",
    "get_visible_satellites",
    "get_closest_satellite",
    "CacheService",
    "default_cache",
    "clear_cache",
    "get_cache_sizes",
    "OrbtrackError",
    "MalformedInputError",
    "UnsupportedTypeError",
    "EmptyChecksumInputError",
    "PropagationError",
]
