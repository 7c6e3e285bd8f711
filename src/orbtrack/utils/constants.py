from __future__ import annotations

"""Time units, default observer and tuned thresholds.

All times in milliseconds and distances in km unless otherwise noted.
"""

# --- Time units ---
MS_IN_A_SECOND: int = 1000
MS_IN_A_MINUTE: int = 60_000
MS_IN_A_DAY: int = 86_400_000

# --- Default observer (Santa Cruz, CA) ---
DEFAULT_OBSERVER_LAT: float = 36.9613422
DEFAULT_OBSERVER_LNG: float = -122.0308
DEFAULT_OBSERVER_HEIGHT_KM: float = 0.37

# --- Antemeridian crossing search ---
ANTEMERIDIAN_THRESHOLD_DEG: float = 100.0
"""Minimum |longitude| for a sign flip to count as an antemeridian crossing.

Tuned heuristic that separates antemeridian crossings from prime meridian
sign flips. Not derived from orbit geometry.
"""

CROSSING_INITIAL_STEP_MS: int = 10 * MS_IN_A_MINUTE
"""Backward step used while looking for the first crossing."""

CROSSING_REFINE_STEP_MS: int = 20_000
"""Step ceiling once a crossing has been bracketed."""

CROSSING_MIN_STEP_MS: int = 500
"""The search stops once the step drops below this."""

CROSSING_MAX_ITERATIONS: int = 1000

NO_CROSSING: int = -1
"""Sentinel for "no antemeridian crossing found within the search budget"."""

# --- Orbit tracks ---
ORBIT_TRACK_STEP_MS: int = 1000
ORBIT_TRACK_MAX_TIME_MS: int = 100 * MS_IN_A_MINUTE
ORBIT_TRACK_JOB_CHUNK_SIZE: int = 1000

PREVIOUS_ORBIT_OFFSET_MS: int = 10_000
"""How far before the current orbit start to look for the previous one."""

NEXT_ORBIT_OFFSET_MS: int = 30 * MS_IN_A_MINUTE
"""Slack added to one orbital period when looking for the next orbit start."""

BEARING_SAMPLE_MS: int = 10_000

# --- Visibility ---
SLOW_MOVING_RATIO: float = 0.001
"""Velocity (km/s) over range (km) below which an object looks static."""

# --- Caching ---
DEFAULT_CACHE_SIZE: int = 10_000
"""Default capacity of each cache in a CacheService."""
