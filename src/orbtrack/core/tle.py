"""TLE (Two-Line Element) parsing, field decoding and validation.

Any function here taking a ``tle`` accepts every supported TLE form: a
newline-delimited string with 2 or 3 lines, a sequence of 2 or 3 line
strings, or an already parsed :class:`TLE`.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Union

from orbtrack.core import fields
from orbtrack.core.cache import CacheService, resolve_cache
from orbtrack.core.errors import (
    EmptyChecksumInputError,
    MalformedInputError,
    OrbtrackError,
    UnsupportedTypeError,
)
from orbtrack.core.fields import FieldDefinition, FieldValue
from orbtrack.utils.constants import MS_IN_A_DAY, MS_IN_A_MINUTE, MS_IN_A_SECOND

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TLE:
    """A canonical Two-Line Element set.

    Attributes:
        lines: TLE line 1 and line 2, trimmed.
        name: Satellite name from line 0, if the source had one.
    """

    lines: tuple[str, str]
    name: str | None = None

    @classmethod
    def from_lines(cls, line1: str, line2: str, name: str | None = None) -> TLE:
        return cls(lines=(line1.strip(), line2.strip()), name=name.strip() if name else None)

    @property
    def line1(self) -> str:
        return self.lines[0]

    @property
    def line2(self) -> str:
        return self.lines[1]

    @property
    def norad_id(self) -> int:
        return get_catalog_number1(self)

    @property
    def epoch(self) -> datetime:
        """Epoch as a UTC datetime."""
        return datetime.fromtimestamp(get_epoch_timestamp(self) / MS_IN_A_SECOND, tz=timezone.utc)

    def __str__(self) -> str:
        header = f"{self.name}\n" if self.name else ""
        return f"{header}{self.line1}\n{self.line2}"


TLEInput = Union[str, Sequence[str], TLE]


def parse_tle(source: TLEInput, *, cache: CacheService | None = None) -> TLE:
    """Normalize any accepted TLE form into a :class:`TLE`.

    Results are memoized by the full string (string input) or by the first
    TLE line (sequence input).

    Example::

        parse_tle("ISS (ZARYA)\\n1 25544U 98067A   ...\\n2 25544  51.6439 ...")
        -> TLE(lines=('1 25544U ...', '2 25544 ...'), name='ISS (ZARYA)')

    Args:
        source: TLE text, sequence of lines, or a parsed TLE (returned as is).
        cache: Cache service to memoize into. Defaults to the shared one.

    Returns:
        The canonical TLE.

    Raises:
        MalformedInputError: For mappings, or when there are not 2 or 3 lines.
        UnsupportedTypeError: For any other input type.
    """
    if isinstance(source, TLE):
        return source

    if isinstance(source, Mapping):
        raise MalformedInputError(
            "Input object is malformed (should be a TLE with name and lines)."
        )

    if isinstance(source, str):
        raw_lines = [line for line in source.splitlines() if line.strip()]
        cache_key: tuple[str, str] = ("text", source)
    elif isinstance(source, Sequence) and not isinstance(source, (bytes, bytearray)):
        raw_lines = list(source)
        if not all(isinstance(line, str) for line in raw_lines):
            raise UnsupportedTypeError("TLE lines must be strings.")
        if len(raw_lines) not in (2, 3):
            raise MalformedInputError(f"Expected 2 or 3 TLE lines, got {len(raw_lines)}.")
        cache_key = ("lines", raw_lines[-2])
    else:
        raise UnsupportedTypeError(
            f"Source TLE must be of type [str, sequence, TLE], but got {type(source).__name__}."
        )

    store = resolve_cache(cache).parsed_tles
    cached = store.get(cache_key)
    if cached is not None:
        return cached

    name = None
    if len(raw_lines) == 3:
        name = raw_lines[0].strip()
        raw_lines = raw_lines[1:]
    if len(raw_lines) != 2:
        raise MalformedInputError(f"Expected 2 or 3 TLE lines, got {len(raw_lines)}.")

    tle = TLE(lines=(raw_lines[0].strip(), raw_lines[1].strip()), name=name)
    store.put(cache_key, tle)
    logger.debug("Parsed TLE %r", tle.line1[:18])
    return tle


def get_from_tle(
    tle: TLEInput,
    line_number: int,
    definition: FieldDefinition,
    *,
    cache: CacheService | None = None,
) -> FieldValue:
    """Decode a field from line 1 or 2 of a TLE.

    Args:
        tle: Any accepted TLE form.
        line_number: 1 or 2.
        definition: One of the definitions in :mod:`orbtrack.core.fields`.
        cache: Cache service used to parse ``tle``. Defaults to the shared one.

    Returns:
        The decoded int, float or str.
    """
    if line_number not in (1, 2):
        raise ValueError(f"line_number must be 1 or 2, got {line_number}")
    parsed = parse_tle(tle, cache=cache)
    return definition.decode(parsed.lines[line_number - 1])


# --- Checksums and validation ---


def compute_checksum(line: str) -> int:
    """Checksum of one TLE line.

    Sum of all digits (line number included, trailing checksum excluded)
    plus 1 for each minus sign, modulo 10. Everything else counts as 0.

    Raises:
        EmptyChecksumInputError: If nothing precedes the trailing character.
    """
    body = line[:-1]
    if not body:
        raise EmptyChecksumInputError(f"No checksum-bearing content in {line!r}.")

    total = 0
    for char in body:
        if char in "0123456789":
            total += int(char)
        elif char == "-":
            total += 1
    return total % 10


def _line_number_is_valid(tle: TLE, line_number: int) -> bool:
    return tle.lines[line_number - 1][:1] == str(line_number)


def _checksum_is_valid(tle: TLE, line_number: int) -> bool:
    line = tle.lines[line_number - 1]
    embedded = line[-1:]
    if not embedded.isdigit():
        return False
    return compute_checksum(line) == int(embedded)


def is_valid(tle: object, *, cache: CacheService | None = None) -> bool:
    """Whether a TLE is structurally valid.

    Checks the line number markers, matching catalog numbers and both line
    checksums. Never raises: unparseable input is simply invalid.
    """
    try:
        parsed = parse_tle(tle, cache=cache)  # type: ignore[arg-type]
        if not (_line_number_is_valid(parsed, 1) and _line_number_is_valid(parsed, 2)):
            return False
        if parsed.line1[2:7] != parsed.line2[2:7]:
            return False
        return _checksum_is_valid(parsed, 1) and _checksum_is_valid(parsed, 2)
    except (OrbtrackError, ValueError, TypeError, IndexError) as e:
        logger.debug("TLE failed validation: %s", e)
        return False


# --- Line 1 getters ---


def get_line_number1(tle: TLEInput, *, cache: CacheService | None = None) -> int:
    """Line number of line 1. Always 1 for valid TLEs."""
    return get_from_tle(tle, 1, fields.LINE_NUMBER_1, cache=cache)


def get_catalog_number1(tle: TLEInput, *, cache: CacheService | None = None) -> int:
    """NORAD catalog number from line 1.

    See https://en.wikipedia.org/wiki/Satellite_Catalog_Number
    """
    return get_from_tle(tle, 1, fields.CATALOG_NUMBER_1, cache=cache)


get_catalog_number = get_catalog_number1


def get_classification(tle: TLEInput, *, cache: CacheService | None = None) -> str:
    """Classification, e.g. ``'U'`` for unclassified."""
    return get_from_tle(tle, 1, fields.CLASSIFICATION, cache=cache)


def get_int_designator_year(tle: TLEInput, *, cache: CacheService | None = None) -> int:
    """Launch year (last two digits) from the COSPAR id."""
    return get_from_tle(tle, 1, fields.INT_DESIGNATOR_YEAR, cache=cache)


def get_int_designator_launch_number(tle: TLEInput, *, cache: CacheService | None = None) -> int:
    return get_from_tle(tle, 1, fields.INT_DESIGNATOR_LAUNCH_NUMBER, cache=cache)


def get_int_designator_piece_of_launch(tle: TLEInput, *, cache: CacheService | None = None) -> str:
    return get_from_tle(tle, 1, fields.INT_DESIGNATOR_PIECE_OF_LAUNCH, cache=cache)


def get_epoch_year(tle: TLEInput, *, cache: CacheService | None = None) -> int:
    """Epoch year, last two digits (e.g. ``17`` for 2017)."""
    return get_from_tle(tle, 1, fields.EPOCH_YEAR, cache=cache)


def get_epoch_day(tle: TLEInput, *, cache: CacheService | None = None) -> float:
    """Epoch day of the year with fractional portion, e.g. ``206.18396726``."""
    return get_from_tle(tle, 1, fields.EPOCH_DAY, cache=cache)


def get_first_time_derivative(tle: TLEInput, *, cache: CacheService | None = None) -> float:
    """First time derivative of mean motion divided by two (orbits/day^2)."""
    return get_from_tle(tle, 1, fields.FIRST_TIME_DERIVATIVE, cache=cache)


def get_second_time_derivative(tle: TLEInput, *, cache: CacheService | None = None) -> float:
    """Second time derivative of mean motion divided by six (orbits/day^3).

    Usually zero unless the satellite is maneuvering or decaying.
    """
    return get_from_tle(tle, 1, fields.SECOND_TIME_DERIVATIVE, cache=cache)


def get_bstar_drag(tle: TLEInput, *, cache: CacheService | None = None) -> float:
    """BSTAR drag term. See https://en.wikipedia.org/wiki/BSTAR"""
    return get_from_tle(tle, 1, fields.BSTAR_DRAG, cache=cache)


def get_orbit_model(tle: TLEInput, *, cache: CacheService | None = None) -> int:
    return get_from_tle(tle, 1, fields.ORBIT_MODEL, cache=cache)


def get_tle_set_number(tle: TLEInput, *, cache: CacheService | None = None) -> int:
    """Element set number, incremented for each new TLE."""
    return get_from_tle(tle, 1, fields.TLE_SET_NUMBER, cache=cache)


def get_checksum1(tle: TLEInput, *, cache: CacheService | None = None) -> int:
    return get_from_tle(tle, 1, fields.CHECKSUM_1, cache=cache)


# --- Line 2 getters ---


def get_line_number2(tle: TLEInput, *, cache: CacheService | None = None) -> int:
    """Line number of line 2. Always 2 for valid TLEs."""
    return get_from_tle(tle, 2, fields.LINE_NUMBER_2, cache=cache)


def get_catalog_number2(tle: TLEInput, *, cache: CacheService | None = None) -> int:
    return get_from_tle(tle, 2, fields.CATALOG_NUMBER_2, cache=cache)


def get_inclination(tle: TLEInput, *, cache: CacheService | None = None) -> float:
    """Inclination in degrees. Above 90 is retrograde."""
    return get_from_tle(tle, 2, fields.INCLINATION, cache=cache)


def get_right_ascension(tle: TLEInput, *, cache: CacheService | None = None) -> float:
    """Right ascension of the ascending node in degrees."""
    return get_from_tle(tle, 2, fields.RIGHT_ASCENSION, cache=cache)


def get_eccentricity(tle: TLEInput, *, cache: CacheService | None = None) -> float:
    return get_from_tle(tle, 2, fields.ECCENTRICITY, cache=cache)


def get_perigee(tle: TLEInput, *, cache: CacheService | None = None) -> float:
    """Argument of perigee in degrees."""
    return get_from_tle(tle, 2, fields.PERIGEE, cache=cache)


def get_mean_anomaly(tle: TLEInput, *, cache: CacheService | None = None) -> float:
    return get_from_tle(tle, 2, fields.MEAN_ANOMALY, cache=cache)


def get_mean_motion(tle: TLEInput, *, cache: CacheService | None = None) -> float:
    """Revolutions per day."""
    return get_from_tle(tle, 2, fields.MEAN_MOTION, cache=cache)


def get_rev_number_at_epoch(tle: TLEInput, *, cache: CacheService | None = None) -> int:
    return get_from_tle(tle, 2, fields.REV_NUMBER_AT_EPOCH, cache=cache)


def get_checksum2(tle: TLEInput, *, cache: CacheService | None = None) -> int:
    return get_from_tle(tle, 2, fields.CHECKSUM_2, cache=cache)


# --- Derived values ---


def full_year(two_digit_year: int) -> int:
    """Expand a two-digit TLE year: 57-99 -> 1900s, 00-56 -> 2000s.

    TLE years roll over in 2057; that is a limitation of the format and is
    not handled here.
    """
    return two_digit_year + 1900 if 56 < two_digit_year < 100 else two_digit_year + 2000


def get_cospar(tle: TLEInput, *, cache: CacheService | None = None) -> str:
    """COSPAR id (international designator), e.g. ``'1998-067A'``."""
    year = full_year(get_int_designator_year(tle, cache=cache))
    launch_number = get_int_designator_launch_number(tle, cache=cache)
    piece = get_int_designator_piece_of_launch(tle, cache=cache)
    return f"{year}-{launch_number:03d}{piece}"


def get_satellite_name(
    tle: TLEInput, fallback_to_cospar: bool = False, *, cache: CacheService | None = None
) -> str:
    """Satellite name from line 0 of a 3-line TLE.

    Returns ``'Unknown'`` when there is no name, or the COSPAR id when
    ``fallback_to_cospar`` is set.
    """
    parsed = parse_tle(tle, cache=cache)
    if parsed.name:
        return parsed.name
    return get_cospar(parsed, cache=cache) if fallback_to_cospar else "Unknown"


def day_of_year_to_timestamp(day_of_year: float, year: int) -> int:
    """Unix timestamp (ms) of a fractional day of the year."""
    year_start_ms = datetime(year, 1, 1, tzinfo=timezone.utc).timestamp() * MS_IN_A_SECOND
    return math.floor(year_start_ms + (day_of_year - 1) * MS_IN_A_DAY)


def get_epoch_timestamp(tle: TLEInput, *, cache: CacheService | None = None) -> int:
    """Unix timestamp (ms) of the TLE epoch, e.g. ``1500956694771``."""
    year = full_year(get_epoch_year(tle, cache=cache))
    return day_of_year_to_timestamp(get_epoch_day(tle, cache=cache), year)


def get_average_orbit_time_ms(tle: TLEInput, *, cache: CacheService | None = None) -> int:
    """Average length of one orbit in whole milliseconds."""
    return int(MS_IN_A_DAY / get_mean_motion(tle, cache=cache))


def get_average_orbit_time_mins(tle: TLEInput, *, cache: CacheService | None = None) -> float:
    return get_average_orbit_time_ms(tle, cache=cache) / MS_IN_A_MINUTE


def get_average_orbit_time_s(tle: TLEInput, *, cache: CacheService | None = None) -> float:
    return get_average_orbit_time_ms(tle, cache=cache) / MS_IN_A_SECOND
