"""Fixed-column field definitions for TLE lines 1 and 2.

See https://en.wikipedia.org/wiki/Two-line_element_set and
https://celestrak.org/columns/v04n03/ for the format. Offsets are 0-based.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Union

FieldValue = Union[int, float, str]


class Encoding(Enum):
    """Numeric encodings used by TLE fields."""

    INT = "int"
    FLOAT = "float"
    CHAR = "char"
    DECIMAL_ASSUMED = "decimal_assumed"
    """``12345`` -> ``0.12345``"""
    DECIMAL_ASSUMED_WITH_EXPONENT = "decimal_assumed_with_exponent"
    """``12345-2`` -> ``0.0012345``"""

    def decode(self, text: str) -> FieldValue:
        """Decode the raw column text of a field."""
        return _DECODERS[self](text)


def _decode_int(text: str) -> int:
    return int(text.strip())


def _decode_float(text: str) -> float:
    return float(text.strip())


def _decode_char(text: str) -> str:
    return text.strip()


def _decode_decimal_assumed(text: str) -> float:
    digits = text.strip()
    sign = 1.0
    if digits[:1] in ("-", "+"):
        sign = -1.0 if digits[0] == "-" else 1.0
        digits = digits[1:]
    if not digits:
        return 0.0
    return sign * float(f"0.{digits}")


def _decode_decimal_assumed_with_exponent(text: str) -> float:
    text = text.strip()
    mantissa = _decode_decimal_assumed(text[:-2])
    exponent = int(text[-2:])
    # Keep 5 significant digits to drop float noise from the scaling.
    return float(f"{mantissa * 10.0 ** exponent:.4e}")


_DECODERS: dict[Encoding, Callable[[str], FieldValue]] = {
    Encoding.INT: _decode_int,
    Encoding.FLOAT: _decode_float,
    Encoding.CHAR: _decode_char,
    Encoding.DECIMAL_ASSUMED: _decode_decimal_assumed,
    Encoding.DECIMAL_ASSUMED_WITH_EXPONENT: _decode_decimal_assumed_with_exponent,
}


@dataclass(frozen=True)
class FieldDefinition:
    """Location and encoding of one fixed-column field.

    Attributes:
        offset: 0-based column where the field starts.
        length: Field width in characters.
        encoding: How the raw text is decoded.
    """

    offset: int
    length: int
    encoding: Encoding

    def extract(self, line: str) -> str:
        """Return the raw column text of this field from ``line``."""
        return line[self.offset:self.offset + self.length]

    def decode(self, line: str) -> FieldValue:
        return self.encoding.decode(self.extract(line))


# --- Line 1 ---

LINE_NUMBER_1 = FieldDefinition(0, 1, Encoding.INT)
"""Always 1 for valid TLEs."""

CATALOG_NUMBER_1 = FieldDefinition(2, 5, Encoding.INT)
"""NORAD catalog number, e.g. 25544."""

CLASSIFICATION = FieldDefinition(7, 1, Encoding.CHAR)
"""'U' unclassified, 'C' classified, 'S' secret."""

INT_DESIGNATOR_YEAR = FieldDefinition(9, 2, Encoding.INT)
"""COSPAR id: last two digits of the launch year (57-99 = 1900s, 00-56 = 2000s)."""

INT_DESIGNATOR_LAUNCH_NUMBER = FieldDefinition(11, 3, Encoding.INT)
"""COSPAR id: launch number of the year."""

INT_DESIGNATOR_PIECE_OF_LAUNCH = FieldDefinition(14, 3, Encoding.CHAR)
"""COSPAR id: piece of the launch, 'A' to 'ZZZ'."""

EPOCH_YEAR = FieldDefinition(18, 2, Encoding.INT)
EPOCH_DAY = FieldDefinition(20, 12, Encoding.FLOAT)
"""Fractional day of the year, e.g. 206.18396726."""

FIRST_TIME_DERIVATIVE = FieldDefinition(33, 11, Encoding.FLOAT)
"""First derivative of mean motion divided by two, orbits/day^2."""

SECOND_TIME_DERIVATIVE = FieldDefinition(44, 8, Encoding.DECIMAL_ASSUMED_WITH_EXPONENT)
"""Second derivative of mean motion divided by six, orbits/day^3."""

BSTAR_DRAG = FieldDefinition(53, 8, Encoding.DECIMAL_ASSUMED_WITH_EXPONENT)
"""BSTAR drag term in inverse Earth radii."""

ORBIT_MODEL = FieldDefinition(62, 1, Encoding.INT)
"""Always 0 in distributed TLEs."""

TLE_SET_NUMBER = FieldDefinition(64, 4, Encoding.INT)
CHECKSUM_1 = FieldDefinition(68, 1, Encoding.INT)

# --- Line 2 ---

LINE_NUMBER_2 = FieldDefinition(0, 1, Encoding.INT)
CATALOG_NUMBER_2 = FieldDefinition(2, 5, Encoding.INT)
INCLINATION = FieldDefinition(8, 8, Encoding.FLOAT)
RIGHT_ASCENSION = FieldDefinition(17, 8, Encoding.FLOAT)
ECCENTRICITY = FieldDefinition(26, 7, Encoding.DECIMAL_ASSUMED)
PERIGEE = FieldDefinition(34, 8, Encoding.FLOAT)
"""Argument of perigee in degrees."""

MEAN_ANOMALY = FieldDefinition(43, 8, Encoding.FLOAT)
MEAN_MOTION = FieldDefinition(52, 11, Encoding.FLOAT)
"""Revolutions per day."""

REV_NUMBER_AT_EPOCH = FieldDefinition(63, 5, Encoding.INT)
"""Total revolutions at epoch. Rolls over at 99999."""

CHECKSUM_2 = FieldDefinition(68, 1, Encoding.INT)

LINE1_FIELDS: dict[str, FieldDefinition] = {
    "line_number": LINE_NUMBER_1,
    "catalog_number": CATALOG_NUMBER_1,
    "classification": CLASSIFICATION,
    "int_designator_year": INT_DESIGNATOR_YEAR,
    "int_designator_launch_number": INT_DESIGNATOR_LAUNCH_NUMBER,
    "int_designator_piece_of_launch": INT_DESIGNATOR_PIECE_OF_LAUNCH,
    "epoch_year": EPOCH_YEAR,
    "epoch_day": EPOCH_DAY,
    "first_time_derivative": FIRST_TIME_DERIVATIVE,
    "second_time_derivative": SECOND_TIME_DERIVATIVE,
    "bstar_drag": BSTAR_DRAG,
    "orbit_model": ORBIT_MODEL,
    "tle_set_number": TLE_SET_NUMBER,
    "checksum": CHECKSUM_1,
}

LINE2_FIELDS: dict[str, FieldDefinition] = {
    "line_number": LINE_NUMBER_2,
    "catalog_number": CATALOG_NUMBER_2,
    "inclination": INCLINATION,
    "right_ascension": RIGHT_ASCENSION,
    "eccentricity": ECCENTRICITY,
    "perigee": PERIGEE,
    "mean_anomaly": MEAN_ANOMALY,
    "mean_motion": MEAN_MOTION,
    "rev_number_at_epoch": REV_NUMBER_AT_EPOCH,
    "checksum": CHECKSUM_2,
}
