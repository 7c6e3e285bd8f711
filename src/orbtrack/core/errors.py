"""Exceptions raised by orbtrack."""

from __future__ import annotations

SAT_REC_ERRORS: dict[int, str] = {
    1: "Mean elements, ecc >= 1.0 or ecc < -0.001 or a < 0.95 er",
    2: "Mean motion less than 0.0",
    3: "Pert elements, ecc < 0.0  or  ecc > 1.0",
    4: "Semi-latus rectum < 0.0",
    5: "Epoch elements are sub-orbital",
    6: "Satellite has decayed",
}
"""Human-readable causes for the SGP4 error codes."""

UNKNOWN_SAT_REC_ERROR = "Problematic TLE with unknown error."


class OrbtrackError(Exception):
    """Base class for all orbtrack errors."""


class MalformedInputError(OrbtrackError, ValueError):
    """TLE input has an accepted type but not the expected shape."""


class UnsupportedTypeError(OrbtrackError, TypeError):
    """TLE input is neither a string, a sequence of lines, nor a TLE."""


class EmptyChecksumInputError(OrbtrackError, ValueError):
    """A checksum was requested for a line with no checksum-bearing content."""


class PropagationError(OrbtrackError, ValueError):
    """SGP4 reported a nonzero error code.

    Attributes:
        code: The SGP4 error code (1-6 for known causes).
    """

    def __init__(self, code: int, message: str | None = None) -> None:
        self.code = code
        super().__init__(message or SAT_REC_ERRORS.get(code, UNKNOWN_SAT_REC_ERROR))
