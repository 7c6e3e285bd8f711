"""Tests for fixed-column field decoding."""

import pytest

from orbtrack.core import fields
from orbtrack.core.fields import Encoding, FieldDefinition

ISS_LINE1 = "1 25544U 98067A   17206.18396726  .00001961  00000-0  36771-4 0  9993"
ISS_LINE2 = "2 25544  51.6400 208.9163 0006317  69.9862  25.2906 15.54225995 67660"


class TestEncoding:
    @pytest.mark.parametrize(
        "encoding, text, expected",
        [
            (Encoding.INT, " 25544", 25544),
            (Encoding.FLOAT, " 51.6400", 51.64),
            (Encoding.CHAR, "A  ", "A"),
            (Encoding.DECIMAL_ASSUMED, "0006317", 0.0006317),
            (Encoding.DECIMAL_ASSUMED, "12345", 0.12345),
            (Encoding.DECIMAL_ASSUMED_WITH_EXPONENT, " 36771-4", 0.000036771),
            (Encoding.DECIMAL_ASSUMED_WITH_EXPONENT, "-29896-5", -0.0000029896),
            (Encoding.DECIMAL_ASSUMED_WITH_EXPONENT, "12345-2", 0.0012345),
            (Encoding.DECIMAL_ASSUMED_WITH_EXPONENT, "+12345+1", 1.2345),
            (Encoding.DECIMAL_ASSUMED_WITH_EXPONENT, " 00000-0", 0.0),
            (Encoding.DECIMAL_ASSUMED_WITH_EXPONENT, " 00000+0", 0.0),
        ],
    )
    def test_decode(self, encoding: Encoding, text: str, expected: object) -> None:
        assert encoding.decode(text) == expected

    def test_leading_zeros_are_kept(self) -> None:
        assert Encoding.DECIMAL_ASSUMED.decode("0000001") == 0.0000001

    def test_bad_int_raises(self) -> None:
        with pytest.raises(ValueError):
            Encoding.INT.decode("12a")

    def test_every_encoding_has_a_decoder(self) -> None:
        assert set(fields._DECODERS) == set(Encoding)


class TestFieldDefinition:
    def test_extract_raw_columns(self) -> None:
        assert fields.CATALOG_NUMBER_1.extract(ISS_LINE1) == "25544"
        assert fields.ECCENTRICITY.extract(ISS_LINE2) == "0006317"
        assert fields.BSTAR_DRAG.extract(ISS_LINE1) == " 36771-4"

    def test_decode(self) -> None:
        assert fields.MEAN_MOTION.decode(ISS_LINE2) == 15.54225995
        assert fields.REV_NUMBER_AT_EPOCH.decode(ISS_LINE2) == 6766

    def test_is_frozen(self) -> None:
        definition = FieldDefinition(0, 1, Encoding.INT)
        with pytest.raises(AttributeError):
            definition.offset = 3  # type: ignore[misc]

    def test_fields_fit_in_a_line(self) -> None:
        for definition in [*fields.LINE1_FIELDS.values(), *fields.LINE2_FIELDS.values()]:
            assert 0 <= definition.offset
            assert definition.offset + definition.length <= 69

    @pytest.mark.parametrize("line", [ISS_LINE1])
    def test_all_line1_fields_decode(self, line: str) -> None:
        decoded = {name: d.decode(line) for name, d in fields.LINE1_FIELDS.items()}
        assert decoded["line_number"] == 1
        assert decoded["classification"] == "U"
        assert decoded["int_designator_piece_of_launch"] == "A"
        assert decoded["tle_set_number"] == 999

    def test_all_line2_fields_decode(self) -> None:
        decoded = {name: d.decode(ISS_LINE2) for name, d in fields.LINE2_FIELDS.items()}
        assert decoded["line_number"] == 2
        assert decoded["catalog_number"] == 25544
        assert decoded["checksum"] == 0
