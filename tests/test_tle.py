"""Tests for TLE parsing, field getters and validation."""

import pytest

from orbtrack.core.cache import CacheService, clear_cache, default_cache
from orbtrack.core.errors import EmptyChecksumInputError, MalformedInputError, UnsupportedTypeError
from orbtrack.core.fields import INCLINATION
from orbtrack.core.tle import (
    TLE,
    compute_checksum,
    full_year,
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

# ISS (ZARYA), epoch 2017-07-25
ISS_NAME = "ISS (ZARYA)"
ISS_LINE1 = "1 25544U 98067A   17206.18396726  .00001961  00000-0  36771-4 0  9993"
ISS_LINE2 = "2 25544  51.6400 208.9163 0006317  69.9862  25.2906 15.54225995 67660"
ISS_TLE_STR = f"{ISS_NAME}\n{ISS_LINE1}\n{ISS_LINE2}"

TIANZHOU_LINE1 = "1 42684U 17021A   17221.56595738 -.00000599  00000-0 -29896-5 0  9990"
TIANZHOU_LINE2 = "2 42684  42.7845  37.8962 0002841 275.1472 140.9012 15.57909698 17345"
TIANZHOU_TLE_STR = f"TIANZHOU 1\n{TIANZHOU_LINE1}\n{TIANZHOU_LINE2}"
TIANZHOU_NO_NAME = f"{TIANZHOU_LINE1}\n{TIANZHOU_LINE2}"


@pytest.fixture
def cache() -> CacheService:
    return CacheService()


@pytest.fixture(autouse=True)
def _fresh_default_cache() -> None:
    clear_cache()


def _bump_last_digit(line: str) -> str:
    return line[:-1] + str((int(line[-1]) + 1) % 10)


class TestParseTLE:
    def test_three_line_string(self, cache: CacheService) -> None:
        tle = parse_tle(ISS_TLE_STR, cache=cache)
        assert tle.name == ISS_NAME
        assert tle.lines == (ISS_LINE1, ISS_LINE2)

    def test_two_line_string_has_no_name(self, cache: CacheService) -> None:
        tle = parse_tle(TIANZHOU_NO_NAME, cache=cache)
        assert tle.name is None
        assert tle.line1 == TIANZHOU_LINE1
        assert tle.line2 == TIANZHOU_LINE2

    def test_sequence_forms_match_string(self, cache: CacheService) -> None:
        from_str = parse_tle(ISS_TLE_STR, cache=cache)
        from_list = parse_tle([ISS_NAME, ISS_LINE1, ISS_LINE2], cache=cache)
        from_tuple = parse_tle((ISS_LINE1, ISS_LINE2), cache=cache)
        assert from_list == from_str
        assert from_tuple.lines == from_str.lines

    def test_lines_are_trimmed(self, cache: CacheService) -> None:
        tle = parse_tle([f"  {ISS_NAME} ", f"{ISS_LINE1}   ", f"\t{ISS_LINE2}\r"], cache=cache)
        assert tle.name == ISS_NAME
        assert tle.lines == (ISS_LINE1, ISS_LINE2)

    def test_windows_line_endings(self, cache: CacheService) -> None:
        tle = parse_tle(ISS_TLE_STR.replace("\n", "\r\n") + "\r\n", cache=cache)
        assert tle.lines == (ISS_LINE1, ISS_LINE2)

    def test_parsed_tle_returned_unchanged(self) -> None:
        tle = TLE.from_lines(ISS_LINE1, ISS_LINE2, name=ISS_NAME)
        assert parse_tle(tle) is tle

    def test_cache_hit_returns_same_object(self, cache: CacheService) -> None:
        first = parse_tle(ISS_TLE_STR, cache=cache)
        second = parse_tle(ISS_TLE_STR, cache=cache)
        assert first is second
        assert cache.sizes()["parsed_tles"] == 1

    def test_mapping_raises_malformed(self) -> None:
        with pytest.raises(MalformedInputError, match="malformed"):
            parse_tle({"name": ISS_NAME, "lines": [ISS_LINE1, ISS_LINE2]})

    def test_malformed_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            parse_tle({"foo": "bar"})

    def test_unsupported_type_raises(self) -> None:
        with pytest.raises(UnsupportedTypeError):
            parse_tle(12345)  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            parse_tle(None)  # type: ignore[arg-type]

    def test_wrong_line_count_raises(self, cache: CacheService) -> None:
        with pytest.raises(MalformedInputError):
            parse_tle([ISS_LINE1], cache=cache)
        with pytest.raises(MalformedInputError):
            parse_tle(["a", "b", "c", "d"], cache=cache)
        with pytest.raises(MalformedInputError):
            parse_tle(ISS_LINE1, cache=cache)

    def test_str_roundtrip(self, cache: CacheService) -> None:
        tle = parse_tle(ISS_TLE_STR, cache=cache)
        assert str(tle) == ISS_TLE_STR
        assert parse_tle(str(tle), cache=CacheService()) == tle

    def test_norad_id_and_epoch(self, cache: CacheService) -> None:
        tle = parse_tle(ISS_TLE_STR, cache=cache)
        assert tle.norad_id == 25544
        assert (tle.epoch.year, tle.epoch.month, tle.epoch.day) == (2017, 7, 25)


class TestLine1Getters:
    def test_line_number(self) -> None:
        assert get_line_number1(ISS_TLE_STR) == 1

    def test_catalog_number(self) -> None:
        assert get_catalog_number1(ISS_TLE_STR) == 25544
        assert get_catalog_number(ISS_TLE_STR) == 25544

    def test_classification(self) -> None:
        assert get_classification(ISS_TLE_STR) == "U"

    def test_int_designator(self) -> None:
        assert get_int_designator_year(ISS_TLE_STR) == 98
        assert get_int_designator_launch_number(ISS_TLE_STR) == 67
        assert get_int_designator_piece_of_launch(ISS_TLE_STR) == "A"

    def test_epoch(self) -> None:
        assert get_epoch_year(ISS_TLE_STR) == 17
        assert get_epoch_day(ISS_TLE_STR) == 206.18396726

    def test_first_time_derivative(self) -> None:
        assert get_first_time_derivative(ISS_TLE_STR) == 0.00001961
        assert get_first_time_derivative(TIANZHOU_TLE_STR) == -0.00000599

    def test_second_time_derivative(self) -> None:
        assert get_second_time_derivative(ISS_TLE_STR) == 0
        assert get_second_time_derivative(TIANZHOU_TLE_STR) == 0

    def test_bstar(self) -> None:
        assert get_bstar_drag(ISS_TLE_STR) == 0.000036771

    def test_negative_bstar(self) -> None:
        assert get_bstar_drag(TIANZHOU_TLE_STR) == -0.0000029896

    def test_orbit_model_and_set_number(self) -> None:
        assert get_orbit_model(ISS_TLE_STR) == 0
        assert get_tle_set_number(ISS_TLE_STR) == 999

    def test_checksum(self) -> None:
        assert get_checksum1(ISS_TLE_STR) == 3


class TestLine2Getters:
    def test_line_number(self) -> None:
        assert get_line_number2(ISS_TLE_STR) == 2

    def test_catalog_number(self) -> None:
        assert get_catalog_number2(ISS_TLE_STR) == 25544

    def test_angles(self) -> None:
        assert get_inclination(ISS_TLE_STR) == 51.64
        assert get_right_ascension(ISS_TLE_STR) == 208.9163
        assert get_perigee(ISS_TLE_STR) == 69.9862
        assert get_mean_anomaly(ISS_TLE_STR) == 25.2906

    def test_eccentricity(self) -> None:
        assert get_eccentricity(ISS_TLE_STR) == 0.0006317
        assert get_eccentricity(TIANZHOU_TLE_STR) == 0.0002841

    def test_mean_motion(self) -> None:
        assert get_mean_motion(ISS_TLE_STR) == 15.54225995

    def test_rev_number(self) -> None:
        assert get_rev_number_at_epoch(ISS_TLE_STR) == 6766

    def test_checksum(self) -> None:
        assert get_checksum2(ISS_TLE_STR) == 0

    def test_get_from_tle_rejects_bad_line_number(self) -> None:
        with pytest.raises(ValueError, match="line_number"):
            get_from_tle(ISS_TLE_STR, 3, INCLINATION)


class TestDerivedValues:
    def test_satellite_name(self) -> None:
        assert get_satellite_name(ISS_TLE_STR) == ISS_NAME
        assert get_satellite_name(TIANZHOU_TLE_STR) == "TIANZHOU 1"

    def test_unknown_name(self) -> None:
        assert get_satellite_name(TIANZHOU_NO_NAME) == "Unknown"

    def test_unknown_name_falls_back_to_cospar(self) -> None:
        assert get_satellite_name(TIANZHOU_NO_NAME, fallback_to_cospar=True) == "2017-021A"

    def test_cospar(self) -> None:
        assert get_cospar(ISS_TLE_STR) == "1998-067A"

    def test_epoch_timestamp(self) -> None:
        assert get_epoch_timestamp(ISS_TLE_STR) == 1500956694771

    def test_average_orbit_time(self) -> None:
        assert get_average_orbit_time_ms(ISS_TLE_STR) == 5559037
        assert get_average_orbit_time_mins(ISS_TLE_STR) == 92.65061666666666
        assert get_average_orbit_time_s(ISS_TLE_STR) == 5559.037

    @pytest.mark.parametrize(
        "two_digit, expected",
        [(57, 1957), (99, 1999), (0, 2000), (17, 2017), (56, 2056)],
    )
    def test_full_year(self, two_digit: int, expected: int) -> None:
        assert full_year(two_digit) == expected


class TestChecksum:
    def test_known_lines(self) -> None:
        assert compute_checksum(ISS_LINE1) == 3
        assert compute_checksum(ISS_LINE2) == 0
        assert compute_checksum(TIANZHOU_LINE1) == 0
        assert compute_checksum(TIANZHOU_LINE2) == 5

    def test_minus_counts_as_one(self) -> None:
        assert compute_checksum("1-1X") == 3
        assert compute_checksum("--A.+ 0") == 2

    def test_non_ascii_digits_count_as_zero(self) -> None:
        assert compute_checksum("1\u00b23\u0663X") == 4

    def test_stable(self) -> None:
        results = {compute_checksum(ISS_LINE1) for _ in range(5)}
        assert results == {3}

    def test_empty_input_raises(self) -> None:
        with pytest.raises(EmptyChecksumInputError):
            compute_checksum("5")
        with pytest.raises(EmptyChecksumInputError):
            compute_checksum("")


class TestIsValid:
    def test_valid_forms(self) -> None:
        assert is_valid(ISS_TLE_STR)
        assert is_valid([ISS_LINE1, ISS_LINE2])
        assert is_valid(TLE.from_lines(TIANZHOU_LINE1, TIANZHOU_LINE2))

    def test_bad_checksum_line1(self) -> None:
        assert not is_valid(f"{_bump_last_digit(ISS_LINE1)}\n{ISS_LINE2}")

    def test_bad_checksum_line2(self) -> None:
        assert not is_valid(f"{ISS_LINE1}\n{_bump_last_digit(ISS_LINE2)}")

    def test_swapped_lines(self) -> None:
        assert not is_valid([ISS_LINE2, ISS_LINE1])

    def test_catalog_number_mismatch(self) -> None:
        assert not is_valid(f"{ISS_LINE1}\n{TIANZHOU_LINE2}")

    def test_never_raises(self) -> None:
        assert not is_valid({"name": "x"})
        assert not is_valid(42)
        assert not is_valid("not a tle")
        assert not is_valid(["1", "2"])
        assert not is_valid(["", ""])


class TestInjectedCache:
    def test_getters_parse_into_given_cache(self, cache: CacheService) -> None:
        assert get_inclination(ISS_TLE_STR, cache=cache) == 51.64
        assert get_satellite_name(ISS_TLE_STR, cache=cache) == ISS_NAME
        assert get_epoch_timestamp(ISS_TLE_STR, cache=cache) == 1500956694771
        assert is_valid(ISS_TLE_STR, cache=cache)
        assert ("text", ISS_TLE_STR) in cache.parsed_tles
        assert len(default_cache().parsed_tles) == 0

    def test_get_from_tle_uses_given_cache(self, cache: CacheService) -> None:
        assert get_from_tle([ISS_LINE1, ISS_LINE2], 2, INCLINATION, cache=cache) == 51.64
        assert ("lines", ISS_LINE1) in cache.parsed_tles
        assert len(default_cache().parsed_tles) == 0
