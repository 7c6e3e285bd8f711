"""orbtrack Quickstart — parse a TLE and find the satellite."""

from orbtrack import (
    get_cospar,
    get_epoch_timestamp,
    get_satellite_info,
    get_satellite_name,
    is_valid,
    parse_tle,
)

# ISS (ZARYA) TLE
tle_text = """
ISS (ZARYA)
1 25544U 98067A   17206.18396726  .00001961  00000-0  36771-4 0  9993
2 25544  51.6400 208.9163 0006317  69.9862  25.2906 15.54225995 67660
""".strip()

tle = parse_tle(tle_text)

print(f"Satellite: {get_satellite_name(tle)}")
print(f"COSPAR:    {get_cospar(tle)}")
print(f"Valid:     {is_valid(tle)}")
print(f"Epoch:     {tle.epoch}")

# Where was it an hour after epoch, seen from Santa Cruz?
info = get_satellite_info(tle, get_epoch_timestamp(tle) + 3_600_000, 36.96, -122.03, 0.0)
print(f"Position:  {info.lat:.2f}, {info.lng:.2f} at {info.height_km:.0f} km")
print(f"Look:      az {info.azimuth_deg:.1f}°, el {info.elevation_deg:.1f}°, {info.range_km:.0f} km")
