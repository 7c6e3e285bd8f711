"""orbtrack Visibility — which satellites are above the horizon, and their ground tracks."""

from orbtrack import get_ground_tracks_sync, get_visible_satellites, parse_tle

catalog = [
    parse_tle("""ISS (ZARYA)
1 25544U 98067A   17206.18396726  .00001961  00000-0  36771-4 0  9993
2 25544  51.6400 208.9163 0006317  69.9862  25.2906 15.54225995 67660"""),
    parse_tle("""TIANZHOU 1
1 42684U 17021A   17221.56595738 -.00000599  00000-0 -29896-5 0  9990
2 42684  42.7845  37.8962 0002841 275.1472 140.9012 15.57909698 17345"""),
]

when = 1_501_039_265_000  # 2017-07-26 03:21 UTC

result = get_visible_satellites(catalog, 34.243889, -116.911389, 0.0, elevation_threshold=10.0, timestamp=when)
for sat in result:
    print(f"{sat.tle.name}: el {sat.info.elevation_deg:.1f}°, az {sat.info.azimuth_deg:.1f}°")
for skipped in result.skipped:
    print(f"skipped {skipped.tle.name}: {skipped.reason}")

previous, current, following = get_ground_tracks_sync(catalog[0], when, step_ms=30_000)
print(f"Current orbit: {len(current)} points starting at {current[0]}")
