import math
from typing import List, NamedTuple, Tuple

EARTH_RADIUS_MILES = 3958.8

# Slack added to the bounding box so float rounding never drops a church
# sitting exactly on the radius.
_BOX_EPSILON_DEG = 1e-6


class BoundingBox(NamedTuple):
    min_lat: float
    max_lat: float
    # One range normally, two when the box crosses the antimeridian
    lng_ranges: List[Tuple[float, float]]


def is_valid_coordinate(lat, lng) -> bool:
    if lat is None or lng is None:
        return False
    try:
        lat, lng = float(lat), float(lng)
    except (TypeError, ValueError):
        return False
    if math.isnan(lat) or math.isnan(lng):
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0


def haversine_miles(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two points in miles."""
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lng = math.radians(lng2 - lng1)

    a = (math.sin(delta_lat / 2) ** 2 +
         math.cos(lat1_rad) * math.cos(lat2_rad) *
         math.sin(delta_lng / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_MILES * c


def bounding_box(lat: float, lng: float, radius_miles: float) -> BoundingBox:
    """
    Smallest lat/lng box that contains every point within ``radius_miles``
    of (lat, lng). Used as an index-friendly prefilter before the exact
    haversine check.
    """
    angular = radius_miles / EARTH_RADIUS_MILES
    lat_delta = math.degrees(angular) + _BOX_EPSILON_DEG

    min_lat = max(lat - lat_delta, -90.0)
    max_lat = min(lat + lat_delta, 90.0)

    # Box touches a pole: every longitude is reachable
    if min_lat <= -90.0 or max_lat >= 90.0:
        return BoundingBox(min_lat, max_lat, [(-180.0, 180.0)])

    ratio = math.sin(angular) / math.cos(math.radians(lat))
    if ratio >= 1.0:
        return BoundingBox(min_lat, max_lat, [(-180.0, 180.0)])

    lng_delta = math.degrees(math.asin(ratio)) + _BOX_EPSILON_DEG
    west, east = lng - lng_delta, lng + lng_delta

    if west < -180.0:
        return BoundingBox(min_lat, max_lat, [(west + 360.0, 180.0), (-180.0, east)])
    if east > 180.0:
        return BoundingBox(min_lat, max_lat, [(west, 180.0), (-180.0, east - 360.0)])
    return BoundingBox(min_lat, max_lat, [(west, east)])
