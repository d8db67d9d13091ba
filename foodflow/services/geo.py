# foodflow/services/geo.py
from math import atan2, cos, radians, sin

EARTH_RADIUS_KM = 6371.0


def haversine(a: dict, b: dict) -> float:
    """
    a, b: dicts like {"lat": float, "lng": float}
    returns distance in km
    """
    dlat = radians(b["lat"] - a["lat"])
    dlon = radians(b["lng"] - a["lng"])
    s = sin(dlat/2)**2 + cos(radians(a["lat"])) * cos(radians(b["lat"])) * sin(dlon/2)**2
    # rounding can push s past 1 for near-antipodal points
    s = min(1.0, max(0.0, s))
    return 2 * EARTH_RADIUS_KM * atan2(s**0.5, (1 - s)**0.5)
