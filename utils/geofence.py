# utils/geofence.py

from math import radians, sin, cos, sqrt, atan2

EARTH_RADIUS_M = 6371000


def haversine_dist(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    φ1, φ2 = radians(lat1), radians(lat2)
    Δφ = radians(lat2 - lat1)
    Δλ = radians(lng2 - lng1)

    a = sin(Δφ/2)**2 + cos(φ1) * cos(φ2) * sin(Δλ/2)**2

    # Rounding can push `a` just outside [0, 1] near antipodes
    a = min(1.0, max(0.0, a))

    c = 2 * atan2(sqrt(a), sqrt(1 - a))
    return EARTH_RADIUS_M * c


def great_circle_distance_meters(a, b) -> float:
    """Distance in meters between two objects exposing `latitude` / `longitude`."""
    return haversine_dist(a.latitude, a.longitude, b.latitude, b.longitude)



def is_within_radius(distance_m: float, radius_m: float) -> bool:
    # Boundary counts as inside
    return distance_m <= radius_m
