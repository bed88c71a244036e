from math import pi

from flareprofile.config import FEET_PER_MINUTE_PER_KNOT, SECONDS_PER_MINUTE


def knots_to_feet_per_minute(knots: float) -> float:
    """Convert knots to feet per minute."""
    return knots * FEET_PER_MINUTE_PER_KNOT

def feet_per_minute_to_knots(feet_per_minute: float) -> float:
    """Convert feet per minute to knots."""
    return feet_per_minute / FEET_PER_MINUTE_PER_KNOT

def deg2rad(degrees: float) -> float:
    return degrees * pi / 180

def rad2deg(radians: float) -> float:
    return radians * 180 / pi

def minutes_to_seconds(minutes: float) -> float:
    return minutes * SECONDS_PER_MINUTE

def seconds_to_minutes(seconds: float) -> float:
    return seconds / SECONDS_PER_MINUTE
