from __future__ import annotations

from .. import config
from .models import RouteSnapshot
from .rounding import round_half_up


def traffic_multiplier(traffic_level: str) -> float:
    try:
        return config.TRAFFIC_TIME_MULTIPLIER[traffic_level]
    except KeyError:
        raise ValueError(f"unknown traffic level: {traffic_level!r}") from None


def estimate_delivery_minutes(route: RouteSnapshot, fatigued: bool) -> int:
    """
    Adjusted delivery duration in whole minutes.

    1) start from the route's base time
    2) fatigued driver → x FATIGUE_SLOWDOWN_FACTOR
    3) traffic multiplier on top (Low 1.0 / Medium 1.1 / High 1.2)
    4) round half up

    The fatigue factor must be applied before the traffic factor; the
    rounded result differs otherwise.
    """
    minutes = float(route.base_time_minutes)
    if fatigued:
        minutes *= config.FATIGUE_SLOWDOWN_FACTOR
    minutes *= traffic_multiplier(route.traffic_level)
    return round_half_up(minutes)
