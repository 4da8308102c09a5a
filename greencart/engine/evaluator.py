from __future__ import annotations

from .. import config
from .models import OrderEvaluation, RouteSnapshot


def fuel_cost(route: RouteSnapshot) -> float:
    rate = config.FUEL_BASE_RATE_PER_KM
    if route.traffic_level == "High":
        rate += config.FUEL_HIGH_TRAFFIC_SURCHARGE_PER_KM
    return route.distance_km * rate


def is_late(route: RouteSnapshot, delivery_time_minutes: int) -> bool:
    # grace window is measured against the unadjusted base time
    return delivery_time_minutes > route.base_time_minutes + config.LATE_GRACE_MINUTES


def evaluate_order(order_value: float, route: RouteSnapshot, delivery_time_minutes: int) -> OrderEvaluation:
    """
    Financial outcome of one delivery.

    - late      → penalty, never a bonus
    - on time   → bonus only for high-value orders
    - profit    = value + bonus - penalty - fuel (no floor, may go negative)
    """
    late = is_late(route, delivery_time_minutes)
    fuel = fuel_cost(route)

    penalty = 0.0
    bonus = 0.0
    if late:
        penalty = float(config.LATE_PENALTY)
    elif order_value > config.HIGH_VALUE_THRESHOLD:
        bonus = order_value * config.HIGH_VALUE_BONUS_RATE

    profit = order_value + bonus - penalty - fuel
    return OrderEvaluation(
        is_late=late,
        penalty=penalty,
        bonus=bonus,
        fuel_cost=fuel,
        profit=profit,
    )
