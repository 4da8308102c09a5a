"""
Assignment scheduler

1) pending orders sorted by delivery deadline (earliest first, stable)
2) drivers walked round-robin from a cursor
3) a driver whose run hours reached max_hours is skipped
4) per order: estimate delivery time → evaluate → book hours on the ledger
5) nobody below the cap → order stays unassigned (pending)

With overbooking=True the scheduler reproduces the old fall-through instead:
when every driver is saturated the order still goes to the driver one
position past the cursor.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from utils.logger import get_logger

from .estimator import estimate_delivery_minutes
from .evaluator import evaluate_order
from .models import DriverSnapshot, OrderSnapshot, PerOrderOutcome, ScheduleResult

logger = get_logger("greencart.scheduler")


def sort_by_deadline(orders: Sequence[OrderSnapshot]) -> List[OrderSnapshot]:
    # sorted() is stable → equal deadlines keep snapshot order
    return sorted(orders, key=lambda o: o.delivery_deadline)


def find_eligible_driver(ledger: List[float], cursor: int, max_hours: float) -> Optional[int]:
    """Index of the first driver from `cursor` (circular) still under the cap, or None."""
    n = len(ledger)
    for step in range(n):
        idx = (cursor + step) % n
        if ledger[idx] < max_hours:
            return idx
    return None


def schedule_orders(
    drivers: Sequence[DriverSnapshot],
    orders: Sequence[OrderSnapshot],
    max_hours_per_driver: float,
    *,
    overbooking: bool = False,
) -> ScheduleResult:
    if not drivers:
        raise ValueError("schedule_orders needs at least one driver")

    # run-local hours ledger, indexed by driver position
    ledger: List[float] = [0.0] * len(drivers)
    cursor = 0
    result = ScheduleResult(ledger=ledger)

    for order in sort_by_deadline(orders):
        idx = find_eligible_driver(ledger, cursor, max_hours_per_driver)

        if idx is None:
            if not overbooking:
                result.unassigned.append(order)
                logger.debug(f"{order.order_code}: every driver at {max_hours_per_driver}h, left pending")
                continue
            # legacy: the scan stops one step past the cursor when all are saturated
            idx = (cursor + 1) % len(drivers)
            logger.warning(
                f"{order.order_code}: every driver saturated, overbooking driver {drivers[idx].driver_id}"
            )

        driver = drivers[idx]
        minutes = estimate_delivery_minutes(order.route, driver.has_fatigue)
        evaluation = evaluate_order(order.value, order.route, minutes)

        result.outcomes.append(
            PerOrderOutcome(
                order_id=order.order_id,
                order_code=order.order_code,
                driver_id=driver.driver_id,
                traffic_level=order.route.traffic_level,
                delivery_time_minutes=minutes,
                is_late=evaluation.is_late,
                profit=evaluation.profit,
                penalty=evaluation.penalty,
                bonus=evaluation.bonus,
                fuel_cost=evaluation.fuel_cost,
            )
        )

        ledger[idx] += minutes / 60
        cursor = (idx + 1) % len(drivers)

    return result
