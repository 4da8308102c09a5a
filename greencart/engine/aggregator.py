from __future__ import annotations

from typing import Iterable

from .models import PerOrderOutcome, RunTotals
from .rounding import round_half_up


class RunAggregator:
    """
    Folds per-order outcomes into run totals.

    total_orders is the pending count seen at snapshot time, not the number
    of processed orders, so unassigned orders pull the efficiency score down.
    """

    def __init__(self, total_orders: int):
        self.totals = RunTotals(total_orders=total_orders)

    def add(self, outcome: PerOrderOutcome) -> None:
        t = self.totals
        if outcome.is_late:
            t.late_deliveries += 1
        else:
            t.on_time_deliveries += 1

        t.total_profit += outcome.profit
        t.total_fuel_cost += outcome.fuel_cost
        t.fuel_cost_by_traffic_level[outcome.traffic_level] += outcome.fuel_cost

    def add_all(self, outcomes: Iterable[PerOrderOutcome]) -> "RunAggregator":
        for outcome in outcomes:
            self.add(outcome)
        return self

    def finish(self) -> RunTotals:
        t = self.totals
        if t.total_orders > 0:
            t.efficiency_score = round_half_up(t.on_time_deliveries / t.total_orders * 100)
        else:
            t.efficiency_score = 0

        # money is rounded once, at run level
        t.total_profit = round_half_up(t.total_profit, 2)
        t.total_fuel_cost = round_half_up(t.total_fuel_cost, 2)
        t.fuel_cost_by_traffic_level = {
            level: round_half_up(cost, 2) for level, cost in t.fuel_cost_by_traffic_level.items()
        }
        return t


def aggregate(outcomes: Iterable[PerOrderOutcome], total_orders: int) -> RunTotals:
    return RunAggregator(total_orders).add_all(outcomes).finish()
