"""
Result sink: writes a finished run and serves the history.

Runs are append-only. Nothing here commits; the caller owns the transaction.
"""

from __future__ import annotations

from typing import Iterable, List

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from . import config
from .engine.models import PerOrderOutcome, RunResult
from .errors import RunNotFound
from .model import Order, SimulationOrderResult, SimulationRun


def apply_order_outcomes(db: Session, outcomes: Iterable[PerOrderOutcome]) -> int:
    """Status / driver / delivery time / profit onto every processed order."""
    outcomes = list(outcomes)
    if not outcomes:
        return 0

    by_id = {o.order_id: o for o in outcomes}
    orders = db.scalars(select(Order).where(Order.id.in_(by_id.keys()))).all()
    for order in orders:
        out = by_id[order.id]
        order.status = out.status
        order.assigned_driver_id = out.driver_id
        order.delivery_time_minutes = out.delivery_time_minutes
        order.profit = out.profit
    return len(orders)


def persist(db: Session, result: RunResult) -> SimulationRun:
    t = result.totals
    run = SimulationRun(
        available_drivers=result.available_drivers,
        route_start_time=result.route_start_time,
        max_hours_per_driver=result.max_hours_per_driver,
        total_profit=t.total_profit,
        total_orders=t.total_orders,
        on_time_deliveries=t.on_time_deliveries,
        late_deliveries=t.late_deliveries,
        efficiency_score=t.efficiency_score,
        total_fuel_cost=t.total_fuel_cost,
        fuel_cost_low=t.fuel_cost_by_traffic_level["Low"],
        fuel_cost_medium=t.fuel_cost_by_traffic_level["Medium"],
        fuel_cost_high=t.fuel_cost_by_traffic_level["High"],
        unassigned_orders=list(result.unassigned_order_codes),
    )
    if result.timestamp is not None:
        run.created_at = result.timestamp

    run.order_results = [
        SimulationOrderResult(
            position=pos,
            order_code=o.order_code,
            driver_id=o.driver_id,
            is_late=o.is_late,
            delivery_time_minutes=o.delivery_time_minutes,
            profit=o.profit,
            penalty=o.penalty,
            bonus=o.bonus,
            fuel_cost=o.fuel_cost,
        )
        for pos, o in enumerate(result.outcomes)
    ]

    db.add(run)
    db.flush()
    result.run_id = run.id
    return run


def history(db: Session, limit: int = config.HISTORY_DEFAULT_LIMIT) -> List[SimulationRun]:
    limit = max(1, min(int(limit), config.HISTORY_MAX_LIMIT))
    stmt = (
        select(SimulationRun)
        .order_by(SimulationRun.created_at.desc(), SimulationRun.id.desc())
        .limit(limit)
    )
    return list(db.scalars(stmt).all())


def get_run(db: Session, run_id: int) -> SimulationRun:
    run = db.scalars(
        select(SimulationRun)
        .options(selectinload(SimulationRun.order_results))
        .where(SimulationRun.id == run_id)
    ).first()
    if run is None:
        raise RunNotFound(run_id)
    return run
