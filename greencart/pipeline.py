from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from utils.logger import get_logger

from . import config, gateway, sink
from .engine.aggregator import aggregate
from .engine.models import RunResult, Snapshot
from .engine.scheduler import schedule_orders
from .model import SimulationRun

logger = get_logger("greencart.pipeline")


def compute_run(
    snapshot: Snapshot,
    *,
    available_drivers: int,
    route_start_time: str,
    max_hours_per_driver: float,
    overbooking: bool = False,
) -> RunResult:
    """Pure part of a run: snapshot in, RunResult out. No I/O."""
    schedule = schedule_orders(
        snapshot.drivers,
        snapshot.pending_orders,
        max_hours_per_driver,
        overbooking=overbooking,
    )
    totals = aggregate(schedule.outcomes, total_orders=len(snapshot.pending_orders))
    return RunResult(
        totals=totals,
        outcomes=schedule.outcomes,
        unassigned_order_codes=[o.order_code for o in schedule.unassigned],
        available_drivers=available_drivers,
        route_start_time=route_start_time,
        max_hours_per_driver=max_hours_per_driver,
    )


def run_simulation(
    db: Session,
    *,
    available_drivers: int,
    route_start_time: str,
    max_hours_per_driver: float,
    overbooking: Optional[bool] = None,
    now: Optional[datetime] = None,
) -> SimulationRun:
    """
    One simulation run.

    1) snapshot (drivers capped at available_drivers, pending orders)
    2) schedule + aggregate in memory
    3) order mutations + run record, committed together

    Any failure rolls the session back, so either everything is written or
    nothing is. route_start_time is stored with the run and has no effect on
    the computation.
    """
    if overbooking is None:
        overbooking = config.OVERBOOKING

    logger.info(
        f"🚀 simulation start: drivers={available_drivers}, start={route_start_time}, "
        f"max_hours={max_hours_per_driver}"
    )
    try:
        snapshot = gateway.load_snapshot(db, available_drivers)
        logger.info(
            f"snapshot: drivers={len(snapshot.drivers)}, routes={len(snapshot.routes)}, "
            f"pending orders={len(snapshot.pending_orders)}"
        )

        result = compute_run(
            snapshot,
            available_drivers=available_drivers,
            route_start_time=route_start_time,
            max_hours_per_driver=max_hours_per_driver,
            overbooking=overbooking,
        )
        result.timestamp = now or datetime.now(timezone.utc)

        if result.unassigned_order_codes:
            logger.warning(
                f"⚠️ {len(result.unassigned_order_codes)} orders left pending, all drivers at the hour cap"
            )

        sink.apply_order_outcomes(db, result.outcomes)
        run = sink.persist(db, result)
        db.commit()
    except Exception:
        db.rollback()
        raise

    t = result.totals
    logger.info(
        f"✅ simulation #{run.id} done: profit={t.total_profit}, on_time={t.on_time_deliveries}, "
        f"late={t.late_deliveries}, efficiency={t.efficiency_score}%"
    )
    return run
