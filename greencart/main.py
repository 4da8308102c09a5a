from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional

import pandas as pd

from greencart import config
from greencart.database import SessionLocal, init_db
from greencart.errors import SimulationError
from greencart.pipeline import run_simulation
from greencart.schemas import SimulationResult, parse_simulation_request

RESULT_COLUMNS = [
    "orderId",
    "assignedDriverId",
    "isLate",
    "deliveryTimeMinutes",
    "profit",
    "penalties",
    "bonus",
    "fuelCost",
]


def results_frame(result: SimulationResult) -> pd.DataFrame:
    rows = [r.model_dump(by_alias=True) for r in result.per_order_results]
    return pd.DataFrame(rows, columns=RESULT_COLUMNS)


def driver_load_frame(result: SimulationResult) -> pd.DataFrame:
    """Orders / minutes / profit per driver, busiest first."""
    df = results_frame(result)
    if df.empty:
        return pd.DataFrame(columns=["assignedDriverId", "orders", "minutes", "profit"])
    out = (
        df.groupby("assignedDriverId")
        .agg(
            orders=("orderId", "count"),
            minutes=("deliveryTimeMinutes", "sum"),
            profit=("profit", "sum"),
        )
        .reset_index()
        .sort_values(["minutes", "assignedDriverId"], ascending=[False, True])
    )
    out["profit"] = out["profit"].round(2)
    return out


def print_summary(result: SimulationResult) -> None:
    fuel = result.fuel_cost_breakdown
    print("\n===== Simulation summary =====")
    print(f"run #{result.id} at {result.timestamp.isoformat()}")
    print(f"total profit      : {result.total_profit:.2f}")
    print(f"orders            : {result.total_orders}")
    print(f"on time / late    : {result.on_time_deliveries} / {result.late_deliveries}")
    print(f"efficiency score  : {result.efficiency_score}%")
    print(
        f"fuel cost         : {fuel.total_fuel_cost:.2f} "
        f"(Low {fuel.by_traffic_level.low:.2f} / Medium {fuel.by_traffic_level.medium:.2f} "
        f"/ High {fuel.by_traffic_level.high:.2f})"
    )
    if result.unassigned_orders:
        print(f"left pending      : {', '.join(result.unassigned_orders)}")

    load = driver_load_frame(result)
    if not load.empty:
        print("\nper driver:")
        print(load.to_string(index=False))


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Run a delivery simulation against the local database")
    p.add_argument("--drivers", type=int, required=True, help="available drivers (1-50)")
    p.add_argument("--start", default="09:00", help="route start time HH:MM (recorded only)")
    p.add_argument("--max-hours", type=float, required=True, help="max hours per driver per day (1-16)")
    p.add_argument("--overbook", action="store_true", help="legacy: keep assigning when every driver is saturated")
    p.add_argument(
        "--export",
        nargs="?",
        const="",
        default=None,
        help="write per-order results to this CSV (bare flag: exports/simulation_<id>.csv)",
    )
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        request = parse_simulation_request(
            {
                "availableDrivers": args.drivers,
                "routeStartTime": args.start,
                "maxHoursPerDriverPerDay": args.max_hours,
            }
        )
    except SimulationError as e:
        print(f"[ERROR] {e}: {', '.join(getattr(e, 'errors', []) or e.invalid_fields)}")
        return 2

    init_db()
    with SessionLocal() as db:
        try:
            run = run_simulation(
                db,
                available_drivers=request.available_drivers,
                route_start_time=request.route_start_time,
                max_hours_per_driver=request.max_hours_per_driver_per_day,
                overbooking=args.overbook or config.OVERBOOKING,
            )
        except SimulationError as e:
            print(f"[ERROR] {e}")
            return 1
        result = SimulationResult.from_run(run)

    print_summary(result)

    if args.export is not None:
        out = Path(args.export) if args.export else config.EXPORT_DIR / f"simulation_{result.id}.csv"
        out.parent.mkdir(parents=True, exist_ok=True)
        results_frame(result).to_csv(out, index=False, encoding="utf-8-sig")
        print(f"\n[OK] per-order results → {out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
