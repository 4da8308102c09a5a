"""
Reference data for local runs and demos.

- drivers / routes come from data/drivers.csv and data/routes.csv
- pending orders are generated (numpy rng, fixed seed → same orders every time)
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

import numpy as np
import pandas as pd
from sqlalchemy import delete
from sqlalchemy.orm import Session

from utils.logger import get_logger

from . import config
from .model import Driver, Order, Route

logger = get_logger("greencart.seed")

DRIVER_COLUMNS = ["name", "current_shift_hours", "past_7_days_work_hours"]
ROUTE_COLUMNS = ["route_code", "distance_km", "traffic_level", "base_time_minutes", "description"]


def _parse_hours(raw) -> list:
    hours = [float(x) for x in str(raw).split("|") if str(x).strip() != ""]
    if len(hours) != 7:
        raise ValueError(f"past_7_days_work_hours needs 7 values, got {len(hours)}: {raw!r}")
    return hours


def load_drivers_csv(path: Path = config.DRIVERS_CSV_PATH) -> pd.DataFrame:
    df = pd.read_csv(path)
    df.columns = [c.strip() for c in df.columns]
    missing = [c for c in DRIVER_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"drivers CSV is missing columns: {missing}")

    df["name"] = df["name"].astype(str).str.strip()
    df["current_shift_hours"] = pd.to_numeric(df["current_shift_hours"], errors="coerce").fillna(0.0)
    df["past_7_days_work_hours"] = df["past_7_days_work_hours"].apply(_parse_hours)
    return df[DRIVER_COLUMNS]


def load_routes_csv(path: Path = config.ROUTES_CSV_PATH) -> pd.DataFrame:
    df = pd.read_csv(path)
    df.columns = [c.strip() for c in df.columns]
    missing = [c for c in ROUTE_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"routes CSV is missing columns: {missing}")

    bad = df[~df["traffic_level"].isin(config.TRAFFIC_LEVELS)]
    if not bad.empty:
        raise ValueError(f"unknown traffic levels: {sorted(bad['traffic_level'].unique())}")

    df["description"] = df["description"].fillna("").astype(str)
    return df[ROUTE_COLUMNS]


def generate_orders(
    route_codes: list,
    *,
    count: int = config.SEED_ORDER_COUNT,
    start: Optional[datetime] = None,
    random_state: int = config.SEED_RANDOM_STATE,
) -> pd.DataFrame:
    """Pending orders spread over the next few days, ~30% of them high value."""
    if not route_codes:
        raise ValueError("generate_orders needs at least one route")

    rng = np.random.default_rng(random_state)
    start = start or datetime.now(timezone.utc)
    window_minutes = config.SEED_DEADLINE_WINDOW_DAYS * 24 * 60

    rows = []
    for i in range(1, count + 1):
        route_code = route_codes[int(rng.integers(0, len(route_codes)))]
        deadline = start + timedelta(minutes=float(rng.uniform(0, window_minutes)))

        if rng.random() < config.SEED_HIGH_VALUE_SHARE:
            value = rng.uniform(1000, 5000)
        else:
            value = rng.uniform(200, 1000)

        rows.append(
            {
                "order_code": f"ORD{i:03d}",
                "value": round(float(value), 2),
                "route_code": route_code,
                "delivery_deadline": deadline,
                "customer_address": f"Address {i}, City District",
                "customer_phone": f"98765{i:05d}",
            }
        )
    return pd.DataFrame(rows)


def seed_database(
    db: Session,
    drivers_df: pd.DataFrame,
    routes_df: pd.DataFrame,
    orders_df: pd.DataFrame,
    *,
    reset: bool = True,
) -> dict:
    """Replace (or extend) drivers, routes and orders. Run history is left alone. Commits once."""
    if reset:
        db.execute(delete(Order))
        db.execute(delete(Route))
        db.execute(delete(Driver))

    drivers = [
        Driver(
            name=row["name"],
            current_shift_hours=float(row["current_shift_hours"]),
            past_7_days_work_hours=list(row["past_7_days_work_hours"]),
        )
        for _, row in drivers_df.iterrows()
    ]
    routes = {
        row["route_code"]: Route(
            route_code=row["route_code"],
            distance_km=float(row["distance_km"]),
            traffic_level=row["traffic_level"],
            base_time_minutes=float(row["base_time_minutes"]),
            description=row["description"] or None,
        )
        for _, row in routes_df.iterrows()
    }
    db.add_all(drivers)
    db.add_all(routes.values())

    orders = []
    for _, row in orders_df.iterrows():
        route = routes.get(row["route_code"])
        if route is None:
            raise ValueError(f"{row['order_code']}: unknown route {row['route_code']}")
        deadline = row["delivery_deadline"]
        if isinstance(deadline, pd.Timestamp):
            deadline = deadline.to_pydatetime()
        orders.append(
            Order(
                order_code=row["order_code"],
                value=float(row["value"]),
                route=route,
                delivery_deadline=deadline,
                status="pending",
                customer_address=row.get("customer_address"),
                customer_phone=row.get("customer_phone"),
            )
        )
    db.add_all(orders)

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    counts = {"drivers": len(drivers), "routes": len(routes), "orders": len(orders)}
    logger.info(f"✅ seeded {counts}")
    return counts
