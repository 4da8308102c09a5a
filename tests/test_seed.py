from datetime import datetime, timezone

import pandas as pd
import pytest
from sqlalchemy import func, select

from greencart.model import Driver, Order, Route, SimulationRun
from greencart.pipeline import run_simulation
from greencart.seed import generate_orders, load_drivers_csv, load_routes_csv, seed_database
from greencart.sink import get_run


def test_reference_csvs_load():
    drivers = load_drivers_csv()
    routes = load_routes_csv()
    assert len(drivers) == 10
    assert all(len(h) == 7 for h in drivers["past_7_days_work_hours"])
    assert len(routes) == 8
    assert set(routes["traffic_level"]) == {"Low", "Medium", "High"}


def test_bad_driver_history_rejected(tmp_path):
    path = tmp_path / "drivers.csv"
    path.write_text("name,current_shift_hours,past_7_days_work_hours\nShort,0,1|2|3\n")
    with pytest.raises(ValueError):
        load_drivers_csv(path)


def test_unknown_traffic_level_rejected(tmp_path):
    path = tmp_path / "routes.csv"
    path.write_text("route_code,distance_km,traffic_level,base_time_minutes,description\nRT009,3,Jammed,20,x\n")
    with pytest.raises(ValueError):
        load_routes_csv(path)


def test_generated_orders_are_reproducible():
    start = datetime(2025, 1, 6, tzinfo=timezone.utc)
    a = generate_orders(["RT001", "RT002"], count=20, start=start, random_state=7)
    b = generate_orders(["RT001", "RT002"], count=20, start=start, random_state=7)
    pd.testing.assert_frame_equal(a, b)
    assert list(a["order_code"][:3]) == ["ORD001", "ORD002", "ORD003"]
    assert (a["value"] > 0).all()
    assert set(a["route_code"]) <= {"RT001", "RT002"}


def test_seed_database_replaces_content(db):
    routes = load_routes_csv()
    orders = generate_orders(list(routes["route_code"]), count=12)

    seed_database(db, load_drivers_csv(), routes, orders)
    counts = seed_database(db, load_drivers_csv(), routes, orders)

    assert counts == {"drivers": 10, "routes": 8, "orders": 12}
    assert db.scalar(select(func.count()).select_from(Driver)) == 10
    assert db.scalar(select(func.count()).select_from(Route)) == 8
    assert db.scalar(select(func.count()).select_from(Order).where(Order.status == "pending")) == 12


def test_driver_history_must_have_seven_days():
    with pytest.raises(ValueError):
        Driver(name="x", past_7_days_work_hours=[1, 2, 3])
    with pytest.raises(ValueError):
        Driver(name="x", past_7_days_work_hours=[1, 2, 3, 4, 5, 6, 25])


def test_reseed_keeps_run_history(db):
    routes = load_routes_csv()
    orders = generate_orders(list(routes["route_code"]), count=12)
    seed_database(db, load_drivers_csv(), routes, orders)

    run = run_simulation(db, available_drivers=2, route_start_time="09:00", max_hours_per_driver=8)
    seed_database(db, load_drivers_csv(), routes, orders)
    db.expire_all()

    assert db.scalar(select(func.count()).select_from(SimulationRun)) == 1
    kept = get_run(db, run.id)
    assert len(kept.order_results) + len(kept.unassigned_orders) == 12
    assert db.scalar(select(func.count()).select_from(Order).where(Order.status == "pending")) == 12
