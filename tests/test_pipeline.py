from datetime import datetime, timedelta

import pytest
from sqlalchemy import func, select

from greencart import gateway, sink
from greencart.errors import InsufficientDrivers, NoPendingOrders, RunNotFound
from greencart.model import Order, SimulationRun
from greencart.pipeline import compute_run, run_simulation
from greencart.seed import generate_orders, load_drivers_csv, load_routes_csv, seed_database

from conftest import FATIGUED, RESTED


def run_count(db):
    return db.scalar(select(func.count()).select_from(SimulationRun))


def simulate(db, drivers=1, max_hours=8, **kwargs):
    return run_simulation(
        db,
        available_drivers=drivers,
        route_start_time="09:00",
        max_hours_per_driver=max_hours,
        **kwargs,
    )


def test_fatigued_driver_high_traffic_scenario(db, store):
    store.driver(hours=FATIGUED)
    r = store.route(distance_km=20, traffic_level="High", base_time_minutes=60)
    store.order(r, value=1500)

    run = simulate(db)

    [res] = run.order_results
    assert res.delivery_time_minutes == 94
    assert res.is_late is True
    assert res.penalty == 50
    assert res.bonus == 0
    assert res.fuel_cost == 140
    assert run.total_profit == 1310
    assert run.late_deliveries == 1
    assert run.efficiency_score == 0
    assert run.fuel_cost_high == 140


def test_rested_driver_low_traffic_scenario(db, store):
    store.driver(hours=RESTED)
    r = store.route(distance_km=20, traffic_level="Low", base_time_minutes=30)
    store.order(r, value=1500)

    run = simulate(db)

    [res] = run.order_results
    assert res.delivery_time_minutes == 30
    assert res.is_late is False
    assert res.bonus == 150
    assert res.penalty == 0
    assert run.on_time_deliveries == 1
    assert run.efficiency_score == 100


def test_zero_drivers_requested_creates_no_run(db, store):
    store.driver()
    store.order(store.route())

    with pytest.raises(InsufficientDrivers):
        simulate(db, drivers=0)
    assert run_count(db) == 0


def test_no_active_drivers(db, store):
    store.driver(active=False)
    store.order(store.route())

    with pytest.raises(InsufficientDrivers):
        simulate(db, drivers=5)
    assert run_count(db) == 0


def test_no_pending_orders(db, store):
    store.driver()
    store.order(store.route(), status="delivered")

    with pytest.raises(NoPendingOrders):
        simulate(db)
    assert run_count(db) == 0


def test_orders_are_updated_with_outcome(db, store):
    d = store.driver(hours=FATIGUED)
    r = store.route(traffic_level="High", base_time_minutes=60)
    o = store.order(r, value=1500)

    simulate(db)
    db.expire_all()

    order = db.get(Order, o.id)
    assert order.status == "late"
    assert order.assigned_driver_id == d.id
    assert order.delivery_time_minutes == 94
    assert order.profit == 1310


def test_driver_records_are_not_touched(db, store):
    d = store.driver(hours=FATIGUED)
    store.order(store.route())

    simulate(db)
    db.expire_all()

    assert d.current_shift_hours == 0
    assert d.past_7_days_work_hours == [float(h) for h in FATIGUED]


def test_saturated_pool_leaves_orders_pending(db, store):
    store.driver(name="A")
    store.driver(name="B")
    r = store.route(traffic_level="Low", base_time_minutes=60)
    orders = [store.order(r, value=500) for _ in range(3)]

    run = simulate(db, drivers=2, max_hours=1)
    db.expire_all()

    assert run.total_orders == 3
    assert len(run.order_results) == 2
    assert run.unassigned_orders == [orders[2].order_code]
    assert db.get(Order, orders[2].id).status == "pending"
    assert db.get(Order, orders[2].id).assigned_driver_id is None
    assert run.efficiency_score == 67


def test_overbooking_assigns_every_order(db, store):
    store.driver(name="A")
    store.driver(name="B")
    r = store.route(traffic_level="Low", base_time_minutes=60)
    for _ in range(3):
        store.order(r, value=500)

    run = simulate(db, drivers=2, max_hours=1, overbooking=True)

    assert len(run.order_results) == 3
    assert run.unassigned_orders == []


def test_driver_pool_capped_at_requested_count(db, store):
    first = store.driver(name="A")
    store.driver(name="B")
    store.driver(name="C")
    r = store.route(traffic_level="Low", base_time_minutes=30)
    for _ in range(4):
        store.order(r, value=500)

    run = simulate(db, drivers=1)

    assert {res.driver_id for res in run.order_results} == {first.id}


def test_route_start_time_is_recorded_but_inert(db, store):
    store.driver()
    r = store.route()
    store.order(r)
    snapshot = gateway.load_snapshot(db, 1)

    morning = compute_run(snapshot, available_drivers=1, route_start_time="06:00", max_hours_per_driver=8)
    night = compute_run(snapshot, available_drivers=1, route_start_time="22:30", max_hours_per_driver=8)

    assert morning.outcomes == night.outcomes
    assert morning.route_start_time == "06:00"


def test_same_snapshot_gives_identical_results(db):
    seed_database(db, load_drivers_csv(), load_routes_csv(), generate_orders(["RT001", "RT002", "RT003", "RT006"]))
    snapshot = gateway.load_snapshot(db, 4)

    a = compute_run(snapshot, available_drivers=4, route_start_time="09:00", max_hours_per_driver=3)
    b = compute_run(snapshot, available_drivers=4, route_start_time="09:00", max_hours_per_driver=3)

    assert a.outcomes == b.outcomes
    assert a.unassigned_order_codes == b.unassigned_order_codes
    assert a.totals == b.totals


def test_seeded_run_totals_are_consistent(db):
    routes = load_routes_csv()
    seed_database(db, load_drivers_csv(), routes, generate_orders(list(routes["route_code"])))

    run = simulate(db, drivers=5, max_hours=6)

    assert run.on_time_deliveries + run.late_deliveries <= run.total_orders
    assert run.efficiency_score == int(run.on_time_deliveries / run.total_orders * 100 + 0.5)
    assert len(run.order_results) + len(run.unassigned_orders) == run.total_orders
    for res in run.order_results:
        assert not (res.penalty > 0 and res.bonus > 0)
    assert run.total_fuel_cost == pytest.approx(
        run.fuel_cost_low + run.fuel_cost_medium + run.fuel_cost_high, abs=0.02
    )


def test_failed_write_rolls_everything_back(db, store, monkeypatch):
    store.driver()
    o = store.order(store.route())

    def boom(*args, **kwargs):
        raise RuntimeError("disk full")

    monkeypatch.setattr(sink, "persist", boom)
    with pytest.raises(RuntimeError):
        simulate(db)

    db.expire_all()
    assert db.get(Order, o.id).status == "pending"
    assert run_count(db) == 0


def test_history_most_recent_first_and_idempotent(db, store):
    store.driver()
    r = store.route()
    t0 = datetime(2025, 1, 6, 12, 0)
    ids = []
    for i in range(3):
        store.order(r)
        ids.append(simulate(db, now=t0 + timedelta(minutes=i)).id)

    first = [run.id for run in sink.history(db, 10)]
    second = [run.id for run in sink.history(db, 10)]

    assert first == list(reversed(ids))
    assert first == second
    assert [run.id for run in sink.history(db, 2)] == list(reversed(ids))[:2]


def test_get_run_unknown_id(db):
    with pytest.raises(RunNotFound):
        sink.get_run(db, 999)
