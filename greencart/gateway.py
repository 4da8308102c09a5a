"""
Snapshot gateway: read-only view of the store for one run.

- active drivers, ordered by id, capped at the requested count
- active routes
- pending orders with their route resolved, ordered by id
"""

from __future__ import annotations

from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from .engine.models import DriverSnapshot, OrderSnapshot, RouteSnapshot, Snapshot
from .errors import InsufficientDrivers, NoPendingOrders
from .model import Driver, Order, Route


def _route_snapshot(route: Route) -> RouteSnapshot:
    return RouteSnapshot(
        route_id=route.id,
        route_code=route.route_code,
        distance_km=float(route.distance_km),
        traffic_level=route.traffic_level,
        base_time_minutes=float(route.base_time_minutes),
        description=route.description or "",
    )


def load_drivers(db: Session, limit: int) -> List[DriverSnapshot]:
    if limit < 1:
        return []
    rows = db.scalars(
        select(Driver).where(Driver.is_active.is_(True)).order_by(Driver.id).limit(limit)
    ).all()
    return [
        DriverSnapshot(
            driver_id=d.id,
            name=d.name,
            past_7_days_work_hours=tuple(float(h) for h in d.past_7_days_work_hours),
        )
        for d in rows
    ]


def load_routes(db: Session) -> List[RouteSnapshot]:
    rows = db.scalars(select(Route).where(Route.is_active.is_(True)).order_by(Route.id)).all()
    return [_route_snapshot(r) for r in rows]


def load_pending_orders(db: Session) -> List[OrderSnapshot]:
    rows = db.scalars(
        select(Order)
        .options(joinedload(Order.route))
        .where(Order.status == "pending")
        .order_by(Order.id)
    ).all()
    return [
        OrderSnapshot(
            order_id=o.id,
            order_code=o.order_code,
            value=float(o.value),
            route=_route_snapshot(o.route),
            delivery_deadline=o.delivery_deadline,
        )
        for o in rows
    ]


def load_snapshot(db: Session, requested_driver_count: int) -> Snapshot:
    drivers = load_drivers(db, requested_driver_count)
    if not drivers:
        raise InsufficientDrivers()

    routes = load_routes(db)

    orders = load_pending_orders(db)
    if not orders:
        raise NoPendingOrders()

    return Snapshot(drivers=drivers, routes=routes, pending_orders=orders)
