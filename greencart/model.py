from datetime import datetime, timezone

from sqlalchemy import (
    JSON, Boolean, CheckConstraint, Column, DateTime, Float, ForeignKey, Index, Integer, String
)
from sqlalchemy.orm import relationship, validates

from .database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Driver table
class Driver(Base):
    __tablename__ = "drivers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), index=True, nullable=False)
    current_shift_hours = Column(Float, nullable=False, default=0.0)
    # oldest → newest, index 6 is the most recent day
    past_7_days_work_hours = Column(JSON, nullable=False, default=lambda: [0.0] * 7)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    orders = relationship("Order", back_populates="assigned_driver")

    __table_args__ = (
        CheckConstraint(
            "current_shift_hours >= 0 AND current_shift_hours <= 24",
            name="ck_drivers_shift_hours",
        ),
    )

    @validates("past_7_days_work_hours")
    def _check_history(self, key, hours):
        if hours is None or len(hours) != 7:
            raise ValueError("past_7_days_work_hours must hold exactly 7 values")
        if any(h < 0 or h > 24 for h in hours):
            raise ValueError("past_7_days_work_hours values must be within 0..24")
        return [float(h) for h in hours]


# Route table
class Route(Base):
    __tablename__ = "routes"

    id = Column(Integer, primary_key=True, index=True)
    route_code = Column(String(10), nullable=False, unique=True)
    distance_km = Column(Float, nullable=False)
    traffic_level = Column(String(10), nullable=False)
    base_time_minutes = Column(Float, nullable=False)
    description = Column(String(200), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    orders = relationship("Order", back_populates="route")

    __table_args__ = (
        CheckConstraint("distance_km > 0", name="ck_routes_distance_pos"),
        CheckConstraint("base_time_minutes > 0", name="ck_routes_base_time_pos"),
        CheckConstraint(
            "traffic_level IN ('Low', 'Medium', 'High')", name="ck_routes_traffic_level"
        ),
    )


# Order table (pending → delivered / late after a run)
class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_code = Column(String(10), nullable=False, unique=True)
    value = Column(Float, nullable=False)
    route_id = Column(
        Integer,
        ForeignKey("routes.id", ondelete="RESTRICT"),
        index=True,
        nullable=False,
    )
    delivery_deadline = Column(DateTime(timezone=True), nullable=False)
    status = Column(String(10), nullable=False, default="pending", index=True)

    assigned_driver_id = Column(
        Integer,
        ForeignKey("drivers.id", ondelete="SET NULL"),
        index=True,
        nullable=True,
    )
    delivery_time_minutes = Column(Integer, nullable=True)
    profit = Column(Float, nullable=False, default=0.0)

    customer_address = Column(String(200), nullable=True)
    customer_phone = Column(String(10), nullable=True)

    route = relationship("Route", back_populates="orders")
    assigned_driver = relationship("Driver", back_populates="orders")

    __table_args__ = (
        CheckConstraint("value > 0", name="ck_orders_value_pos"),
        CheckConstraint("status IN ('pending', 'delivered', 'late')", name="ck_orders_status"),
        CheckConstraint(
            "delivery_time_minutes IS NULL OR delivery_time_minutes >= 0",
            name="ck_orders_delivery_time_nonneg",
        ),
        Index("ix_orders_status_deadline", "status", "delivery_deadline"),
    )


# Simulation history (append-only)
class SimulationRun(Base):
    __tablename__ = "simulation_runs"

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    # input parameters
    available_drivers = Column(Integer, nullable=False)
    route_start_time = Column(String(5), nullable=False)
    max_hours_per_driver = Column(Float, nullable=False)

    # totals
    total_profit = Column(Float, nullable=False, default=0.0)
    total_orders = Column(Integer, nullable=False, default=0)
    on_time_deliveries = Column(Integer, nullable=False, default=0)
    late_deliveries = Column(Integer, nullable=False, default=0)
    efficiency_score = Column(Integer, nullable=False, default=0)

    total_fuel_cost = Column(Float, nullable=False, default=0.0)
    fuel_cost_low = Column(Float, nullable=False, default=0.0)
    fuel_cost_medium = Column(Float, nullable=False, default=0.0)
    fuel_cost_high = Column(Float, nullable=False, default=0.0)

    unassigned_orders = Column(JSON, nullable=False, default=list)

    order_results = relationship(
        "SimulationOrderResult",
        back_populates="run",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="SimulationOrderResult.position",
    )

    __table_args__ = (
        CheckConstraint("available_drivers >= 0", name="ck_sr_drivers_nonneg"),
        CheckConstraint("on_time_deliveries + late_deliveries <= total_orders", name="ck_sr_counts"),
        CheckConstraint("efficiency_score >= 0 AND efficiency_score <= 100", name="ck_sr_efficiency"),
    )


# one row per processed order, kept in processing order
class SimulationOrderResult(Base):
    __tablename__ = "simulation_order_results"

    id = Column(Integer, primary_key=True, index=True)
    run_id = Column(
        Integer,
        ForeignKey("simulation_runs.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    position = Column(Integer, nullable=False)

    order_code = Column(String(10), nullable=False)
    driver_id = Column(Integer, nullable=False)
    is_late = Column(Boolean, nullable=False)
    delivery_time_minutes = Column(Integer, nullable=False)
    profit = Column(Float, nullable=False)
    penalty = Column(Float, nullable=False, default=0.0)
    bonus = Column(Float, nullable=False, default=0.0)
    fuel_cost = Column(Float, nullable=False)

    run = relationship("SimulationRun", back_populates="order_results")

    __table_args__ = (
        Index("ix_sim_order_results_run_position", "run_id", "position", unique=True),
    )
