"""
Plain in-memory records the simulation engine works on.

The gateway converts ORM rows into these before the run starts, so the
scheduler never touches a live session and never writes to a Driver/Route.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from .. import config


@dataclass(frozen=True)
class DriverSnapshot:
    driver_id: int
    name: str
    past_7_days_work_hours: Tuple[float, ...]

    @property
    def has_fatigue(self) -> bool:
        """Most recent recorded day (index 6) above the fatigue threshold."""
        return self.past_7_days_work_hours[6] > config.FATIGUE_HOURS_THRESHOLD


@dataclass(frozen=True)
class RouteSnapshot:
    route_id: int
    route_code: str
    distance_km: float
    traffic_level: str
    base_time_minutes: float
    description: str = ""


@dataclass(frozen=True)
class OrderSnapshot:
    order_id: int
    order_code: str
    value: float
    route: RouteSnapshot
    delivery_deadline: datetime


@dataclass(frozen=True)
class Snapshot:
    drivers: List[DriverSnapshot]
    routes: List[RouteSnapshot]
    pending_orders: List[OrderSnapshot]


@dataclass(frozen=True)
class OrderEvaluation:
    is_late: bool
    penalty: float
    bonus: float
    fuel_cost: float
    profit: float


@dataclass(frozen=True)
class PerOrderOutcome:
    order_id: int
    order_code: str
    driver_id: int
    traffic_level: str
    delivery_time_minutes: int
    is_late: bool
    profit: float
    penalty: float
    bonus: float
    fuel_cost: float

    @property
    def status(self) -> str:
        return "late" if self.is_late else "delivered"


@dataclass
class ScheduleResult:
    outcomes: List[PerOrderOutcome] = field(default_factory=list)
    unassigned: List[OrderSnapshot] = field(default_factory=list)
    # hours per driver position, only meaningful for the run that produced it
    ledger: List[float] = field(default_factory=list)


@dataclass
class RunTotals:
    total_profit: float = 0.0
    total_orders: int = 0
    on_time_deliveries: int = 0
    late_deliveries: int = 0
    efficiency_score: int = 0
    total_fuel_cost: float = 0.0
    fuel_cost_by_traffic_level: Dict[str, float] = field(
        default_factory=lambda: {level: 0.0 for level in config.TRAFFIC_LEVELS}
    )


@dataclass
class RunResult:
    """Everything a finished run hands to the result sink."""

    totals: RunTotals
    outcomes: List[PerOrderOutcome]
    unassigned_order_codes: List[str]
    available_drivers: int
    route_start_time: str
    max_hours_per_driver: float
    timestamp: Optional[datetime] = None
    run_id: Optional[int] = None
