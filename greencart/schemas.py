from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from . import config
from .errors import InvalidParameters


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# API request: simulation parameters
class SimulationRequest(CamelModel):
    available_drivers: int = Field(ge=config.MIN_AVAILABLE_DRIVERS, le=config.MAX_AVAILABLE_DRIVERS)
    route_start_time: str = Field(pattern=config.ROUTE_START_TIME_PATTERN)  # "HH:MM", recorded only
    max_hours_per_driver_per_day: float = Field(
        ge=config.MIN_HOURS_PER_DRIVER, le=config.MAX_HOURS_PER_DRIVER
    )


class InputParameters(CamelModel):
    available_drivers: int
    route_start_time: str
    max_hours_per_driver_per_day: float


class TrafficLevelCosts(CamelModel):
    low: float = Field(0.0, alias="Low")
    medium: float = Field(0.0, alias="Medium")
    high: float = Field(0.0, alias="High")


class FuelCostBreakdown(CamelModel):
    total_fuel_cost: float
    by_traffic_level: TrafficLevelCosts


class PerOrderResult(CamelModel):
    order_id: str
    assigned_driver_id: int
    is_late: bool
    delivery_time_minutes: int
    profit: float
    penalties: float
    bonus: float
    fuel_cost: float


class SimulationSummary(CamelModel):
    id: int
    timestamp: datetime
    input_parameters: InputParameters
    total_profit: float
    total_orders: int
    on_time_deliveries: int
    late_deliveries: int
    efficiency_score: int
    fuel_cost_breakdown: FuelCostBreakdown

    @classmethod
    def from_run(cls, run) -> "SimulationSummary":
        return cls(**_summary_fields(run))


class SimulationResult(SimulationSummary):
    per_order_results: List[PerOrderResult]
    unassigned_orders: List[str]

    @classmethod
    def from_run(cls, run) -> "SimulationResult":
        per_order = [
            PerOrderResult(
                order_id=r.order_code,
                assigned_driver_id=r.driver_id,
                is_late=r.is_late,
                delivery_time_minutes=r.delivery_time_minutes,
                profit=r.profit,
                penalties=r.penalty,
                bonus=r.bonus,
                fuel_cost=r.fuel_cost,
            )
            for r in run.order_results
        ]
        return cls(
            **_summary_fields(run),
            per_order_results=per_order,
            unassigned_orders=list(run.unassigned_orders or []),
        )


class SimulationHistory(BaseModel):
    data: List[SimulationSummary]
    total: int


def as_utc(value: datetime) -> datetime:
    # SQLite hands DateTime(timezone=True) back naive; stored values are UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _summary_fields(run) -> Dict[str, Any]:
    return {
        "id": run.id,
        "timestamp": as_utc(run.created_at),
        "input_parameters": InputParameters(
            available_drivers=run.available_drivers,
            route_start_time=run.route_start_time,
            max_hours_per_driver_per_day=run.max_hours_per_driver,
        ),
        "total_profit": run.total_profit,
        "total_orders": run.total_orders,
        "on_time_deliveries": run.on_time_deliveries,
        "late_deliveries": run.late_deliveries,
        "efficiency_score": run.efficiency_score,
        "fuel_cost_breakdown": FuelCostBreakdown(
            total_fuel_cost=run.total_fuel_cost,
            by_traffic_level=TrafficLevelCosts(
                low=run.fuel_cost_low,
                medium=run.fuel_cost_medium,
                high=run.fuel_cost_high,
            ),
        ),
    }


def validation_details(exc: ValidationError) -> tuple:
    """(invalid field names, messages) in the shape the API error body uses."""
    fields: List[str] = []
    messages: List[str] = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        name = loc[0] if loc else "request"
        if name not in fields:
            fields.append(name)
        messages.append(f"{name}: {err.get('msg')}")
    return fields, messages


def parse_simulation_request(payload: Optional[Dict[str, Any]]) -> SimulationRequest:
    try:
        return SimulationRequest.model_validate(payload or {})
    except ValidationError as e:
        fields, messages = validation_details(e)
        raise InvalidParameters("Validation failed", invalid_fields=fields, errors=messages) from e
