from typing import Any, Dict, List

from greencart.api.client import ApiError, api_url, get_json, post_json
from greencart.errors import RUN_FAILURES, InvalidParameters, RunNotFound, SimulationError


def _raise_for_api_error(e: ApiError, run_id: int | None = None) -> None:
    if e.status_code == 404 and run_id is not None:
        raise RunNotFound(run_id) from e
    if e.status_code == 400:
        message = e.body.get("message") or "Simulation failed"
        failure = RUN_FAILURES.get(e.code)
        if failure is not None:
            raise failure(message) from e
        if e.body.get("invalidFields") == ["simulation"]:
            raise SimulationError(message) from e
        raise InvalidParameters(
            message,
            invalid_fields=e.body.get("invalidFields"),
            errors=e.body.get("errors"),
        ) from e
    raise e


def run_remote_simulation(
    available_drivers: int,
    route_start_time: str,
    max_hours_per_driver_per_day: float,
    *,
    base_url: str | None = None,
) -> Dict[str, Any]:
    """
    POST /api/simulate
    body: { "availableDrivers": 5, "routeStartTime": "09:00", "maxHoursPerDriverPerDay": 8 }
    """
    body = {
        "availableDrivers": int(available_drivers),
        "routeStartTime": route_start_time,
        "maxHoursPerDriverPerDay": max_hours_per_driver_per_day,
    }
    try:
        return post_json(api_url("/api/simulate", base_url), json_body=body)
    except ApiError as e:
        _raise_for_api_error(e)


def get_simulation_history(limit: int = 10, *, base_url: str | None = None) -> List[Dict[str, Any]]:
    """
    GET /api/simulations?limit=n
    """
    js = get_json(api_url("/api/simulations", base_url), params={"limit": limit})
    return (js or {}).get("data") or []


def get_simulation(run_id: int, *, base_url: str | None = None) -> Dict[str, Any]:
    """
    GET /api/simulations/{id}
    """
    try:
        return get_json(api_url(f"/api/simulations/{int(run_id)}", base_url))
    except ApiError as e:
        _raise_for_api_error(e, run_id=int(run_id))
