from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from utils.logger import get_logger

from . import config, schemas, sink
from .database import get_db
from .errors import RunNotFound, SimulationError
from .pipeline import run_simulation

logger = get_logger("greencart.api")

router = APIRouter(prefix="/api", tags=["simulation"])


def error_body(message: str, invalid_fields=None, errors=None, code=None) -> dict:
    body = {"status": "error", "message": message}
    if code is not None:
        body["code"] = code
    if invalid_fields is not None:
        body["invalidFields"] = invalid_fields
    if errors:
        body["errors"] = errors
    return body


@router.get("/health", summary="API status", status_code=status.HTTP_200_OK)
def health_check():
    return {"status": "success", "message": "GreenCart Logistics API is running"}


@router.post("/simulate", response_model=schemas.SimulationResult, summary="Run a delivery simulation")
def simulate(request: schemas.SimulationRequest, db: Session = Depends(get_db)):
    try:
        run = run_simulation(
            db,
            available_drivers=request.available_drivers,
            route_start_time=request.route_start_time,
            max_hours_per_driver=request.max_hours_per_driver_per_day,
        )
    except SimulationError as e:
        logger.warning(f"simulation rejected: {e}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body(str(e), invalid_fields=e.invalid_fields, code=e.code),
        )
    except Exception as e:
        logger.exception("❌ simulation failed")
        raise HTTPException(status_code=500, detail=f"Simulation failed: {type(e).__name__}: {e}")

    return schemas.SimulationResult.from_run(run)


@router.get("/simulations", response_model=schemas.SimulationHistory, summary="Simulation history")
def list_simulations(
    limit: int = Query(config.HISTORY_DEFAULT_LIMIT, ge=1, le=config.HISTORY_MAX_LIMIT),
    db: Session = Depends(get_db),
):
    runs = sink.history(db, limit)
    data = [schemas.SimulationSummary.from_run(r) for r in runs]
    return schemas.SimulationHistory(data=data, total=len(data))


@router.get("/simulations/{run_id}", response_model=schemas.SimulationResult, summary="One simulation result")
def get_simulation(run_id: int, db: Session = Depends(get_db)):
    try:
        run = sink.get_run(db, run_id)
    except RunNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return schemas.SimulationResult.from_run(run)
