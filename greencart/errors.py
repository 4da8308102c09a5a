from typing import Dict, List, Optional, Type


class SimulationError(Exception):
    """Base class for run failures reported back to the caller."""

    invalid_fields: List[str] = ["simulation"]

    @property
    def code(self) -> str:
        # sent as "code" in API error bodies
        return type(self).__name__


class InsufficientDrivers(SimulationError):
    def __init__(self, message: str = "No available drivers found"):
        super().__init__(message)


class NoPendingOrders(SimulationError):
    def __init__(self, message: str = "No pending orders found"):
        super().__init__(message)


class InvalidParameters(SimulationError):
    def __init__(self, message: str, invalid_fields: Optional[List[str]] = None, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.invalid_fields = invalid_fields or []
        self.errors = errors or []


class RunNotFound(SimulationError):
    def __init__(self, run_id: int):
        super().__init__(f"Simulation result not found: {run_id}")
        self.run_id = run_id


# run failures a remote caller can get back by code
RUN_FAILURES: Dict[str, Type[SimulationError]] = {
    cls.__name__: cls for cls in (InsufficientDrivers, NoPendingOrders)
}
