import argparse

from greencart.api.simulation import get_simulation_history, run_remote_simulation
from greencart.errors import SimulationError
from utils.logger import get_logger

logger = get_logger("remote_simulate")


def run(drivers: int, start: str, max_hours: float, history: int = 5):
    try:
        result = run_remote_simulation(drivers, start, max_hours)
    except SimulationError as e:
        logger.error(f"❌ simulation rejected: {e}")
        return None

    logger.info(
        f"run #{result.get('id')}: profit={result.get('totalProfit')}, "
        f"efficiency={result.get('efficiencyScore')}%, "
        f"unassigned={len(result.get('unassignedOrders') or [])}"
    )

    for summary in get_simulation_history(limit=history):
        logger.info(
            f"  #{summary['id']} {summary['timestamp']} profit={summary['totalProfit']} "
            f"efficiency={summary['efficiencyScore']}%"
        )
    return result


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run a simulation through the HTTP service")
    parser.add_argument("--drivers", type=int, required=True)
    parser.add_argument("--start", default="09:00")
    parser.add_argument("--max-hours", type=float, required=True)
    parser.add_argument("--history", type=int, default=5)
    args = parser.parse_args()
    run(args.drivers, args.start, args.max_hours, args.history)
