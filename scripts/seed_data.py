import argparse

from greencart import config
from greencart.database import SessionLocal, init_db
from greencart.seed import generate_orders, load_drivers_csv, load_routes_csv, seed_database
from utils.logger import get_logger

logger = get_logger("seed_data")


def run(order_count: int = config.SEED_ORDER_COUNT, random_state: int = config.SEED_RANDOM_STATE):
    logger.info(f"reading {config.DRIVERS_CSV_PATH} / {config.ROUTES_CSV_PATH}")
    drivers_df = load_drivers_csv()
    routes_df = load_routes_csv()
    orders_df = generate_orders(
        list(routes_df["route_code"]),
        count=order_count,
        random_state=random_state,
    )
    logger.info(f"{len(drivers_df)} drivers, {len(routes_df)} routes, {len(orders_df)} orders")

    init_db()
    with SessionLocal() as db:
        seed_database(db, drivers_df, routes_df, orders_df)

    logger.info("✅ seed complete")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Reset the local database with reference data")
    parser.add_argument("--orders", type=int, default=config.SEED_ORDER_COUNT)
    parser.add_argument("--seed", type=int, default=config.SEED_RANDOM_STATE)
    args = parser.parse_args()
    run(order_count=args.orders, random_state=args.seed)
