from pathlib import Path

from utils.env import ALLOW_OVERBOOKING, DATABASE_URL

# ===========================
#  Paths
# ===========================
BASE_DIR = Path(__file__).resolve().parent.parent

DATA_DIR = BASE_DIR / "data"
EXPORT_DIR = BASE_DIR / "exports"

DRIVERS_CSV_PATH = DATA_DIR / "drivers.csv"
ROUTES_CSV_PATH = DATA_DIR / "routes.csv"

SQLALCHEMY_DATABASE_URL = DATABASE_URL

# ===========================
#  Run request bounds
# ===========================
MIN_AVAILABLE_DRIVERS = 1
MAX_AVAILABLE_DRIVERS = 50

MIN_HOURS_PER_DRIVER = 1
MAX_HOURS_PER_DRIVER = 16

ROUTE_START_TIME_PATTERN = r"^([01]\d|2[0-3]):([0-5]\d)$"

HISTORY_DEFAULT_LIMIT = 10
HISTORY_MAX_LIMIT = 100

# ===========================
#  Company rules (scoring policy)
# ===========================
# fatigue: most recent day's hours above the threshold slows deliveries down
FATIGUE_HOURS_THRESHOLD = 8
FATIGUE_SLOWDOWN_FACTOR = 1.3

# applied after the fatigue factor
TRAFFIC_LEVELS = ("Low", "Medium", "High")
TRAFFIC_TIME_MULTIPLIER = {
    "Low": 1.0,
    "Medium": 1.1,
    "High": 1.2,
}

# minutes allowed over the route's unadjusted base time
LATE_GRACE_MINUTES = 10
LATE_PENALTY = 50

HIGH_VALUE_THRESHOLD = 1000
HIGH_VALUE_BONUS_RATE = 0.10

# currency units per km
FUEL_BASE_RATE_PER_KM = 5
FUEL_HIGH_TRAFFIC_SURCHARGE_PER_KM = 2

OVERBOOKING = ALLOW_OVERBOOKING

# ===========================
#  Seed data
# ===========================
SEED_ORDER_COUNT = 50
SEED_RANDOM_STATE = 42
SEED_DEADLINE_WINDOW_DAYS = 3
SEED_HIGH_VALUE_SHARE = 0.3
