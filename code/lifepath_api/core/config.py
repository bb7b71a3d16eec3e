import os

CATALOG_PATH = os.getenv("LIFEPATH_CATALOG_PATH") or None
DEFAULT_HORIZON_YEARS = int(os.getenv("LIFEPATH_DEFAULT_HORIZON", "10"))
EVALUATE_HORIZON_YEARS = int(os.getenv("LIFEPATH_EVALUATE_HORIZON", "10"))
MAX_HORIZON_YEARS = 100
# 0 disables eviction.
SIMULATION_CACHE_SIZE = max(0, int(os.getenv("LIFEPATH_CACHE_SIZE", "512")))
LOG_LEVEL = os.getenv("LIFEPATH_LOG_LEVEL", "INFO").upper()
