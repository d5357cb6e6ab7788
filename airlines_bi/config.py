"""
Database Configuration and Settings

This module contains all configuration settings for the Airlines BI project,
including database credentials, table and view names, view parameters,
loading settings and output paths.
"""

import logging
import os
from pathlib import Path

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent

# Supported database backends
SUPPORTED_BACKENDS = ('mariadb', 'sqlite')

# Active backend: MariaDB in production, SQLite for local work and tests
DB_BACKEND = os.getenv('DB_BACKEND', 'mariadb')

# Database configuration
DB_CONFIG = {
    'host': os.getenv('DB_HOST', 'localhost'),
    'port': int(os.getenv('DB_PORT', 3306)),
    'user': os.getenv('DB_USER', 'root'),
    'password': os.getenv('DB_PASSWORD', 'your_password'),
    'database': os.getenv('DB_NAME', 'airlines_bi')
}

# SQLite database file (used when DB_BACKEND=sqlite)
SQLITE_PATH = Path(os.getenv('SQLITE_PATH', str(PROJECT_ROOT / 'data' / 'airlines.db')))

# Table and view names
BASE_TABLE = 'airlines'
ANALYTICS_VIEW = 'airlines_analytics_v'
ANALYTICS_TABLE = 'airlines_analytics'

# Data paths
DATA_DIR = PROJECT_ROOT / 'data'
RAW_DATA_DIR = DATA_DIR / 'raw'
DEFAULT_CSV_PATH = RAW_DATA_DIR / 'Clean_Dataset.csv'

# Categorical domains of the flight record
STOPS_VALUES = ('zero', 'one', 'two_or_more')
CLASS_VALUES = ('Economy', 'Business')
TIME_BUCKETS = (
    'Early_Morning', 'Morning', 'Afternoon',
    'Evening', 'Night', 'Late_Night'
)

# Analytical view settings
VIEW_CONFIG = {
    'moving_avg_window': 3,     # Current row plus two preceding rows
    'nth_price': 3,             # NTH_VALUE position (3rd cheapest fare)
    'price_buckets': 4          # NTILE buckets (quartiles)
}

# Loading settings
LOAD_CONFIG = {
    'chunk_size': 10000,        # Rows per executemany batch
    'replace_table': True       # Drop and recreate the base table before loading
}

# Consistency check settings (SQL view vs DataFrame view)
CONSISTENCY_CONFIG = {
    'warmup_runs': 1,           # Number of warmup runs before timing
    'test_runs': 3,             # Number of timed runs (take average)
    'tolerance': 1e-6           # Float tolerance when comparing results
}

# Output settings
RESULTS_DIR = PROJECT_ROOT / 'results' / 'consistency'
TIMESTAMP_FORMAT = '%Y%m%d_%H%M%S'

# Logging configuration
LOGGING_CONFIG = {
    'level': os.getenv('LOG_LEVEL', 'INFO'),
    'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    'datefmt': '%Y-%m-%d %H:%M:%S'
}


def setup_logging(level: str = None) -> None:
    """
    Configure root logging from LOGGING_CONFIG.

    Args:
        level: Optional level name overriding LOGGING_CONFIG['level']
    """
    logging.basicConfig(
        level=(level or LOGGING_CONFIG['level']).upper(),
        format=LOGGING_CONFIG['format'],
        datefmt=LOGGING_CONFIG['datefmt']
    )


def validate_config():
    """
    Validate configuration settings and create necessary directories.

    Raises:
        ValueError: If required configuration is missing or invalid
    """
    # Create directories if they don't exist
    for directory in [DATA_DIR, RAW_DATA_DIR, RESULTS_DIR]:
        directory.mkdir(parents=True, exist_ok=True)

    if DB_BACKEND not in SUPPORTED_BACKENDS:
        raise ValueError(
            f"Unsupported DB_BACKEND '{DB_BACKEND}'. Expected one of {SUPPORTED_BACKENDS}"
        )

    # Validate database config
    required_keys = ['host', 'port', 'user', 'password', 'database']
    missing_keys = [key for key in required_keys if key not in DB_CONFIG]
    if missing_keys:
        raise ValueError(f"Missing required database config keys: {missing_keys}")

    for key in ('moving_avg_window', 'nth_price', 'price_buckets'):
        if VIEW_CONFIG[key] < 1:
            raise ValueError(f"VIEW_CONFIG['{key}'] must be >= 1, got {VIEW_CONFIG[key]}")

    return True


if __name__ == "__main__":
    # Show configuration
    print("Airlines BI Configuration")
    print("=" * 50)
    print(f"Backend: {DB_BACKEND}")
    if DB_BACKEND == 'sqlite':
        print(f"Database: {SQLITE_PATH}")
    else:
        print(f"Database: {DB_CONFIG['database']} @ {DB_CONFIG['host']}:{DB_CONFIG['port']}")
    print(f"Base Table: {BASE_TABLE}")
    print(f"Analytics View: {ANALYTICS_VIEW}")
    print(f"Analytics Snapshot: {ANALYTICS_TABLE}")
    print(f"Results Directory: {RESULTS_DIR}")
    print("\nValidating configuration...")

    try:
        validate_config()
        print("Configuration valid!")
    except ValueError as e:
        print(f"Configuration error: {e}")
