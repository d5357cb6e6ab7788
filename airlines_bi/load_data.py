"""
Data Loading Module

This script bulk-loads the airline ticket dataset (CSV) into the base
flight records table, once. The table is recreated from the schema DDL,
rows are inserted in chunks and the final row count is validated.
"""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

import pandas as pd

from airlines_bi.config import (
    BASE_TABLE, CLASS_VALUES, DEFAULT_CSV_PATH, LOAD_CONFIG, STOPS_VALUES,
    TIME_BUCKETS, setup_logging
)
from airlines_bi.db_connector import DatabaseConnection
from airlines_bi.schema import COLUMN_NAMES, create_table, insert_sql
from airlines_bi.utils import format_time, format_number, frame_to_rows, progress_bar

logger = logging.getLogger(__name__)

# Header variants of the leading row-number column in exported datasets
INDEX_ALIASES = ('unnamed: 0', '', 'id', 'row_id')

# Known values of the categorical columns
CATEGORY_DOMAINS = {
    'stops': STOPS_VALUES,
    'class': CLASS_VALUES,
    'departure_time': TIME_BUCKETS,
    'arrival_time': TIME_BUCKETS,
}


def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """
    Standardize column names and map the leading row-number column to `index`.

    Raises:
        ValueError: If required flight record columns are missing
    """
    renamed = {col: str(col).strip().lower() for col in df.columns}
    df = df.rename(columns=renamed)

    if 'index' not in df.columns:
        for alias in INDEX_ALIASES:
            if alias in df.columns:
                df = df.rename(columns={alias: 'index'})
                break

    missing = [c for c in COLUMN_NAMES if c not in df.columns]
    if missing:
        raise ValueError(f"CSV is missing required columns: {missing}")

    return df[COLUMN_NAMES]


def check_categories(df: pd.DataFrame) -> Dict[str, int]:
    """
    Count non-null categorical values outside their known domain.

    Rows are not rejected; the table has no constraint on these columns.

    Returns:
        Mapping of column name to out-of-domain count, for columns with any
    """
    unknown = {}
    for column, domain in CATEGORY_DOMAINS.items():
        values = df[column]
        count = int((values.notna() & ~values.isin(domain)).sum())
        if count:
            unknown[column] = count
    return unknown


class DataLoader:
    """
    Handles loading CSV data into the flight records table.
    """

    def __init__(self, csv_path: Union[str, Path], table_name: str = BASE_TABLE,
                 backend: Optional[str] = None,
                 sqlite_path: Optional[Union[str, Path]] = None,
                 chunk_size: Optional[int] = None):
        """
        Initialize the data loader.

        Args:
            csv_path: Path to the dataset CSV file
            table_name: Target table
            backend: Database backend (defaults to config)
            sqlite_path: SQLite database file when backend is sqlite
            chunk_size: Rows per insert batch (defaults to LOAD_CONFIG)
        """
        self.csv_path = Path(csv_path)
        self.table_name = table_name
        self.backend = backend
        self.sqlite_path = sqlite_path
        self.chunk_size = chunk_size or LOAD_CONFIG['chunk_size']

        if not self.csv_path.exists():
            raise FileNotFoundError(f"CSV file not found: {self.csv_path}")

    def connection(self) -> DatabaseConnection:
        """Create a (not yet opened) connection to the target table."""
        return DatabaseConnection(self.table_name, backend=self.backend,
                                  sqlite_path=self.sqlite_path)

    def get_row_count(self) -> int:
        """
        Get total row count from CSV (excluding header).
        """
        with open(self.csv_path, 'r') as f:
            return sum(1 for _ in f) - 1

    def validate_table_count(self, expected_count: int) -> bool:
        """
        Validate that the table has the expected row count.
        """
        with self.connection() as conn:
            result = conn.execute_query(f"SELECT COUNT(*) FROM {self.table_name}")
            actual_count = result[0][0] if result else 0

        print(f"\n  Validation:")
        print(f"    Expected rows: {format_number(expected_count)}")
        print(f"    Actual rows:   {format_number(actual_count)}")

        if actual_count == expected_count:
            print(f"    Status: SUCCESS")
            return True

        print(f"    Status: MISMATCH")
        logger.warning("Row count mismatch for %s: expected %d, got %d",
                       self.table_name, expected_count, actual_count)
        return False

    def load(self, replace_table: Optional[bool] = None) -> Tuple[bool, float]:
        """
        Load the CSV into the table using chunked inserts.

        Args:
            replace_table: Drop and recreate the table first (defaults to LOAD_CONFIG)

        Returns:
            Tuple of (success, elapsed_time)
        """
        if replace_table is None:
            replace_table = LOAD_CONFIG['replace_table']

        print("=" * 70)
        print(f"Loading data into table: {self.table_name}")
        print("=" * 70)

        start_time = time.time()
        total_rows = self.get_row_count()
        print(f"Total rows to load: {format_number(total_rows)}\n")

        sql = insert_sql(self.table_name)
        rows_processed = 0
        unknown_categories: Dict[str, int] = {}

        with self.connection() as conn:
            try:
                if replace_table:
                    print("Recreating table...")
                    create_table(conn, self.table_name)

                print(f"Loading data in chunks of {format_number(self.chunk_size)}...")

                for chunk in pd.read_csv(self.csv_path, chunksize=self.chunk_size):
                    chunk = normalize_columns(chunk)
                    for column, count in check_categories(chunk).items():
                        unknown_categories[column] = unknown_categories.get(column, 0) + count
                    conn.executemany(sql, frame_to_rows(chunk))

                    rows_processed += len(chunk)
                    progress = progress_bar(rows_processed, total_rows, 50)
                    print(f"  {progress} Loaded {format_number(rows_processed)} rows", end='\r')

            except (conn.driver.Error, ValueError) as e:
                logger.error("Error loading %s: %s", self.csv_path, e)
                print(f"\nError loading data: {e}")
                if rows_processed:
                    logger.error("Table %s is partially loaded (%d rows committed); reload it",
                                 self.table_name, rows_processed)
                    print(f"Table {self.table_name} is partially loaded "
                          f"({format_number(rows_processed)} rows committed) and must be reloaded")
                return False, time.time() - start_time

        print(f"  {progress_bar(rows_processed, total_rows, 50)} Loaded {format_number(rows_processed)} rows")

        for column, count in unknown_categories.items():
            logger.warning("%s: %d value(s) outside %s", column, count, CATEGORY_DOMAINS[column])

        elapsed = time.time() - start_time
        print(f"\nLoading completed in {format_time(elapsed)}")

        success = self.validate_table_count(total_rows)
        return success, elapsed


def parse_arguments() -> argparse.Namespace:
    """
    Parse command line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description='Load the airline ticket dataset into the flight records table',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Load the default dataset:
    python -m airlines_bi.load_data

  Load a custom CSV and build the analytical view:
    python -m airlines_bi.load_data --file data/raw/sample.csv --create-view
        """
    )

    parser.add_argument(
        '--file',
        type=str,
        help=f'Path to CSV file (default: {DEFAULT_CSV_PATH})'
    )

    parser.add_argument(
        '--create-view',
        action='store_true',
        help='Create the analytical view and its snapshot after loading'
    )

    return parser.parse_args()


def main():
    """
    Main entry point for data loading.
    """
    from airlines_bi.view import create_view, materialize_view

    args = parse_arguments()
    setup_logging()

    csv_path = Path(args.file) if args.file else DEFAULT_CSV_PATH

    print("\n" + "=" * 70)
    print("Airlines BI Data Loading")
    print("=" * 70)
    print(f"CSV file: {csv_path}")
    print("=" * 70)
    print()

    try:
        loader = DataLoader(csv_path)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        sys.exit(1)

    success, elapsed = loader.load()
    print()

    if not success:
        print("Data load failed. Please check errors above.")
        sys.exit(1)

    if args.create_view:
        with loader.connection() as conn:
            create_view(conn, loader.table_name)
            rows = materialize_view(conn)
        print(f"Analytical view created and materialized ({format_number(rows)} rows)")

    print(f"All data loaded successfully in {format_time(elapsed)}!")
    sys.exit(0)


if __name__ == "__main__":
    main()
