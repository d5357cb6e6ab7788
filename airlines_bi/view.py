"""
Analytical View Definition

This module builds the analytical view consumed by the BI dashboard. The
view left-extends every flight record with partition-scoped statistics:

- Rankings of price and duration within each route and each airline
- Running price totals and trailing moving averages per airline
- Price deltas to the neighbouring record on the same route
- Global price quartiles
- First/last/Nth price values and route-level broadcast aggregates

A route is the ordered pair (source_city, destination_city). Rank and
dense-rank windows order by value only, so equal values share a rank; every
other ordered window ends with `index` so results are deterministic when the
leading sort key has duplicates. The view never writes back to the base table.
"""

import argparse
import logging
from typing import Optional

import pandas as pd

from airlines_bi.config import (
    BASE_TABLE, ANALYTICS_VIEW, ANALYTICS_TABLE, VIEW_CONFIG
)
from airlines_bi.schema import COLUMN_NAMES, quote_identifier

logger = logging.getLogger(__name__)

ROUTE = "b.source_city, b.destination_city"
AIRLINE = "b.airline"
ROW_ID = "b.`index`"

# Derived columns in the order they appear in the view
DERIVED_COLUMNS = [
    'route_price_rank',
    'route_price_dense_rank',
    'route_price_row_number',
    'airline_price_rank',
    'airline_price_dense_rank',
    'route_duration_rank',
    'route_duration_dense_rank',
    'airline_duration_rank',
    'airline_duration_dense_rank',
    'airline_running_price',
    'airline_moving_avg_price',
    'route_prev_price',
    'route_price_diff_prev',
    'route_next_price',
    'route_price_diff_next',
    'price_quartile',
    'route_first_price',
    'route_last_price',
    'airline_nth_cheapest_price',
    'route_flight_count',
    'route_avg_price',
    'route_price_deviation',
]

VIEW_COLUMNS = COLUMN_NAMES + DERIVED_COLUMNS


def build_view_sql(table_name: str = BASE_TABLE,
                   moving_avg_window: Optional[int] = None,
                   nth_price: Optional[int] = None,
                   price_buckets: Optional[int] = None) -> str:
    """
    Render the SELECT statement defining the analytical view.

    Args:
        table_name: Base table holding flight records
        moving_avg_window: Trailing window size for the moving average
        nth_price: Position N for the Nth cheapest price per airline
        price_buckets: Number of equal-count price buckets (4 = quartiles)

    Returns:
        SQL SELECT statement (no trailing semicolon)
    """
    window = moving_avg_window or VIEW_CONFIG['moving_avg_window']
    nth = nth_price or VIEW_CONFIG['nth_price']
    buckets = price_buckets or VIEW_CONFIG['price_buckets']

    base_columns = ',\n            '.join(f"b.{quote_identifier(c)}" for c in COLUMN_NAMES)

    by_route_price = f"PARTITION BY {ROUTE} ORDER BY b.price"
    by_airline_price = f"PARTITION BY {AIRLINE} ORDER BY b.price"
    by_route_duration = f"PARTITION BY {ROUTE} ORDER BY b.duration"
    by_airline_duration = f"PARTITION BY {AIRLINE} ORDER BY b.duration"
    by_airline_seq = f"PARTITION BY {AIRLINE} ORDER BY {ROW_ID}"
    by_route_days_desc = f"PARTITION BY {ROUTE} ORDER BY b.days_left DESC, {ROW_ID}"
    by_route_days_asc = f"PARTITION BY {ROUTE} ORDER BY b.days_left, {ROW_ID}"

    prev_price = f"LAG(b.price) OVER ({by_route_days_desc})"
    next_price = f"LEAD(b.price) OVER ({by_route_days_asc})"
    route_avg = f"AVG(b.price) OVER (PARTITION BY {ROUTE})"

    # Partial leading windows stay NULL; a single-row airline keeps its price.
    moving_avg = f"""CASE
                WHEN ROW_NUMBER() OVER ({by_airline_seq}) >= {window}
                  OR COUNT(*) OVER (PARTITION BY {AIRLINE}) = 1
                THEN AVG(b.price) OVER (
                    {by_airline_seq}
                    ROWS BETWEEN {window - 1} PRECEDING AND CURRENT ROW)
            END"""

    return f"""
        SELECT
            {base_columns},
            RANK() OVER ({by_route_price}) AS route_price_rank,
            DENSE_RANK() OVER ({by_route_price}) AS route_price_dense_rank,
            ROW_NUMBER() OVER ({by_route_price}, {ROW_ID}) AS route_price_row_number,
            RANK() OVER ({by_airline_price}) AS airline_price_rank,
            DENSE_RANK() OVER ({by_airline_price}) AS airline_price_dense_rank,
            RANK() OVER ({by_route_duration}) AS route_duration_rank,
            DENSE_RANK() OVER ({by_route_duration}) AS route_duration_dense_rank,
            RANK() OVER ({by_airline_duration}) AS airline_duration_rank,
            DENSE_RANK() OVER ({by_airline_duration}) AS airline_duration_dense_rank,
            SUM(b.price) OVER (
                {by_airline_seq}
                ROWS BETWEEN UNBOUNDED PRECEDING AND CURRENT ROW
            ) AS airline_running_price,
            {moving_avg} AS airline_moving_avg_price,
            {prev_price} AS route_prev_price,
            b.price - {prev_price} AS route_price_diff_prev,
            {next_price} AS route_next_price,
            b.price - {next_price} AS route_price_diff_next,
            NTILE({buckets}) OVER (ORDER BY b.price, {ROW_ID}) AS price_quartile,
            FIRST_VALUE(b.price) OVER ({by_route_days_desc}) AS route_first_price,
            LAST_VALUE(b.price) OVER (
                {by_route_days_desc}
                ROWS BETWEEN CURRENT ROW AND UNBOUNDED FOLLOWING
            ) AS route_last_price,
            NTH_VALUE(b.price, {nth}) OVER (
                {by_airline_price}, {ROW_ID}
                ROWS BETWEEN UNBOUNDED PRECEDING AND UNBOUNDED FOLLOWING
            ) AS airline_nth_cheapest_price,
            COUNT(*) OVER (PARTITION BY {ROUTE}) AS route_flight_count,
            {route_avg} AS route_avg_price,
            b.price - {route_avg} AS route_price_deviation
        FROM {table_name} b
    """


def create_view(conn, table_name: str = BASE_TABLE,
                view_name: str = ANALYTICS_VIEW) -> None:
    """
    (Re)create the analytical view over the base table.

    Args:
        conn: An open DatabaseConnection
        table_name: Base table holding flight records
        view_name: Name of the view to create
    """
    logger.info("Creating view %s over %s", view_name, table_name)
    conn.execute_script(
        f"DROP VIEW IF EXISTS {view_name};\n"
        f"CREATE VIEW {view_name} AS {build_view_sql(table_name)}"
    )


def materialize_view(conn, view_name: str = ANALYTICS_VIEW,
                     snapshot_table: str = ANALYTICS_TABLE) -> int:
    """
    Rebuild the snapshot table from the analytical view.

    MariaDB has no native materialized views, so the snapshot is a plain
    table rebuilt in full with CREATE TABLE ... AS SELECT.

    Args:
        conn: An open DatabaseConnection
        view_name: Source view
        snapshot_table: Table receiving the snapshot

    Returns:
        Number of rows in the snapshot
    """
    logger.info("Materializing %s into %s", view_name, snapshot_table)
    conn.execute_script(
        f"DROP TABLE IF EXISTS {snapshot_table};\n"
        f"CREATE TABLE {snapshot_table} AS SELECT * FROM {view_name};\n"
        f"CREATE INDEX idx_{snapshot_table}_route "
        f"ON {snapshot_table} (source_city, destination_city)"
    )
    result = conn.execute_query(f"SELECT COUNT(*) FROM {snapshot_table}")
    row_count = result[0][0] if result else 0
    logger.info("Snapshot %s holds %d rows", snapshot_table, row_count)
    return row_count


def fetch_view(conn, view_name: str = ANALYTICS_VIEW) -> pd.DataFrame:
    """
    Read the analytical view (or its snapshot) ordered by `index`.
    """
    return conn.fetch_frame(f"SELECT * FROM {view_name} ORDER BY `index`")


def parse_arguments() -> argparse.Namespace:
    """
    Parse command line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description='Create the analytical view over the airlines table'
    )
    parser.add_argument(
        '--materialize',
        action='store_true',
        help=f'Also rebuild the {ANALYTICS_TABLE} snapshot table'
    )
    parser.add_argument(
        '--print-sql',
        action='store_true',
        help='Only print the view definition'
    )
    return parser.parse_args()


def main():
    """
    Main entry point for view creation.
    """
    from airlines_bi.config import setup_logging
    from airlines_bi.db_connector import DatabaseConnection

    args = parse_arguments()
    setup_logging()

    if args.print_sql:
        print(build_view_sql())
        return

    with DatabaseConnection(ANALYTICS_VIEW) as conn:
        create_view(conn)
        info = conn.get_table_info()
        print(f"View {ANALYTICS_VIEW}: {info['row_count']:,} rows")

        if args.materialize:
            rows = materialize_view(conn)
            print(f"Snapshot {ANALYTICS_TABLE}: {rows:,} rows")


if __name__ == "__main__":
    main()
