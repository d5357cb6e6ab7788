"""
Pytest fixtures for the analytical view and query catalog tests.
Uses an on-disk SQLite database under tmp_path; no MariaDB server needed.
"""
import pandas as pd
import pytest

from airlines_bi.config import BASE_TABLE
from airlines_bi.db_connector import DatabaseConnection
from airlines_bi.schema import COLUMN_NAMES, create_table, insert_sql
from airlines_bi.utils import frame_to_rows
from airlines_bi.view import create_view, fetch_view


def make_records(rows):
    """Build a flight records DataFrame from tuples in COLUMN_NAMES order."""
    return pd.DataFrame(rows, columns=COLUMN_NAMES)


def load_records(conn, df, table_name=BASE_TABLE):
    create_table(conn, table_name)
    conn.executemany(insert_sql(table_name), frame_to_rows(df[COLUMN_NAMES]))


@pytest.fixture
def two_routes():
    """
    Two routes, three rows each. By ascending days_left the prices are
    [100, 200, 300] on Delhi->Mumbai and [400, 500, 600] on Mumbai->Chennai.
    """
    return make_records([
        (1, 'Vistara', 'UK-801', 'Delhi', 'Morning', 'zero', 'Afternoon', 'Mumbai', 'Economy', 2.0, 1, 100.0),
        (2, 'Vistara', 'UK-802', 'Delhi', 'Evening', 'one', 'Night', 'Mumbai', 'Economy', 2.5, 2, 200.0),
        (3, 'Vistara', 'UK-803', 'Delhi', 'Night', 'zero', 'Late_Night', 'Mumbai', 'Business', 2.0, 3, 300.0),
        (4, 'Indigo', '6E-101', 'Mumbai', 'Morning', 'zero', 'Morning', 'Chennai', 'Economy', 1.5, 1, 400.0),
        (5, 'Indigo', '6E-102', 'Mumbai', 'Afternoon', 'one', 'Evening', 'Chennai', 'Economy', 4.0, 2, 500.0),
        (6, 'Indigo', '6E-103', 'Mumbai', 'Evening', 'zero', 'Night', 'Chennai', 'Economy', 1.5, 3, 600.0),
    ])


@pytest.fixture
def tied_prices():
    """One airline on one route with duplicate prices and durations."""
    return make_records([
        (10, 'SpiceJet', 'SG-8157', 'Delhi', 'Morning', 'zero', 'Afternoon', 'Kolkata', 'Economy', 2.25, 20, 300.0),
        (11, 'SpiceJet', 'SG-8158', 'Delhi', 'Morning', 'one', 'Night', 'Kolkata', 'Economy', 5.0, 19, 100.0),
        (12, 'SpiceJet', 'SG-8159', 'Delhi', 'Evening', 'one', 'Night', 'Kolkata', 'Economy', 5.0, 18, 100.0),
        (13, 'SpiceJet', 'SG-8160', 'Delhi', 'Night', 'zero', 'Late_Night', 'Kolkata', 'Economy', 2.25, 17, 200.0),
        (14, 'SpiceJet', 'SG-8161', 'Delhi', 'Early_Morning', 'two_or_more', 'Evening', 'Kolkata', 'Economy', 11.0, 16, 300.0),
    ])


@pytest.fixture
def single_row():
    return make_records([
        (20, 'AirAsia', 'I5-764', 'Bangalore', 'Morning', 'zero', 'Morning', 'Hyderabad', 'Economy', 1.25, 5, 2500.0),
    ])


@pytest.fixture
def with_nulls():
    """Records with missing price and duration values."""
    return make_records([
        (30, 'GO_FIRST', 'G8-334', 'Chennai', 'Morning', 'zero', 'Afternoon', 'Delhi', 'Economy', 2.75, 10, 5000.0),
        (31, 'GO_FIRST', 'G8-335', 'Chennai', 'Evening', 'one', 'Night', 'Delhi', 'Economy', None, 9, None),
        (32, 'GO_FIRST', 'G8-336', 'Chennai', 'Night', 'zero', 'Late_Night', 'Delhi', 'Economy', 3.0, 8, 7000.0),
        (33, 'GO_FIRST', 'G8-337', 'Chennai', 'Night', 'one', 'Morning', 'Delhi', 'Economy', 9.5, 7, 6000.0),
    ])


@pytest.fixture
def all_records(two_routes, tied_prices, single_row, with_nulls):
    return pd.concat([two_routes, tied_prices, single_row, with_nulls], ignore_index=True)


@pytest.fixture
def sqlite_path(tmp_path):
    return tmp_path / 'airlines.db'


@pytest.fixture
def db(sqlite_path):
    """Open SQLite connection, closed after the test."""
    with DatabaseConnection(BASE_TABLE, backend='sqlite', sqlite_path=sqlite_path) as conn:
        yield conn


@pytest.fixture
def make_view(db):
    """Load records, create the analytical view and return it indexed by `index`."""
    def _make(df):
        load_records(db, df)
        create_view(db)
        return fetch_view(db).set_index('index')
    return _make


@pytest.fixture
def loaded_db(db, all_records):
    load_records(db, all_records)
    create_view(db)
    return db
