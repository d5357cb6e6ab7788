"""
Flight Record Schema

Table definition for the flat airlines table. The DDL is written in the
subset of SQL shared by MariaDB and SQLite; `index` and `class` are
reserved words and are always quoted with backticks.
"""

from airlines_bi.config import BASE_TABLE

# Column name -> SQL type, in source file order
COLUMNS = {
    'index': 'INTEGER NOT NULL PRIMARY KEY',
    'airline': 'VARCHAR(64) NOT NULL',
    'flight': 'VARCHAR(32) NOT NULL',
    'source_city': 'VARCHAR(64) NOT NULL',
    'departure_time': 'VARCHAR(32)',
    'stops': 'VARCHAR(16)',
    'arrival_time': 'VARCHAR(32)',
    'destination_city': 'VARCHAR(64) NOT NULL',
    'class': 'VARCHAR(16)',
    'duration': 'DOUBLE',
    'days_left': 'INTEGER NOT NULL',
    'price': 'DOUBLE',
}

COLUMN_NAMES = list(COLUMNS)

RESERVED_WORDS = {'index', 'class'}


def quote_identifier(name: str) -> str:
    """Backtick-quote an identifier when it is a reserved word."""
    return f"`{name}`" if name in RESERVED_WORDS else name


def create_table_sql(table_name: str = BASE_TABLE) -> str:
    """
    Build the DDL script for the flight record table.

    Args:
        table_name: Name of the table to create

    Returns:
        ';'-separated script dropping and recreating the table and its indexes
    """
    column_defs = ',\n    '.join(
        f"{quote_identifier(name)} {sql_type}" for name, sql_type in COLUMNS.items()
    )
    return f"""
        DROP TABLE IF EXISTS {table_name};
        CREATE TABLE {table_name} (
            {column_defs},
            CHECK (price >= 0),
            CHECK (days_left >= 0)
        );
        CREATE INDEX idx_{table_name}_route ON {table_name} (source_city, destination_city);
        CREATE INDEX idx_{table_name}_airline ON {table_name} (airline)
    """


def insert_sql(table_name: str = BASE_TABLE) -> str:
    """Build a parameterized INSERT statement covering every column."""
    columns = ', '.join(quote_identifier(name) for name in COLUMN_NAMES)
    placeholders = ', '.join(['?'] * len(COLUMN_NAMES))
    return f"INSERT INTO {table_name} ({columns}) VALUES ({placeholders})"


def create_table(conn, table_name: str = BASE_TABLE) -> None:
    """
    (Re)create the flight record table.

    Args:
        conn: An open DatabaseConnection
        table_name: Name of the table to create
    """
    conn.execute_script(create_table_sql(table_name))


if __name__ == "__main__":
    print(create_table_sql())
    print()
    print(insert_sql())
