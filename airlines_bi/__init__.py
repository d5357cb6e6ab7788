"""
Airlines BI Package

This package contains the reporting layer over the flat airlines table:
- config: Database configuration and settings
- db_connector: Database connection management (MariaDB / SQLite)
- schema: Table definition for flight records
- view: Analytical view definition (window statistics)
- frame_view: The same analytical view computed with pandas
- queries: Cataloged business query definitions
- load_data: Bulk CSV loading into the base table
- consistency: SQL vs DataFrame consistency checks
- utils: Utility functions for formatting and comparisons
"""

__version__ = "1.0.0"
__author__ = "Airlines BI Team"
