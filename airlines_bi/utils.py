"""
Utility Functions

This module provides utility functions for the Airlines BI project,
including time formatting, result comparisons and data processing helpers.
"""

import math
from typing import List, Tuple, Any

import pandas as pd


def format_time(seconds: float) -> str:
    """
    Format time duration in human-readable format.

    Args:
        seconds: Time duration in seconds

    Returns:
        Formatted string (e.g., "500ms", "2.345s", "500μs")

    Examples:
        >>> format_time(0.0005)
        '500μs'
        >>> format_time(0.5)
        '500ms'
        >>> format_time(2.345)
        '2.345s'
    """
    if seconds < 0.001:
        return f"{seconds * 1000000:.0f}μs"
    elif seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    else:
        return f"{seconds:.3f}s"


def calculate_speedup(time1: float, time2: float) -> float:
    """
    Calculate speedup ratio between two execution times.

    Examples:
        >>> calculate_speedup(10.0, 2.0)
        5.0
    """
    if time2 == 0:
        return float('inf')
    return time1 / time2


def format_number(number: int) -> str:
    """
    Format large numbers with thousand separators.

    Examples:
        >>> format_number(1234567)
        '1,234,567'
    """
    return f"{number:,}"


def format_price(price) -> str:
    """
    Format a ticket price for reports; missing prices render as '-'.

    Examples:
        >>> format_price(5953)
        '5,953.00'
        >>> format_price(None)
        '-'
    """
    if is_null(price):
        return '-'
    return f"{price:,.2f}"


def is_null(value: Any) -> bool:
    """True for None and float NaN (SQL NULL in either rendition)."""
    if value is None:
        return True
    return isinstance(value, float) and math.isnan(value)


def _normalize(value: Any) -> Any:
    if is_null(value):
        return None
    # numpy scalars -> plain Python values
    if hasattr(value, 'item'):
        return value.item()
    return value


def _sort_key(row: Tuple) -> Tuple:
    # NULLs first, then numbers compared as floats, then everything else as text
    key = []
    for v in row:
        if v is None:
            key.append((0, 0.0, ''))
        elif isinstance(v, (int, float)):
            key.append((1, float(v), ''))
        else:
            key.append((2, 0.0, str(v)))
    return tuple(key)


def compare_results(results1: List[Tuple], results2: List[Tuple],
                    tolerance: float = 0.001, ordered: bool = False) -> bool:
    """
    Compare two result sets for equality (with floating point tolerance).

    None and NaN are treated as the same NULL value; ints and floats compare
    numerically.

    Args:
        results1: First result set (list of tuples)
        results2: Second result set (list of tuples)
        tolerance: Tolerance for floating point comparison
        ordered: If False, rows are sorted before comparing

    Returns:
        True if results match, False otherwise

    Examples:
        >>> compare_results([(1, 2.0)], [(1, 2.001)], tolerance=0.01)
        True
        >>> compare_results([(1, None)], [(1, float('nan'))])
        True
        >>> compare_results([(1, 'a')], [(2, 'a')])
        False
    """
    if results1 is None or results2 is None:
        return False

    if len(results1) != len(results2):
        return False

    rows1 = [tuple(_normalize(v) for v in row) for row in results1]
    rows2 = [tuple(_normalize(v) for v in row) for row in results2]

    if not ordered:
        rows1 = sorted(rows1, key=_sort_key)
        rows2 = sorted(rows2, key=_sort_key)

    for row1, row2 in zip(rows1, rows2):
        if len(row1) != len(row2):
            return False

        for val1, val2 in zip(row1, row2):
            if val1 is None or val2 is None:
                if val1 is not val2:
                    return False
            elif isinstance(val1, float) or isinstance(val2, float):
                if abs(val1 - val2) > tolerance:
                    return False
            elif val1 != val2:
                return False

    return True


def frame_to_rows(df: pd.DataFrame) -> List[Tuple]:
    """
    Convert a DataFrame to a list of tuples with NaN mapped to None.
    """
    data = df.astype(object).where(pd.notna(df), None)
    return list(data.itertuples(index=False, name=None))


def progress_bar(current: int, total: int, width: int = 50) -> str:
    """
    Generate a text-based progress bar.

    Examples:
        >>> progress_bar(50, 100, 20)
        '[==========          ] 50%'
    """
    if total == 0:
        return '[' + ' ' * width + '] 0%'

    percent = current / total
    filled = int(width * percent)
    bar = '=' * filled + ' ' * (width - filled)
    return f"[{bar}] {int(percent * 100)}%"

