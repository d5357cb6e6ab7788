"""
Analytical View (DataFrame Rendition)

Computes the same derived columns as the SQL view in airlines_bi.view, but
over an in-memory pandas DataFrame. Used to build the view without a
database and to cross-check the SQL rendition.

SQL semantics are mirrored explicitly:
- NULL prices sort first in ascending orders (ranked, bucketed first)
- aggregates skip NULLs; an all-NULL window yields NULL
- FIRST_VALUE / LAST_VALUE / NTH_VALUE are positional and may return NULL
"""

from typing import Optional

import numpy as np
import pandas as pd

from airlines_bi.config import VIEW_CONFIG
from airlines_bi.schema import COLUMN_NAMES
from airlines_bi.view import VIEW_COLUMNS

ROUTE_KEYS = ['source_city', 'destination_city']
KEY_COLUMNS = ['index', 'airline'] + ROUTE_KEYS + ['days_left']


def ntile(n: int, buckets: int) -> np.ndarray:
    """
    Bucket labels for n ordered rows, as SQL NTILE assigns them.

    Buckets differ in size by at most one row; the earlier buckets take the
    remainder. With fewer rows than buckets each row gets its own bucket.

    Examples:
        >>> ntile(10, 4).tolist()
        [1, 1, 1, 2, 2, 2, 3, 3, 4, 4]
    """
    base, rem = divmod(n, buckets)
    labels = []
    for bucket in range(1, buckets + 1):
        size = base + (1 if bucket <= rem else 0)
        labels.extend([bucket] * size)
    return np.array(labels, dtype='int64')


def _rank(df: pd.DataFrame, keys, column: str, method: str) -> pd.Series:
    ranks = df.groupby(keys, sort=False)[column].rank(method=method, na_option='top')
    return ranks.astype('int64')


def _nth(values: pd.Series, n: int) -> float:
    return values.iloc[n - 1] if len(values) >= n else np.nan


def build_analytics_frame(df: pd.DataFrame,
                          moving_avg_window: Optional[int] = None,
                          nth_price: Optional[int] = None,
                          price_buckets: Optional[int] = None) -> pd.DataFrame:
    """
    Left-extend flight records with the analytical view's derived columns.

    Args:
        df: Flight records with the twelve base columns
        moving_avg_window: Trailing window size for the moving average
        nth_price: Position N for the Nth cheapest price per airline
        price_buckets: Number of equal-count price buckets

    Returns:
        New DataFrame with base and derived columns, one row per input row,
        ordered by `index`

    Raises:
        ValueError: If base columns are missing, `index` is not unique or a
            partition or ordering key holds nulls
    """
    window = moving_avg_window or VIEW_CONFIG['moving_avg_window']
    nth = nth_price or VIEW_CONFIG['nth_price']
    buckets = price_buckets or VIEW_CONFIG['price_buckets']

    missing = [c for c in COLUMN_NAMES if c not in df.columns]
    if missing:
        raise ValueError(f"Missing flight record columns: {missing}")
    if df['index'].duplicated().any():
        raise ValueError("Column 'index' must be unique")
    null_keys = [c for c in KEY_COLUMNS if df[c].isna().any()]
    if null_keys:
        raise ValueError(f"Key columns must not contain nulls: {null_keys}")

    out = df[COLUMN_NAMES].sort_values('index', kind='mergesort').reset_index(drop=True)
    out['price'] = out['price'].astype(float)
    out['duration'] = out['duration'].astype(float)
    price = out['price']

    # Rankings
    out['route_price_rank'] = _rank(out, ROUTE_KEYS, 'price', 'min')
    out['route_price_dense_rank'] = _rank(out, ROUTE_KEYS, 'price', 'dense')
    by_price = out.sort_values(['price', 'index'], na_position='first', kind='mergesort')
    out['route_price_row_number'] = by_price.groupby(ROUTE_KEYS, sort=False).cumcount() + 1
    out['airline_price_rank'] = _rank(out, 'airline', 'price', 'min')
    out['airline_price_dense_rank'] = _rank(out, 'airline', 'price', 'dense')
    out['route_duration_rank'] = _rank(out, ROUTE_KEYS, 'duration', 'min')
    out['route_duration_dense_rank'] = _rank(out, ROUTE_KEYS, 'duration', 'dense')
    out['airline_duration_rank'] = _rank(out, 'airline', 'duration', 'min')
    out['airline_duration_dense_rank'] = _rank(out, 'airline', 'duration', 'dense')

    # Sequence statistics per airline (out is already ordered by index)
    airline = out['airline']
    running = price.fillna(0).groupby(airline).cumsum()
    seen = price.notna().astype('int64').groupby(airline).cumsum()
    out['airline_running_price'] = running.where(seen > 0)

    moving = price.groupby(airline).transform(
        lambda s: s.rolling(window, min_periods=1).mean()
    )
    position = out.groupby('airline', sort=False).cumcount() + 1
    size = out.groupby('airline', sort=False)['index'].transform('size')
    out['airline_moving_avg_price'] = moving.where((position >= window) | (size == 1))

    # Neighbour deltas per route, ordered by booking lead time
    days_desc = out.sort_values(['days_left', 'index'], ascending=[False, True], kind='mergesort')
    days_asc = out.sort_values(['days_left', 'index'], kind='mergesort')
    out['route_prev_price'] = days_desc.groupby(ROUTE_KEYS, sort=False)['price'].shift(1)
    out['route_price_diff_prev'] = price - out['route_prev_price']
    out['route_next_price'] = days_asc.groupby(ROUTE_KEYS, sort=False)['price'].shift(-1)
    out['route_price_diff_next'] = price - out['route_next_price']

    # Global equal-count buckets
    out['price_quartile'] = pd.Series(ntile(len(out), buckets), index=by_price.index)

    # Positional values
    desc_groups = days_desc.groupby(ROUTE_KEYS, sort=False)['price']
    out['route_first_price'] = desc_groups.transform(lambda s: s.iloc[0])
    out['route_last_price'] = desc_groups.transform(lambda s: s.iloc[-1])
    out['airline_nth_cheapest_price'] = by_price.groupby('airline', sort=False)['price'].transform(
        lambda s: _nth(s, nth)
    )

    # Route broadcast aggregates
    route_groups = out.groupby(ROUTE_KEYS, sort=False)['price']
    out['route_flight_count'] = route_groups.transform('size').astype('int64')
    out['route_avg_price'] = route_groups.transform('mean')
    out['route_price_deviation'] = price - out['route_avg_price']

    return out[VIEW_COLUMNS]
