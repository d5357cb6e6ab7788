import pandas as pd
import pytest

from airlines_bi.config import ANALYTICS_TABLE, ANALYTICS_VIEW, BASE_TABLE
from airlines_bi.view import (
    DERIVED_COLUMNS, VIEW_COLUMNS, build_view_sql, fetch_view, materialize_view
)


def test_view_sql_quotes_reserved_columns():
    sql = build_view_sql()
    assert "b.`index`" in sql
    assert "b.`class`" in sql
    assert f"FROM {BASE_TABLE} b" in sql


def test_view_sql_uses_configured_parameters():
    sql = build_view_sql(moving_avg_window=5, nth_price=2, price_buckets=10)
    assert "ROWS BETWEEN 4 PRECEDING AND CURRENT ROW" in sql
    assert "NTH_VALUE(b.price, 2)" in sql
    assert "NTILE(10)" in sql


def test_view_columns(make_view, two_routes):
    view = make_view(two_routes)
    assert list(view.reset_index().columns) == VIEW_COLUMNS
    assert len(DERIVED_COLUMNS) == len(set(DERIVED_COLUMNS))


def test_lag_lead_and_positional_values(make_view, two_routes):
    view = make_view(two_routes)

    # days_left DESC on Delhi->Mumbai visits rows 3, 2, 1
    assert pd.isna(view.loc[3, 'route_prev_price'])
    assert view.loc[2, 'route_prev_price'] == 300
    assert view.loc[2, 'route_price_diff_prev'] == -100
    assert view.loc[1, 'route_prev_price'] == 200

    # days_left ASC visits rows 1, 2, 3
    assert view.loc[1, 'route_next_price'] == 200
    assert view.loc[1, 'route_price_diff_next'] == -100
    assert pd.isna(view.loc[3, 'route_next_price'])
    assert pd.isna(view.loc[3, 'route_price_diff_next'])

    for idx in (1, 2, 3):
        assert view.loc[idx, 'route_first_price'] == 300
        assert view.loc[idx, 'route_last_price'] == 100
    for idx in (4, 5, 6):
        assert view.loc[idx, 'route_first_price'] == 600
        assert view.loc[idx, 'route_last_price'] == 400


def test_running_total_and_moving_average(make_view, two_routes):
    view = make_view(two_routes)

    assert view.loc[[1, 2, 3], 'airline_running_price'].tolist() == [100, 300, 600]
    assert view.loc[[4, 5, 6], 'airline_running_price'].tolist() == [400, 900, 1500]

    assert view.loc[[1, 2, 4, 5], 'airline_moving_avg_price'].isna().all()
    assert view.loc[3, 'airline_moving_avg_price'] == pytest.approx(200)
    assert view.loc[6, 'airline_moving_avg_price'] == pytest.approx(500)


def test_quartiles_split_by_row_count(make_view, two_routes):
    view = make_view(two_routes)
    # 6 rows into 4 buckets -> sizes 2, 2, 1, 1
    assert view['price_quartile'].to_dict() == {1: 1, 2: 1, 3: 2, 4: 2, 5: 3, 6: 4}


def test_nth_cheapest_and_route_aggregates(make_view, two_routes):
    view = make_view(two_routes)

    assert set(view.loc[[1, 2, 3], 'airline_nth_cheapest_price']) == {300}
    assert set(view.loc[[4, 5, 6], 'airline_nth_cheapest_price']) == {600}

    assert set(view['route_flight_count']) == {3}
    assert view.loc[1, 'route_avg_price'] == pytest.approx(200)
    assert view.loc[1, 'route_price_deviation'] == pytest.approx(-100)
    assert view.loc[6, 'route_price_deviation'] == pytest.approx(100)


def test_rank_leaves_gaps_dense_rank_does_not(make_view, tied_prices):
    view = make_view(tied_prices)

    assert view['route_price_rank'].to_dict() == {10: 4, 11: 1, 12: 1, 13: 3, 14: 4}
    assert view['route_price_dense_rank'].to_dict() == {10: 3, 11: 1, 12: 1, 13: 2, 14: 3}
    assert view['airline_price_rank'].to_dict() == view['route_price_rank'].to_dict()
    # ties broken by index
    assert view['route_price_row_number'].to_dict() == {10: 4, 11: 1, 12: 2, 13: 3, 14: 5}

    assert view['route_duration_rank'].to_dict() == {10: 1, 11: 3, 12: 3, 13: 1, 14: 5}
    assert view['airline_duration_dense_rank'].to_dict() == {10: 1, 11: 2, 12: 2, 13: 1, 14: 3}


def test_tied_prices_window_values(make_view, tied_prices):
    view = make_view(tied_prices)

    assert view.loc[12, 'airline_moving_avg_price'] == pytest.approx(500 / 3)
    assert view.loc[13, 'airline_moving_avg_price'] == pytest.approx(400 / 3)
    assert view.loc[14, 'airline_moving_avg_price'] == pytest.approx(200)

    # 3rd cheapest counts duplicates: 100, 100, 200
    assert set(view['airline_nth_cheapest_price']) == {200}

    # equal prices at a bucket edge can split; order falls back to index
    assert view['price_quartile'].to_dict() == {11: 1, 12: 1, 13: 2, 10: 3, 14: 4}


def test_single_row_partition(make_view, single_row):
    row = make_view(single_row).loc[20]

    assert row['route_price_rank'] == 1
    assert row['airline_price_dense_rank'] == 1
    assert pd.isna(row['route_prev_price'])
    assert pd.isna(row['route_next_price'])
    assert row['airline_moving_avg_price'] == pytest.approx(2500)
    assert row['airline_running_price'] == pytest.approx(2500)
    assert pd.isna(row['airline_nth_cheapest_price'])
    assert row['route_flight_count'] == 1
    assert row['route_price_deviation'] == pytest.approx(0)
    assert row['route_first_price'] == row['route_last_price'] == 2500


def test_two_row_partition_leaves_moving_average_null(make_view, single_row):
    extra = single_row.copy()
    extra['index'] = 21
    extra['price'] = 3500.0
    view = make_view(pd.concat([single_row, extra], ignore_index=True))

    assert view['airline_moving_avg_price'].isna().all()


def test_null_prices_propagate(make_view, with_nulls):
    view = make_view(with_nulls)

    assert pd.isna(view.loc[31, 'route_price_deviation'])
    assert view.loc[30, 'route_avg_price'] == pytest.approx(6000)
    assert view.loc[30, 'route_price_deviation'] == pytest.approx(-1000)
    assert view.loc[[30, 31, 32, 33], 'airline_running_price'].tolist() == [5000, 5000, 12000, 18000]
    assert view.loc[32, 'airline_moving_avg_price'] == pytest.approx(6000)
    assert view.loc[33, 'airline_moving_avg_price'] == pytest.approx(6500)

    # NULL sorts first
    assert view['route_price_rank'].to_dict() == {30: 2, 31: 1, 32: 4, 33: 3}
    assert view['route_duration_rank'].to_dict() == {30: 2, 31: 1, 32: 3, 33: 4}
    assert set(view['airline_nth_cheapest_price']) == {6000}
    assert set(view['route_flight_count']) == {4}


def test_route_counts_match_base(loaded_db, all_records):
    view = fetch_view(loaded_db)
    expected = all_records.groupby(['source_city', 'destination_city']).size()
    reported = view.groupby(['source_city', 'destination_city'])['route_flight_count'].agg(['min', 'max'])

    assert (reported['min'] == reported['max']).all()
    assert reported['max'].sort_index().tolist() == expected.sort_index().tolist()


def test_running_total_ends_at_airline_total(loaded_db, all_records):
    view = fetch_view(loaded_db)
    finals = view.groupby('airline')['airline_running_price'].last()
    totals = all_records.groupby('airline')['price'].sum()

    for airline, total in totals.items():
        assert finals[airline] == pytest.approx(total)


def test_quartiles_have_equal_cardinality(loaded_db, all_records):
    view = fetch_view(loaded_db)
    sizes = view['price_quartile'].value_counts().sort_index()

    assert sizes.index.tolist() == [1, 2, 3, 4]
    assert sizes.max() - sizes.min() <= 1

    priced = view.dropna(subset=['price'])
    bounds = priced.groupby('price_quartile')['price'].agg(['min', 'max'])
    for lower, upper in zip(bounds.index[:-1], bounds.index[1:]):
        assert bounds.loc[lower, 'max'] <= bounds.loc[upper, 'min']


def test_view_preserves_rows_and_is_idempotent(loaded_db, all_records):
    first = fetch_view(loaded_db)
    second = fetch_view(loaded_db)

    assert len(first) == len(all_records)
    assert first['index'].tolist() == sorted(all_records['index'])
    pd.testing.assert_frame_equal(first, second)


def test_view_does_not_modify_base_table(loaded_db, all_records):
    fetch_view(loaded_db)
    count = loaded_db.execute_query(f"SELECT COUNT(*) FROM {BASE_TABLE}")[0][0]
    columns = loaded_db.execute_query(f"SELECT * FROM {BASE_TABLE} LIMIT 1")
    assert count == len(all_records)
    assert len(columns[0]) == 12


def test_materialize_view_snapshot(loaded_db, all_records):
    rows = materialize_view(loaded_db)
    assert rows == len(all_records)

    snapshot = fetch_view(loaded_db, ANALYTICS_TABLE)
    view = fetch_view(loaded_db, ANALYTICS_VIEW)
    pd.testing.assert_frame_equal(snapshot, view, check_dtype=False)

    # rebuilding replaces the snapshot rather than appending to it
    assert materialize_view(loaded_db) == len(all_records)
