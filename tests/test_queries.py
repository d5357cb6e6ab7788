import pandas as pd
import pytest

from airlines_bi.config import ANALYTICS_VIEW, BASE_TABLE
from airlines_bi.queries import (
    QUERIES, get_query, get_query_info, list_queries,
    list_queries_by_category, run_query, uses_view
)


def test_catalog_size_and_metadata():
    assert len(QUERIES) >= 30
    for key, info in QUERIES.items():
        assert {'name', 'description', 'category', 'use_case', 'sql'} <= set(info), key


def test_get_query_substitutes_names():
    sql = get_query('busiest_routes', table_name='flights_copy')
    assert 'FROM flights_copy' in sql
    assert '{table_name}' not in sql

    sql = get_query('route_cheapest_fares', view_name='snapshot')
    assert 'FROM snapshot' in sql


def test_unknown_query_raises():
    with pytest.raises(KeyError, match="Available queries"):
        get_query('no_such_query')
    with pytest.raises(KeyError):
        get_query_info('no_such_query')


def test_query_info_excludes_sql():
    info = get_query_info('dataset_overview')
    assert 'sql' not in info
    assert info['category'] == 'Overview'


def test_list_queries_by_category_covers_catalog():
    categories = list_queries_by_category()
    flattened = [key for keys in categories.values() for key in keys]
    assert sorted(flattened) == sorted(list_queries())
    assert 'Window Analytics' in categories


def test_uses_view():
    assert uses_view('volatile_routes')
    assert not uses_view('price_by_class')


@pytest.mark.parametrize('query_key', list(QUERIES))
def test_every_query_runs(loaded_db, query_key):
    df = run_query(loaded_db, query_key, BASE_TABLE, ANALYTICS_VIEW)
    assert isinstance(df, pd.DataFrame)
    assert len(df.columns) > 0


def test_dataset_overview(loaded_db, all_records):
    row = run_query(loaded_db, 'dataset_overview').iloc[0]
    assert row['total_records'] == len(all_records)
    assert row['num_airlines'] == all_records['airline'].nunique()
    assert row['max_price'] == all_records['price'].max()


def test_missing_values(loaded_db):
    row = run_query(loaded_db, 'missing_values').iloc[0]
    assert row['null_price'] == 1
    assert row['null_duration'] == 1
    assert row['null_class'] == 0


def test_market_share_sums_to_100(loaded_db):
    df = run_query(loaded_db, 'airline_market_share')
    assert df['share_pct'].sum() == pytest.approx(100, abs=0.05)
    assert df.iloc[0]['airline'] == 'SpiceJet'


def test_route_cheapest_fares_includes_ties(loaded_db):
    df = run_query(loaded_db, 'route_cheapest_fares')
    kolkata = df[df['destination_city'] == 'Kolkata']
    assert kolkata['price'].tolist() == [100, 100]


def test_cumulative_revenue_matches_totals(loaded_db, all_records):
    df = run_query(loaded_db, 'airline_cumulative_revenue').set_index('airline')
    totals = all_records.groupby('airline')['price'].sum()
    for airline, total in totals.items():
        assert df.loc[airline, 'total_fare_value'] == pytest.approx(total)


def test_nth_cheapest_per_airline(loaded_db):
    df = run_query(loaded_db, 'airline_nth_cheapest').set_index('airline')
    assert df.loc['Vistara', 'airline_nth_cheapest_price'] == 300
    assert df.loc['SpiceJet', 'airline_nth_cheapest_price'] == 200
    assert pd.isna(df.loc['AirAsia', 'airline_nth_cheapest_price'])


def test_booking_curve_ends(loaded_db):
    df = run_query(loaded_db, 'route_booking_curve_ends')
    delhi_mumbai = df[(df['source_city'] == 'Delhi') & (df['destination_city'] == 'Mumbai')].iloc[0]
    assert delhi_mumbai['earliest_booking_price'] == 300
    assert delhi_mumbai['latest_booking_price'] == 100
    assert delhi_mumbai['price_change'] == -200


def test_top_fares_per_airline(loaded_db):
    df = run_query(loaded_db, 'top_fares_per_airline')
    assert df.groupby('airline')['fare_rank'].max().max() <= 3
    vistara = df[df['airline'] == 'Vistara']
    assert vistara['price'].tolist() == [300, 200, 100]
