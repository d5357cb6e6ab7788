"""
Analytical Query Definitions

This module contains the cataloged business queries for the Airlines BI
project. Each query runs against the base flight records table
(`{table_name}`) or against the analytical view (`{view_name}`).

Query Categories:
- Dataset overview and data quality
- Airline analysis (market share, pricing, class mix)
- Route analysis (busiest, most expensive, competition)
- Booking window analysis (price vs days left)
- Schedule analysis (departure/arrival time buckets)
- Class and stops analysis
- Duration analysis
- Window analytics over the analytical view

All SQL sticks to the dialect shared by MariaDB and SQLite.
"""

import argparse

import pandas as pd
from tabulate import tabulate

from airlines_bi.config import BASE_TABLE, ANALYTICS_VIEW

# Query dictionary with metadata and SQL templates
QUERIES = {
    "dataset_overview": {
        "name": "Dataset Overview",
        "description": "Headline counts and price/duration ranges of the dataset",
        "category": "Overview",
        "use_case": "Sanity check after loading - does the data look complete?",
        "sql": """
            SELECT
                COUNT(*) AS total_records,
                COUNT(DISTINCT airline) AS num_airlines,
                COUNT(DISTINCT flight) AS num_flights,
                COUNT(DISTINCT source_city) AS num_source_cities,
                MIN(price) AS min_price,
                MAX(price) AS max_price,
                ROUND(AVG(price), 2) AS avg_price,
                ROUND(AVG(duration), 2) AS avg_duration
            FROM {table_name}
        """
    },

    "missing_values": {
        "name": "Missing Values",
        "description": "Count NULLs in the numeric and categorical columns",
        "category": "Overview",
        "use_case": "Data quality - which columns need attention upstream?",
        "sql": """
            SELECT
                SUM(CASE WHEN price IS NULL THEN 1 ELSE 0 END) AS null_price,
                SUM(CASE WHEN duration IS NULL THEN 1 ELSE 0 END) AS null_duration,
                SUM(CASE WHEN stops IS NULL THEN 1 ELSE 0 END) AS null_stops,
                SUM(CASE WHEN `class` IS NULL THEN 1 ELSE 0 END) AS null_class,
                SUM(CASE WHEN departure_time IS NULL THEN 1 ELSE 0 END) AS null_departure_time,
                SUM(CASE WHEN arrival_time IS NULL THEN 1 ELSE 0 END) AS null_arrival_time
            FROM {table_name}
        """
    },

    "price_bands": {
        "name": "Price Bands",
        "description": "Distribution of tickets across fixed price bands",
        "category": "Overview",
        "use_case": "Pricing overview - where do most fares sit?",
        "sql": """
            SELECT
                CASE
                    WHEN price < 5000 THEN 'Under 5k'
                    WHEN price < 10000 THEN '5k-10k'
                    WHEN price < 25000 THEN '10k-25k'
                    WHEN price < 50000 THEN '25k-50k'
                    ELSE '50k+'
                END AS price_band,
                COUNT(*) AS num_tickets,
                MIN(price) AS band_min_price
            FROM {table_name}
            WHERE price IS NOT NULL
            GROUP BY price_band
            ORDER BY band_min_price
        """
    },

    "airline_market_share": {
        "name": "Airline Market Share",
        "description": "Share of offered tickets per airline",
        "category": "Airline Analysis",
        "use_case": "Competitive landscape - who dominates the offer?",
        "sql": """
            SELECT
                airline,
                COUNT(*) AS num_tickets,
                ROUND(100.0 * COUNT(*) / (SELECT COUNT(*) FROM {table_name}), 2) AS share_pct
            FROM {table_name}
            GROUP BY airline
            ORDER BY num_tickets DESC, airline
        """
    },

    "airline_price_summary": {
        "name": "Airline Price Summary",
        "description": "Average, minimum and maximum fare per airline",
        "category": "Airline Analysis",
        "use_case": "Positioning - which carriers are premium vs budget?",
        "sql": """
            SELECT
                airline,
                ROUND(AVG(price), 2) AS avg_price,
                MIN(price) AS min_price,
                MAX(price) AS max_price
            FROM {table_name}
            GROUP BY airline
            ORDER BY avg_price DESC, airline
        """
    },

    "airline_class_mix": {
        "name": "Airline Class Mix",
        "description": "Economy vs Business ticket counts per airline",
        "category": "Airline Analysis",
        "use_case": "Product mix - which carriers sell business class?",
        "sql": """
            SELECT
                airline,
                SUM(CASE WHEN `class` = 'Economy' THEN 1 ELSE 0 END) AS economy_tickets,
                SUM(CASE WHEN `class` = 'Business' THEN 1 ELSE 0 END) AS business_tickets
            FROM {table_name}
            GROUP BY airline
            ORDER BY business_tickets DESC, airline
        """
    },

    "airline_business_premium": {
        "name": "Business Class Premium",
        "description": "Ratio of average business fare to average economy fare per airline",
        "category": "Airline Analysis",
        "use_case": "Yield analysis - how much more does business class earn?",
        "sql": """
            SELECT
                airline,
                ROUND(AVG(CASE WHEN `class` = 'Business' THEN price END), 2) AS avg_business_price,
                ROUND(AVG(CASE WHEN `class` = 'Economy' THEN price END), 2) AS avg_economy_price,
                ROUND(
                    AVG(CASE WHEN `class` = 'Business' THEN price END)
                    / AVG(CASE WHEN `class` = 'Economy' THEN price END), 2
                ) AS business_premium
            FROM {table_name}
            GROUP BY airline
            ORDER BY airline
        """
    },

    "airline_flight_codes": {
        "name": "Distinct Flight Codes",
        "description": "Number of distinct flight codes operated per airline",
        "category": "Airline Analysis",
        "use_case": "Network size - how many services does each carrier run?",
        "sql": """
            SELECT
                airline,
                COUNT(DISTINCT flight) AS num_flight_codes
            FROM {table_name}
            GROUP BY airline
            ORDER BY num_flight_codes DESC, airline
        """
    },

    "airline_route_coverage": {
        "name": "Airline Route Coverage",
        "description": "Number of distinct routes served per airline",
        "category": "Airline Analysis",
        "use_case": "Network breadth - which carriers cover the most city pairs?",
        "sql": """
            SELECT
                airline,
                COUNT(*) AS num_routes
            FROM (
                SELECT DISTINCT airline, source_city, destination_city
                FROM {table_name}
            ) airline_routes
            GROUP BY airline
            ORDER BY num_routes DESC, airline
        """
    },

    "busiest_routes": {
        "name": "Busiest Routes",
        "description": "Top 10 routes by number of offered tickets",
        "category": "Route Analysis",
        "use_case": "Demand hotspots - which city pairs have the most supply?",
        "sql": """
            SELECT
                source_city,
                destination_city,
                COUNT(*) AS num_tickets,
                ROUND(AVG(price), 2) AS avg_price
            FROM {table_name}
            GROUP BY source_city, destination_city
            ORDER BY num_tickets DESC, source_city, destination_city
            LIMIT 10
        """
    },

    "most_expensive_routes": {
        "name": "Most Expensive Routes",
        "description": "Top 10 routes by average fare",
        "category": "Route Analysis",
        "use_case": "Premium corridors - where are fares highest?",
        "sql": """
            SELECT
                source_city,
                destination_city,
                ROUND(AVG(price), 2) AS avg_price,
                COUNT(*) AS num_tickets
            FROM {table_name}
            GROUP BY source_city, destination_city
            ORDER BY avg_price DESC, source_city, destination_city
            LIMIT 10
        """
    },

    "cheapest_routes": {
        "name": "Cheapest Routes",
        "description": "Top 10 routes with the lowest average fare",
        "category": "Route Analysis",
        "use_case": "Budget corridors - where can travellers fly cheaply?",
        "sql": """
            SELECT
                source_city,
                destination_city,
                ROUND(AVG(price), 2) AS avg_price,
                COUNT(*) AS num_tickets
            FROM {table_name}
            GROUP BY source_city, destination_city
            ORDER BY avg_price, source_city, destination_city
            LIMIT 10
        """
    },

    "route_competition": {
        "name": "Route Competition",
        "description": "Number of airlines competing on each route",
        "category": "Route Analysis",
        "use_case": "Market structure - monopoly vs contested routes",
        "sql": """
            SELECT
                source_city,
                destination_city,
                COUNT(DISTINCT airline) AS num_airlines,
                ROUND(AVG(price), 2) AS avg_price
            FROM {table_name}
            GROUP BY source_city, destination_city
            ORDER BY num_airlines DESC, source_city, destination_city
        """
    },

    "route_price_spread": {
        "name": "Route Price Spread",
        "description": "Difference between the highest and lowest fare per route",
        "category": "Route Analysis",
        "use_case": "Price dispersion - where is fare shopping most worthwhile?",
        "sql": """
            SELECT
                source_city,
                destination_city,
                MIN(price) AS min_price,
                MAX(price) AS max_price,
                MAX(price) - MIN(price) AS price_spread
            FROM {table_name}
            GROUP BY source_city, destination_city
            ORDER BY price_spread DESC, source_city, destination_city
        """
    },

    "departures_by_city": {
        "name": "Departures by City",
        "description": "Ticket counts and average fare by departure city",
        "category": "Route Analysis",
        "use_case": "Origin analysis - which cities generate most supply?",
        "sql": """
            SELECT
                source_city,
                COUNT(*) AS num_departures,
                ROUND(AVG(price), 2) AS avg_price
            FROM {table_name}
            GROUP BY source_city
            ORDER BY num_departures DESC, source_city
        """
    },

    "arrivals_by_city": {
        "name": "Arrivals by City",
        "description": "Ticket counts and average fare by arrival city",
        "category": "Route Analysis",
        "use_case": "Destination analysis - which cities attract most supply?",
        "sql": """
            SELECT
                destination_city,
                COUNT(*) AS num_arrivals,
                ROUND(AVG(price), 2) AS avg_price
            FROM {table_name}
            GROUP BY destination_city
            ORDER BY num_arrivals DESC, destination_city
        """
    },

    "price_by_days_left": {
        "name": "Price by Days Left",
        "description": "Average fare for each booking lead time",
        "category": "Booking Window",
        "use_case": "Booking curve - how do fares move as departure approaches?",
        "sql": """
            SELECT
                days_left,
                COUNT(*) AS num_tickets,
                ROUND(AVG(price), 2) AS avg_price
            FROM {table_name}
            GROUP BY days_left
            ORDER BY days_left
        """
    },

    "booking_window_segments": {
        "name": "Booking Window Segments",
        "description": "Average fare by coarse booking lead-time segment",
        "category": "Booking Window",
        "use_case": "Customer advice - how early should travellers book?",
        "sql": """
            SELECT
                CASE
                    WHEN days_left <= 3 THEN 'Last minute (0-3 days)'
                    WHEN days_left <= 7 THEN 'Within a week (4-7 days)'
                    WHEN days_left <= 15 THEN 'Two weeks (8-15 days)'
                    WHEN days_left <= 30 THEN 'One month (16-30 days)'
                    ELSE 'Early (31+ days)'
                END AS booking_window,
                COUNT(*) AS num_tickets,
                ROUND(AVG(price), 2) AS avg_price,
                MIN(days_left) AS window_start
            FROM {table_name}
            GROUP BY booking_window
            ORDER BY window_start
        """
    },

    "last_minute_premium": {
        "name": "Last-Minute Premium",
        "description": "Average fare when booking 0-3 days out vs 30+ days out, per airline",
        "category": "Booking Window",
        "use_case": "Revenue management - which carriers charge most for late bookings?",
        "sql": """
            SELECT
                airline,
                ROUND(AVG(CASE WHEN days_left <= 3 THEN price END), 2) AS last_minute_avg,
                ROUND(AVG(CASE WHEN days_left >= 30 THEN price END), 2) AS early_avg,
                ROUND(
                    AVG(CASE WHEN days_left <= 3 THEN price END)
                    - AVG(CASE WHEN days_left >= 30 THEN price END), 2
                ) AS premium
            FROM {table_name}
            GROUP BY airline
            ORDER BY airline
        """
    },

    "price_by_departure_time": {
        "name": "Price by Departure Time",
        "description": "Average fare per departure time-of-day bucket",
        "category": "Schedule Analysis",
        "use_case": "Schedule pricing - are morning departures more expensive?",
        "sql": """
            SELECT
                departure_time,
                COUNT(*) AS num_tickets,
                ROUND(AVG(price), 2) AS avg_price
            FROM {table_name}
            GROUP BY departure_time
            ORDER BY avg_price DESC, departure_time
        """
    },

    "price_by_arrival_time": {
        "name": "Price by Arrival Time",
        "description": "Average fare per arrival time-of-day bucket",
        "category": "Schedule Analysis",
        "use_case": "Schedule pricing - do convenient arrivals cost more?",
        "sql": """
            SELECT
                arrival_time,
                COUNT(*) AS num_tickets,
                ROUND(AVG(price), 2) AS avg_price
            FROM {table_name}
            GROUP BY arrival_time
            ORDER BY avg_price DESC, arrival_time
        """
    },

    "departure_arrival_pairs": {
        "name": "Departure/Arrival Combinations",
        "description": "Ticket counts and fares for each departure/arrival bucket pair",
        "category": "Schedule Analysis",
        "use_case": "Timetable design - which time combinations are offered most?",
        "sql": """
            SELECT
                departure_time,
                arrival_time,
                COUNT(*) AS num_tickets,
                ROUND(AVG(price), 2) AS avg_price
            FROM {table_name}
            GROUP BY departure_time, arrival_time
            ORDER BY num_tickets DESC, departure_time, arrival_time
        """
    },

    "night_departures": {
        "name": "Night Departures by Airline",
        "description": "Tickets on Night and Late_Night departures per airline",
        "category": "Schedule Analysis",
        "use_case": "Red-eye offer - which carriers operate overnight?",
        "sql": """
            SELECT
                airline,
                COUNT(*) AS night_tickets,
                ROUND(AVG(price), 2) AS avg_price
            FROM {table_name}
            WHERE departure_time IN ('Night', 'Late_Night')
            GROUP BY airline
            ORDER BY night_tickets DESC, airline
        """
    },

    "price_by_class": {
        "name": "Price by Class",
        "description": "Ticket counts and fare statistics per travel class",
        "category": "Class & Stops",
        "use_case": "Cabin economics - how far apart are Economy and Business?",
        "sql": """
            SELECT
                `class`,
                COUNT(*) AS num_tickets,
                ROUND(AVG(price), 2) AS avg_price,
                MIN(price) AS min_price,
                MAX(price) AS max_price
            FROM {table_name}
            GROUP BY `class`
            ORDER BY avg_price DESC
        """
    },

    "price_by_stops": {
        "name": "Price by Stops",
        "description": "Ticket counts and average fare per number of stops",
        "category": "Class & Stops",
        "use_case": "Itinerary pricing - are direct flights worth the premium?",
        "sql": """
            SELECT
                stops,
                COUNT(*) AS num_tickets,
                ROUND(AVG(price), 2) AS avg_price,
                ROUND(AVG(duration), 2) AS avg_duration
            FROM {table_name}
            GROUP BY stops
            ORDER BY
                CASE stops
                    WHEN 'zero' THEN 1
                    WHEN 'one' THEN 2
                    ELSE 3
                END
        """
    },

    "stops_by_airline": {
        "name": "Stops by Airline",
        "description": "Ticket counts per airline and number of stops",
        "category": "Class & Stops",
        "use_case": "Network style - point-to-point vs connecting carriers",
        "sql": """
            SELECT
                airline,
                stops,
                COUNT(*) AS num_tickets
            FROM {table_name}
            GROUP BY airline, stops
            ORDER BY airline, stops
        """
    },

    "class_stops_matrix": {
        "name": "Class x Stops Price Matrix",
        "description": "Average fare for each class and stops combination",
        "category": "Class & Stops",
        "use_case": "Fare matrix - combined effect of cabin and connections",
        "sql": """
            SELECT
                `class`,
                stops,
                COUNT(*) AS num_tickets,
                ROUND(AVG(price), 2) AS avg_price
            FROM {table_name}
            GROUP BY `class`, stops
            ORDER BY `class`, stops
        """
    },

    "duration_by_stops": {
        "name": "Duration by Stops",
        "description": "Average, shortest and longest duration per number of stops",
        "category": "Duration Analysis",
        "use_case": "Travel time - how much does each connection add?",
        "sql": """
            SELECT
                stops,
                ROUND(AVG(duration), 2) AS avg_duration,
                MIN(duration) AS min_duration,
                MAX(duration) AS max_duration
            FROM {table_name}
            GROUP BY stops
            ORDER BY avg_duration
        """
    },

    "price_per_hour": {
        "name": "Price per Flight Hour",
        "description": "Average fare per hour of flight duration per airline",
        "category": "Duration Analysis",
        "use_case": "Value comparison - which carrier gives the most flying per rupee?",
        "sql": """
            SELECT
                airline,
                ROUND(AVG(price / duration), 2) AS avg_price_per_hour
            FROM {table_name}
            WHERE duration > 0
            GROUP BY airline
            ORDER BY avg_price_per_hour, airline
        """
    },

    "longest_flights": {
        "name": "Longest Flights",
        "description": "Top 10 tickets by flight duration",
        "category": "Duration Analysis",
        "use_case": "Outliers - which itineraries take the longest?",
        "sql": """
            SELECT
                `index`,
                airline,
                flight,
                source_city,
                destination_city,
                stops,
                duration,
                price
            FROM {table_name}
            WHERE duration IS NOT NULL
            ORDER BY duration DESC, `index`
            LIMIT 10
        """
    },

    "duration_segments": {
        "name": "Duration Segments",
        "description": "Ticket counts and fares by coarse duration segment",
        "category": "Duration Analysis",
        "use_case": "Product design - short hops vs long journeys",
        "sql": """
            SELECT
                CASE
                    WHEN duration < 2 THEN 'Under 2h'
                    WHEN duration < 5 THEN '2-5h'
                    WHEN duration < 10 THEN '5-10h'
                    ELSE '10h+'
                END AS duration_segment,
                COUNT(*) AS num_tickets,
                ROUND(AVG(price), 2) AS avg_price,
                MIN(duration) AS segment_start
            FROM {table_name}
            WHERE duration IS NOT NULL
            GROUP BY duration_segment
            ORDER BY segment_start
        """
    },

    "top_fares_per_airline": {
        "name": "Top 3 Fares per Airline",
        "description": "The three most expensive tickets of every airline",
        "category": "Window Analytics",
        "use_case": "Premium tickets - what are the top fares each carrier sells?",
        "sql": """
            WITH ranked AS (
                SELECT
                    airline,
                    flight,
                    source_city,
                    destination_city,
                    price,
                    ROW_NUMBER() OVER (
                        PARTITION BY airline ORDER BY price DESC, `index`
                    ) AS fare_rank
                FROM {table_name}
                WHERE price IS NOT NULL
            )
            SELECT airline, fare_rank, flight, source_city, destination_city, price
            FROM ranked
            WHERE fare_rank <= 3
            ORDER BY airline, fare_rank
        """
    },

    "route_cheapest_fares": {
        "name": "Cheapest Fare per Route",
        "description": "Tickets holding the lowest fare on their route (ties included)",
        "category": "Window Analytics",
        "use_case": "Deal finder - who sells the cheapest ticket on each route?",
        "sql": """
            SELECT
                source_city,
                destination_city,
                airline,
                flight,
                days_left,
                price
            FROM {view_name}
            WHERE route_price_rank = 1
            ORDER BY source_city, destination_city, `index`
        """
    },

    "airline_price_quartiles": {
        "name": "Airline Presence by Price Quartile",
        "description": "Ticket counts per airline in each global price quartile",
        "category": "Window Analytics",
        "use_case": "Segment positioning - which carriers live in the top quartile?",
        "sql": """
            SELECT
                airline,
                price_quartile,
                COUNT(*) AS num_tickets
            FROM {view_name}
            GROUP BY airline, price_quartile
            ORDER BY airline, price_quartile
        """
    },

    "airline_cumulative_revenue": {
        "name": "Airline Cumulative Fare Total",
        "description": "Final running fare total per airline (equals total fare volume)",
        "category": "Window Analytics",
        "use_case": "Revenue proxy - total fare value offered by each carrier",
        "sql": """
            SELECT
                airline,
                MAX(airline_running_price) AS total_fare_value,
                COUNT(*) AS num_tickets
            FROM {view_name}
            GROUP BY airline
            ORDER BY total_fare_value DESC, airline
        """
    },

    "volatile_routes": {
        "name": "Most Volatile Routes",
        "description": "Top 10 routes by mean absolute fare step between consecutive lead times",
        "category": "Window Analytics",
        "use_case": "Price volatility - where do fares jump the most day to day?",
        "sql": """
            SELECT
                source_city,
                destination_city,
                ROUND(AVG(ABS(route_price_diff_prev)), 2) AS avg_price_step,
                MAX(route_flight_count) AS num_tickets
            FROM {view_name}
            WHERE route_price_diff_prev IS NOT NULL
            GROUP BY source_city, destination_city
            ORDER BY avg_price_step DESC, source_city, destination_city
            LIMIT 10
        """
    },

    "above_route_average": {
        "name": "Tickets Above Route Average",
        "description": "Share of each airline's tickets priced above their route average",
        "category": "Window Analytics",
        "use_case": "Relative pricing - which carriers price above the market?",
        "sql": """
            SELECT
                airline,
                SUM(CASE WHEN route_price_deviation > 0 THEN 1 ELSE 0 END) AS above_avg_tickets,
                COUNT(*) AS num_tickets,
                ROUND(
                    100.0 * SUM(CASE WHEN route_price_deviation > 0 THEN 1 ELSE 0 END) / COUNT(*), 2
                ) AS above_avg_pct
            FROM {view_name}
            GROUP BY airline
            ORDER BY above_avg_pct DESC, airline
        """
    },

    "airline_nth_cheapest": {
        "name": "Third Cheapest Fare per Airline",
        "description": "The third lowest fare each airline offers",
        "category": "Window Analytics",
        "use_case": "Entry pricing - a robust low-end fare that ignores one-off outliers",
        "sql": """
            SELECT DISTINCT
                airline,
                airline_nth_cheapest_price
            FROM {view_name}
            ORDER BY airline
        """
    },

    "route_booking_curve_ends": {
        "name": "Route Booking Curve Ends",
        "description": "Fare at the longest and shortest lead time per route",
        "category": "Window Analytics",
        "use_case": "Booking curve - how much do fares rise from first to last day?",
        "sql": """
            SELECT
                source_city,
                destination_city,
                MAX(route_first_price) AS earliest_booking_price,
                MAX(route_last_price) AS latest_booking_price,
                MAX(route_last_price) - MAX(route_first_price) AS price_change,
                ROUND(MAX(route_avg_price), 2) AS avg_price
            FROM {view_name}
            GROUP BY source_city, destination_city
            ORDER BY source_city, destination_city
        """
    }
}


def get_query(query_key: str, table_name: str = BASE_TABLE,
              view_name: str = ANALYTICS_VIEW) -> str:
    """
    Get a formatted SQL query for a specific table and view.

    Args:
        query_key: The key identifying the query (e.g., 'busiest_routes')
        table_name: The base table name to substitute in the query
        view_name: The analytical view name to substitute in the query

    Returns:
        Formatted SQL query string

    Raises:
        KeyError: If query_key is not found
    """
    if query_key not in QUERIES:
        raise KeyError(f"Query '{query_key}' not found. Available queries: {list(QUERIES.keys())}")

    return QUERIES[query_key]['sql'].format(table_name=table_name, view_name=view_name)


def get_query_info(query_key: str) -> dict:
    """
    Get metadata about a query.

    Returns:
        Dictionary with query metadata (name, description, category, use_case)

    Raises:
        KeyError: If query_key is not found
    """
    if query_key not in QUERIES:
        raise KeyError(f"Query '{query_key}' not found")

    return {k: v for k, v in QUERIES[query_key].items() if k != 'sql'}


def list_queries() -> list:
    """
    Get a list of all available query keys.
    """
    return list(QUERIES.keys())


def list_queries_by_category() -> dict:
    """
    Get queries organized by category.

    Returns:
        Dictionary mapping category names to lists of query keys
    """
    categories = {}
    for key, info in QUERIES.items():
        category = info.get('category', 'Uncategorized')
        if category not in categories:
            categories[category] = []
        categories[category].append(key)
    return categories


def uses_view(query_key: str) -> bool:
    """True if the query reads the analytical view rather than the base table."""
    if query_key not in QUERIES:
        raise KeyError(f"Query '{query_key}' not found")
    return '{view_name}' in QUERIES[query_key]['sql']


def run_query(conn, query_key: str, table_name: str = BASE_TABLE,
              view_name: str = ANALYTICS_VIEW) -> pd.DataFrame:
    """
    Execute a cataloged query and return its results as a DataFrame.

    Args:
        conn: An open DatabaseConnection
        query_key: The key identifying the query
        table_name: The base table name
        view_name: The analytical view name (must already exist for view queries)
    """
    return conn.fetch_frame(get_query(query_key, table_name, view_name))


def print_query_catalog():
    """
    Print a formatted catalog of all available queries.
    """
    print("=" * 80)
    print("Airlines BI Query Catalog")
    print("=" * 80)
    print()

    for idx, (key, info) in enumerate(QUERIES.items(), 1):
        source = "view" if uses_view(key) else "table"
        print(f"{idx}. {info['name']} (Key: {key}, reads {source})")
        print(f"   Category: {info['category']}")
        print(f"   Description: {info['description']}")
        print(f"   Use Case: {info['use_case']}")
        print()


def parse_arguments() -> argparse.Namespace:
    """
    Parse command line arguments.
    """
    parser = argparse.ArgumentParser(
        description='List or run cataloged Airlines BI queries'
    )
    parser.add_argument(
        '--run',
        metavar='QUERY_KEY',
        help='Run a query and print its results'
    )
    parser.add_argument(
        '--limit',
        type=int,
        default=20,
        help='Maximum rows to print (default: 20)'
    )
    return parser.parse_args()


def main():
    """
    Main entry point: print the catalog or run one query.
    """
    from airlines_bi.config import setup_logging
    from airlines_bi.db_connector import DatabaseConnection

    args = parse_arguments()
    query_key = args.run

    if not query_key:
        print_query_catalog()
        return

    setup_logging()
    info = get_query_info(query_key)
    with DatabaseConnection(BASE_TABLE) as conn:
        df = run_query(conn, query_key)

    print(f"{info['name']} ({len(df)} rows)")
    print(tabulate(df.head(args.limit), headers='keys', tablefmt='grid', showindex=False))


if __name__ == "__main__":
    main()
