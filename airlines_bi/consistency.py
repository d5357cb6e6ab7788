"""
Consistency Check Suite

This script computes the analytical view twice (through SQL and through
pandas), measures both, and verifies that the renditions agree, that the
SQL view is idempotent and that it preserves the base row count. Results
are printed as a table and saved to CSV.
"""

import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Tuple, Union

import pandas as pd
from tabulate import tabulate

from airlines_bi.config import (
    BASE_TABLE, ANALYTICS_VIEW, CONSISTENCY_CONFIG,
    RESULTS_DIR, TIMESTAMP_FORMAT, setup_logging
)
from airlines_bi.db_connector import DatabaseConnection
from airlines_bi.frame_view import build_analytics_frame
from airlines_bi.schema import quote_identifier, COLUMN_NAMES
from airlines_bi.utils import format_time, calculate_speedup, compare_results, frame_to_rows
from airlines_bi.view import create_view, fetch_view

logger = logging.getLogger(__name__)


class ConsistencyChecker:
    """
    Cross-checks the SQL analytical view against the DataFrame rendition.
    """

    def __init__(self, table_name: str = BASE_TABLE, view_name: str = ANALYTICS_VIEW,
                 backend: Optional[str] = None,
                 sqlite_path: Optional[Union[str, Path]] = None):
        self.table_name = table_name
        self.view_name = view_name
        self.conn = DatabaseConnection(view_name, backend=backend, sqlite_path=sqlite_path)
        self.tolerance = CONSISTENCY_CONFIG['tolerance']
        self.results = []
        self.timings = {}

    def setup(self) -> None:
        """Connect and (re)create the analytical view."""
        self.conn.connect()
        create_view(self.conn, self.table_name, self.view_name)

    def fetch_base(self) -> pd.DataFrame:
        columns = ', '.join(quote_identifier(c) for c in COLUMN_NAMES)
        return self.conn.fetch_frame(f"SELECT {columns} FROM {self.table_name} ORDER BY `index`")

    def _timed(self, label: str, func: Callable[[], pd.DataFrame]) -> pd.DataFrame:
        """Run func with warmup, average the timed runs and keep the last result."""
        for _ in range(CONSISTENCY_CONFIG['warmup_runs']):
            func()

        times = []
        result = None
        for _ in range(max(CONSISTENCY_CONFIG['test_runs'], 1)):
            start = time.time()
            result = func()
            times.append(time.time() - start)

        self.timings[label] = sum(times) / len(times)
        print(f"  [{label}] Done in {format_time(self.timings[label])}")
        return result

    def _record(self, check: str, passed: bool, detail: str = '') -> bool:
        self.results.append({'check': check, 'passed': passed, 'detail': detail})
        if not passed:
            logger.warning("Check failed: %s %s", check, detail)
        return passed

    def check_row_count(self, base: pd.DataFrame, view: pd.DataFrame) -> bool:
        return self._record(
            'row_count', len(base) == len(view),
            f"base={len(base)} view={len(view)}"
        )

    def check_idempotence(self, first: pd.DataFrame) -> bool:
        second = fetch_view(self.conn, self.view_name)
        match = compare_results(frame_to_rows(first), frame_to_rows(second), tolerance=0, ordered=True)
        return self._record('idempotence', match)

    def check_parity(self, sql_view: pd.DataFrame, frame_view: pd.DataFrame) -> bool:
        mismatched = [
            col for col in sql_view.columns
            if not compare_results(
                frame_to_rows(sql_view[[col]]), frame_to_rows(frame_view[[col]]),
                tolerance=self.tolerance, ordered=True
            )
        ]
        return self._record('sql_frame_parity', not mismatched,
                            f"mismatched columns: {mismatched}" if mismatched else '')

    def check_route_counts(self, base: pd.DataFrame, view: pd.DataFrame) -> bool:
        expected = base.groupby(['source_city', 'destination_city']).size()
        reported = view.groupby(['source_city', 'destination_city'])['route_flight_count'].max()
        return self._record('route_counts', bool((expected == reported).all()))

    def check_running_totals(self, base: pd.DataFrame, view: pd.DataFrame) -> bool:
        totals = base.groupby('airline')['price'].sum(min_count=1)
        finals = view.groupby('airline')['airline_running_price'].last()
        match = compare_results(
            frame_to_rows(totals.sort_index().to_frame()),
            frame_to_rows(finals.sort_index().to_frame()),
            tolerance=self.tolerance, ordered=True
        )
        return self._record('running_totals', match)

    def run_checks(self) -> bool:
        """
        Compute both renditions and run every check.

        Returns:
            True if every check passed
        """
        print("Computing analytical view...")
        base = self.fetch_base()
        sql_view = self._timed('SQL', lambda: fetch_view(self.conn, self.view_name))
        frame_view = self._timed('pandas', lambda: build_analytics_frame(base))
        print()

        checks = [
            self.check_row_count(base, sql_view),
            self.check_idempotence(sql_view),
            self.check_parity(sql_view, frame_view),
            self.check_route_counts(base, sql_view),
            self.check_running_totals(base, sql_view),
        ]
        return all(checks)

    def print_summary(self) -> None:
        """
        Print the check summary table.
        """
        print("=" * 70)
        print("Consistency Summary")
        print("=" * 70)
        print()

        table_data = [
            [r['check'], 'PASS' if r['passed'] else 'FAIL', r['detail'][:40]]
            for r in self.results
        ]
        print(tabulate(table_data, headers=['Check', 'Status', 'Detail'], tablefmt='grid'))
        print()

        if 'SQL' in self.timings and 'pandas' in self.timings:
            speedup = calculate_speedup(self.timings['pandas'], self.timings['SQL'])
            print(f"SQL {format_time(self.timings['SQL'])} vs pandas "
                  f"{format_time(self.timings['pandas'])} ({speedup:.1f}x)")
            print()

    def save_results(self, results_dir: Path = RESULTS_DIR) -> Path:
        """
        Save check results to CSV.

        Returns:
            Path to saved CSV file
        """
        results_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime(TIMESTAMP_FORMAT)
        filename = results_dir / f"consistency_{timestamp}.csv"

        df = pd.DataFrame(self.results)
        for label, seconds in self.timings.items():
            df[f"{label.lower()}_time_sec"] = seconds
        df.to_csv(filename, index=False)

        print(f"Results saved to: {filename}")
        return filename

    def cleanup(self) -> None:
        self.conn.close()

    def run(self) -> Tuple[bool, Optional[Path]]:
        """
        Execute the full consistency suite.
        """
        try:
            self.setup()
            passed = self.run_checks()
            self.print_summary()
            path = self.save_results()
            return passed, path
        finally:
            self.cleanup()


def main():
    """Main entry point for the consistency check script."""
    setup_logging()
    checker = ConsistencyChecker()

    try:
        passed, _ = checker.run()
    except KeyboardInterrupt:
        print("\n\nConsistency check interrupted by user")
        sys.exit(1)

    print("All checks passed!" if passed else "Some checks failed. See summary above.")
    sys.exit(0 if passed else 1)


if __name__ == "__main__":
    main()
