import pandas as pd

from airlines_bi.consistency import ConsistencyChecker


def test_consistency_checks_pass(loaded_db, sqlite_path, tmp_path):
    checker = ConsistencyChecker(backend='sqlite', sqlite_path=sqlite_path)
    try:
        checker.setup()
        assert checker.run_checks()
        path = checker.save_results(tmp_path / 'results')
    finally:
        checker.cleanup()

    checks = {r['check']: r['passed'] for r in checker.results}
    assert checks == {
        'row_count': True,
        'idempotence': True,
        'sql_frame_parity': True,
        'route_counts': True,
        'running_totals': True,
    }
    assert set(checker.timings) == {'SQL', 'pandas'}

    saved = pd.read_csv(path)
    assert len(saved) == 5
    assert 'sql_time_sec' in saved.columns


def test_running_total_check_detects_mismatch(loaded_db, sqlite_path):
    checker = ConsistencyChecker(backend='sqlite', sqlite_path=sqlite_path)
    try:
        checker.setup()
        base = checker.fetch_base()
        view = pd.DataFrame({'airline': base['airline'], 'airline_running_price': 0.0})
        assert not checker.check_running_totals(base, view)
    finally:
        checker.cleanup()
