'''
Xentrix KPI Backend Test Suite

Test Modules:
-------------
- test_normalizer.py: null-like tokens, full-width digits, units, durations,
  dates, booleans, idempotence
- test_ingestion.py: alias resolution, agent identity, row-set boundary,
  time-range slicing
- test_metrics.py: CSAT, AHT, FCR, SLA and Escalation computers
- test_summary.py: Summary Builder, Agent Aggregator, daily trend
- test_ranking.py: interpolated quantiles, top/bottom selection, fallbacks
- test_insights.py: rule set, severity, ids, determinism
- test_overview.py: composition order and degradation
- test_api.py: FastAPI endpoints

Running Tests:
--------------
    pip install -e ".[test]"
    pytest xentrix/tests/ -v
'''

__all__ = []
