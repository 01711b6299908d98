"""
Pytest Configuration and Shared Fixtures for Xentrix KPI Backend Tests.

This module provides fixtures and configuration for all backend tests:
- Scenario rows with hand-checked expected metrics
- A seeded mock-data generator mirroring the dashboard's demo export
  (AgentName / CallsHandled / AvgHandleTimeSeconds / CSAT / Resolution_Status)
- AgentStat fixtures for quantile ranking and insight rule tests
- Settings cache isolation
"""

import random
from datetime import date, timedelta
from typing import Any, Dict, Generator, List

import pytest

from xentrix.core.config import get_settings
from xentrix.models import AgentStat


# ============================================================
# PYTEST HOOKS
# ============================================================

def pytest_configure(config) -> None:
    """
    Configure custom pytest markers for test organization.

    Custom markers defined:
    - slow: Marks tests as slow (deselect with -m "not slow")
    - parity: Marks tests pinning KPI values shown on the dashboard
    """
    config.addinivalue_line(
        'markers',
        'slow: marks tests as slow (deselect with -m "not slow")'
    )
    config.addinivalue_line(
        'markers',
        'parity: marks tests pinning KPI values shown on the dashboard'
    )


# ============================================================
# SETTINGS ISOLATION
# ============================================================

@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear the cached Settings before and after each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ============================================================
# MOCK DATA
# ============================================================

MOCK_AGENTS = ["Akari", "Kenji", "Mei", "Taro", "Yui"]
MOCK_STATUSES = ["Resolved", "Partially Resolved", "Escalated"]
MOCK_ISSUES = ["Order", "Billing", "Technical", "Return", "Complaint", "Follow-up"]


def generate_mock_rows(
    n: int = 260,
    seed: int = 42,
    end: date = date(2026, 1, 31),
    agents: List[str] = None,
) -> List[Dict[str, Any]]:
    """
    Generate reproducible demo rows over the 30 days ending on `end`.

    AHT mostly sits in 220-380s with occasional 360-450s spikes; CSAT drifts
    down as AHT grows, with occasional complaint dips.
    """
    rng = random.Random(seed)
    agents = agents or MOCK_AGENTS
    start = end - timedelta(days=29)

    rows: List[Dict[str, Any]] = []
    for _ in range(n):
        day = start + timedelta(days=rng.randint(0, 29))
        aht = rng.randint(220, 380)
        if rng.random() < 0.12:
            aht = rng.randint(360, 450)
        aht = min(480, max(180, aht))

        csat = rng.randint(75, 96) - (aht - 280) // 25
        if rng.random() < 0.08:
            csat -= rng.randint(10, 18)
        csat = min(100, max(50, csat))

        rows.append({
            "Date": f"{day.isoformat()}T{rng.randint(9, 18):02d}:{rng.randint(0, 59):02d}:00",
            "AgentName": rng.choice(agents),
            "CallsHandled": rng.randint(10, 35),
            "AvgHandleTimeSeconds": aht,
            "CSAT": csat,
            "Call_Type": rng.choice(["Inbound", "Outbound"]),
            "Issue_Type": rng.choice(MOCK_ISSUES),
            "Resolution_Status": rng.choice(MOCK_STATUSES),
        })
    return rows


@pytest.fixture
def mock_rows() -> List[Dict[str, Any]]:
    """260 seeded demo rows."""
    return generate_mock_rows()


# ============================================================
# SCENARIO FIXTURES
# ============================================================

@pytest.fixture
def two_call_rows() -> List[Dict[str, Any]]:
    """Two rows: FCR 50%, AHT 350s, CSAT 75."""
    return [
        {"CSAT": 90, "AHT": 200, "Resolution_Status": "Resolved"},
        {"CSAT": 60, "AHT": 500, "Resolution_Status": "Escalated"},
    ]


@pytest.fixture
def mixed_rows() -> List[Dict[str, Any]]:
    """
    Rows exercising aliases, null-like tokens and out-of-range values.

    Agents: Akari (3 rows), Kenji (2 rows), Unknown (1 row).
    """
    return [
        {"Date": "2026/1/5", "Agent": "Akari", "CSAT": "95%", "AHT": "05:00",
         "Resolution_Status": "Resolved", "WithinSLA": "yes"},
        {"Date": "2026-01-06", "Agent": "Akari", "CSAT": "N/A", "AHT": "250 sec",
         "Resolution_Status": "Transfer to L2", "WithinSLA": "no"},
        {"Date": "2026-01-06", "AgentName": "Akari", "CSAT": 120, "AHT": -5,
         "Resolution_Status": "closed", "WithinSLA": "maybe"},
        {"Date": "2026-01-07", "agentName": "Kenji", "csat": "８０", "aht": "1:00:00",
         "status": "pending", "within_sla": 1},
        {"Date": "bad date", "Agent": "Kenji", "CSAT": "", "AHT": None,
         "Resolution_Status": None},
        {"Date": "2026-01-07", "CSAT": 70, "AHT": "12:xx",
         "Resolution_Status": "Escalated", "WithinSLA": "met"},
    ]


def make_agent_stat(name: str, total_calls: int, **metrics: Any) -> AgentStat:
    """Build an AgentStat with only the fields a test cares about."""
    return AgentStat(agentName=name, rowCount=total_calls, totalCalls=total_calls, **metrics)


@pytest.fixture
def forty_agents() -> List[AgentStat]:
    """40 agents with 50 calls each and distinct AHT values 200, 210, ..., 590."""
    return [
        make_agent_stat(f"agent_{i:02d}", 50, avgAht=200.0 + 10 * i, avgCsat=60.0 + i)
        for i in range(40)
    ]
