"""Shared fixtures and record builders for cycle insight engine tests."""

from __future__ import annotations

from datetime import date, timedelta
from uuid import UUID

import pytest

from src.cycle_insights.config_loader import InsightConfig, load_insight_config
from src.cycle_insights.store import InMemoryCycleStore
from src.models.cycles import CycleRecord, DailyLog

# Canonical test user ID
TEST_USER_ID = UUID("12345678-1234-5678-1234-567812345678")


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def insight_config() -> InsightConfig:
    """Load the real insight config for tests."""
    return load_insight_config()


# ---------------------------------------------------------------------------
# Record fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def regular_cycles() -> list[CycleRecord]:
    """Three closed 5-day cycles, 28 days apart."""
    return [
        CycleRecord(start_date=date(2024, 1, 1), end_date=date(2024, 1, 5)),
        CycleRecord(start_date=date(2024, 1, 29), end_date=date(2024, 2, 2)),
        CycleRecord(start_date=date(2024, 2, 26), end_date=date(2024, 3, 1)),
    ]


@pytest.fixture
def irregular_cycles() -> list[CycleRecord]:
    """Four closed cycles whose lengths swing between 22 and 38 days."""
    starts = [date(2024, 1, 1)]
    for gap in (22, 38, 24):
        starts.append(starts[-1] + timedelta(days=gap))
    return [CycleRecord(start_date=s, end_date=s + timedelta(days=4)) for s in starts]


@pytest.fixture
def cramp_logs() -> list[DailyLog]:
    """Daily logs across the first regular cycle: cramps early, irritable late."""
    start = date(2024, 1, 1)
    logs = [
        DailyLog(log_date=start + timedelta(days=i), symptoms=["cramps"], mood="tired")
        for i in range(3)
    ]
    logs.append(DailyLog(log_date=start + timedelta(days=3), symptoms=["cramps", "bloating"]))
    return logs


@pytest.fixture
def store(regular_cycles: list[CycleRecord], cramp_logs: list[DailyLog]) -> InMemoryCycleStore:
    s = InMemoryCycleStore()
    s.add_cycles(TEST_USER_ID, regular_cycles)
    s.add_logs(TEST_USER_ID, cramp_logs)
    return s
