"""Read-only data access for the insight engine.

The engine never talks to the database directly.  It receives a
CycleDataStore implementation and calls the three fetch operations below;
implementations translate driver failures into DataStoreError so the
engine can degrade to an empty result.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from uuid import UUID

import asyncpg

from src.models.cycles import CycleRecord, DailyLog
from src.services import supabase

logger = logging.getLogger("cycle_insights.store")


class DataStoreError(Exception):
    """Raised by a CycleDataStore when the backing store cannot be read."""


class CycleDataStore(ABC):
    """Abstract source of a user's cycle records and daily logs.

    Subclasses must implement:
        - fetch_closed_cycles()
        - fetch_all_logs()
        - fetch_latest_cycle()

    Results may be returned in any order.
    """

    @abstractmethod
    async def fetch_closed_cycles(self, user_id: UUID) -> list[CycleRecord]:
        """Return every cycle with an end date.

        Raises:
            DataStoreError: If the store cannot be read.
        """

    @abstractmethod
    async def fetch_all_logs(self, user_id: UUID) -> list[DailyLog]:
        """Return every daily symptom/mood log.

        Raises:
            DataStoreError: If the store cannot be read.
        """

    @abstractmethod
    async def fetch_latest_cycle(self, user_id: UUID) -> CycleRecord | None:
        """Return the most recent cycle by start date, open or closed.

        Raises:
            DataStoreError: If the store cannot be read.
        """


# ---------------------------------------------------------------------------
# Postgres (Supabase) implementation
# ---------------------------------------------------------------------------

_DRIVER_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)

_CLOSED_CYCLES_SQL = """
    SELECT cycle_id, start_date, end_date
    FROM cycles
    WHERE user_id = $1 AND end_date IS NOT NULL
    ORDER BY start_date DESC
"""

_ALL_LOGS_SQL = """
    SELECT log_date, symptoms, mood
    FROM period_logs
    WHERE user_id = $1
    ORDER BY log_date ASC
"""

_LATEST_CYCLE_SQL = """
    SELECT cycle_id, start_date, end_date
    FROM cycles
    WHERE user_id = $1
    ORDER BY start_date DESC
    LIMIT 1
"""


class PostgresCycleStore(CycleDataStore):
    """CycleDataStore backed by the Supabase Postgres ``cycles`` and
    ``period_logs`` tables, read through the RLS-aware asyncpg pool.

    The pool must be initialized with ``src.services.supabase.init_pool``
    before any fetch.
    """

    async def fetch_closed_cycles(self, user_id: UUID) -> list[CycleRecord]:
        try:
            rows = await supabase.fetch(_CLOSED_CYCLES_SQL, user_id, user_id=user_id)
        except _DRIVER_ERRORS as exc:
            raise DataStoreError(f"Failed to fetch cycles for user {user_id}: {exc}") from exc
        return [CycleRecord.model_validate(dict(row)) for row in rows]

    async def fetch_all_logs(self, user_id: UUID) -> list[DailyLog]:
        try:
            rows = await supabase.fetch(_ALL_LOGS_SQL, user_id, user_id=user_id)
        except _DRIVER_ERRORS as exc:
            raise DataStoreError(f"Failed to fetch logs for user {user_id}: {exc}") from exc
        return [DailyLog.model_validate(dict(row)) for row in rows]

    async def fetch_latest_cycle(self, user_id: UUID) -> CycleRecord | None:
        try:
            row = await supabase.fetchrow(_LATEST_CYCLE_SQL, user_id, user_id=user_id)
        except _DRIVER_ERRORS as exc:
            raise DataStoreError(
                f"Failed to fetch latest cycle for user {user_id}: {exc}"
            ) from exc
        return CycleRecord.model_validate(dict(row)) if row else None


# ---------------------------------------------------------------------------
# In-memory implementation
# ---------------------------------------------------------------------------


class InMemoryCycleStore(CycleDataStore):
    """Dict-backed store for tests and offline analysis.

    Usage::

        store = InMemoryCycleStore()
        store.add_cycles(user_id, [CycleRecord(start_date=..., end_date=...)])
        store.add_logs(user_id, [DailyLog(log_date=..., symptoms=["cramps"])])
    """

    def __init__(self) -> None:
        self._cycles: dict[UUID, list[CycleRecord]] = {}
        self._logs: dict[UUID, dict] = {}

    def add_cycles(self, user_id: UUID, cycles: list[CycleRecord]) -> None:
        self._cycles.setdefault(user_id, []).extend(cycles)

    def add_logs(self, user_id: UUID, logs: list[DailyLog]) -> None:
        """Store logs keyed by date; a later log for the same date replaces the earlier one."""
        by_date = self._logs.setdefault(user_id, {})
        for log in logs:
            by_date[log.log_date] = log

    async def fetch_closed_cycles(self, user_id: UUID) -> list[CycleRecord]:
        return [c for c in self._cycles.get(user_id, []) if c.is_closed]

    async def fetch_all_logs(self, user_id: UUID) -> list[DailyLog]:
        return list(self._logs.get(user_id, {}).values())

    async def fetch_latest_cycle(self, user_id: UUID) -> CycleRecord | None:
        cycles = self._cycles.get(user_id, [])
        return max(cycles, key=lambda c: c.start_date, default=None)
