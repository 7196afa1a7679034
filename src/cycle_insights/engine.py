"""Public entry points of the cycle insight engine.

For a given user, reads closed cycles and daily logs through an injected
CycleDataStore and derives cycle statistics, phase patterns, predictions,
and tips.  Every call recomputes from a fresh snapshot; nothing is cached
between calls.

Store failures never escape: a DataStoreError from any fetch turns the
affected entry point's result into None, the same as "no data".
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Any
from uuid import UUID

from src.cycle_insights.config_loader import InsightConfig, get_insight_config
from src.cycle_insights.cycle_stats import compute_cycle_stats, sort_most_recent_first, summarize
from src.cycle_insights.patterns import PatternAggregator
from src.cycle_insights.phase import get_phase_info
from src.cycle_insights.predictor import (
    CyclePredictor,
    build_current_status,
    symptom_management_tips,
)
from src.cycle_insights.store import CycleDataStore, DataStoreError
from src.models.cycles import (
    CurrentCycleStatus,
    CycleRecord,
    DailyLog,
    PersonalInsights,
    PhaseInfo,
    SymptomPattern,
)

logger = logging.getLogger("cycle_insights.engine")


def build_insights(
    cycles: list[CycleRecord],
    logs: list[DailyLog],
    config: InsightConfig | None = None,
) -> PersonalInsights | None:
    """Derive personal insights from an in-memory snapshot.

    Args:
        cycles: The user's closed cycle records, any order.
        logs:   The user's daily logs, any order.
        config: Insight config (defaults to the global singleton).

    Returns:
        PersonalInsights, or None when there are no closed cycles.
    """
    cfg = config or get_insight_config()
    closed = sort_most_recent_first([c for c in cycles if c.is_closed])
    if not closed:
        logger.info("No closed cycles; skipping insight generation")
        return None

    stats = compute_cycle_stats(closed, cfg)
    patterns = PatternAggregator(cfg).aggregate(logs, closed, stats.average_cycle_length)
    predictor = CyclePredictor(cfg)

    return PersonalInsights(
        cycle_analysis=summarize(stats),
        common_symptoms=patterns.symptoms,
        mood_patterns=patterns.moods,
        predictions=predictor.predict(stats, closed[0].start_date),
        personalized_tips=predictor.generate_tips(stats, patterns),
    )


class CycleInsightEngine:
    """Generate cycle insights and current-cycle status for a user.

    Usage::

        engine = CycleInsightEngine(PostgresCycleStore())
        insights = await engine.generate_insights(user_id)
        status = await engine.get_current_status(user_id, today=date(2024, 3, 10))
    """

    def __init__(self, store: CycleDataStore, config: InsightConfig | None = None) -> None:
        self._store = store
        self._config = config or get_insight_config()

    async def _gather(self, user_id: UUID, *fetches: Any) -> list[Any] | None:
        """Run independent fetches concurrently; None if any store read failed."""
        results = await asyncio.gather(*fetches, return_exceptions=True)
        failed = False
        for result in results:
            if isinstance(result, DataStoreError):
                logger.warning("Data store read failed for user %s: %s", user_id, result)
                failed = True
            elif isinstance(result, BaseException):
                raise result
        return None if failed else list(results)

    async def generate_insights(self, user_id: UUID) -> PersonalInsights | None:
        """Analyze the user's full history.

        Args:
            user_id: User whose records to analyze.

        Returns:
            PersonalInsights, or None when the user has no closed cycles
            or the store could not be read.
        """
        results = await self._gather(
            user_id,
            self._store.fetch_closed_cycles(user_id),
            self._store.fetch_all_logs(user_id),
        )
        if results is None:
            return None
        cycles, logs = results
        return build_insights(cycles or [], logs or [], self._config)

    def get_phase_info(self, day_of_cycle: int, average_cycle_length: float) -> PhaseInfo:
        """Phase, display name, description and tips for a day of cycle."""
        return get_phase_info(
            day_of_cycle, average_cycle_length, self._config.phases.menstrual_days
        )

    def get_symptom_tips(self, symptom_patterns: list[SymptomPattern]) -> dict[str, list[str]]:
        return symptom_management_tips(symptom_patterns)

    async def get_current_status(
        self, user_id: UUID, today: date | None = None
    ) -> CurrentCycleStatus | None:
        """Describe today relative to the user's most recent cycle.

        Args:
            user_id: User whose cycle to describe.
            today:   Reference date (defaults to the current date).

        Returns:
            CurrentCycleStatus, or None when the user has no cycle at all
            or the store could not be read.
        """
        today = today or date.today()
        results = await self._gather(
            user_id,
            self._store.fetch_latest_cycle(user_id),
            self._store.fetch_closed_cycles(user_id),
        )
        if results is None:
            return None
        latest, closed = results
        if latest is None:
            logger.info("No cycle records for user %s", user_id)
            return None

        analysis = summarize(compute_cycle_stats(closed or [], self._config))
        return build_current_status(latest, analysis, today, self._config)
