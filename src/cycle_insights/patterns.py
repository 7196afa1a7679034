"""Symptom and mood pattern aggregation across cycle phases.

Places every daily log inside the cycle it belongs to, classifies its
phase, and reports for each tag:

- how often it shows up across all logs ("cramps on 60% of logged days")
- how its occurrences split across phases ("80% of those in menstrual")

Aggregation runs in two passes: index each tag to the phases of the logs
that carry it, then derive percentages from that index.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable

from src.cycle_insights.config_loader import InsightConfig, get_insight_config
from src.cycle_insights.cycle_stats import round_half_up, sort_most_recent_first
from src.cycle_insights.phase import classify_phase
from src.models.cycles import (
    CycleRecord,
    DailyLog,
    MoodPattern,
    Phase,
    SymptomPattern,
    TagPattern,
)

logger = logging.getLogger("cycle_insights.patterns")


@dataclass
class PhasedLog:
    """A daily log placed inside its cycle.

    Attributes:
        log:          The daily log being classified.
        cycle_start:  Start date of the containing cycle.
        day_of_cycle: 1-based day within that cycle.
        phase:        Phase classified from the day and average length.
    """

    log: DailyLog
    cycle_start: date
    day_of_cycle: int
    phase: Phase


@dataclass
class PatternSummary:
    """Aggregator output: ranked symptom and mood patterns."""

    symptoms: list[SymptomPattern] = field(default_factory=list)
    moods: list[MoodPattern] = field(default_factory=list)
    total_logs: int = 0
    assigned_logs: int = 0


def _percent(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    return int(round_half_up(100 * part / whole))


def find_cycle(log_date: date, cycles: list[CycleRecord]) -> CycleRecord | None:
    """Return the most recent cycle whose interval contains ``log_date``.

    Args:
        log_date: Date of the daily log.
        cycles:   Cycle records sorted most recent first.

    Returns:
        The containing cycle, or None if the log falls between cycles.
    """
    return next((c for c in cycles if c.contains(log_date)), None)


class PatternAggregator:
    """Correlate daily symptom/mood logs with the cycle phase they fell in.

    Usage::

        aggregator = PatternAggregator()
        summary = aggregator.aggregate(logs, cycles, average_cycle_length=28.0)
        for pattern in summary.symptoms:
            print(pattern.tag, pattern.frequency, pattern.phase_frequency)
    """

    def __init__(self, config: InsightConfig | None = None) -> None:
        self._config = config or get_insight_config()

    def assign_phases(
        self,
        logs: list[DailyLog],
        cycles: list[CycleRecord],
        average_cycle_length: float,
    ) -> list[PhasedLog]:
        """Place each log in its containing cycle; logs outside every cycle are skipped."""
        ordered = sort_most_recent_first(cycles)
        menstrual_days = self._config.phases.menstrual_days
        phased: list[PhasedLog] = []

        for log in sorted(logs, key=lambda l: l.log_date):
            cycle = find_cycle(log.log_date, ordered)
            if cycle is None:
                continue
            day = (log.log_date - cycle.start_date).days + 1
            phased.append(
                PhasedLog(
                    log=log,
                    cycle_start=cycle.start_date,
                    day_of_cycle=day,
                    phase=classify_phase(day, average_cycle_length, menstrual_days),
                )
            )
        return phased

    def aggregate(
        self,
        logs: list[DailyLog],
        cycles: list[CycleRecord],
        average_cycle_length: float,
    ) -> PatternSummary:
        """Build ranked symptom and mood patterns.

        Args:
            logs:                 Every daily log for the user.
            cycles:               The user's cycle records.
            average_cycle_length: Raw average cycle length for phase classification.

        Returns:
            PatternSummary with the top symptoms and all moods, each sorted
            by frequency descending.
        """
        total_logs = len(logs)
        if total_logs == 0:
            logger.info("No daily logs to aggregate")
            return PatternSummary()

        phased = self.assign_phases(logs, cycles, average_cycle_length)
        if len(phased) < total_logs:
            logger.debug(
                "%d of %d logs fall outside every cycle and are ignored",
                total_logs - len(phased), total_logs,
            )

        symptom_index = self._index_tags(
            (tag, p.phase) for p in phased for tag in p.log.symptoms
        )
        mood_index = self._index_tags(
            (p.log.mood, p.phase) for p in phased if p.log.mood
        )

        symptoms = self._rank(symptom_index, total_logs, SymptomPattern)
        moods = self._rank(mood_index, total_logs, MoodPattern)

        return PatternSummary(
            symptoms=symptoms[: self._config.patterns.top_symptoms],
            moods=moods,
            total_logs=total_logs,
            assigned_logs=len(phased),
        )

    @staticmethod
    def _index_tags(pairs: Iterable[tuple[str, Phase]]) -> dict[str, list[Phase]]:
        """Group phases by tag, preserving the order tags are first seen."""
        index: dict[str, list[Phase]] = {}
        for tag, phase in pairs:
            index.setdefault(tag, []).append(phase)
        return index

    @staticmethod
    def _rank(
        index: dict[str, list[Phase]],
        total_logs: int,
        pattern_cls: type[TagPattern],
    ) -> list:
        patterns = []
        for tag, phases in index.items():
            count = len(phases)
            by_phase = Counter(phases)
            patterns.append(
                pattern_cls(
                    tag=tag,
                    frequency=_percent(count, total_logs),
                    phase_frequency={
                        phase: _percent(by_phase[phase], count or 1) for phase in Phase
                    },
                )
            )
        # sorted() is stable, so ties keep discovery order
        return sorted(patterns, key=lambda p: p.frequency, reverse=True)
