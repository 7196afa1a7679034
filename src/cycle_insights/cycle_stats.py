"""Cycle and period length statistics.

Derives cycle lengths (start of one cycle to the start of the next) and
period lengths (inclusive day count of bleeding) from closed cycle records,
then summarizes them into averages, variation, and a regularity label.

Unrealistic samples are dropped, not corrected: a typo'd future date should
shrink the sample set rather than skew the average or raise.
"""

from __future__ import annotations

import logging
import math
import statistics
from dataclasses import dataclass, field

from src.cycle_insights.config_loader import CycleLengthConfig, InsightConfig, get_insight_config
from src.models.cycles import CycleAnalysis, CycleRecord, CycleRegularity

logger = logging.getLogger("cycle_insights.cycle_stats")


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round halves away from zero for non-negative values (12.5 → 13).

    Built-in ``round`` uses banker's rounding, which would turn a 12.5%
    frequency into 12.
    """
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


@dataclass
class CycleStats:
    """Raw (unrounded) statistics over a user's closed cycles.

    Attributes:
        cycle_lengths:        Admitted cycle-length samples in days.
        period_lengths:       Admitted period-length samples in days.
        average_cycle_length: Mean cycle length, 0.0 without samples.
        average_period_length: Mean period length, 0.0 without samples.
        cycle_variation:      Population standard deviation of cycle lengths.
        regularity:           Regularity label derived from the variation.
        total_tracked_cycles: Number of closed cycle records considered.
    """

    cycle_lengths: list[int] = field(default_factory=list)
    period_lengths: list[int] = field(default_factory=list)
    average_cycle_length: float = 0.0
    average_period_length: float = 0.0
    cycle_variation: float = 0.0
    regularity: CycleRegularity = CycleRegularity.unknown
    total_tracked_cycles: int = 0


def sort_most_recent_first(cycles: list[CycleRecord]) -> list[CycleRecord]:
    return sorted(cycles, key=lambda c: c.start_date, reverse=True)


def cycle_lengths(cycles: list[CycleRecord], max_days: int = 60) -> list[int]:
    """Return admitted cycle lengths, most recent cycle first.

    A closed cycle's length runs from its start to the nearest start date
    strictly after its end date.  Cycles with no later record contribute
    nothing.

    Args:
        cycles:   Cycle records in any order.
        max_days: Exclusive upper bound for a realistic cycle length.

    Returns:
        Day counts with ``0 < length < max_days``.
    """
    ordered = sort_most_recent_first(cycles)
    starts = sorted(c.start_date for c in ordered)
    lengths: list[int] = []
    for cycle in ordered:
        if cycle.end_date is None:
            continue
        next_start = next((s for s in starts if s > cycle.end_date), None)
        if next_start is None:
            continue
        length = (next_start - cycle.start_date).days
        if 0 < length < max_days:
            lengths.append(length)
        else:
            logger.debug(
                "Dropping unrealistic cycle length %d for cycle starting %s",
                length, cycle.start_date,
            )
    return lengths


def period_lengths(cycles: list[CycleRecord], max_days: int = 15) -> list[int]:
    """Return admitted inclusive period lengths, most recent cycle first."""
    lengths: list[int] = []
    for cycle in sort_most_recent_first(cycles):
        if cycle.end_date is None:
            continue
        length = (cycle.end_date - cycle.start_date).days + 1
        if 0 < length < max_days:
            lengths.append(length)
        else:
            logger.debug(
                "Dropping unrealistic period length %d for cycle starting %s",
                length, cycle.start_date,
            )
    return lengths


def _mean(values: list[int]) -> float:
    return statistics.fmean(values) if values else 0.0


def _population_std(values: list[int]) -> float:
    # Population (not sample) deviation; defined as 0 below two samples
    if len(values) < 2:
        return 0.0
    return statistics.pstdev(values)


def classify_regularity(
    lengths: list[int], variation: float, config: CycleLengthConfig
) -> CycleRegularity:
    """Label cycles regular/irregular once enough samples exist.

    Args:
        lengths:   Admitted cycle-length samples.
        variation: Population standard deviation of ``lengths``.
        config:    Thresholds for sample count and allowed deviation.

    Returns:
        ``unknown`` with too few samples, else ``regular`` iff the deviation
        is within the threshold.
    """
    if len(lengths) < config.min_cycles_for_regularity:
        return CycleRegularity.unknown
    if variation <= config.regularity_threshold_days:
        return CycleRegularity.regular
    return CycleRegularity.irregular


def compute_cycle_stats(
    cycles: list[CycleRecord], config: InsightConfig | None = None
) -> CycleStats:
    """Compute raw cycle statistics over closed cycle records.

    Open records still count as next-cycle starts but are not themselves
    tracked cycles.

    Args:
        cycles: Cycle records in any order.
        config: Insight config (defaults to the global singleton).

    Returns:
        CycleStats with unrounded averages for downstream computation.
    """
    cl = (config or get_insight_config()).cycle_length
    cycle_samples = cycle_lengths(cycles, cl.max_cycle_days)
    period_samples = period_lengths(cycles, cl.max_period_days)

    average_cycle = _mean(cycle_samples)
    variation = _population_std(cycle_samples)

    return CycleStats(
        cycle_lengths=cycle_samples,
        period_lengths=period_samples,
        average_cycle_length=average_cycle,
        average_period_length=_mean(period_samples),
        cycle_variation=variation,
        regularity=classify_regularity(cycle_samples, variation, cl),
        total_tracked_cycles=sum(1 for c in cycles if c.is_closed),
    )


def summarize(stats: CycleStats) -> CycleAnalysis:
    """Round raw statistics for display: whole-day averages, 0.1-day variation."""
    return CycleAnalysis(
        average_cycle_length=round_half_up(stats.average_cycle_length),
        average_period_length=round_half_up(stats.average_period_length),
        cycle_regularity=stats.regularity,
        cycle_variation=round_half_up(stats.cycle_variation, 1),
        total_tracked_cycles=stats.total_tracked_cycles,
        shortest_cycle=float(min(stats.cycle_lengths, default=0)),
        longest_cycle=float(max(stats.cycle_lengths, default=0)),
    )
