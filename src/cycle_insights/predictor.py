"""Next-cycle prediction and personalized guidance.

Calendar-only projection from the most recent cycle start:

- next period = latest start + average cycle length
- ovulation   = latest start + (floor(average / 2) - 2)
- fertile window = ovulation - 5 days .. ovulation + 1 day

Tips come from an ordered list of independent rules over the cycle
statistics and aggregated patterns.  No rule is diagnostic; the
out-of-range rule only suggests talking to a clinician.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta

from src.cycle_insights.config_loader import InsightConfig, get_insight_config
from src.cycle_insights.cycle_stats import CycleStats, round_half_up
from src.cycle_insights.patterns import PatternSummary
from src.cycle_insights.phase import get_phase_info, ovulation_day
from src.cycle_insights.reference import (
    GENERAL_TIPS_KEY,
    SYMPTOM_TIP_KEYS,
    SYMPTOM_TIPS,
    TIP_ATYPICAL_LENGTH,
    TIP_FALLBACK,
    TIP_FREQUENT_CRAMPS,
    TIP_HIGH_VARIATION,
    TIP_KEEP_TRACKING,
    TIP_PREMENSTRUAL_MOOD,
)
from src.models.cycles import (
    ConfidenceLevel,
    CurrentCycleStatus,
    CycleAnalysis,
    CyclePredictions,
    CycleRecord,
    CycleRegularity,
    DateWindow,
    Phase,
    SymptomPattern,
)

logger = logging.getLogger("cycle_insights.predictor")


class CyclePredictor:
    """Project the next period and fertile window, and generate tips.

    Usage::

        predictor = CyclePredictor()
        predictions = predictor.predict(stats, latest_start=date(2024, 2, 26))
        tips = predictor.generate_tips(stats, patterns)
    """

    def __init__(self, config: InsightConfig | None = None) -> None:
        self._config = config or get_insight_config()

    def fertile_window(self, anchor: date, average_cycle_length: float) -> DateWindow:
        """Fertile window around the ovulation day of a cycle starting at ``anchor``."""
        ph = self._config.phases
        ovulation = anchor + timedelta(days=ovulation_day(average_cycle_length))
        return DateWindow(
            start=ovulation - timedelta(days=ph.fertile_days_before_ovulation),
            end=ovulation + timedelta(days=ph.fertile_days_after_ovulation),
        )

    def confidence(self, stats: CycleStats) -> ConfidenceLevel:
        pr = self._config.prediction
        if (
            stats.regularity == CycleRegularity.regular
            and stats.total_tracked_cycles >= pr.high_confidence_min_cycles
        ):
            return ConfidenceLevel.high
        if stats.total_tracked_cycles >= pr.medium_confidence_min_cycles:
            return ConfidenceLevel.medium
        return ConfidenceLevel.low

    def predict(self, stats: CycleStats, latest_start: date | None) -> CyclePredictions:
        """Predict the next period from the most recent closed cycle.

        Args:
            stats:        Raw cycle statistics.
            latest_start: Start date of the most recent closed cycle.

        Returns:
            CyclePredictions; every field stays empty/unknown unless at least
            one cycle is tracked and the average cycle length is positive.
        """
        avg = stats.average_cycle_length
        if latest_start is None or stats.total_tracked_cycles < 1 or avg <= 0:
            logger.info(
                "Skipping prediction: %d tracked cycles, average length %.1f",
                stats.total_tracked_cycles, avg,
            )
            return CyclePredictions()

        return CyclePredictions(
            next_period_start=latest_start + timedelta(days=int(round_half_up(avg))),
            confidence_level=self.confidence(stats),
            predicted_ovulation_date=latest_start + timedelta(days=ovulation_day(avg)),
            next_fertile_window=self.fertile_window(latest_start, avg),
        )

    def generate_tips(self, stats: CycleStats, patterns: PatternSummary) -> list[str]:
        """Evaluate every tip rule in order and collect the ones that fire.

        Args:
            stats:    Raw cycle statistics.
            patterns: Aggregated symptom (top N) and mood patterns.

        Returns:
            Tips in rule order, or a single fallback tip if none fired.
        """
        tp = self._config.tips
        tips: list[str] = []

        if (
            stats.regularity == CycleRegularity.irregular
            and stats.cycle_variation > tp.irregular_variation_days
        ):
            tips.append(TIP_HIGH_VARIATION)

        if any(
            s.tag == "cramps" and s.frequency > tp.cramps_frequency_pct
            for s in patterns.symptoms
        ):
            tips.append(TIP_FREQUENT_CRAMPS)

        if any(
            m.tag == "irritable" and m.phase_frequency[Phase.luteal] > tp.irritable_luteal_pct
            for m in patterns.moods
        ):
            tips.append(TIP_PREMENSTRUAL_MOOD)

        avg = stats.average_cycle_length
        if avg < tp.typical_cycle_min_days or avg > tp.typical_cycle_max_days:
            tips.append(TIP_ATYPICAL_LENGTH)

        if stats.total_tracked_cycles < tp.min_tracked_cycles:
            tips.append(TIP_KEEP_TRACKING)

        return tips or [TIP_FALLBACK]


def symptom_management_tips(symptoms: list[SymptomPattern]) -> dict[str, list[str]]:
    """Map each symptom to coping suggestions.

    Mood-like symptoms share the ``mood`` entry; tags outside the known
    vocabulary contribute the ``general`` entry once.

    Args:
        symptoms: Ranked symptom patterns (normally the top five).

    Returns:
        Dict of tip key → suggestions, in order of first appearance.
    """
    tips: dict[str, list[str]] = {}
    for pattern in symptoms:
        key = SYMPTOM_TIP_KEYS.get(pattern.tag.lower(), GENERAL_TIPS_KEY)
        if key not in tips:
            tips[key] = list(SYMPTOM_TIPS[key])
    return tips


def build_current_status(
    latest: CycleRecord,
    analysis: CycleAnalysis,
    today: date,
    config: InsightConfig | None = None,
) -> CurrentCycleStatus:
    """Describe ``today`` relative to the most recent cycle, open or closed.

    Falls back to the configured default cycle and period lengths when the
    analysis has no average yet.  A cycle starting after ``today`` keeps the
    absolute day distance and is reported in ``warnings``.

    Args:
        latest:   Most recent cycle record by start date.
        analysis: Rounded cycle analysis over the user's closed cycles.
        today:    Reference date.
        config:   Insight config (defaults to the global singleton).

    Returns:
        CurrentCycleStatus for the reference date.
    """
    cfg = config or get_insight_config()
    cs = cfg.current_status
    ph = cfg.phases

    average_length = int(analysis.average_cycle_length) or cs.default_cycle_length
    period_length = int(analysis.average_period_length) or cs.default_period_length
    start = latest.start_date

    warnings: list[str] = []
    offset = (today - start).days
    if offset < 0:
        logger.warning(
            "Latest cycle starts %s, %d day(s) after reference date %s",
            start, -offset, today,
        )
        warnings.append(
            f"Latest cycle start {start.isoformat()} is in the future; "
            "day of cycle counts days until it begins"
        )
    day_of_cycle = abs(offset) + 1

    info = get_phase_info(day_of_cycle, average_length, ph.menstrual_days)
    ov_day = ovulation_day(average_length)
    is_fertile = (
        ov_day - ph.fertile_days_before_ovulation
        <= day_of_cycle
        <= ov_day + ph.fertile_days_after_ovulation
    )

    predictor = CyclePredictor(cfg)
    return CurrentCycleStatus(
        is_active=True,
        day_of_cycle=day_of_cycle,
        current_phase=info.phase,
        phase_name=info.name,
        phase_description=info.description,
        phase_tips=info.tips,
        is_fertile=is_fertile,
        cycle_start_date=start,
        next_period_date=start + timedelta(days=average_length),
        period_window=DateWindow(start=start, end=start + timedelta(days=period_length - 1)),
        fertile_window=predictor.fertile_window(start, average_length),
        warnings=warnings,
    )
