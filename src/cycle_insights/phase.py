"""Cycle phase classification.

Maps a day of cycle onto one of four phases using the user's average
cycle length.  The first ``menstrual_days`` are always menstrual; a
three-day ovulatory window sits around ``floor(average / 2) - 2``.

The classifier is total: any integer day and any average (including 0,
which puts the ovulation day below zero) yields exactly one phase.
"""

from __future__ import annotations

import math

from src.cycle_insights.reference import PHASE_TEXT
from src.models.cycles import Phase, PhaseInfo

MENSTRUAL_DAYS = 5


def ovulation_day(average_cycle_length: float) -> int:
    """Estimated ovulation day of cycle (12 for a 28-day average)."""
    return math.floor(average_cycle_length / 2) - 2


def classify_phase(
    day_of_cycle: int,
    average_cycle_length: float,
    menstrual_days: int = MENSTRUAL_DAYS,
) -> Phase:
    """Return the phase for a 1-based day of cycle.

    Args:
        day_of_cycle:         Day within the cycle (day 1 = period start).
        average_cycle_length: Personal average cycle length in days.
        menstrual_days:       Length of the fixed menstrual phase.

    Returns:
        The single Phase that day falls in.
    """
    ov_day = ovulation_day(average_cycle_length)

    if day_of_cycle <= menstrual_days:
        return Phase.menstrual
    if day_of_cycle < ov_day - 1:
        return Phase.follicular
    if day_of_cycle <= ov_day + 1:
        return Phase.ovulatory
    return Phase.luteal


def get_phase_info(
    day_of_cycle: int,
    average_cycle_length: float,
    menstrual_days: int = MENSTRUAL_DAYS,
) -> PhaseInfo:
    """Classify a day and attach the phase's display name, description and tips."""
    phase = classify_phase(day_of_cycle, average_cycle_length, menstrual_days)
    text = PHASE_TEXT[phase]
    return PhaseInfo(
        phase=phase,
        name=text.name,
        description=text.description,
        tips=list(text.tips),
    )
