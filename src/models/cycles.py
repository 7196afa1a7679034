"""Pydantic models for menstrual cycle records, daily logs, and the
insight engine's output structures."""

from __future__ import annotations

import uuid
from datetime import date
from enum import Enum

from pydantic import Field, field_validator

from src.models.base import InsightBase


# ---------- Enums ----------

class Phase(str, Enum):
    menstrual = "menstrual"
    follicular = "follicular"
    ovulatory = "ovulatory"
    luteal = "luteal"


class CycleRegularity(str, Enum):
    regular = "regular"
    irregular = "irregular"
    unknown = "unknown"


class ConfidenceLevel(str, Enum):
    high = "high"
    medium = "medium"
    low = "low"
    unknown = "unknown"


# ---------- Input records ----------

class CycleRecord(InsightBase):
    """One menstrual period occurrence.

    ``end_date`` is None while the period is ongoing (an open cycle).  A
    reversed record (end before start) is kept as entered; the length
    filters drop it from every sample.
    """

    start_date: date
    end_date: date | None = None
    cycle_id: uuid.UUID | None = None

    @property
    def is_closed(self) -> bool:
        return self.end_date is not None

    def contains(self, day: date) -> bool:
        """True if ``day`` falls inside this cycle (open cycles never end)."""
        if day < self.start_date:
            return False
        return self.end_date is None or day <= self.end_date


class DailyLog(InsightBase):
    """One day's symptom and mood entry. ``log_date`` is the natural key."""

    log_date: date
    symptoms: tuple[str, ...] = ()
    mood: str | None = None

    @field_validator("symptoms", mode="before")
    @classmethod
    def _dedupe_symptoms(cls, value):
        if value is None:
            return ()
        if isinstance(value, str):
            value = (value,)
        seen: dict[str, None] = {}
        for tag in value:
            tag = str(tag).strip()
            if tag:
                seen.setdefault(tag, None)
        return tuple(seen)

    @field_validator("mood")
    @classmethod
    def _blank_mood_is_none(cls, value: str | None) -> str | None:
        return value or None


# ---------- Outputs ----------

class CycleAnalysis(InsightBase):
    average_cycle_length: float = 0.0
    average_period_length: float = 0.0
    cycle_regularity: CycleRegularity = CycleRegularity.unknown
    cycle_variation: float = Field(default=0.0, ge=0)
    total_tracked_cycles: int = 0
    shortest_cycle: float = 0.0
    longest_cycle: float = 0.0


class TagPattern(InsightBase):
    """Frequency of a symptom or mood tag, overall and per phase.

    ``frequency`` is the percentage of all logs carrying the tag;
    ``phase_frequency`` splits the tag's own occurrences across phases.
    """

    tag: str
    frequency: int = Field(ge=0, le=100)
    phase_frequency: dict[Phase, int]


class SymptomPattern(TagPattern):
    pass


class MoodPattern(TagPattern):
    pass


class DateWindow(InsightBase):
    start: date | None = None
    end: date | None = None


class CyclePredictions(InsightBase):
    next_period_start: date | None = None
    confidence_level: ConfidenceLevel = ConfidenceLevel.unknown
    predicted_ovulation_date: date | None = None
    next_fertile_window: DateWindow = Field(default_factory=DateWindow)


class PersonalInsights(InsightBase):
    cycle_analysis: CycleAnalysis
    common_symptoms: list[SymptomPattern] = Field(default_factory=list)
    mood_patterns: list[MoodPattern] = Field(default_factory=list)
    predictions: CyclePredictions = Field(default_factory=CyclePredictions)
    personalized_tips: list[str] = Field(default_factory=list)


class PhaseInfo(InsightBase):
    phase: Phase
    name: str
    description: str
    tips: list[str]


class CurrentCycleStatus(InsightBase):
    is_active: bool = True
    day_of_cycle: int
    current_phase: Phase
    phase_name: str
    phase_description: str
    phase_tips: list[str]
    is_fertile: bool
    cycle_start_date: date
    next_period_date: date
    period_window: DateWindow
    fertile_window: DateWindow
    warnings: list[str] = Field(default_factory=list)
