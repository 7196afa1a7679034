"""Tests for symptom/mood aggregation by cycle phase."""

from __future__ import annotations

from datetime import date, timedelta

from src.cycle_insights.config_loader import InsightConfig
from src.cycle_insights.patterns import PatternAggregator, find_cycle
from src.models.cycles import CycleRecord, DailyLog, Phase


def log(d: date, symptoms: list[str] | None = None, mood: str | None = None) -> DailyLog:
    return DailyLog(log_date=d, symptoms=symptoms or [], mood=mood)


class TestFindCycle:
    def test_open_cycle_extends_forever(self) -> None:
        cycles = [CycleRecord(start_date=date(2024, 1, 1))]
        assert find_cycle(date(2024, 6, 1), cycles) is cycles[0]

    def test_gap_between_cycles_matches_nothing(
        self, regular_cycles: list[CycleRecord]
    ) -> None:
        assert find_cycle(date(2024, 1, 15), regular_cycles) is None

    def test_end_date_is_inclusive(self, regular_cycles: list[CycleRecord]) -> None:
        assert find_cycle(date(2024, 1, 5), regular_cycles) is regular_cycles[0]


class TestPatternAggregator:
    def test_day_three_log_is_menstrual(
        self, insight_config: InsightConfig, regular_cycles: list[CycleRecord]
    ) -> None:
        logs = [log(date(2024, 1, 3), ["cramps"], "happy")]
        summary = PatternAggregator(insight_config).aggregate(logs, regular_cycles, 28.0)

        cramps = summary.symptoms[0]
        assert cramps.tag == "cramps"
        assert cramps.frequency == 100
        assert cramps.phase_frequency[Phase.menstrual] == 100

        happy = summary.moods[0]
        assert happy.tag == "happy"
        assert happy.phase_frequency[Phase.menstrual] == 100
        assert happy.phase_frequency[Phase.luteal] == 0

    def test_frequency_uses_all_logs_as_denominator(
        self, insight_config: InsightConfig, regular_cycles: list[CycleRecord]
    ) -> None:
        logs = [
            log(date(2024, 1, 2), ["cramps"]),
            log(date(2024, 1, 3), ["cramps"]),
            log(date(2024, 1, 15)),  # between cycles, not assigned
            log(date(2024, 1, 20)),
        ]
        summary = PatternAggregator(insight_config).aggregate(logs, regular_cycles, 28.0)
        assert summary.total_logs == 4
        assert summary.assigned_logs == 2
        assert summary.symptoms[0].frequency == 50

    def test_unassigned_logs_are_not_tallied(
        self, insight_config: InsightConfig, regular_cycles: list[CycleRecord]
    ) -> None:
        logs = [log(date(2024, 1, 15), ["headache"], "sad")]
        summary = PatternAggregator(insight_config).aggregate(logs, regular_cycles, 28.0)
        assert summary.symptoms == []
        assert summary.moods == []

    def test_phase_split_normalized_by_tag_count(
        self, insight_config: InsightConfig
    ) -> None:
        cycles = [CycleRecord(start_date=date(2024, 1, 1))]
        start = cycles[0].start_date
        logs = [
            log(start, mood="irritable"),                        # day 1 menstrual
            log(start + timedelta(days=19), mood="irritable"),   # day 20 luteal
            log(start + timedelta(days=20), mood="irritable"),   # day 21 luteal
            log(start + timedelta(days=21), mood="calm"),
        ]
        summary = PatternAggregator(insight_config).aggregate(logs, cycles, 28.0)
        irritable = next(m for m in summary.moods if m.tag == "irritable")
        assert irritable.frequency == 75
        assert irritable.phase_frequency[Phase.luteal] == 67
        assert irritable.phase_frequency[Phase.menstrual] == 33
        assert irritable.phase_frequency[Phase.follicular] == 0

    def test_top_five_symptoms_sorted(self, insight_config: InsightConfig) -> None:
        cycles = [CycleRecord(start_date=date(2024, 1, 1))]
        tags = ["cramps", "bloating", "headache", "fatigue", "acne", "backache", "nausea"]
        logs = [
            # tag i appears on the first (7 - i) days
            log(date(2024, 1, 1) + timedelta(days=d), [t for i, t in enumerate(tags) if d < 7 - i])
            for d in range(7)
        ]
        summary = PatternAggregator(insight_config).aggregate(logs, cycles, 28.0)
        assert [s.tag for s in summary.symptoms] == tags[:5]
        frequencies = [s.frequency for s in summary.symptoms]
        assert frequencies == sorted(frequencies, reverse=True)

    def test_moods_are_not_truncated(self, insight_config: InsightConfig) -> None:
        cycles = [CycleRecord(start_date=date(2024, 1, 1))]
        moods = ["happy", "calm", "sad", "anxious", "irritable", "emotional", "tired"]
        logs = [log(date(2024, 1, 1) + timedelta(days=i), mood=m) for i, m in enumerate(moods)]
        summary = PatternAggregator(insight_config).aggregate(logs, cycles, 28.0)
        assert len(summary.moods) == 7

    def test_ties_keep_discovery_order(self, insight_config: InsightConfig) -> None:
        cycles = [CycleRecord(start_date=date(2024, 1, 1))]
        logs = [log(date(2024, 1, 1), ["headache", "cramps"])]
        summary = PatternAggregator(insight_config).aggregate(logs, cycles, 28.0)
        assert [s.tag for s in summary.symptoms] == ["headache", "cramps"]

    def test_frequencies_within_bounds(
        self, insight_config: InsightConfig, cramp_logs: list[DailyLog],
        regular_cycles: list[CycleRecord],
    ) -> None:
        summary = PatternAggregator(insight_config).aggregate(cramp_logs, regular_cycles, 28.0)
        for pattern in [*summary.symptoms, *summary.moods]:
            assert 0 <= pattern.frequency <= 100
            assert all(0 <= v <= 100 for v in pattern.phase_frequency.values())
            assert set(pattern.phase_frequency) == set(Phase)

    def test_no_logs(self, insight_config: InsightConfig, regular_cycles: list[CycleRecord]) -> None:
        summary = PatternAggregator(insight_config).aggregate([], regular_cycles, 28.0)
        assert summary.symptoms == []
        assert summary.total_logs == 0

    def test_zero_average_classifies_without_error(
        self, insight_config: InsightConfig
    ) -> None:
        cycles = [CycleRecord(start_date=date(2024, 1, 1), end_date=date(2024, 1, 10))]
        logs = [log(date(2024, 1, 8), ["cramps"])]
        summary = PatternAggregator(insight_config).aggregate(logs, cycles, 0.0)
        assert summary.symptoms[0].phase_frequency[Phase.luteal] == 100
