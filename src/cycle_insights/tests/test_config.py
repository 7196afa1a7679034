"""Tests for insight_config.yaml loading and validation."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from src.cycle_insights.config_loader import (
    ConfigValidationError,
    InsightConfig,
    _validate_and_build,
    get_insight_config,
    load_insight_config,
    reload_insight_config,
)


class TestConfigLoading:
    """Tests for loading the bundled insight_config.yaml."""

    def test_load_default_config(self, insight_config: InsightConfig) -> None:
        assert insight_config.version == "1.0"

    def test_cycle_length_filters(self, insight_config: InsightConfig) -> None:
        cl = insight_config.cycle_length
        assert cl.max_cycle_days == 60
        assert cl.max_period_days == 15
        assert cl.min_cycles_for_regularity == 3
        assert cl.regularity_threshold_days == 3.0

    def test_phase_settings(self, insight_config: InsightConfig) -> None:
        ph = insight_config.phases
        assert ph.menstrual_days == 5
        assert ph.fertile_days_before_ovulation == 5
        assert ph.fertile_days_after_ovulation == 1

    def test_tip_thresholds(self, insight_config: InsightConfig) -> None:
        tp = insight_config.tips
        assert tp.cramps_frequency_pct == 50
        assert tp.irritable_luteal_pct == 40
        assert (tp.typical_cycle_min_days, tp.typical_cycle_max_days) == (21, 35)

    def test_status_defaults(self, insight_config: InsightConfig) -> None:
        assert insight_config.current_status.default_cycle_length == 28
        assert insight_config.current_status.default_period_length == 5

    def test_top_symptoms(self, insight_config: InsightConfig) -> None:
        assert insight_config.patterns.top_symptoms == 5

    def test_singleton_is_cached(self) -> None:
        assert get_insight_config() is get_insight_config()


class TestConfigValidation:
    """Tests for config validation logic."""

    def test_empty_config_uses_defaults(self) -> None:
        config = _validate_and_build({})
        assert config.cycle_length.max_cycle_days == 60
        assert config.prediction.high_confidence_min_cycles == 3

    def test_non_numeric_value_raises(self) -> None:
        with pytest.raises(ConfigValidationError, match="max_cycle_days"):
            _validate_and_build({"cycle_length": {"max_cycle_days": "lots"}})

    def test_negative_value_raises(self) -> None:
        with pytest.raises(ConfigValidationError, match="regularity_threshold_days"):
            _validate_and_build({"cycle_length": {"regularity_threshold_days": -1}})

    def test_section_must_be_mapping(self) -> None:
        with pytest.raises(ConfigValidationError, match="'tips' must be a mapping"):
            _validate_and_build({"tips": [1, 2]})

    def test_inverted_typical_range_raises(self) -> None:
        with pytest.raises(ConfigValidationError, match="typical_cycle_min_days"):
            _validate_and_build(
                {"tips": {"typical_cycle_min_days": 40, "typical_cycle_max_days": 30}}
            )

    def test_fractional_integer_raises(self) -> None:
        with pytest.raises(ConfigValidationError, match="menstrual_days must be a whole number"):
            _validate_and_build({"phases": {"menstrual_days": 5.9}})

    def test_whole_float_accepted_for_integer(self) -> None:
        config = _validate_and_build({"phases": {"menstrual_days": 6.0}})
        assert config.phases.menstrual_days == 6

    def test_all_errors_reported_together(self) -> None:
        with pytest.raises(ConfigValidationError, match="2 validation error"):
            _validate_and_build(
                {
                    "cycle_length": {"max_cycle_days": "x"},
                    "patterns": {"top_symptoms": 0},
                }
            )


class TestConfigFiles:
    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_insight_config(tmp_path / "missing.yaml")

    def test_malformed_yaml_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("cycle_length: [unclosed\n")
        with pytest.raises(ConfigValidationError, match="YAML parse error"):
            load_insight_config(path)

    def test_reload_replaces_singleton(self, tmp_path: Path) -> None:
        path = tmp_path / "custom.yaml"
        path.write_text(
            textwrap.dedent(
                """
                version: "2.0"
                patterns:
                  top_symptoms: 3
                """
            )
        )
        try:
            config = reload_insight_config(path)
            assert config.version == "2.0"
            assert get_insight_config().patterns.top_symptoms == 3
        finally:
            reload_insight_config()
        assert get_insight_config().version == "1.0"
