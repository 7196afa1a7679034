"""Load, validate, and hot-reload the cycle insight configuration.

The config lives in ``insight_config.yaml`` alongside this module.  At startup
it is loaded once and cached.  Call ``reload_insight_config()`` to re-read from
disk after an admin update without a restart.

Usage::

    from src.cycle_insights.config_loader import get_insight_config

    config = get_insight_config()
    config.cycle_length.max_cycle_days      # 60
    config.phases.menstrual_days            # 5
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger("cycle_insights.config")

# Path to the YAML file sitting next to this module
_CONFIG_PATH = Path(__file__).parent / "insight_config.yaml"


# ---------------------------------------------------------------------------
# Typed config sections
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CycleLengthConfig:
    """Sample filtering and regularity settings."""

    max_cycle_days: int = 60
    max_period_days: int = 15
    min_cycles_for_regularity: int = 3
    regularity_threshold_days: float = 3.0


@dataclass(frozen=True)
class PhaseConfig:
    """Phase boundaries and fertile window offsets around ovulation."""

    menstrual_days: int = 5
    fertile_days_before_ovulation: int = 5
    fertile_days_after_ovulation: int = 1


@dataclass(frozen=True)
class PatternConfig:
    top_symptoms: int = 5


@dataclass(frozen=True)
class PredictionConfig:
    """Minimum tracked cycles for each confidence level."""

    high_confidence_min_cycles: int = 3
    medium_confidence_min_cycles: int = 2


@dataclass(frozen=True)
class TipConfig:
    """Thresholds for the personalized tip rules."""

    irregular_variation_days: float = 5.0
    cramps_frequency_pct: int = 50
    irritable_luteal_pct: int = 40
    typical_cycle_min_days: int = 21
    typical_cycle_max_days: int = 35
    min_tracked_cycles: int = 3


@dataclass(frozen=True)
class StatusConfig:
    """Fallbacks for the current-cycle status when no average exists yet."""

    default_cycle_length: int = 28
    default_period_length: int = 5


@dataclass
class InsightConfig:
    """Complete, validated insight engine configuration.

    This is the single in-memory representation of insight_config.yaml.
    Every calculator, aggregator and predictor reads from this object.

    Attributes:
        version:        Config schema version string.
        cycle_length:   Cycle/period sample filtering and regularity.
        phases:         Phase classifier and fertile window settings.
        patterns:       Pattern aggregator settings.
        prediction:     Confidence level thresholds.
        tips:           Personalized tip rule thresholds.
        current_status: Defaults for the current-cycle status.
    """

    version: str = "1.0"
    cycle_length: CycleLengthConfig = field(default_factory=CycleLengthConfig)
    phases: PhaseConfig = field(default_factory=PhaseConfig)
    patterns: PatternConfig = field(default_factory=PatternConfig)
    prediction: PredictionConfig = field(default_factory=PredictionConfig)
    tips: TipConfig = field(default_factory=TipConfig)
    current_status: StatusConfig = field(default_factory=StatusConfig)


# ---------------------------------------------------------------------------
# Loader / validation
# ---------------------------------------------------------------------------


class ConfigValidationError(ValueError):
    """Raised when insight_config.yaml fails validation."""


def _load_yaml(path: Path) -> dict:
    """Read and parse a YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed dict.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigValidationError: If the YAML is malformed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Insight config not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        try:
            return yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigValidationError(f"YAML parse error in {path}: {exc}") from exc


def _validate_and_build(raw: dict) -> InsightConfig:
    """Validate the raw YAML dict and construct an InsightConfig.

    Every section is optional; missing keys take the dataclass defaults.
    All problems are collected and reported together.

    Args:
        raw: Parsed YAML dict.

    Returns:
        Validated InsightConfig instance.

    Raises:
        ConfigValidationError: If any value has the wrong type or range.
    """
    errors: list[str] = []

    def _section(name: str) -> dict:
        value = raw.get(name) or {}
        if not isinstance(value, dict):
            errors.append(f"'{name}' must be a mapping, got {type(value).__name__}")
            return {}
        return value

    def _number(section: str, d: dict, key: str, default: Any, cast: type, minimum: float) -> Any:
        value = d.get(key, default)
        if cast is int and isinstance(value, float) and not value.is_integer():
            errors.append(f"{section}.{key} must be a whole number, got {value!r}")
            return default
        try:
            num = cast(value)
        except (TypeError, ValueError):
            errors.append(f"{section}.{key} must be a number, got {value!r}")
            return default
        if num < minimum:
            errors.append(f"{section}.{key} = {num} must be >= {minimum}")
        return num

    version = str(raw.get("version", "1.0"))

    # ── Cycle length ──
    cl_raw = _section("cycle_length")
    cycle_length = CycleLengthConfig(
        max_cycle_days=_number("cycle_length", cl_raw, "max_cycle_days", 60, int, 1),
        max_period_days=_number("cycle_length", cl_raw, "max_period_days", 15, int, 1),
        min_cycles_for_regularity=_number(
            "cycle_length", cl_raw, "min_cycles_for_regularity", 3, int, 1
        ),
        regularity_threshold_days=_number(
            "cycle_length", cl_raw, "regularity_threshold_days", 3.0, float, 0
        ),
    )

    # ── Phases ──
    ph_raw = _section("phases")
    phases = PhaseConfig(
        menstrual_days=_number("phases", ph_raw, "menstrual_days", 5, int, 1),
        fertile_days_before_ovulation=_number(
            "phases", ph_raw, "fertile_days_before_ovulation", 5, int, 0
        ),
        fertile_days_after_ovulation=_number(
            "phases", ph_raw, "fertile_days_after_ovulation", 1, int, 0
        ),
    )

    # ── Patterns ──
    pt_raw = _section("patterns")
    patterns = PatternConfig(
        top_symptoms=_number("patterns", pt_raw, "top_symptoms", 5, int, 1),
    )

    # ── Prediction ──
    pr_raw = _section("prediction")
    prediction = PredictionConfig(
        high_confidence_min_cycles=_number(
            "prediction", pr_raw, "high_confidence_min_cycles", 3, int, 1
        ),
        medium_confidence_min_cycles=_number(
            "prediction", pr_raw, "medium_confidence_min_cycles", 2, int, 1
        ),
    )
    if prediction.medium_confidence_min_cycles > prediction.high_confidence_min_cycles:
        logger.warning(
            "prediction.medium_confidence_min_cycles (%d) exceeds "
            "high_confidence_min_cycles (%d)",
            prediction.medium_confidence_min_cycles,
            prediction.high_confidence_min_cycles,
        )

    # ── Tips ──
    tp_raw = _section("tips")
    tips = TipConfig(
        irregular_variation_days=_number("tips", tp_raw, "irregular_variation_days", 5.0, float, 0),
        cramps_frequency_pct=_number("tips", tp_raw, "cramps_frequency_pct", 50, int, 0),
        irritable_luteal_pct=_number("tips", tp_raw, "irritable_luteal_pct", 40, int, 0),
        typical_cycle_min_days=_number("tips", tp_raw, "typical_cycle_min_days", 21, int, 1),
        typical_cycle_max_days=_number("tips", tp_raw, "typical_cycle_max_days", 35, int, 1),
        min_tracked_cycles=_number("tips", tp_raw, "min_tracked_cycles", 3, int, 1),
    )
    if tips.typical_cycle_min_days > tips.typical_cycle_max_days:
        errors.append(
            f"tips.typical_cycle_min_days ({tips.typical_cycle_min_days}) must not exceed "
            f"tips.typical_cycle_max_days ({tips.typical_cycle_max_days})"
        )

    # ── Current status ──
    cs_raw = _section("current_status")
    current_status = StatusConfig(
        default_cycle_length=_number(
            "current_status", cs_raw, "default_cycle_length", 28, int, 1
        ),
        default_period_length=_number(
            "current_status", cs_raw, "default_period_length", 5, int, 1
        ),
    )

    if errors:
        raise ConfigValidationError(
            f"insight_config.yaml has {len(errors)} validation error(s):\n"
            + "\n".join(f"  • {e}" for e in errors)
        )

    return InsightConfig(
        version=version,
        cycle_length=cycle_length,
        phases=phases,
        patterns=patterns,
        prediction=prediction,
        tips=tips,
        current_status=current_status,
    )


def load_insight_config(path: Path | None = None) -> InsightConfig:
    """Load and validate the insight config from disk.

    Args:
        path: Override path to YAML. Uses the bundled insight_config.yaml by default.

    Returns:
        Validated InsightConfig instance.
    """
    target = path or _CONFIG_PATH
    raw = _load_yaml(target)
    if not isinstance(raw, dict):
        raise ConfigValidationError(f"{target} must contain a mapping at the top level")
    config = _validate_and_build(raw)
    logger.info("Loaded insight config v%s from %s", config.version, target)
    return config


# ---------------------------------------------------------------------------
# Global singleton with hot-reload support
# ---------------------------------------------------------------------------

_config: InsightConfig | None = None
_config_lock = threading.Lock()


def get_insight_config() -> InsightConfig:
    """Return the global InsightConfig singleton, loading it on first call.

    Thread-safe.  Use ``reload_insight_config()`` to refresh after YAML changes.
    """
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:  # double-checked locking
                _config = load_insight_config()
    return _config


def reload_insight_config(path: Path | None = None) -> InsightConfig:
    """Reload the insight config from disk and replace the global singleton.

    If validation fails, the old config is retained and the error is re-raised.

    Args:
        path: Override path to YAML. Defaults to bundled insight_config.yaml.

    Returns:
        The newly loaded InsightConfig.

    Raises:
        ConfigValidationError: If the new config is invalid.
        FileNotFoundError:     If the config file is missing.
    """
    global _config
    new_config = load_insight_config(path)  # validate before acquiring lock
    with _config_lock:
        old_version = _config.version if _config else "none"
        _config = new_config
    logger.info(
        "Reloaded insight config: %s → %s",
        old_version,
        new_config.version,
    )
    return new_config
