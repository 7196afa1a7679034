"""Menstrual cycle insight engine.

Derives descriptive statistics, symptom/mood phase patterns, next-cycle
predictions, and personalized tips from a user's cycle records and daily
logs.  Cycle data is sensitive health data; the engine only reads it
through an injected store and never persists anything.

Modules:
    cycle_stats - Cycle and period length statistics, regularity
    phase       - Day-of-cycle → phase classification
    patterns    - Symptom/mood frequency by phase
    predictor   - Next period, fertile window, tips, current status
    store       - Data access interface and implementations
    engine      - Public entry points
"""

from src.cycle_insights.engine import CycleInsightEngine, build_insights
from src.cycle_insights.store import (
    CycleDataStore,
    DataStoreError,
    InMemoryCycleStore,
    PostgresCycleStore,
)

__all__ = [
    "CycleInsightEngine",
    "build_insights",
    "CycleDataStore",
    "DataStoreError",
    "InMemoryCycleStore",
    "PostgresCycleStore",
]
