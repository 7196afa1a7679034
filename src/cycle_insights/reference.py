"""Static reference text for phases, tips, and symptom coping suggestions.

Kept as read-only lookup tables so translations can swap the text without
touching the classification or tip rules.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from src.models.cycles import Phase


@dataclass(frozen=True)
class PhaseText:
    name: str
    description: str
    tips: tuple[str, ...]


PHASE_TEXT: Mapping[Phase, PhaseText] = MappingProxyType({
    Phase.menstrual: PhaseText(
        name="Menstrual Phase",
        description=(
            "Your body is shedding the uterine lining. "
            "Energy levels may be lower during this time."
        ),
        tips=(
            "Focus on rest and self-care",
            "Stay hydrated and warm",
            "Gentle exercise like yoga may help with cramps",
        ),
    ),
    Phase.follicular: PhaseText(
        name="Follicular Phase",
        description=(
            "Estrogen is rising as your body prepares for ovulation. "
            "You may notice increased energy and creativity."
        ),
        tips=(
            "Great time for starting new projects",
            "Your energy is building - ideal for more intense workouts",
            "Socialize and connect with others",
        ),
    ),
    Phase.ovulatory: PhaseText(
        name="Ovulatory Phase",
        description=(
            "Your body is releasing an egg. "
            "You may feel most energetic and confident during this phase."
        ),
        tips=(
            "Peak fertility window if trying to conceive",
            "Ideal time for high-intensity exercise",
            "You may feel more social and outgoing",
        ),
    ),
    Phase.luteal: PhaseText(
        name="Luteal Phase",
        description=(
            "Progesterone rises and then falls if no pregnancy occurs. "
            "You may notice mood changes and physical symptoms."
        ),
        tips=(
            "Focus on completing existing projects",
            "Pay attention to self-care as energy decreases",
            "Consider reducing caffeine and sugar which may worsen PMS",
        ),
    ),
})


# ---------------------------------------------------------------------------
# Personalized tips (one per rule, in evaluation order)
# ---------------------------------------------------------------------------

TIP_HIGH_VARIATION = (
    "Your cycle shows significant variation. Consider tracking additional factors "
    "like stress, sleep, and exercise to identify potential triggers."
)
TIP_FREQUENT_CRAMPS = (
    "Cramps appear regularly in your cycles. Heat therapy and gentle exercise "
    "may help reduce discomfort."
)
TIP_PREMENSTRUAL_MOOD = (
    "Your mood tends to change before your period. "
    "Consider mindfulness practices during this phase."
)
TIP_ATYPICAL_LENGTH = (
    "Your average cycle length is outside the typical range. "
    "Consider discussing this with a healthcare provider."
)
TIP_KEEP_TRACKING = (
    "Continue tracking your cycle for more personalized insights. "
    "More data leads to better predictions!"
)
TIP_FALLBACK = "Keep tracking your cycle consistently for personalized insights!"


# ---------------------------------------------------------------------------
# Symptom management
# ---------------------------------------------------------------------------

MOOD_TIPS_KEY = "mood"
GENERAL_TIPS_KEY = "general"

# Known symptom tag → tip key; mood-like tags share one entry
SYMPTOM_TIP_KEYS: Mapping[str, str] = MappingProxyType({
    "cramps": "cramps",
    "headache": "headache",
    "bloating": "bloating",
    "fatigue": "fatigue",
    "mood swings": MOOD_TIPS_KEY,
    "irritable": MOOD_TIPS_KEY,
    "emotional": MOOD_TIPS_KEY,
})

SYMPTOM_TIPS: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "cramps": (
        "Apply heat to your lower abdomen",
        "Try gentle stretching or yoga",
        "Stay hydrated and consider anti-inflammatory foods",
        "Over-the-counter pain relievers like ibuprofen can help",
    ),
    "headache": (
        "Ensure adequate hydration",
        "Try relaxation techniques like deep breathing",
        "Apply a cold compress to your forehead",
        "Reduce screen time and rest in a dark room",
    ),
    "bloating": (
        "Limit salt intake during this time",
        "Stay hydrated with water",
        "Gentle exercise can help reduce water retention",
        "Consider foods rich in potassium like bananas and leafy greens",
    ),
    "fatigue": (
        "Prioritize getting enough sleep",
        "Consider iron-rich foods if your fatigue coincides with your period",
        "Light exercise can boost energy",
        "Balance activity with rest periods",
    ),
    MOOD_TIPS_KEY: (
        "Practice mindfulness meditation",
        "Regular exercise can help stabilize mood",
        "Prioritize sleep and stress management",
        "Track mood triggers to better prepare for future cycles",
    ),
    GENERAL_TIPS_KEY: (
        "Track your symptoms consistently to identify patterns",
        "Consider discussing persistent symptoms with a healthcare provider",
        "Lifestyle factors like sleep, diet, and stress can impact cycle symptoms",
    ),
})
