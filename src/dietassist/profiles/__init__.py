"""User profiles and calorie targets."""

from __future__ import annotations

from dietassist.profiles.body_calc import (
    ActivityLevel,
    CalorieCalculationMethod,
    Gender,
    calculate_bmr,
    calculate_tdee,
)
from dietassist.profiles.manager import CalorieSummary, ProfileManager
from dietassist.profiles.models import DailyProfile, UserProfile

__all__ = [
    "ActivityLevel",
    "CalorieCalculationMethod",
    "CalorieSummary",
    "DailyProfile",
    "Gender",
    "ProfileManager",
    "UserProfile",
    "calculate_bmr",
    "calculate_tdee",
]
