"""Profile manager: profile edits and target-vs-consumed summaries."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Optional

from dietassist.diary.store import DiaryStore
from dietassist.profiles.body_calc import ActivityLevel, CalorieCalculationMethod
from dietassist.profiles.models import MAX_AGE, DailyProfile, UserProfile

logger = logging.getLogger(__name__)


@dataclass
class CalorieSummary:
    """Calorie target compared with calories consumed on a date."""

    date: str
    target: float
    consumed: float

    @property
    def difference(self) -> float:
        """Consumed minus target; negative means under target."""
        return self.consumed - self.target

    @property
    def remaining(self) -> float:
        """Calories left before reaching the target (never negative)."""
        return max(self.target - self.consumed, 0.0)

    @property
    def over_target(self) -> bool:
        return self.difference > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "target": round(self.target, 1),
            "consumed": round(self.consumed, 1),
            "difference": round(self.difference, 1),
            "remaining": round(self.remaining, 1),
        }


class ProfileManager:
    """Owns the user profile and reads totals from the diary."""

    def __init__(self, diary: DiaryStore, profile: Optional[UserProfile] = None):
        self.diary = diary
        self.profile = profile or UserProfile()

    def load(self, data: Any) -> UserProfile:
        """Replace the profile with persisted data.

        Raises:
            MalformedProfileError: If the data is invalid; the current
                profile is kept.
        """
        self.profile = UserProfile.from_dict(data, default_daily=self.profile.default_daily)
        logger.info("Loaded profile for %s", self.profile.user_id)
        return self.profile

    def save(self) -> dict[str, Any]:
        return self.profile.to_dict()

    def update_user(
        self,
        date: str,
        age: Optional[int] = None,
        weight_kg: Optional[float] = None,
        activity_level: Optional[ActivityLevel] = None,
        method: Optional[CalorieCalculationMethod] = None,
    ) -> UserProfile:
        """Update the static profile and the daily profile for date.

        Values are validated before anything is changed.
        """
        if age is not None and not 0 <= age <= MAX_AGE:
            raise ValueError(f"age must be between 0 and {MAX_AGE}, got {age}")
        daily = self.profile.daily_profile(date)
        updated_daily = replace(
            daily,
            weight_kg=daily.weight_kg if weight_kg is None else weight_kg,
            activity_level=daily.activity_level if activity_level is None else activity_level,
        )

        if age is not None:
            self.profile.age = age
        if method is not None:
            self.profile.calculation_method = method
        self.profile.set_daily_profile(date, updated_daily)
        return self.profile

    def update_daily(
        self,
        date: str,
        weight_kg: Optional[float] = None,
        activity_level: Optional[ActivityLevel] = None,
    ) -> DailyProfile:
        """Update weight and/or activity level for a single date."""
        self.update_user(date, weight_kg=weight_kg, activity_level=activity_level)
        return self.profile.daily_profile(date)

    def summary(self, date: str) -> CalorieSummary:
        """Compare the calorie target for date with what was logged."""
        return CalorieSummary(
            date=date,
            target=self.profile.calorie_target(date),
            consumed=self.diary.total_calories(date),
        )
