"""User profile models for calorie targets.

A UserProfile holds the attributes that rarely change (gender, height, age,
equation). Weight and activity level change day to day and live in
per-date DailyProfile records. Asking for a date with no record copies the
most recent earlier record forward.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Optional

from dietassist.errors import MalformedProfileError
from dietassist.profiles.body_calc import (
    ActivityLevel,
    CalorieCalculationMethod,
    Gender,
    calculate_bmr,
    calculate_tdee,
)

MAX_AGE = 1000


@dataclass
class DailyProfile:
    """Weight and activity level for a single day."""

    weight_kg: float = 70.0
    activity_level: ActivityLevel = ActivityLevel.MODERATELY_ACTIVE

    def __post_init__(self) -> None:
        if self.weight_kg <= 0:
            raise ValueError(f"weight must be positive, got {self.weight_kg}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "weight": self.weight_kg,
            "activity_level": self.activity_level.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DailyProfile":
        return cls(
            weight_kg=float(data["weight"]),
            activity_level=ActivityLevel(data["activity_level"]),
        )


@dataclass
class UserProfile:
    """Static user attributes plus per-date daily profiles."""

    user_id: str = "user"
    gender: Gender = Gender.OTHER
    height_cm: float = 170.0
    age: int = 30
    calculation_method: CalorieCalculationMethod = CalorieCalculationMethod.MIFFLIN_ST_JEOR
    daily_profiles: dict[str, DailyProfile] = field(default_factory=dict)
    # Used when no earlier daily profile exists; not persisted.
    default_daily: DailyProfile = field(default_factory=DailyProfile, repr=False)

    def __post_init__(self) -> None:
        if not 0 <= self.age <= MAX_AGE:
            raise ValueError(f"age must be between 0 and {MAX_AGE}, got {self.age}")
        if self.height_cm <= 0:
            raise ValueError(f"height must be positive, got {self.height_cm}")

    def has_profile_for_date(self, date: str) -> bool:
        return date in self.daily_profiles

    def set_daily_profile(self, date: str, profile: DailyProfile) -> None:
        self.daily_profiles[date] = profile

    def daily_profile(self, date: str) -> DailyProfile:
        """Return the profile for date, creating it from the latest earlier one."""
        if date not in self.daily_profiles:
            self.daily_profiles[date] = replace(self._most_recent_before(date))
        return self.daily_profiles[date]

    def _most_recent_before(self, date: str) -> DailyProfile:
        # ISO dates sort lexicographically.
        earlier = [d for d in self.daily_profiles if d <= date]
        if not earlier:
            return self.default_daily
        return self.daily_profiles[max(earlier)]

    def bmr(self, date: str) -> float:
        daily = self.daily_profile(date)
        return calculate_bmr(
            self.calculation_method, self.gender, daily.weight_kg, self.height_cm, self.age
        )

    def calorie_target(self, date: str) -> float:
        """Daily calorie target (BMR x activity multiplier) for date."""
        return calculate_tdee(self.bmr(date), self.daily_profile(date).activity_level)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted profile format."""
        return {
            "user_id": self.user_id,
            "gender": self.gender.value,
            "height": self.height_cm,
            "age": self.age,
            "calculation_method": self.calculation_method.value,
            "daily_profiles": {
                date: self.daily_profiles[date].to_dict()
                for date in sorted(self.daily_profiles)
            },
        }

    @classmethod
    def from_dict(
        cls,
        data: Any,
        default_daily: Optional[DailyProfile] = None,
    ) -> "UserProfile":
        """Build a profile from persisted data.

        Raises:
            MalformedProfileError: If required fields are missing or invalid
        """
        if not isinstance(data, dict):
            raise MalformedProfileError("User profile must be an object")
        try:
            daily_data = data.get("daily_profiles") or {}
            daily_profiles = {
                date: DailyProfile.from_dict(entry) for date, entry in daily_data.items()
            }
            return cls(
                user_id=str(data.get("user_id", "user")),
                gender=Gender(data["gender"]),
                height_cm=float(data["height"]),
                age=int(data["age"]),
                calculation_method=CalorieCalculationMethod(data["calculation_method"]),
                daily_profiles=daily_profiles,
                default_daily=default_daily or DailyProfile(),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise MalformedProfileError(f"Invalid user profile: {exc}") from exc
