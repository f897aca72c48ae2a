"""Tests for BMR/TDEE formulas, user profiles and calorie summaries."""

from __future__ import annotations

import pytest

from dietassist.errors import MalformedProfileError
from dietassist.profiles.body_calc import (
    ACTIVITY_MULTIPLIERS,
    ActivityLevel,
    CalorieCalculationMethod,
    Gender,
    calculate_bmr,
    calculate_bmr_harris_benedict,
    calculate_bmr_mifflin_st_jeor,
    calculate_tdee,
)
from dietassist.profiles.manager import CalorieSummary, ProfileManager
from dietassist.profiles.models import DailyProfile, UserProfile


class TestBodyCalc:
    """Tests for BMR and TDEE equations."""

    def test_mifflin_male(self):
        # 10*80 + 6.25*180 - 5*30 + 5
        assert calculate_bmr_mifflin_st_jeor(Gender.MALE, 80, 180, 30) == pytest.approx(1780)

    def test_mifflin_female_and_other(self):
        expected = 10 * 60 + 6.25 * 165 - 5 * 40 - 161
        assert calculate_bmr_mifflin_st_jeor(Gender.FEMALE, 60, 165, 40) == pytest.approx(expected)
        assert calculate_bmr_mifflin_st_jeor(Gender.OTHER, 60, 165, 40) == pytest.approx(expected)

    def test_harris_benedict_male(self):
        expected = 66.5 + 13.75 * 80 + 5.003 * 180 - 6.75 * 30
        assert calculate_bmr_harris_benedict(Gender.MALE, 80, 180, 30) == pytest.approx(expected)

    def test_harris_benedict_female(self):
        expected = 655.1 + 9.563 * 60 + 1.850 * 165 - 4.676 * 40
        assert calculate_bmr_harris_benedict(Gender.FEMALE, 60, 165, 40) == pytest.approx(expected)

    def test_calculate_bmr_dispatches_on_method(self):
        hb = calculate_bmr(CalorieCalculationMethod.HARRIS_BENEDICT, Gender.MALE, 80, 180, 30)
        msj = calculate_bmr(CalorieCalculationMethod.MIFFLIN_ST_JEOR, Gender.MALE, 80, 180, 30)
        assert hb == pytest.approx(calculate_bmr_harris_benedict(Gender.MALE, 80, 180, 30))
        assert msj == pytest.approx(1780)

    @pytest.mark.parametrize("level", list(ActivityLevel))
    def test_tdee_multipliers(self, level):
        assert calculate_tdee(1000, level) == pytest.approx(1000 * ACTIVITY_MULTIPLIERS[level])


class TestUserProfile:
    """Tests for per-date daily profiles."""

    def test_default_daily_profile(self):
        profile = UserProfile()
        daily = profile.daily_profile("2024-01-10")
        assert daily.weight_kg == 70
        assert daily.activity_level is ActivityLevel.MODERATELY_ACTIVE
        assert profile.has_profile_for_date("2024-01-10")

    def test_copies_most_recent_earlier_profile(self):
        profile = UserProfile()
        profile.set_daily_profile("2024-01-01", DailyProfile(80, ActivityLevel.SEDENTARY))
        profile.set_daily_profile("2024-01-05", DailyProfile(78, ActivityLevel.VERY_ACTIVE))
        profile.set_daily_profile("2024-02-01", DailyProfile(75, ActivityLevel.SEDENTARY))

        daily = profile.daily_profile("2024-01-20")

        assert daily.weight_kg == 78
        assert daily.activity_level is ActivityLevel.VERY_ACTIVE
        assert daily is not profile.daily_profiles["2024-01-05"]

    def test_no_earlier_profile_uses_default(self):
        profile = UserProfile(default_daily=DailyProfile(90))
        profile.set_daily_profile("2024-03-01", DailyProfile(80))
        assert profile.daily_profile("2024-01-01").weight_kg == 90

    def test_calorie_target(self):
        profile = UserProfile(gender=Gender.MALE, height_cm=180, age=30)
        profile.set_daily_profile("2024-01-01", DailyProfile(80, ActivityLevel.SEDENTARY))
        assert profile.calorie_target("2024-01-01") == pytest.approx(1780 * 1.2)

    @pytest.mark.parametrize("kwargs", [{"age": -1}, {"age": 1001}, {"height_cm": 0}])
    def test_validation(self, kwargs):
        with pytest.raises(ValueError):
            UserProfile(**kwargs)

    def test_weight_must_be_positive(self):
        with pytest.raises(ValueError):
            DailyProfile(weight_kg=0)

    def test_round_trip(self):
        profile = UserProfile(
            user_id="sam",
            gender=Gender.FEMALE,
            height_cm=165,
            age=41,
            calculation_method=CalorieCalculationMethod.HARRIS_BENEDICT,
        )
        profile.set_daily_profile("2024-01-01", DailyProfile(62.5, ActivityLevel.LIGHTLY_ACTIVE))

        restored = UserProfile.from_dict(profile.to_dict())

        assert restored.to_dict() == profile.to_dict()
        assert restored.calorie_target("2024-01-01") == pytest.approx(
            profile.calorie_target("2024-01-01")
        )

    @pytest.mark.parametrize(
        "data",
        [
            "not a dict",
            {"gender": "male"},
            {"gender": "robot", "height": 170, "age": 30, "calculation_method": "mifflin_st_jeor"},
            {
                "gender": "male",
                "height": 170,
                "age": 30,
                "calculation_method": "mifflin_st_jeor",
                "daily_profiles": {"2024-01-01": {"weight": 70, "activity_level": "lazy"}},
            },
        ],
    )
    def test_malformed(self, data):
        with pytest.raises(MalformedProfileError):
            UserProfile.from_dict(data)


class TestProfileManager:
    """Tests for ProfileManager."""

    def test_summary_reads_diary_totals(self, diary):
        manager = ProfileManager(diary, UserProfile(gender=Gender.MALE, height_cm=180, age=30))
        manager.update_daily("2024-01-01", weight_kg=80, activity_level=ActivityLevel.SEDENTARY)
        diary.add_entry("2024-01-01", "Lunch Combo", 2)

        result = manager.summary("2024-01-01")

        assert result.target == pytest.approx(2136)
        assert result.consumed == pytest.approx(1120)
        assert result.difference == pytest.approx(1120 - 2136)
        assert result.remaining == pytest.approx(1016)
        assert not result.over_target

    def test_summary_over_target(self):
        result = CalorieSummary("2024-01-01", target=2000, consumed=2500)
        assert result.over_target
        assert result.remaining == 0
        assert result.to_dict()["difference"] == 500

    def test_update_user(self, diary):
        manager = ProfileManager(diary)
        manager.update_user(
            "2024-01-01",
            age=45,
            weight_kg=90,
            method=CalorieCalculationMethod.HARRIS_BENEDICT,
        )
        profile = manager.profile
        assert profile.age == 45
        assert profile.calculation_method is CalorieCalculationMethod.HARRIS_BENEDICT
        assert profile.daily_profile("2024-01-01").weight_kg == 90
        assert profile.daily_profile("2024-01-01").activity_level is ActivityLevel.MODERATELY_ACTIVE

    def test_update_user_rejects_bad_age(self, diary):
        manager = ProfileManager(diary)
        with pytest.raises(ValueError):
            manager.update_user("2024-01-01", age=-3)
        assert manager.profile.age == 30

    def test_failed_load_keeps_profile(self, diary):
        manager = ProfileManager(diary, UserProfile(age=50))
        with pytest.raises(MalformedProfileError):
            manager.load({"gender": "male"})
        assert manager.profile.age == 50
