"""Tests for DietSession wiring and persistence."""

from __future__ import annotations

import json

import pytest

from dietassist.config.settings import Settings
from dietassist.errors import MalformedDiaryError, NothingToUndoError
from dietassist.profiles.body_calc import ActivityLevel, Gender
from dietassist.session import DietSession

DAY = "2024-01-01"


@pytest.fixture
def settings(data_dir):
    settings = Settings()
    settings.storage.data_dir = data_dir
    return settings


class TestDietSession:
    """Tests for loading, editing and saving a session."""

    def test_load_from_files(self, settings):
        session = DietSession.from_settings(settings).load()
        assert len(session.catalog) == 6
        assert session.diary.dates() == []
        assert session.warnings == []

    def test_missing_files_give_empty_session(self, tmp_path):
        settings = Settings()
        settings.storage.data_dir = tmp_path
        session = DietSession.from_settings(settings).load()
        assert len(session.catalog) == 0

    def test_defaults_seed_profile(self, tmp_path):
        settings = Settings()
        settings.storage.data_dir = tmp_path
        settings.profile_defaults.gender = "male"
        settings.profile_defaults.weight_kg = 95
        settings.profile_defaults.activity_level = "sedentary"

        session = DietSession.from_settings(settings).load()
        profile = session.profiles.profile

        assert profile.gender is Gender.MALE
        assert profile.daily_profile(DAY).weight_kg == 95
        assert profile.daily_profile(DAY).activity_level is ActivityLevel.SEDENTARY

    def test_add_undo_and_save(self, settings):
        session = DietSession.from_settings(settings).load()
        session.add_entry(DAY, "Apple", 2)
        session.add_entry(DAY, "Rice", 1)
        assert session.undo().startswith("Add 1 serving(s) of Rice")
        session.save()

        saved = json.loads(settings.storage.food_log_path.read_text())
        assert saved == {DAY: [{"food": "Apple", "servings": 2.0, "calories": 190.0}]}

        reloaded = DietSession.from_settings(settings).load()
        assert reloaded.diary.total_calories(DAY) == 190
        with pytest.raises(NothingToUndoError):
            reloaded.undo()

    def test_delete_and_undo(self, settings):
        session = DietSession.from_settings(settings).load()
        session.add_entry(DAY, "Apple", 1)
        removed = session.delete_entry(DAY, 0)
        assert removed.food_name == "Apple"
        assert DAY not in session.diary
        session.undo()
        assert session.diary.total_calories(DAY) == 95

    def test_save_then_reload_catalog(self, settings):
        session = DietSession.from_settings(settings).load()
        session.catalog.create_composite("Snack Plate", ["snack"], [("Apple", 2), ("Greek Yogurt", 1)])
        session.save()

        reloaded = DietSession.from_settings(settings).load()
        assert reloaded.catalog.get("Snack Plate").calories == pytest.approx(290)
        assert reloaded.profiles.profile.to_dict() == session.profiles.profile.to_dict()

    def test_malformed_log_propagates(self, settings):
        settings.storage.food_log_path.write_text(json.dumps(["wrong"]))
        with pytest.raises(MalformedDiaryError):
            DietSession.from_settings(settings).load()

    def test_unchanged_catalog_is_not_rewritten(self, settings):
        records = [
            {"name": "Apple", "keywords": [], "type": "basic", "calories": 95},
            {"name": "Bad", "keywords": [], "type": "composite",
             "components": [{"name": "Ghost", "servings": 1}, {"name": "Apple", "servings": 1}]},
        ]
        settings.storage.food_database_path.write_text(json.dumps(records))

        session = DietSession.from_settings(settings).load()
        assert [w.component for w in session.warnings] == ["Ghost"]
        session.add_entry(DAY, "Apple", 1)
        session.save()

        assert json.loads(settings.storage.food_database_path.read_text()) == records
        assert settings.storage.food_log_path.exists()
