"""Application settings and configuration management."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from dietassist.profiles.body_calc import (
    ActivityLevel,
    CalorieCalculationMethod,
    Gender,
)


def _default_config_dir() -> Path:
    """Return the default configuration directory."""
    return Path.home() / ".dietassist"


@dataclass
class StorageConfig:
    """Where the food database, food log and profile are kept."""

    data_dir: Path = field(default_factory=_default_config_dir)
    food_database: str = "food_database.json"
    food_log: str = "food_log.json"
    profile: str = "user_profile.json"

    @property
    def food_database_path(self) -> Path:
        return self.data_dir / self.food_database

    @property
    def food_log_path(self) -> Path:
        return self.data_dir / self.food_log

    @property
    def profile_path(self) -> Path:
        return self.data_dir / self.profile


@dataclass
class ProfileDefaultsConfig:
    """Profile values used before the user has entered their own."""

    gender: str = Gender.OTHER.value
    height_cm: float = 170.0
    age: int = 30
    weight_kg: float = 70.0
    activity_level: str = ActivityLevel.MODERATELY_ACTIVE.value
    calculation_method: str = CalorieCalculationMethod.MIFFLIN_ST_JEOR.value


@dataclass
class DisplayConfig:
    """Output preferences."""

    output_format: str = "table"  # "table" or "json"


@dataclass
class Settings:
    """Main application settings."""

    storage: StorageConfig = field(default_factory=StorageConfig)
    profile_defaults: ProfileDefaultsConfig = field(default_factory=ProfileDefaultsConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from YAML file or return defaults.

        Args:
            config_path: Path to config.yaml. If None, uses ~/.dietassist/config.yaml

        Returns:
            Settings instance
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        settings = cls()

        # Parse storage config
        if "storage" in data:
            storage_data = data["storage"] or {}
            if "data_dir" in storage_data:
                settings.storage.data_dir = Path(storage_data["data_dir"]).expanduser()
            for key in ("food_database", "food_log", "profile"):
                if key in storage_data:
                    setattr(settings.storage, key, str(storage_data[key]))

        # Parse profile defaults
        if "profile_defaults" in data:
            prof_data = data["profile_defaults"] or {}
            defaults = settings.profile_defaults
            if "gender" in prof_data:
                defaults.gender = Gender(prof_data["gender"]).value
            if "height_cm" in prof_data:
                defaults.height_cm = float(prof_data["height_cm"])
            if "age" in prof_data:
                defaults.age = int(prof_data["age"])
            if "weight_kg" in prof_data:
                defaults.weight_kg = float(prof_data["weight_kg"])
            if "activity_level" in prof_data:
                defaults.activity_level = ActivityLevel(prof_data["activity_level"]).value
            if "calculation_method" in prof_data:
                defaults.calculation_method = CalorieCalculationMethod(
                    prof_data["calculation_method"]
                ).value

        # Parse display
        if "display" in data:
            disp_data = data["display"] or {}
            if "output_format" in disp_data:
                settings.display.output_format = disp_data["output_format"]

        return settings

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save current settings to YAML file.

        Args:
            config_path: Path to save config.yaml. If None, uses ~/.dietassist/config.yaml
        """
        if config_path is None:
            config_path = _default_config_dir() / "config.yaml"

        config_path.parent.mkdir(parents=True, exist_ok=True)

        defaults = self.profile_defaults
        data = {
            "storage": {
                "data_dir": str(self.storage.data_dir),
                "food_database": self.storage.food_database,
                "food_log": self.storage.food_log,
                "profile": self.storage.profile,
            },
            "profile_defaults": {
                "gender": defaults.gender,
                "height_cm": defaults.height_cm,
                "age": defaults.age,
                "weight_kg": defaults.weight_kg,
                "activity_level": defaults.activity_level,
                "calculation_method": defaults.calculation_method,
            },
            "display": {
                "output_format": self.display.output_format,
            },
        }

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, loading from disk if needed."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reload_settings(config_path: Optional[Path] = None) -> Settings:
    """Force reload settings from disk."""
    global _settings
    _settings = Settings.load(config_path)
    return _settings
