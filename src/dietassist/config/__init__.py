"""Configuration management."""

from __future__ import annotations

from dietassist.config.settings import Settings, get_settings, reload_settings

__all__ = ["Settings", "get_settings", "reload_settings"]
