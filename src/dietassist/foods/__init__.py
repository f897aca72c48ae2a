"""Food model and catalog."""

from __future__ import annotations

from dietassist.foods.catalog import FoodCatalog, ResolutionWarning, WarningKind
from dietassist.foods.models import BasicFood, CompositeFood, Food, FoodComponent

__all__ = [
    "BasicFood",
    "CompositeFood",
    "Food",
    "FoodCatalog",
    "FoodComponent",
    "ResolutionWarning",
    "WarningKind",
]
