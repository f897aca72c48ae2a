"""Food data models.

A food is either basic (a fixed calorie value per serving) or composite
(a weighted list of other foods). Composite foods hold references to their
component Food objects rather than copies, so their calorie totals always
reflect the current definitions in the catalog.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterable


BASIC = "basic"
COMPOSITE = "composite"

FOOD_TYPES = (BASIC, COMPOSITE)


def check_calories(value: float) -> float:
    """Return value as a float; calories must be finite and not negative."""
    value = float(value)
    if not math.isfinite(value) or value < 0:
        raise ValueError(f"Calories must be a non-negative number, got {value:g}")
    return value


def check_servings(value: float) -> float:
    """Return value as a float; servings must be finite and positive."""
    value = float(value)
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"Servings must be a positive number, got {value:g}")
    return value


class Food(ABC):
    """Base class for catalog foods."""

    type_tag: str = ""

    def __init__(self, name: str, keywords: Iterable[str]):
        self.name = name
        self.keywords = list(keywords)

    @property
    @abstractmethod
    def calories(self) -> float:
        """Calories for a single serving."""

    def matches_keyword(self, term: str) -> bool:
        """Return True if any keyword contains term, ignoring case."""
        needle = term.lower()
        return any(needle in keyword.lower() for keyword in self.keywords)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted food-definition format."""
        return {
            "name": self.name,
            "keywords": list(self.keywords),
            "type": self.type_tag,
            "calories": self.calories,
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, calories={self.calories:g})"


class BasicFood(Food):
    """A food with a directly specified calorie value."""

    type_tag = BASIC

    def __init__(self, name: str, keywords: Iterable[str], calories: float):
        super().__init__(name, keywords)
        self._calories = check_calories(calories)

    @property
    def calories(self) -> float:
        return self._calories

    @calories.setter
    def calories(self, value: float) -> None:
        self._calories = check_calories(value)


@dataclass
class FoodComponent:
    """A weighted reference to another food inside a composite."""

    food: Food
    servings: float

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.food.name, "servings": self.servings}


class CompositeFood(Food):
    """A food whose calories are derived from its components.

    The total is recomputed on every read. Components are shared with the
    catalog, so editing a basic food changes every composite that includes
    it, directly or transitively.
    """

    type_tag = COMPOSITE

    def __init__(
        self,
        name: str,
        keywords: Iterable[str],
        components: Iterable[FoodComponent] = (),
    ):
        super().__init__(name, keywords)
        self.components = list(components)

    @property
    def calories(self) -> float:
        total = 0.0
        pending = [(c.food, c.servings) for c in self.components]
        while pending:
            food, weight = pending.pop()
            if isinstance(food, CompositeFood):
                pending.extend((c.food, weight * c.servings) for c in food.components)
            else:
                total += food.calories * weight
        return total

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["components"] = [c.to_dict() for c in self.components]
        return data
