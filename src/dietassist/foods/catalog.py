"""Food catalog: owns every food by name and resolves composite definitions.

Basic definitions are materialized as soon as they are read. Composite
definitions are staged and resolved depth-first once the whole file has
been read, so a composite may reference foods defined before or after it,
including other composites.

A component that cannot be resolved is dropped with a warning and the
composite is still created from the remaining components. A component that
refers back to a composite still being resolved (a cycle) is dropped the
same way, which keeps resolution finite.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from numbers import Real
from typing import Any, Iterable, Iterator, Optional

from dietassist.errors import (
    DuplicateFoodError,
    FoodNotFoundError,
    MalformedCatalogError,
)
from dietassist.foods.models import (
    BASIC,
    COMPOSITE,
    FOOD_TYPES,
    BasicFood,
    CompositeFood,
    Food,
    FoodComponent,
    check_servings,
)

logger = logging.getLogger(__name__)


class WarningKind(Enum):
    """Kinds of non-fatal resolution problems."""

    MISSING_COMPONENT = "missing_component"
    UNRESOLVED_CYCLE = "unresolved_cycle"


@dataclass(frozen=True)
class ResolutionWarning:
    """A component dropped while resolving a composite food."""

    kind: WarningKind
    food: str
    component: str

    @property
    def message(self) -> str:
        if self.kind is WarningKind.UNRESOLVED_CYCLE:
            return (
                f"Component '{self.component}' of composite food '{self.food}' "
                f"forms a reference cycle and was skipped"
            )
        return (
            f"Component '{self.component}' not found for composite food "
            f"'{self.food}' and was skipped"
        )

    def __str__(self) -> str:
        return self.message


class _State(Enum):
    STAGED = "staged"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"


@dataclass
class _Frame:
    """A composite being resolved and how far through its components it is."""

    name: str
    position: int = 0
    components: list[FoodComponent] = field(default_factory=list)


class _Resolver:
    """Materializes staged composite definitions into a food mapping.

    Resolution walks an explicit stack of frames instead of recursing, so
    the depth of a composite chain is not limited by the interpreter stack.
    """

    def __init__(self, foods: dict[str, Food], staged: dict[str, dict[str, Any]]):
        self.foods = foods
        self.staged = staged
        self.state = {name: _State.STAGED for name in staged}
        self.warnings: list[ResolutionWarning] = []

    def resolve_all(self) -> None:
        for name in self.staged:
            self.resolve(name)

    def resolve(self, name: str) -> Optional[Food]:
        """Return the food called name, materializing it if it is staged."""
        if name in self.foods:
            return self.foods[name]
        if name not in self.staged:
            return None

        stack = [self._start(name)]
        while stack:
            frame = stack[-1]
            entries = self.staged[frame.name]["components"]
            if frame.position == len(entries):
                stack.pop()
                self._finish(frame)
                continue

            entry = entries[frame.position]
            component_name = entry["name"]
            state = self.state.get(component_name)
            if state is _State.STAGED:
                # Resolve the component first; this entry is revisited after.
                stack.append(self._start(component_name))
                continue

            frame.position += 1
            if state is _State.IN_PROGRESS:
                self._warn(WarningKind.UNRESOLVED_CYCLE, frame.name, component_name)
                continue
            food = self.foods.get(component_name)
            if food is None:
                self._warn(WarningKind.MISSING_COMPONENT, frame.name, component_name)
                continue
            frame.components.append(FoodComponent(food, float(entry["servings"])))

        return self.foods[name]

    def _start(self, name: str) -> _Frame:
        self.state[name] = _State.IN_PROGRESS
        return _Frame(name)

    def _finish(self, frame: _Frame) -> None:
        record = self.staged[frame.name]
        self.foods[frame.name] = CompositeFood(frame.name, record["keywords"], frame.components)
        self.state[frame.name] = _State.RESOLVED

    def _warn(self, kind: WarningKind, food: str, component: str) -> None:
        warning = ResolutionWarning(kind, food, component)
        logger.warning(warning.message)
        self.warnings.append(warning)


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def _validate_record(position: int, record: Any) -> dict[str, Any]:
    """Check the structure of one food definition and return it."""
    where = f"food definition #{position + 1}"
    if not isinstance(record, dict):
        raise MalformedCatalogError(f"{where} is not an object")

    name = record.get("name")
    if not isinstance(name, str) or not name:
        raise MalformedCatalogError(f"{where} has no name")
    where = f"food '{name}'"

    food_type = record.get("type")
    if food_type not in FOOD_TYPES:
        raise MalformedCatalogError(f"{where} has unknown type {food_type!r}")

    keywords = record.get("keywords", [])
    if not isinstance(keywords, list) or not all(isinstance(k, str) for k in keywords):
        raise MalformedCatalogError(f"{where} has invalid keywords")

    if food_type == BASIC:
        calories = record.get("calories")
        if not _is_number(calories) or calories < 0:
            raise MalformedCatalogError(f"{where} has invalid calories")
        return record

    components = record.get("components")
    if not isinstance(components, list):
        raise MalformedCatalogError(f"{where} has no component list")
    for component in components:
        if not isinstance(component, dict) or not isinstance(component.get("name"), str):
            raise MalformedCatalogError(f"{where} has a component without a name")
        servings = component.get("servings")
        if not _is_number(servings) or servings <= 0:
            raise MalformedCatalogError(
                f"{where} has invalid servings for component '{component['name']}'"
            )
    return record


class FoodCatalog:
    """In-memory food database keyed by unique name."""

    def __init__(self) -> None:
        self._foods: dict[str, Food] = {}
        self.modified = False

    def __len__(self) -> int:
        return len(self._foods)

    def __contains__(self, name: object) -> bool:
        return name in self._foods

    def __iter__(self) -> Iterator[Food]:
        return iter(self.list_foods())

    def load(self, records: Any) -> tuple[int, list[ResolutionWarning]]:
        """Replace the catalog with the given food definitions.

        Args:
            records: Sequence of food-definition dicts as produced by save()

        Returns:
            Tuple of (number of foods loaded, resolution warnings)

        Raises:
            MalformedCatalogError: If the data is structurally invalid. The
                current catalog is left unchanged.
        """
        if not isinstance(records, list):
            raise MalformedCatalogError("Food database must be a list of food definitions")

        foods: dict[str, Food] = {}
        staged: dict[str, dict[str, Any]] = {}
        for position, raw in enumerate(records):
            record = _validate_record(position, raw)
            name = record["name"]
            if name in foods or name in staged:
                raise MalformedCatalogError(f"Duplicate food name '{name}'")

            if record["type"] == BASIC:
                foods[name] = BasicFood(name, record.get("keywords", []), record["calories"])
            else:
                staged[name] = {
                    "keywords": record.get("keywords", []),
                    "components": record["components"],
                }

        resolver = _Resolver(foods, staged)
        resolver.resolve_all()

        self._foods = foods
        self.modified = False
        logger.info(
            "Food database loaded: %d foods (%d composite), %d warnings",
            len(foods),
            len(staged),
            len(resolver.warnings),
        )
        return len(foods), resolver.warnings

    def save(self) -> list[dict[str, Any]]:
        """Serialize every food, sorted by name.

        Composite components are written by name and servings so that
        load() can re-resolve the graph.
        """
        data = [food.to_dict() for food in self.list_foods()]
        self.modified = False
        return data

    def add(self, food: Food) -> None:
        """Add a food, rejecting duplicate names.

        Raises:
            DuplicateFoodError: If a food with the same name exists
        """
        if food.name in self._foods:
            raise DuplicateFoodError(food.name)
        self._foods[food.name] = food
        self.modified = True
        logger.debug("Added %s food '%s'", food.type_tag, food.name)

    def get(self, name: str) -> Food:
        """Return the food called name.

        Raises:
            FoodNotFoundError: If no such food exists
        """
        food = self._foods.get(name)
        if food is None:
            raise FoodNotFoundError(name)
        return food

    def find(self, name: str) -> Optional[Food]:
        """Return the food called name, or None."""
        return self._foods.get(name)

    def list_foods(self) -> list[Food]:
        """All foods sorted by name."""
        return [self._foods[name] for name in sorted(self._foods)]

    def create_composite(
        self,
        name: str,
        keywords: Iterable[str],
        components: Iterable[tuple[str, float]],
    ) -> CompositeFood:
        """Build a composite from existing catalog foods and add it.

        Args:
            name: Name of the new composite food
            keywords: Search keywords
            components: (food name, servings) pairs

        Returns:
            The new CompositeFood

        Raises:
            DuplicateFoodError: If name is already taken
            FoodNotFoundError: If a component name is unknown
            ValueError: If a servings value is not a positive number
        """
        if name in self._foods:
            raise DuplicateFoodError(name)

        parts = []
        for component_name, servings in components:
            parts.append(FoodComponent(self.get(component_name), check_servings(servings)))

        composite = CompositeFood(name, keywords, parts)
        self.add(composite)
        return composite

    def set_calories(self, name: str, calories: float) -> BasicFood:
        """Change the calorie value of a basic food.

        Composites that include the food see the new value immediately.
        Diary entries keep their snapshot.

        Raises:
            FoodNotFoundError: If no such food exists
            ValueError: If the food is composite, or calories is negative or
                not finite
        """
        food = self.get(name)
        if not isinstance(food, BasicFood):
            raise ValueError(f"'{name}' is a {COMPOSITE} food; its calories are derived")
        food.calories = calories
        self.modified = True
        return food

    def search_by_keywords(self, terms: Iterable[str], match_all: bool) -> list[Food]:
        """Find foods whose keywords contain the search terms.

        Each term matches a food if it is a case-insensitive substring of
        any of the food's keywords.

        Args:
            terms: Search terms; blank terms are ignored
            match_all: Require every term to match (AND) instead of any (OR)

        Returns:
            Matching foods sorted by name
        """
        needles = [t.strip() for t in terms if t and t.strip()]
        if not needles:
            return []

        results = []
        for food in self.list_foods():
            hits = sum(1 for term in needles if food.matches_keyword(term))
            if (match_all and hits == len(needles)) or (not match_all and hits > 0):
                results.append(food)
        return results
