"""Pytest fixtures for dietassist tests."""

from __future__ import annotations

import json

import pytest

from dietassist.diary.commands import UndoHistory
from dietassist.diary.store import DiaryStore
from dietassist.foods.catalog import FoodCatalog


SAMPLE_FOODS = [
    {"name": "Apple", "keywords": ["fruit", "Sweet"], "type": "basic", "calories": 95},
    {
        "name": "Chicken Breast",
        "keywords": ["meat", "High Protein", "poultry"],
        "type": "basic",
        "calories": 165,
    },
    {"name": "Greek Yogurt", "keywords": ["dairy", "high-protein"], "type": "basic", "calories": 100},
    {"name": "Rice", "keywords": ["grain", "carb"], "type": "basic", "calories": 200},
    # Defined before its component composite to exercise forward references
    {
        "name": "Lunch Combo",
        "keywords": ["meal"],
        "type": "composite",
        "components": [
            {"name": "Chicken Rice Bowl", "servings": 1},
            {"name": "Apple", "servings": 1},
        ],
    },
    {
        "name": "Chicken Rice Bowl",
        "keywords": ["meal", "protein"],
        "type": "composite",
        "components": [
            {"name": "Chicken Breast", "servings": 1},
            {"name": "Rice", "servings": 1.5},
        ],
    },
]


@pytest.fixture
def sample_records():
    """Fresh copy of the sample food definitions."""
    return json.loads(json.dumps(SAMPLE_FOODS))


@pytest.fixture
def catalog(sample_records):
    """Catalog loaded with the sample foods."""
    cat = FoodCatalog()
    cat.load(sample_records)
    return cat


@pytest.fixture
def diary(catalog):
    """Empty diary backed by the sample catalog."""
    return DiaryStore(catalog)


@pytest.fixture
def history():
    return UndoHistory()


@pytest.fixture
def data_dir(tmp_path, sample_records):
    """Data directory holding the sample food database."""
    (tmp_path / "food_database.json").write_text(json.dumps(sample_records))
    return tmp_path
