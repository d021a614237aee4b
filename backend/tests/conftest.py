import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from cookingdb import main
from cookingdb.schemas.recipe import Recipe
from cookingdb.schemas.state import RenderState


def _macros(kcal, protein, fat, sat_fat, carbs, sugars, fiber, sodium, **extra):
    return {
        "kcal": kcal,
        "protein_g": protein,
        "fat_g": fat,
        "sat_fat_g": sat_fat,
        "carbs_g": carbs,
        "sugars_g": sugars,
        "fiber_g": fiber,
        "sodium_mg": sodium,
        **extra,
    }


PANCAKES = {
    "id": "pancakes",
    "title": "Weekend Pancakes",
    "default_base": 1,
    "token_order": ["flour", "milk", "egg", "water", "salt"],
    "ingredient_sections": ["Batter", "Wash"],
    "steps_raw": "1. Whisk {{flour}} with {{milk}}.\n2. Beat in {{egg}}.\n\n3. Cook until golden.",
    "compatibility_possible": {"gluten_free": False, "egg_free": False, "dairy_free": True},
    "choices": {
        "milk": {"label": "Milk", "default_option": "whole_milk"},
        "egg": {"label": "Egg", "default_option": "whole"},
    },
    "ingredients": {
        "flour": {
            "token": "flour",
            "section": "Batter",
            "options": [
                {
                    "display": "all-purpose flour",
                    "ratio": "1/2",
                    "unit": "cup",
                    "ingredient_id": "flour",
                    "dietary": {"gluten_free": False, "egg_free": True, "dairy_free": True},
                    "nutrition": [
                        {"serving_qty": 1, "serving_unit": "cup", **_macros(455, 13, 1.2, 0.2, 95, 0.3, 3.4, 2)}
                    ],
                }
            ],
        },
        "milk": {
            "token": "milk",
            "isChoice": True,
            "section": "Batter",
            "options": [
                {
                    "option": "whole_milk",
                    "display": "whole milk",
                    "ratio": "1",
                    "unit": "cup",
                    "ingredient_id": "whole_milk",
                    "dietary": {"gluten_free": True, "egg_free": True, "dairy_free": False},
                    "nutrition": [
                        {"serving_qty": 1, "serving_unit": "cup", **_macros(149, 8, 8, 4.6, 12, 12, 0, 105)}
                    ],
                },
                {
                    "option": "oat_milk",
                    "display": "oat milk",
                    "ratio": "1",
                    "unit": "cup",
                    "ingredient_id": "oat_milk",
                    "dietary": {"gluten_free": True, "egg_free": True, "dairy_free": True},
                    "nutrition": [
                        {
                            "serving_qty": 240,
                            "serving_unit": "ml",
                            **_macros(120, 3, 5, 0.5, 16, 7, 2, 100, added_sugar_g=7),
                        }
                    ],
                },
            ],
        },
        "egg": {
            "token": "egg",
            "isChoice": True,
            "section": "Batter",
            "options": [
                {
                    "option": "whole",
                    "display": "egg",
                    "ratio": "1",
                    "unit": "whole",
                    "ingredient_id": "egg",
                    "dietary": {"gluten_free": True, "egg_free": False, "dairy_free": True},
                    "nutrition": [
                        {"serving_qty": 50, "serving_unit": "g", **_macros(72, 6.3, 4.8, 1.6, 0.4, 0.2, 0, 71)}
                    ],
                },
                {
                    "option": "yolk",
                    "display": "egg yolk",
                    "ratio": "1",
                    "unit": "whole",
                    "ingredient_id": "egg_yolk",
                    "dietary": {"gluten_free": True, "egg_free": False, "dairy_free": True},
                    "nutrition": [
                        {"serving_qty": 1, "serving_unit": "count", **_macros(55, 2.7, 4.5, 1.6, 0.6, 0.1, 0, 8)}
                    ],
                },
            ],
        },
        "water": {
            "token": "water",
            "section": "Wash",
            "depends_on": {"token": "egg", "option": "whole"},
            "options": [
                {
                    "display": "water",
                    "ratio": "1",
                    "unit": "tbsp",
                    "ingredient_id": "water",
                    "nutrition": [{"serving_qty": 1, "serving_unit": "cup", **_macros(0, 0, 0, 0, 0, 0, 0, 0)}],
                }
            ],
        },
        "salt": {
            "token": "salt",
            "options": [
                {
                    "display": "salt",
                    "ratio": "1/4",
                    "unit": "tsp",
                    "ingredient_id": "salt",
                    "nutrition": [{"serving_qty": 1, "serving_unit": "tsp", **_macros(0, 0, 0, 0, 0, 0, 0, 2325)}],
                }
            ],
        },
    },
}


OATS = {
    "id": "overnight-oats",
    "title": "Overnight Oats",
    "token_order": ["oats"],
    "ingredients": {
        "oats": {
            "token": "oats",
            "options": [
                {
                    "display": "oat mix",
                    "ratio": "1",
                    "unit": "cup",
                    "ingredient_id": "oat_mix",
                    "nutrition": [
                        {"serving_qty": 1, "serving_unit": "cup", **_macros(2800, 80, 60, 20, 400, 20, 40, 2000)}
                    ],
                }
            ],
        }
    },
}


@pytest.fixture(name="pancakes_data")
def pancakes_data_fixture():
    return PANCAKES


@pytest.fixture(name="pancakes")
def pancakes_fixture():
    return Recipe.model_validate(PANCAKES)


@pytest.fixture(name="oats_data")
def oats_data_fixture():
    return OATS


@pytest.fixture(name="oats")
def oats_fixture():
    return Recipe.model_validate(OATS)


@pytest.fixture(name="state")
def state_fixture():
    return RenderState()


@pytest.fixture(name="make_recipe")
def make_recipe_fixture():
    def _make(token_order, ingredients, **fields):
        return Recipe.model_validate(
            {"id": fields.pop("id", "test"), "token_order": token_order, "ingredients": ingredients, **fields}
        )

    return _make


@pytest.fixture(name="client")
def client_fixture():
    return TestClient(main.app)
