from cookingdb.schemas.recipe import DietaryFlags, Option
from cookingdb.services.dietary import (
    compatibility_possible,
    initial_restrictions,
    option_meets_restriction,
    option_meets_restrictions,
    recipe_default_compatibility,
    restriction_status,
    restrictions_active,
)


def test_option_without_dietary_data_meets_everything():
    assert option_meets_restriction(Option(display="salt"), "gluten_free")
    assert option_meets_restriction(None, "egg_free")


def test_option_meets_restrictions_checks_active_flags_only():
    milk = Option(display="milk", dietary=DietaryFlags(gluten_free=True, egg_free=True, dairy_free=False))
    assert option_meets_restrictions(milk, DietaryFlags(gluten_free=True))
    assert not option_meets_restrictions(milk, DietaryFlags(dairy_free=True))
    assert not restrictions_active(DietaryFlags())
    assert restrictions_active(DietaryFlags(egg_free=True))


def test_default_compatibility_uses_default_options(pancakes):
    defaults = recipe_default_compatibility(pancakes)
    assert defaults == DietaryFlags(gluten_free=False, egg_free=False, dairy_free=False)


def test_compatibility_possible_prefers_build_data(pancakes, make_recipe):
    assert compatibility_possible(pancakes).dairy_free is True
    plain = make_recipe(["salt"], {"salt": {"token": "salt", "options": [{"display": "salt"}]}})
    assert compatibility_possible(plain) == DietaryFlags(gluten_free=True, egg_free=True, dairy_free=True)


def test_restriction_status_badges(pancakes):
    status = restriction_status(pancakes)
    assert status["gluten_free"].status == "cannot"
    assert status["gluten_free"].toggle_enabled is False
    assert status["dairy_free"].status == "can-become"
    assert status["dairy_free"].locked is False
    assert status["dairy_free"].toggle_enabled is True
    assert status["dairy_free"].label == "Dairy-free ready"
    assert status["egg_free"].label == "Contains egg"


def test_restriction_locked_when_no_choice_can_break_it(make_recipe):
    recipe = make_recipe(
        ["butter"],
        {
            "butter": {
                "token": "butter",
                "isChoice": True,
                "options": [
                    {"option": "vegan", "display": "vegan butter", "dietary": {"dairy_free": True}},
                    {"option": "oil", "display": "olive oil", "dietary": {"dairy_free": True}},
                ],
            }
        },
    )
    status = restriction_status(recipe)
    assert status["dairy_free"].status == "ready"
    assert status["dairy_free"].locked is True
    assert status["dairy_free"].toggle_enabled is False
    assert initial_restrictions(recipe, {"dairy_free": False}).dairy_free is True


def test_initial_restrictions(pancakes):
    assert initial_restrictions(pancakes) == DietaryFlags()
    requested = initial_restrictions(pancakes, {"dairy_free": True, "gluten_free": True})
    assert requested.dairy_free is True
    # Impossible restrictions stay off whatever was asked for.
    assert requested.gluten_free is False
