"""
Dietary restrictions and recipe compatibility.

Options carry gluten/egg/dairy flags from the build step. An option without
dietary data is treated as meeting every restriction.
"""

from typing import Literal, Mapping, Optional

from pydantic import BaseModel

from cookingdb.logging import get_logger
from cookingdb.schemas.recipe import DietaryFlags, Option, Recipe

logger = get_logger(__name__)

RESTRICTIONS = ("gluten_free", "egg_free", "dairy_free")

DIETARY_TAGS = {
    "gluten_free": {"positive": "Gluten-free ready", "negative": "Contains gluten"},
    "egg_free": {"positive": "Egg-free friendly", "negative": "Contains egg"},
    "dairy_free": {"positive": "Dairy-free ready", "negative": "Contains dairy"},
}

StatusName = Literal["cannot", "ready", "can-become"]


class RestrictionStatus(BaseModel):
    restriction: str
    status: StatusName
    locked: bool  # already met and no choice could break it
    toggle_enabled: bool
    label: str = ""


def restrictions_active(restrictions: DietaryFlags) -> bool:
    return any(getattr(restrictions, r) for r in RESTRICTIONS)


def option_meets_restriction(option: Optional[Option], restriction: str) -> bool:
    if option is None or option.dietary is None:
        return True
    return bool(getattr(option.dietary, restriction))


def option_meets_restrictions(option: Optional[Option], restrictions: DietaryFlags) -> bool:
    return all(
        option_meets_restriction(option, r) for r in RESTRICTIONS if getattr(restrictions, r)
    )


def recipe_default_compatibility(recipe: Recipe) -> DietaryFlags:
    """Which restrictions the recipe meets as written, ignoring active toggles."""
    from cookingdb.services.resolver import default_option_for_token

    flags = {r: True for r in RESTRICTIONS}
    for token in recipe.ingredients:
        option = default_option_for_token(token, recipe)
        for r in RESTRICTIONS:
            if not option_meets_restriction(option, r):
                flags[r] = False
    return DietaryFlags(**flags)


def compatibility_possible(recipe: Recipe) -> DietaryFlags:
    """Build-time compatibility when present, else the recipe-as-written answer."""
    if recipe.compatibility_possible is not None:
        return recipe.compatibility_possible
    return recipe_default_compatibility(recipe)


def has_non_compliant_alternative(recipe: Recipe, restriction: str) -> bool:
    """True when some choice member fails ``restriction``, so a compliant default is not forced."""
    for token_data in recipe.ingredients.values():
        if not token_data.is_choice:
            continue
        if any(not option_meets_restriction(opt, restriction) for opt in token_data.choice_options()):
            return True
    return False


def restriction_status(recipe: Recipe) -> dict[str, RestrictionStatus]:
    possible = compatibility_possible(recipe)
    defaults = recipe_default_compatibility(recipe)
    result: dict[str, RestrictionStatus] = {}
    for r in RESTRICTIONS:
        is_possible = getattr(possible, r)
        ready = getattr(defaults, r)
        status: StatusName = "cannot" if not is_possible else ("ready" if ready else "can-become")
        locked = ready and not has_non_compliant_alternative(recipe, r)
        result[r] = RestrictionStatus(
            restriction=r,
            status=status,
            locked=locked,
            toggle_enabled=is_possible and not locked,
            label=DIETARY_TAGS[r]["negative" if status == "cannot" else "positive"],
        )
    return result


def initial_restrictions(
    recipe: Recipe, requested: Optional[Mapping[str, Optional[bool]]] = None
) -> DietaryFlags:
    """
    Starting toggles for a new session.
    Locked restrictions are always on, impossible ones always off; otherwise an
    explicit request (e.g. from a shared link) wins over the recipe default.
    """
    requested = requested or {}
    possible = compatibility_possible(recipe)
    defaults = recipe_default_compatibility(recipe)
    flags = {}
    for r in RESTRICTIONS:
        if not getattr(possible, r):
            flags[r] = False
        elif getattr(defaults, r) and not has_non_compliant_alternative(recipe, r):
            flags[r] = True
        elif requested.get(r) is not None:
            flags[r] = bool(requested[r])
        else:
            flags[r] = getattr(defaults, r)
    logger.debug("dietary.initial recipe=%s flags=%s", recipe.id, flags)
    return DietaryFlags(**flags)
