"""Per-meal nutrition targets derived from daily settings and policy constants."""

import math
from typing import Mapping, Optional

from cookingdb.schemas.nutrition import MEAL_TYPES, MealTargets, NutritionPolicy, NutritionSettings

KCAL_PER_G_FAT = 9.0
KCAL_PER_G_SUGAR = 4.0


def normalize_meal_fractions(
    fractions: Optional[Mapping[str, float]], policy: Optional[NutritionPolicy] = None
) -> dict[str, float]:
    """
    Meal shares of the day, summing to 1.

    Keys come from the policy defaults; a missing or non-positive share falls
    back to its default, and an all-zero configuration splits the day evenly.
    """
    policy = policy or NutritionPolicy.from_settings()
    defaults = policy.meal_fractions_default or {}
    keys = list(defaults) or list(MEAL_TYPES)
    fractions = fractions or {}
    normalized: dict[str, float] = {}
    for key in keys:
        value = _number(fractions.get(key))
        if value is None or value <= 0:
            value = _number(defaults.get(key)) or 0.0
        normalized[key] = max(value, 0.0)
    total = sum(normalized.values())
    if total <= 0:
        return {key: 1 / len(keys) for key in keys}
    return {key: value / total for key, value in normalized.items()}


def meal_targets(
    settings: NutritionSettings, meal_type: str, policy: Optional[NutritionPolicy] = None
) -> MealTargets:
    policy = policy or NutritionPolicy.from_settings()
    daily_kcal = _positive(settings.daily_kcal) or policy.default_daily_kcal
    fractions = normalize_meal_fractions(settings.meal_fractions, policy)
    fraction = fractions.get(meal_type)
    if not fraction or fraction <= 0:
        fraction = 1 / (policy.default_meals_per_day or 3)
    kcal_target = daily_kcal * fraction

    if _positive(policy.sat_fat_day_max_g):
        sat_fat_limit = policy.sat_fat_day_max_g * fraction
    else:
        sat_fat_limit = policy.sat_fat_max_pct_kcal * kcal_target / KCAL_PER_G_FAT
    if _positive(policy.added_sugar_day_max_g):
        added_sugar_limit = policy.added_sugar_day_max_g * fraction
    else:
        added_sugar_limit = policy.added_sugar_max_pct_kcal * kcal_target / KCAL_PER_G_SUGAR

    weight = _positive(settings.weight_kg)
    protein_floor = policy.protein_rda_g_per_kg_day * weight * fraction if weight else 0.0

    return MealTargets(
        meal_fraction=fraction,
        kcal_target_meal=kcal_target,
        sodium_limit_meal=policy.sodium_day_max_mg * fraction,
        sat_fat_limit_g_meal=sat_fat_limit,
        added_sugar_limit_g_meal=added_sugar_limit,
        fiber_target_g_meal=policy.fiber_g_per_1000_kcal_min * kcal_target / 1000,
        protein_floor_g_meal=protein_floor,
    )


def _number(value: object) -> Optional[float]:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _positive(value: object) -> Optional[float]:
    number = _number(value)
    return number if number is not None and number > 0 else None
