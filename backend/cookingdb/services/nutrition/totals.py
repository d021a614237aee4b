"""
Batch nutrition totals across the resolved ingredient options.

Partial data is additive: an ingredient that cannot be matched to a usable
nutrition row flips ``missing`` but does not stop other ingredients from
contributing. Only complete batches feed the serving estimator.
"""

import math
from typing import Optional

from cookingdb.logging import get_logger
from cookingdb.schemas.nutrition import (
    REQUIRED_NUTRIENTS,
    BatchTotals,
    MissingIngredient,
    NutrientTotals,
)
from cookingdb.schemas.recipe import NutritionVariant, Recipe
from cookingdb.schemas.state import BridgeFactors, RenderState
from cookingdb.services.parsing.ratios import fraction_to_float, multiply_fraction, parse_ratio
from cookingdb.services.resolver import resolve_tokens
from cookingdb.services.units.converter import convert_with_factors
from cookingdb.services.units.registry import normalize_unit

logger = get_logger(__name__)


def variant_is_complete(variant: NutritionVariant) -> bool:
    return all(_finite(getattr(variant, key)) for key in REQUIRED_NUTRIENTS)


def match_nutrition_variant(
    amount: float,
    unit: Optional[str],
    variants: list[NutritionVariant],
    factors: Optional[BridgeFactors] = None,
    pinned_unit: Optional[str] = None,
) -> Optional[tuple[NutritionVariant, float]]:
    """
    First variant the amount converts into, preferring complete rows.
    Returns the variant and the amount expressed in its serving unit.

    ``pinned_unit`` is the unit the reader switched the line to. When no single
    bridge reaches a serving unit, the amount may hop through the pinned unit
    and take a second bridge from there (sprigs -> tbsp -> g).
    """
    fallback = None
    for variant in variants:
        serving_unit = normalize_unit(variant.serving_unit)
        if not serving_unit:
            continue
        converted = convert_with_factors(amount, unit, serving_unit, factors)
        if converted is None and pinned_unit:
            via = convert_with_factors(amount, unit, pinned_unit, factors)
            if via is not None:
                converted = convert_with_factors(via.amount, via.unit, serving_unit, factors)
        if converted is None:
            continue
        if variant_is_complete(variant):
            return variant, converted.amount
        if fallback is None:
            fallback = (variant, converted.amount)
    return fallback


def compute_batch_totals(recipe: Recipe, state: RenderState) -> BatchTotals:
    multiplier = state.effective_multiplier
    result = BatchTotals()
    totals = result.totals

    for resolved in resolve_tokens(recipe, state):
        option = resolved.option
        if not resolved.visible or option is None or not option.ratio or not option.unit:
            continue
        result.coverage.total += 1
        unit = normalize_unit(option.unit)

        def _missing(reason: str) -> None:
            result.missing = True
            result.missing_details.append(
                MissingIngredient(
                    token=resolved.token, ingredient_id=option.ingredient_id, unit=unit, reason=reason
                )
            )
            logger.debug(
                "nutrition.missing recipe=%s token=%s ingredient=%s unit=%s reason=%s",
                recipe.id,
                resolved.token,
                option.ingredient_id,
                unit,
                reason,
            )

        frac = parse_ratio(option.ratio)
        if frac is None:
            _missing("unparseable_ratio")
            continue
        if not option.nutrition:
            _missing("no_nutrition_data")
            continue
        amount = fraction_to_float(multiply_fraction(frac, multiplier))
        pinned = normalize_unit(state.unit_selections.get(resolved.token))
        match = match_nutrition_variant(
            amount, unit, option.nutrition, state.factors_for(option.ingredient_id), pinned
        )
        if match is None:
            _missing("unconvertible_unit")
            continue

        variant, qty = match
        servings = qty / variant.serving_qty
        for key in REQUIRED_NUTRIENTS:
            value = getattr(variant, key)
            if _finite(value):
                setattr(totals, key, getattr(totals, key) + servings * value)
        if _finite(variant.added_sugar_g):
            totals.added_sugar_g = (totals.added_sugar_g or 0.0) + servings * variant.added_sugar_g

        if variant_is_complete(variant):
            result.coverage.covered += 1
        else:
            _missing("incomplete_nutrients")

    logger.debug(
        "nutrition.totals recipe=%s covered=%s total=%s complete=%s",
        recipe.id,
        result.coverage.covered,
        result.coverage.total,
        result.complete,
    )
    return result


def scale_nutrition_totals(totals: NutrientTotals, factor: float) -> NutrientTotals:
    scaled = {key: getattr(totals, key) * factor for key in REQUIRED_NUTRIENTS}
    added = totals.added_sugar_g
    return NutrientTotals(**scaled, added_sugar_g=added * factor if added is not None else None)


def _finite(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value)
