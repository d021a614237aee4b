import math
from dataclasses import dataclass
from typing import Optional

from cookingdb.logging import get_logger
from cookingdb.schemas.nutrition import (
    BatchTotals,
    MealTargets,
    NutrientTotals,
    NutritionPolicy,
    NutritionResult,
    NutritionSettings,
    ServingEstimate,
)
from cookingdb.schemas.recipe import Recipe
from cookingdb.schemas.state import RenderState
from cookingdb.services.nutrition.targets import meal_targets
from cookingdb.services.nutrition.totals import compute_batch_totals, scale_nutrition_totals

logger = get_logger(__name__)


@dataclass
class _Candidate:
    servings: int
    penalty: float
    per_serving: NutrientTotals


def serving_penalty(per_serving: NutrientTotals, targets: MealTargets, policy: NutritionPolicy) -> float:
    """Weighted distance of one serving from the meal targets. Lower is better."""
    weights = policy.penalty_weights
    penalty = weights.kcal * abs(per_serving.kcal - targets.kcal_target_meal)
    penalty += weights.sodium * max(0.0, per_serving.sodium_mg - targets.sodium_limit_meal)
    penalty += weights.sat_fat * max(0.0, per_serving.sat_fat_g - targets.sat_fat_limit_g_meal)
    if per_serving.added_sugar_g is not None:
        penalty += weights.added_sugar * max(
            0.0, per_serving.added_sugar_g - targets.added_sugar_limit_g_meal
        )
    penalty += weights.fiber * max(0.0, targets.fiber_target_g_meal - per_serving.fiber_g)
    if targets.protein_floor_g_meal > 0:
        penalty += weights.protein * max(0.0, targets.protein_floor_g_meal - per_serving.protein_g)
    return penalty


def estimate_servings(
    totals: BatchTotals,
    settings: NutritionSettings,
    meal_type: str,
    policy: Optional[NutritionPolicy] = None,
) -> Optional[ServingEstimate]:
    """
    Serving count in 1..max_servings whose per-serving nutrition lands
    closest to the meal targets.

    Incomplete batches get no estimate. Ties keep the smaller count.
    """
    if not totals.complete or totals.totals.kcal <= 0:
        return None
    policy = policy or NutritionPolicy.from_settings()
    targets = meal_targets(settings, meal_type, policy)

    best: Optional[_Candidate] = None
    for servings in range(1, settings.max_servings + 1):
        per_serving = scale_nutrition_totals(totals.totals, 1 / servings)
        penalty = serving_penalty(per_serving, targets, policy)
        if best is None or penalty < best.penalty:
            best = _Candidate(servings=servings, penalty=penalty, per_serving=per_serving)

    logger.debug(
        "estimator.best meal_type=%s servings=%s penalty=%.3f kcal_target=%.1f",
        meal_type,
        best.servings,
        best.penalty,
        targets.kcal_target_meal,
    )
    return ServingEstimate(
        servings=best.servings, penalty=best.penalty, per_serving=best.per_serving, targets=targets
    )


def nutrition_summary(
    recipe: Recipe,
    state: RenderState,
    settings: Optional[NutritionSettings] = None,
    meal_type: str = "dinner",
    policy: Optional[NutritionPolicy] = None,
    servings_override: Optional[float] = None,
) -> NutritionResult:
    settings = settings or NutritionSettings()
    policy = policy or NutritionPolicy.from_settings()
    batch = compute_batch_totals(recipe, state)
    estimate = estimate_servings(batch, settings, meal_type, policy)

    servings_used: Optional[float] = None
    per_serving: Optional[NutrientTotals] = None
    if servings_override is not None and servings_override > 0 and batch.complete:
        servings_used = servings_override
        per_serving = scale_nutrition_totals(batch.totals, 1 / servings_override)
    elif estimate is not None:
        servings_used = float(estimate.servings)
        per_serving = estimate.per_serving

    if not batch.complete:
        logger.info(
            "nutrition.incomplete recipe=%s covered=%s total=%s",
            recipe.id,
            batch.coverage.covered,
            batch.coverage.total,
        )

    return NutritionResult(
        servings_estimate=estimate.servings if estimate else None,
        servings_used=servings_used,
        author_servings=_author_servings(recipe),
        per_serving_totals=per_serving,
        batch_totals=batch,
        complete=batch.complete,
        coverage_ratio=batch.coverage.ratio,
        debug_targets=estimate.targets if estimate else meal_targets(settings, meal_type, policy),
    )


def _author_servings(recipe: Recipe) -> Optional[float]:
    servings = recipe.servings_per_batch
    if servings is None or not math.isfinite(servings) or servings <= 0:
        return None
    return servings
