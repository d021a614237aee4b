"""Tests for meal targets and the serving-count search."""

import pytest

from cookingdb.schemas.nutrition import (
    BatchTotals,
    Coverage,
    NutrientTotals,
    NutritionPolicy,
    NutritionSettings,
    PenaltyWeights,
)
from cookingdb.schemas.recipe import Recipe
from cookingdb.schemas.state import RenderState
from cookingdb.services.nutrition.targets import meal_targets, normalize_meal_fractions
from cookingdb.services.optimization.serving_estimator import (
    estimate_servings,
    nutrition_summary,
    serving_penalty,
)


def _batch(**totals):
    return BatchTotals(totals=NutrientTotals(**totals), coverage=Coverage(covered=1, total=1))


def test_normalize_meal_fractions_defaults_sum_to_one():
    fractions = normalize_meal_fractions(None, NutritionPolicy())
    assert sum(fractions.values()) == pytest.approx(1)
    assert fractions["dinner"] == pytest.approx(0.35)


def test_normalize_meal_fractions_renormalizes_and_falls_back():
    fractions = normalize_meal_fractions({"breakfast": 1, "lunch": 1, "dinner": 2, "snack": 0}, NutritionPolicy())
    # Snack falls back to its default share before renormalising.
    assert fractions["dinner"] == pytest.approx(2 / 4.05)
    assert fractions["snack"] == pytest.approx(0.05 / 4.05)


def test_normalize_meal_fractions_equal_split_when_nothing_positive():
    policy = NutritionPolicy(meal_fractions_default={"lunch": 0, "dinner": 0})
    assert normalize_meal_fractions({}, policy) == {"lunch": 0.5, "dinner": 0.5}


def test_meal_targets_for_dinner():
    targets = meal_targets(NutritionSettings(daily_kcal=2000), "dinner", NutritionPolicy())
    assert targets.kcal_target_meal == pytest.approx(700)
    assert targets.sodium_limit_meal == pytest.approx(805)
    assert targets.sat_fat_limit_g_meal == pytest.approx(70 / 9)
    assert targets.added_sugar_limit_g_meal == pytest.approx(17.5)
    assert targets.fiber_target_g_meal == pytest.approx(9.8)
    assert targets.protein_floor_g_meal == 0


def test_meal_targets_with_weight_and_fixed_caps():
    policy = NutritionPolicy(sat_fat_day_max_g=20, added_sugar_day_max_g=50)
    targets = meal_targets(NutritionSettings(daily_kcal=2000, weight_kg=70), "dinner", policy)
    assert targets.protein_floor_g_meal == pytest.approx(0.8 * 70 * 0.35)
    assert targets.sat_fat_limit_g_meal == pytest.approx(7)
    assert targets.added_sugar_limit_g_meal == pytest.approx(17.5)


def test_unknown_meal_type_uses_meals_per_day():
    targets = meal_targets(NutritionSettings(), "brunch", NutritionPolicy())
    assert targets.meal_fraction == pytest.approx(1 / 3)
    assert targets.kcal_target_meal == pytest.approx(2000 / 3)


def test_estimate_hits_exact_kcal_target():
    totals = _batch(kcal=2800, protein_g=80, fat_g=60, sat_fat_g=20, carbs_g=400, sugars_g=20, fiber_g=40, sodium_mg=2000)
    estimate = estimate_servings(totals, NutritionSettings(daily_kcal=2000), "dinner", NutritionPolicy())
    assert estimate.servings == 4
    assert estimate.penalty == pytest.approx(0)
    assert estimate.per_serving.kcal == pytest.approx(700)


def test_incomplete_totals_get_no_estimate():
    totals = _batch(kcal=2800)
    totals.missing = True
    assert estimate_servings(totals, NutritionSettings(), "dinner") is None
    assert estimate_servings(BatchTotals(), NutritionSettings(), "dinner") is None


def test_scale_invariance():
    base = dict(kcal=2500, protein_g=90, fat_g=70, sat_fat_g=20, carbs_g=300, sugars_g=30, fiber_g=40, sodium_mg=2000)
    policy = NutritionPolicy()
    settings = NutritionSettings(daily_kcal=2000, weight_kg=60)
    single = estimate_servings(_batch(**base), settings, "dinner", policy)

    k = 2
    scaled_policy = NutritionPolicy(sodium_day_max_mg=policy.sodium_day_max_mg * k)
    scaled_settings = NutritionSettings(daily_kcal=2000 * k, weight_kg=60 * k)
    doubled = estimate_servings(
        _batch(**{key: value * k for key, value in base.items()}), scaled_settings, "dinner", scaled_policy
    )
    assert single.servings == doubled.servings == 4
    assert doubled.penalty == pytest.approx(single.penalty * k)


def test_ties_keep_smaller_serving_count():
    # 800 kcal against a 600 kcal meal: one serving is 200 over, two are 200 under.
    policy = NutritionPolicy(meal_fractions_default={"dinner": 1.0})
    totals = _batch(kcal=800)
    estimate = estimate_servings(totals, NutritionSettings(daily_kcal=600), "dinner", policy)
    assert estimate.servings == 1


def test_max_servings_bounds_the_search():
    totals = _batch(kcal=20000, fiber_g=1000)
    estimate = estimate_servings(totals, NutritionSettings(daily_kcal=2000, max_servings=5), "dinner", NutritionPolicy())
    assert estimate.servings == 5


def test_penalty_terms_and_weights():
    targets = meal_targets(NutritionSettings(daily_kcal=2000, weight_kg=50), "dinner", NutritionPolicy())
    serving = NutrientTotals(kcal=700, sodium_mg=905, fiber_g=9.8, protein_g=14, added_sugar_g=20.5)
    assert serving_penalty(serving, targets, NutritionPolicy()) == pytest.approx(100 + 3)

    muted = NutritionPolicy(penalty_weights=PenaltyWeights(sodium=0, added_sugar=0))
    assert serving_penalty(serving, targets, muted) == pytest.approx(0)

    serving.added_sugar_g = None
    assert serving_penalty(serving, targets, NutritionPolicy()) == pytest.approx(100)


def test_nutrition_summary(oats):
    result = nutrition_summary(oats, RenderState(), NutritionSettings(daily_kcal=2000), "dinner", NutritionPolicy())
    assert result.complete
    assert result.servings_estimate == 4
    assert result.servings_used == 4
    assert result.per_serving_totals.kcal == pytest.approx(700)
    assert result.coverage_ratio == 1
    assert result.debug_targets.kcal_target_meal == pytest.approx(700)


def test_nutrition_summary_servings_override(oats):
    result = nutrition_summary(oats, RenderState(), NutritionSettings(daily_kcal=2000), "dinner", servings_override=8)
    assert result.servings_estimate == 4
    assert result.servings_used == 8
    assert result.per_serving_totals.kcal == pytest.approx(350)


def test_nutrition_summary_incomplete(pancakes):
    result = nutrition_summary(pancakes, RenderState())
    assert not result.complete
    assert result.servings_estimate is None
    assert result.per_serving_totals is None
    assert result.debug_targets is not None


def test_dinner_scenario_tie_resolves_to_three():
    totals = _batch(kcal=2400, protein_g=60, fat_g=80, sat_fat_g=15, carbs_g=300, sugars_g=30, fiber_g=0, sodium_mg=1800)
    estimate = estimate_servings(totals, NutritionSettings(daily_kcal=2000), "dinner", NutritionPolicy())
    # Three and four servings both miss the kcal target by 100; the smaller count wins.
    assert estimate.servings == 3


def test_nutrition_summary_reports_author_servings(pancakes_data, oats_data):
    oats = Recipe.model_validate({**oats_data, "servings_per_batch": 6})
    assert nutrition_summary(oats, RenderState()).author_servings == 6

    # Still reported when nutrition is incomplete and no estimate exists.
    pancakes = Recipe.model_validate({**pancakes_data, "servings_per_batch": 8})
    result = nutrition_summary(pancakes, RenderState())
    assert result.servings_estimate is None
    assert result.author_servings == 8

    assert nutrition_summary(Recipe.model_validate(oats_data), RenderState()).author_servings is None
