from typing import Optional

from pydantic import BaseModel, Field

from cookingdb.config import settings as app_settings
from cookingdb.schemas.recipe import Recipe
from cookingdb.schemas.state import RenderState

REQUIRED_NUTRIENTS = (
    "kcal",
    "protein_g",
    "fat_g",
    "sat_fat_g",
    "carbs_g",
    "sugars_g",
    "fiber_g",
    "sodium_mg",
)

MEAL_TYPES = ("breakfast", "lunch", "dinner", "snack")


class PenaltyWeights(BaseModel):
    kcal: float = 1.0
    sodium: float = 1.0
    sat_fat: float = 1.0
    added_sugar: float = 1.0
    fiber: float = 1.0
    protein: float = 1.0


class NutritionPolicy(BaseModel):
    """Guideline constants behind the per-meal targets."""

    default_daily_kcal: float = 2000.0
    default_meals_per_day: int = 3
    meal_fractions_default: dict[str, float] = {
        "breakfast": 0.25,
        "lunch": 0.35,
        "dinner": 0.35,
        "snack": 0.05,
    }
    sodium_day_max_mg: float = 2300.0
    # A fixed daily cap wins over the percentage-of-kcal form when set.
    sat_fat_day_max_g: Optional[float] = None
    sat_fat_max_pct_kcal: float = 0.10
    added_sugar_day_max_g: Optional[float] = None
    added_sugar_max_pct_kcal: float = 0.10
    fiber_g_per_1000_kcal_min: float = 14.0
    protein_rda_g_per_kg_day: float = 0.8
    penalty_weights: PenaltyWeights = Field(default_factory=PenaltyWeights)

    @classmethod
    def from_settings(cls) -> "NutritionPolicy":
        return cls(
            default_daily_kcal=app_settings.default_daily_kcal,
            default_meals_per_day=app_settings.default_meals_per_day,
        )


class NutritionSettings(BaseModel):
    daily_kcal: Optional[float] = None
    weight_kg: Optional[float] = None
    meal_fractions: dict[str, float] = {}
    max_servings: int = Field(default_factory=lambda: app_settings.max_servings, ge=1)


class NutrientTotals(BaseModel):
    kcal: float = 0.0
    protein_g: float = 0.0
    fat_g: float = 0.0
    sat_fat_g: float = 0.0
    carbs_g: float = 0.0
    sugars_g: float = 0.0
    fiber_g: float = 0.0
    sodium_mg: float = 0.0
    added_sugar_g: Optional[float] = None  # None until some ingredient reports it


class Coverage(BaseModel):
    covered: int = 0
    total: int = 0

    @property
    def ratio(self) -> float:
        return self.covered / self.total if self.total else 0.0


class MissingIngredient(BaseModel):
    token: str
    ingredient_id: Optional[str] = None
    unit: Optional[str] = None
    reason: str


class BatchTotals(BaseModel):
    totals: NutrientTotals = Field(default_factory=NutrientTotals)
    coverage: Coverage = Field(default_factory=Coverage)
    missing: bool = False
    missing_details: list[MissingIngredient] = []

    @property
    def complete(self) -> bool:
        return not self.missing and self.coverage.total > 0


class MealTargets(BaseModel):
    meal_fraction: float
    kcal_target_meal: float
    sodium_limit_meal: float
    sat_fat_limit_g_meal: float
    added_sugar_limit_g_meal: float
    fiber_target_g_meal: float
    protein_floor_g_meal: float


class ServingEstimate(BaseModel):
    servings: int
    penalty: float
    per_serving: NutrientTotals
    targets: MealTargets


class NutritionResult(BaseModel):
    servings_estimate: Optional[int] = None
    servings_used: Optional[float] = None
    author_servings: Optional[float] = None  # the recipe's own count, shown when no estimate exists
    per_serving_totals: Optional[NutrientTotals] = None
    batch_totals: BatchTotals
    complete: bool
    coverage_ratio: float
    debug_targets: Optional[MealTargets] = None


class NutritionRequest(BaseModel):
    recipe: Recipe
    state: Optional[RenderState] = None
    settings: NutritionSettings = Field(default_factory=NutritionSettings)
    meal_type: str = "dinner"
    policy: Optional[NutritionPolicy] = None
    servings_override: Optional[float] = None
