import math
from typing import Optional

from pydantic import BaseModel, Field

from cookingdb.schemas.recipe import DietaryFlags


class UnitFactor(BaseModel):
    from_unit: str
    to_unit: str
    factor: float


class BridgeFactors(BaseModel):
    """Ingredient-specific factors that allow conversion across unit groups."""

    grams_per_count: Optional[float] = None
    tsp_per_sprig: Optional[float] = None
    grams_per_cup: Optional[float] = None
    unit_factors: list[UnitFactor] = []


class RenderState(BaseModel):
    """
    Per-session rendering state. Caller-owned and mutable: the resolver writes
    resolved choices back into ``selected_options`` so later lookups in the
    same render pass see the same choice.
    """

    multiplier: float = 1.0
    pan_multiplier: float = 1.0
    selected_pan_id: Optional[str] = None
    selected_options: dict[str, str] = {}
    restrictions: DietaryFlags = Field(default_factory=DietaryFlags)
    unit_selections: dict[str, str] = {}
    ingredient_factors: dict[str, BridgeFactors] = {}

    @property
    def effective_multiplier(self) -> float:
        return _safe_factor(self.multiplier) * _safe_factor(self.pan_multiplier)

    def factors_for(self, ingredient_id: Optional[str]) -> Optional[BridgeFactors]:
        if not ingredient_id:
            return None
        return self.ingredient_factors.get(ingredient_id)


def _safe_factor(value: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 1.0
    return number if math.isfinite(number) and number != 0 else 1.0
