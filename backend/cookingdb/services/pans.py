"""Pan-size scaling: quantities follow the ratio of pan areas."""

import math
from typing import Optional

from cookingdb.logging import get_logger
from cookingdb.schemas.recipe import PanSize, Recipe
from cookingdb.schemas.state import RenderState

logger = get_logger(__name__)


def pan_area(pan: Optional[PanSize]) -> Optional[float]:
    if pan is None:
        return None
    shape = (pan.shape or "rectangle").lower()
    width = pan.width
    if width is None or not math.isfinite(width) or width <= 0:
        return None
    if shape == "round":
        radius = width / 2
        return math.pi * radius * radius
    if shape == "muffin":
        cups = pan.cups or width
        return cups if cups > 0 else None
    height = pan.height or (width if shape == "square" else None)
    if height is None or not math.isfinite(height) or height <= 0:
        return None
    return width * height


def valid_pans(recipe: Recipe) -> list[PanSize]:
    return [pan for pan in recipe.pan_sizes if pan_area(pan) is not None]


def base_pan(recipe: Recipe) -> Optional[PanSize]:
    pans = valid_pans(recipe)
    for pan in pans:
        if pan.id == recipe.default_pan:
            return pan
    return pans[0] if pans else None


def has_meaningful_pans(recipe: Recipe) -> bool:
    """At least two usable pans, one of them differing in area by 1% or more."""
    pans = valid_pans(recipe)
    base = base_pan(recipe)
    if len(pans) < 2 or base is None:
        if recipe.pan_sizes and not pans:
            logger.warning("pans.ignored recipe=%s reason=missing_dimensions", recipe.id)
        return False
    base_area = pan_area(base)
    return any(abs(pan_area(pan) / base_area - 1) >= 0.01 for pan in pans)


def pan_multiplier(recipe: Recipe, pan_id: Optional[str]) -> float:
    base = base_pan(recipe)
    if base is None or not pan_id:
        return 1.0
    selected = next((pan for pan in valid_pans(recipe) if pan.id == pan_id), None)
    if selected is None:
        return 1.0
    return pan_area(selected) / pan_area(base)


def apply_pan(recipe: Recipe, state: RenderState, pan_id: Optional[str]) -> float:
    """Point ``state`` at ``pan_id`` and return the resulting pan multiplier."""
    state.selected_pan_id = pan_id or recipe.default_pan
    state.pan_multiplier = pan_multiplier(recipe, pan_id) if has_meaningful_pans(recipe) else 1.0
    return state.pan_multiplier
