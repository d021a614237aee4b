from typing import Mapping, Optional

from cookingdb.logging import get_logger
from cookingdb.schemas.recipe import Recipe
from cookingdb.schemas.state import BridgeFactors, RenderState
from cookingdb.services.dietary import initial_restrictions
from cookingdb.services.resolver import sync_selections

logger = get_logger(__name__)


def new_render_state(
    recipe: Recipe,
    requested_restrictions: Optional[Mapping[str, Optional[bool]]] = None,
    ingredient_factors: Optional[Mapping[str, BridgeFactors]] = None,
) -> RenderState:
    """Default state for a fresh view of ``recipe`` with choices already resolved."""
    state = RenderState(
        multiplier=recipe.default_base,
        pan_multiplier=1.0,
        selected_pan_id=recipe.default_pan,
        restrictions=initial_restrictions(recipe, requested_restrictions),
        ingredient_factors=dict(ingredient_factors or {}),
    )
    sync_selections(recipe, state)
    logger.debug("session.new recipe=%s selections=%s", recipe.id, state.selected_options)
    return state
