from fastapi import APIRouter, HTTPException

from cookingdb.logging import get_logger
from cookingdb.schemas.nutrition import MEAL_TYPES, NutritionRequest, NutritionResult
from cookingdb.services.optimization.serving_estimator import nutrition_summary
from cookingdb.services.resolver import sync_selections
from cookingdb.services.session import new_render_state

router = APIRouter()
logger = get_logger(__name__)


@router.get("/nutrition/meal-types")
def list_meal_types():
    return {"meal_types": list(MEAL_TYPES)}


@router.post("/nutrition", response_model=NutritionResult)
def post_nutrition(body: NutritionRequest):
    """
    Batch totals, per-serving totals and a suggested serving count.
    servings_estimate is null when any ingredient lacks usable nutrition data.
    """
    recipe = body.recipe
    try:
        if body.state is None:
            state = new_render_state(recipe)
        else:
            state = body.state.model_copy(deep=True)
            sync_selections(recipe, state)
        return nutrition_summary(
            recipe,
            state,
            settings=body.settings,
            meal_type=body.meal_type,
            policy=body.policy,
            servings_override=body.servings_override,
        )
    except KeyError as e:
        logger.warning("nutrition.contract_violation recipe=%s error=%s", recipe.id, e)
        raise HTTPException(status_code=400, detail=str(e.args[0]) if e.args else "unknown token")
