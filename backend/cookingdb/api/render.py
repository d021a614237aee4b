from fastapi import APIRouter, HTTPException

from cookingdb.logging import get_logger
from cookingdb.schemas.render import RenderRequest, RenderResponse
from cookingdb.services.dietary import restriction_status
from cookingdb.services.pans import apply_pan
from cookingdb.services.rendering import render_document
from cookingdb.services.resolver import sync_selections
from cookingdb.services.session import new_render_state

router = APIRouter()
logger = get_logger(__name__)


@router.post("/render", response_model=RenderResponse)
def post_render(body: RenderRequest):
    """
    Render a recipe at the state's batch size.
    Without a state, a fresh one is built from the recipe defaults and any
    requested restrictions. The returned state carries the resolved choices.
    """
    recipe = body.recipe
    try:
        if body.state is None:
            state = new_render_state(recipe, body.requested_restrictions)
        else:
            state = body.state.model_copy(deep=True)
            sync_selections(recipe, state)
        if body.pan_id is not None:
            apply_pan(recipe, state, body.pan_id)
        ingredients, steps = render_document(recipe, state)
    except KeyError as e:
        logger.warning("render.contract_violation recipe=%s error=%s", recipe.id, e)
        raise HTTPException(status_code=400, detail=str(e.args[0]) if e.args else "unknown token")

    logger.info(
        "render.done recipe=%s multiplier=%s lines=%s",
        recipe.id,
        state.effective_multiplier,
        sum(len(section.lines) for section in ingredients),
    )
    return RenderResponse(
        recipe_id=recipe.id,
        effective_multiplier=state.effective_multiplier,
        ingredients=ingredients,
        steps=steps,
        state=state,
        restriction_status={k: v.model_dump() for k, v in restriction_status(recipe).items()},
    )
