import re

from cookingdb.schemas.recipe import Recipe
from cookingdb.schemas.render import RenderedLine
from cookingdb.schemas.state import RenderState
from cookingdb.services.rendering.lines import render_ingredient_entry
from cookingdb.services.resolver import select_option_for_token

_PLACEHOLDER_RE = re.compile(r"{{\s*([a-zA-Z0-9_-]+)\s*}}")
_STEP_NUMBER_RE = re.compile(r"^\d+\.\s*")


def format_step_text(step_text: str, recipe: Recipe, state: RenderState) -> str:
    """Replace ``{{token}}`` placeholders with the scaled, resolved ingredient text."""
    multiplier = state.effective_multiplier

    def _replace(match: re.Match) -> str:
        token = match.group(1)
        if token not in recipe.ingredients:
            return match.group(0)
        option = select_option_for_token(token, recipe, state)
        entry = render_ingredient_entry(option, multiplier, state.unit_selections.get(token), token=token)
        return entry.text

    return _PLACEHOLDER_RE.sub(_replace, step_text)


def render_step_lines(recipe: Recipe, state: RenderState) -> list[RenderedLine]:
    if recipe.steps:
        raw_steps = [(step.section, step.text) for step in recipe.steps if step.text.strip()]
    else:
        raw_steps = [(None, line) for line in recipe.steps_raw.splitlines() if line.strip()]
    return [
        RenderedLine(
            text=format_step_text(_STEP_NUMBER_RE.sub("", text.strip()), recipe, state),
            section=section,
        )
        for section, text in raw_steps
    ]
