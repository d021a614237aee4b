from cookingdb.schemas.recipe import Recipe
from cookingdb.schemas.render import LineSection
from cookingdb.schemas.state import RenderState
from cookingdb.services.rendering.lines import group_lines_by_section, render_ingredient_lines
from cookingdb.services.rendering.steps import render_step_lines


def render_document(recipe: Recipe, state: RenderState) -> tuple[list[LineSection], list[LineSection]]:
    """Sectioned ingredient and step lines for one render pass."""
    ingredients = group_lines_by_section(
        render_ingredient_lines(recipe, state), recipe.ingredient_sections
    )
    steps = group_lines_by_section(render_step_lines(recipe, state), recipe.step_sections)
    return ingredients, steps
