"""Ingredient and step lines for display."""

from cookingdb.services.rendering.document import render_document
from cookingdb.services.rendering.lines import (
    group_lines_by_section,
    render_ingredient_entry,
    render_ingredient_lines,
)
from cookingdb.services.rendering.steps import format_step_text, render_step_lines

__all__ = [
    "format_step_text",
    "group_lines_by_section",
    "render_document",
    "render_ingredient_entry",
    "render_ingredient_lines",
    "render_step_lines",
]
