"""
Scaled ingredient lines.

Quantities in the option's own unit are scaled as fractions and read as
cooking fractions ("1 1/2 cups"); quantities switched to another unit read as
rounded decimals unless they land near a simple fraction.
"""

from typing import Iterable, Optional, Sequence

from cookingdb.logging import get_logger
from cookingdb.schemas.recipe import Option, Recipe
from cookingdb.schemas.render import LineSection, RenderedEntry, RenderedLine
from cookingdb.schemas.state import RenderState
from cookingdb.services.parsing.ratios import (
    format_amount_for_display,
    format_fraction,
    fraction_to_float,
    multiply_fraction,
    parse_ratio,
)
from cookingdb.services.resolver import alternative_options, resolve_tokens
from cookingdb.services.units.registry import (
    convert_unit_amount,
    format_unit_label,
    normalize_unit,
    unit_definition,
)

logger = get_logger(__name__)

LINE_JOINER = " + "

# Count aliases that print no unit word: "2 eggs", not "2 count eggs".
_BARE_COUNT_WORDS = frozenset({"count", "each", "whole"})
# Size words that stay in the line and still pluralize the name: "2 medium onions".
_SIZE_WORDS = frozenset({"small", "medium", "large"})


def pluralize(display: str, amount: float) -> str:
    if abs(amount - 1) < 1e-9:
        return display
    if display.endswith("s"):
        return display
    return f"{display}s"


def render_ingredient_entry(
    option: Optional[Option],
    multiplier: float,
    selected_unit: Optional[str] = None,
    token: str = "",
) -> RenderedEntry:
    if option is None:
        return RenderedEntry(token=token, text="")
    base = {"token": token, "option_key": option.option_key, "ingredient_id": option.ingredient_id}
    frac = parse_ratio(option.ratio)
    if frac is None:
        return RenderedEntry(**base, text=option.display)

    scaled = multiply_fraction(frac, multiplier)
    base_amount = fraction_to_float(scaled)
    base_unit = normalize_unit(option.unit)
    raw_unit = " ".join((option.unit or "").split()).lower()

    display_amount = base_amount
    display_unit = base_unit
    amount_text = format_fraction(scaled)
    factor = None
    target = normalize_unit(selected_unit) if selected_unit else base_unit
    if base_unit and target and target != base_unit:
        converted = convert_unit_amount(base_amount, base_unit, target)
        if converted:
            display_amount, display_unit = converted.amount, converted.unit
            amount_text = format_amount_for_display(display_amount)
            factor = convert_unit_amount(1, base_unit, display_unit).amount

    if factor is None:
        unit_label = _native_unit_label(option.unit, raw_unit, base_unit, display_amount)
    else:
        unit_label = format_unit_label(display_unit, display_amount)

    name = option.display
    if base_unit == "count" and (raw_unit in _BARE_COUNT_WORDS or raw_unit in _SIZE_WORDS):
        name = pluralize(option.display, display_amount)

    text = " ".join(part for part in (amount_text, unit_label, name) if part)
    return RenderedEntry(
        **base,
        text=text,
        scalable=True,
        amount=display_amount,
        amount_text=amount_text,
        unit=display_unit,
        unit_label=unit_label,
        base_amount=base_amount,
        base_amount_text=format_fraction(scaled),
        base_unit=base_unit,
        base_unit_label=_native_unit_label(option.unit, raw_unit, base_unit, base_amount),
        conversion_factor=factor,
    )


def _native_unit_label(raw: Optional[str], cleaned: str, unit: Optional[str], amount: float) -> str:
    if not unit or cleaned in _BARE_COUNT_WORDS:
        return ""
    definition = unit_definition(unit)
    if definition is None or definition.id == "count":
        # Unknown units and count aliases ("pinch", "sprig", "can") print as written.
        return (raw or "").strip()
    return format_unit_label(unit, amount)


def render_ingredient_lines(recipe: Recipe, state: RenderState) -> list[RenderedLine]:
    multiplier = state.effective_multiplier
    lines: list[RenderedLine] = []
    by_group: dict[str, RenderedLine] = {}

    for resolved in resolve_tokens(recipe, state):
        if not resolved.visible:
            continue
        option = resolved.option
        token_data = resolved.token_data
        selected_unit = state.unit_selections.get(resolved.token)
        entry = render_ingredient_entry(option, multiplier, selected_unit, token=resolved.token)
        alternatives = [
            render_ingredient_entry(alt, multiplier, selected_unit, token=resolved.token).text
            for alt in alternative_options(token_data, state, option)
        ]
        line_group = (option.line_group if option else None) or token_data.line_group
        section = (option.section if option else None) or token_data.section

        if line_group and line_group in by_group:
            line = by_group[line_group]
            line.entries.append(entry)
            line.alternatives.extend(alternatives)
            line.text = LINE_JOINER.join(e.text for e in line.entries if e.text)
            continue

        line = RenderedLine(
            text=entry.text,
            alternatives=alternatives,
            entries=[entry],
            section=section,
            line_group=line_group,
        )
        if line_group:
            by_group[line_group] = line
        lines.append(line)

    logger.debug(
        "render.ingredients recipe=%s lines=%s multiplier=%s", recipe.id, len(lines), multiplier
    )
    return lines


def group_lines_by_section(
    lines: Iterable[RenderedLine], ordered_sections: Sequence[str]
) -> list[LineSection]:
    """
    Bucket lines under section headers.

    Unsectioned lines come first with no header, declared sections follow in
    the given order, and sections missing from the declaration trail in the
    order they first appear. Line order inside a bucket is preserved.
    """
    buckets: dict[Optional[str], list[RenderedLine]] = {None: []}
    for name in ordered_sections:
        buckets.setdefault(name, [])
    for line in lines:
        buckets.setdefault(line.section or None, []).append(line)
    return [
        LineSection(section=name, lines=bucket) for name, bucket in buckets.items() if bucket
    ]
