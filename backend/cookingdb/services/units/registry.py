"""
Canonical unit groups and alias table.

Every unit belongs to exactly one group (volume, mass, count) and converts
linearly to the group's base unit. Conversion never crosses groups here; see
``cookingdb.services.units.converter`` for ingredient-specific bridging.
"""

import math
from types import MappingProxyType
from typing import Mapping, NamedTuple, Optional


class UnitDefinition(NamedTuple):
    id: str
    group: str
    label: str
    plural: str
    to_base: float


class ConvertedAmount(NamedTuple):
    amount: float
    unit: str


class UnitOption(NamedTuple):
    id: str
    label: str


def _group(base: str, label: str, units: dict[str, tuple[str, str, float]]) -> Mapping:
    return MappingProxyType({"base": base, "label": label, "units": MappingProxyType(units)})


UNIT_CONVERSIONS: Mapping[str, Mapping] = MappingProxyType({
    "volume": _group("ml", "Volume", {
        "tsp": ("teaspoon", "teaspoons", 5.0),
        "tbsp": ("tablespoon", "tablespoons", 15.0),
        "cup": ("cup", "cups", 240.0),
        "fl_oz": ("fl oz", "fl oz", 30.0),
        "pint": ("pint", "pints", 480.0),
        "quart": ("quart", "quarts", 960.0),
        "gallon": ("gallon", "gallons", 3840.0),
        "ml": ("mL", "mL", 1.0),
        "l": ("liter", "liters", 1000.0),
    }),
    "mass": _group("g", "Mass", {
        "g": ("gram", "grams", 1.0),
        "kg": ("kilogram", "kilograms", 1000.0),
        "oz": ("ounce", "ounces", 28.3495),
        "lb": ("pound", "pounds", 453.592),
    }),
    "count": _group("count", "Count", {
        "count": ("count", "count", 1.0),
        "clove": ("clove", "cloves", 1.0),
    }),
})

# Lowercased spellings, plurals and size words mapped to canonical unit ids.
UNIT_ALIASES: Mapping[str, str] = MappingProxyType({
    "teaspoon": "tsp", "teaspoons": "tsp", "tsps": "tsp",
    "tablespoon": "tbsp", "tablespoons": "tbsp", "tbsps": "tbsp", "tbs": "tbsp", "tb": "tbsp",
    "cups": "cup",
    "fl oz": "fl_oz", "fluid ounce": "fl_oz", "fluid ounces": "fl_oz", "floz": "fl_oz",
    "pints": "pint", "pt": "pint",
    "quarts": "quart", "qt": "quart",
    "gallons": "gallon", "gal": "gallon",
    "milliliter": "ml", "milliliters": "ml", "millilitre": "ml", "millilitres": "ml", "mls": "ml",
    "liter": "l", "liters": "l", "litre": "l", "litres": "l",
    "gram": "g", "grams": "g", "gs": "g",
    "kilogram": "kg", "kilograms": "kg", "kgs": "kg",
    "ounce": "oz", "ounces": "oz",
    "pound": "lb", "pounds": "lb", "lbs": "lb",
    "cloves": "clove",
    "each": "count", "whole": "count",
    "medium": "count", "large": "count", "small": "count",
    "piece": "count", "pieces": "count",
    "package": "count", "bag": "count", "bunch": "count",
    "sprig": "count", "sprigs": "count", "can": "count",
    "dash": "tsp", "drop": "tsp",
})


def normalize_unit(raw: Optional[str]) -> Optional[str]:
    """Canonical unit id for ``raw``; unknown units pass through lowercased."""
    if raw is None:
        return None
    cleaned = " ".join(str(raw).split()).lower()
    if not cleaned:
        return None
    return UNIT_ALIASES.get(cleaned, cleaned)


def unit_definition(unit: Optional[str]) -> Optional[UnitDefinition]:
    unit_id = normalize_unit(unit)
    if not unit_id:
        return None
    for group_name, group in UNIT_CONVERSIONS.items():
        meta = group["units"].get(unit_id)
        if meta:
            label, plural, to_base = meta
            return UnitDefinition(unit_id, group_name, label, plural, to_base)
    return None


def unit_group(unit: Optional[str]) -> Optional[str]:
    definition = unit_definition(unit)
    return definition.group if definition else None


def convert_unit_amount(amount: float, from_unit: Optional[str], to_unit: Optional[str]) -> Optional[ConvertedAmount]:
    """Same-group conversion; None for unknown units or different groups."""
    if amount is None:
        return None
    try:
        value = float(amount)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    from_def = unit_definition(from_unit)
    to_def = unit_definition(to_unit)
    if not from_def or not to_def or from_def.group != to_def.group:
        return None
    return ConvertedAmount(value * from_def.to_base / to_def.to_base, to_def.id)


def unit_options_for(unit: Optional[str]) -> list[UnitOption]:
    """Units a reader may switch ``unit`` to (its own group, table order)."""
    definition = unit_definition(unit)
    if not definition:
        return []
    units = UNIT_CONVERSIONS[definition.group]["units"]
    return [UnitOption(unit_id, plural or label or unit_id) for unit_id, (label, plural, _) in units.items()]


def format_unit_label(unit: Optional[str], amount: float = 1.0) -> str:
    definition = unit_definition(unit)
    if not definition:
        return unit or ""
    return definition.plural if amount > 1 + 1e-9 else definition.label


def unit_groups() -> dict[str, dict]:
    """Plain-dict copy of the registry for serialisation."""
    return {
        name: {
            "label": group["label"],
            "base": group["base"],
            "units": {
                unit_id: {"label": label, "plural": plural, "to_base": to_base}
                for unit_id, (label, plural, to_base) in group["units"].items()
            },
        }
        for name, group in UNIT_CONVERSIONS.items()
    }
