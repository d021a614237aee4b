"""Unit registry (same-group conversion) and ingredient-specific bridging."""

from cookingdb.services.units.converter import bridge_rows, convert_with_factors
from cookingdb.services.units.registry import (
    ConvertedAmount,
    UnitDefinition,
    convert_unit_amount,
    format_unit_label,
    normalize_unit,
    unit_definition,
    unit_options_for,
)

__all__ = [
    "ConvertedAmount",
    "UnitDefinition",
    "bridge_rows",
    "convert_unit_amount",
    "convert_with_factors",
    "format_unit_label",
    "normalize_unit",
    "unit_definition",
    "unit_options_for",
]
