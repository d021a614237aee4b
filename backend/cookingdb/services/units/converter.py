"""
Convert amounts across unit groups with ingredient-specific factors.

Two passes: (1) direct same-group conversion, (2) a single hop through one
bridge row (count→mass, volume→mass, count→volume or any generic row), run
forwards by multiplying or backwards by dividing. No factor, no conversion:
callers treat the ingredient as unconvertible rather than guessing.
"""

import math
from typing import Callable, NamedTuple, Optional

from cookingdb.logging import get_logger
from cookingdb.schemas.state import BridgeFactors
from cookingdb.services.units.registry import ConvertedAmount, convert_unit_amount, normalize_unit

logger = get_logger(__name__)


class BridgeRow(NamedTuple):
    from_unit: str
    to_unit: str
    factor: float


def bridge_rows(factors: Optional[BridgeFactors]) -> list[BridgeRow]:
    """Flatten named factors and generic rows into (from, to, factor) rows."""
    if factors is None:
        return []
    rows: list[BridgeRow] = []
    if _usable(factors.grams_per_count):
        rows.append(BridgeRow("count", "g", factors.grams_per_count))
    if _usable(factors.grams_per_cup):
        rows.append(BridgeRow("cup", "g", factors.grams_per_cup))
    if _usable(factors.tsp_per_sprig):
        rows.append(BridgeRow("count", "tsp", factors.tsp_per_sprig))
    for row in factors.unit_factors:
        from_unit = normalize_unit(row.from_unit)
        to_unit = normalize_unit(row.to_unit)
        if from_unit and to_unit and _usable(row.factor):
            rows.append(BridgeRow(from_unit, to_unit, row.factor))
    return rows


def convert_with_factors(
    amount: float,
    from_unit: Optional[str],
    to_unit: Optional[str],
    factors: Optional[BridgeFactors] = None,
) -> Optional[ConvertedAmount]:
    source = normalize_unit(from_unit)
    target = normalize_unit(to_unit)
    if not source or not target or amount is None or not math.isfinite(amount):
        return None
    if source == target:
        return ConvertedAmount(float(amount), target)
    direct = convert_unit_amount(amount, source, target)
    if direct:
        return direct
    for row in bridge_rows(factors):
        forward = _hop(amount, source, target, row.from_unit, row.to_unit, lambda v: v * row.factor)
        if forward:
            return forward
        backward = _hop(amount, source, target, row.to_unit, row.from_unit, lambda v: v / row.factor)
        if backward:
            return backward
    logger.debug("units.bridge_failed from=%s to=%s", source, target)
    return None


def _hop(
    amount: float,
    source: str,
    target: str,
    hop_from: str,
    hop_to: str,
    apply: Callable[[float], float],
) -> Optional[ConvertedAmount]:
    start = _same_or_convert(amount, source, hop_from)
    if start is None:
        return None
    return _same_or_convert_result(apply(start), hop_to, target)


def _same_or_convert(amount: float, unit: str, into: str) -> Optional[float]:
    if unit == into:
        return float(amount)
    converted = convert_unit_amount(amount, unit, into)
    return converted.amount if converted else None


def _same_or_convert_result(amount: float, unit: str, into: str) -> Optional[ConvertedAmount]:
    value = _same_or_convert(amount, unit, into)
    return ConvertedAmount(value, into) if value is not None else None


def _usable(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value) and value > 0
