"""
Ratio strings ("1", "3/4", "1 1/2") as reduced fractions, scaled by batch multipliers.

Multipliers are snapped to sixteenths before scaling, so scaled quantities are
always expressible in 1/16 steps of the original ratio's denominator.
"""

import fractions
import math
import re
from typing import NamedTuple, Optional

from cookingdb.config import settings

_RATIO_RE = re.compile(r"^(?:(?P<whole>-?\d+)\s+)?(?P<num>-?\d+(?:\.\d+)?)(?:/(?P<den>\d+))?$")

# Fractional parts that displayed amounts snap to before falling back to decimals.
_COOKING_FRACTIONS = tuple(
    sorted({n / d for d in (2, 3, 4, 8) for n in range(1, d)})
)


class Fraction(NamedTuple):
    num: int
    den: int


def simplify(frac: Fraction) -> Fraction:
    g = math.gcd(frac.num, frac.den) or 1
    num, den = frac.num // g, frac.den // g
    if den < 0:
        num, den = -num, -den
    return Fraction(num, den)


def parse_ratio(text: Optional[str]) -> Optional[Fraction]:
    """Parse "N", "N/D" or "W N/D"; anything else (or a zero denominator) is None."""
    if not text:
        return None
    cleaned = " ".join(str(text).split())
    if not cleaned:
        return None
    match = _RATIO_RE.match(cleaned)
    if not match:
        return None
    raw_num = match.group("num")
    if "." in raw_num:
        # Decimals only stand alone: "1.5" but never "1 1.5" or "1.5/2".
        if match.group("whole") or match.group("den"):
            return None
        exact = fractions.Fraction(raw_num)
        return simplify(Fraction(exact.numerator, exact.denominator))
    whole = int(match.group("whole") or 0)
    num = int(raw_num)
    den = int(match.group("den") or 1)
    if den == 0:
        return None
    if match.group("whole") and not match.group("den"):
        # "1 2" is not a mixed number.
        return None
    return simplify(Fraction(whole * den + num, den))


def parse_ratio_to_number(text: Optional[str]) -> Optional[float]:
    frac = parse_ratio(text)
    return fraction_to_float(frac) if frac else None


def fraction_to_float(frac: Fraction) -> float:
    return frac.num / frac.den


def decimal_to_fraction(value: float, max_den: Optional[int] = None) -> Fraction:
    den = max_den or settings.fraction_max_denominator
    # Halves round up, never to even.
    return simplify(Fraction(math.floor(value * den + 0.5), den))


def multiply_fraction(frac: Optional[Fraction], multiplier: float) -> Optional[Fraction]:
    if frac is None:
        return None
    mult = decimal_to_fraction(multiplier)
    return simplify(Fraction(frac.num * mult.num, frac.den * mult.den))


def format_fraction(frac: Optional[Fraction]) -> str:
    if frac is None:
        return ""
    whole = int(frac.num / frac.den)
    remainder = abs(frac.num) % frac.den
    if remainder == 0:
        return str(whole)
    if whole == 0:
        return f"{frac.num}/{frac.den}"
    return f"{whole} {remainder}/{frac.den}"


def format_amount_for_display(value: Optional[float]) -> str:
    """
    Render a decimal amount for humans.

    Amounts close to a whole number or a common cooking fraction (halves,
    thirds, quarters, eighths) read as that fraction; anything else, such as
    the output of a grams-to-ounces conversion, reads as a rounded decimal.
    """
    if value is None or not math.isfinite(value):
        return ""
    tolerance = settings.display_snap_tolerance
    whole = math.floor(value)
    part = value - whole
    if part <= tolerance:
        return str(int(whole))
    if 1 - part <= tolerance:
        return str(int(whole) + 1)
    for candidate in _COOKING_FRACTIONS:
        if abs(part - candidate) <= tolerance:
            frac = _snap(candidate)
            return format_fraction(simplify(Fraction(int(whole) * frac.den + frac.num, frac.den)))
    return f"{value:.2f}".rstrip("0").rstrip(".")


def _snap(value: float) -> Fraction:
    for den in (2, 3, 4, 8):
        num = round(value * den)
        if abs(num / den - value) < 1e-9:
            return simplify(Fraction(num, den))
    return decimal_to_fraction(value)
