"""Free-text package size parsing and tolerance comparison.

Sizes are normalised to grams (weight), millilitres (volume) or a plain item
count so that "1kg", "2 x 500g" and "1000 grams" all compare equal.
"""
import re
from typing import Optional

from product_validator.models import Quantity, Size, SizeKind

WEIGHT_UNITS = {
    "g": 1.0, "gram": 1.0, "grams": 1.0, "gr": 1.0,
    "kg": 1000.0, "kilo": 1000.0, "kilos": 1000.0, "kilogram": 1000.0, "kilograms": 1000.0,
}

VOLUME_UNITS = {
    "ml": 1.0, "millilitre": 1.0, "millilitres": 1.0, "milliliter": 1.0, "milliliters": 1.0,
    "l": 1000.0, "litre": 1000.0, "litres": 1000.0, "liter": 1000.0, "liters": 1000.0, "ltr": 1000.0,
}

COUNT_UNITS = frozenset({"count", "pack", "pk", "pc", "pcs", "ea", "each", "ct"})

_MULTI_PACK = re.compile(r"(\d+)\s*x\s*(\d+(?:\.\d+)?)\s*([a-z]+)\b")
_AMOUNT_UNIT = re.compile(r"(\d+(?:\.\d+)?)\s*([a-z]+)\b")
_BARE_COUNT = re.compile(r"\b(\d+)\s*(?:pack|pk|count|pcs?)\b")
_LONE_INTEGER = re.compile(r"^\s*(\d+)\s*$")


def _clean(text: str) -> str:
    return text.lower().replace("×", "x").replace(",", "").strip()


def unit_to_size(amount: float, unit: str) -> Optional[Size]:
    """Normalise one amount/unit pair, or None for an unknown unit."""
    unit = unit.lower()
    if unit in WEIGHT_UNITS:
        return Size(amount=round(amount * WEIGHT_UNITS[unit], 6), unit="g", kind=SizeKind.WEIGHT)
    if unit in VOLUME_UNITS:
        return Size(amount=round(amount * VOLUME_UNITS[unit], 6), unit="ml", kind=SizeKind.VOLUME)
    if unit in COUNT_UNITS:
        return Size(amount=amount, unit="count", kind=SizeKind.COUNT)
    return None


def parse_size(text: Optional[str]) -> Optional[Size]:
    """Parse a free-text size description.

    Tried in order: multi-pack ("4 x 250g"), amount with unit ("1L",
    "500 grams"), bare count ("6 pack", "12").

    Args:
        text: Size text or product title

    Returns:
        Canonical Size, or None when nothing recognisable is found
    """
    if not text:
        return None
    t = _clean(text)

    for match in _MULTI_PACK.finditer(t):
        inner = unit_to_size(float(match.group(2)), match.group(3))
        if inner is not None:
            count = int(match.group(1))
            return Size(amount=round(inner.amount * count, 6), unit=inner.unit, kind=inner.kind)

    for match in _AMOUNT_UNIT.finditer(t):
        size = unit_to_size(float(match.group(1)), match.group(2))
        if size is not None:
            return size

    match = _BARE_COUNT.search(t) or _LONE_INTEGER.match(t)
    if match:
        return Size(amount=float(match.group(1)), unit="count", kind=SizeKind.COUNT)

    return None


def quantity_to_size(quantity: Optional[Quantity]) -> Optional[Size]:
    """Normalise an ingredient's target quantity through the same parser."""
    if quantity is None:
        return None
    size = unit_to_size(quantity.amount, quantity.unit.strip())
    if size is not None:
        return size
    return parse_size(f"{quantity.amount} {quantity.unit}")


def within_tolerance(
    a: Optional[Size],
    b: Optional[Size],
    percent_tolerance: float = 15.0,
    count_slack: float = 1.0,
) -> bool:
    """Whether candidate size `b` is acceptably close to required size `a`.

    Tolerance is relative to `a`, so the comparison is not symmetric.
    Sizes of different kinds never match.
    """
    if a is None or b is None:
        return False
    if a.kind != b.kind:
        return False
    if a.kind == SizeKind.COUNT:
        return abs(a.amount - b.amount) <= count_slack
    tolerance = (percent_tolerance / 100.0) * a.amount
    return abs(a.amount - b.amount) <= tolerance
