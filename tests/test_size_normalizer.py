from typing import Optional

import pytest


@pytest.mark.parametrize(
    "text,amount,unit,kind",
    [
        ("4 x 250g", 1000, "g", "weight"),
        ("2L", 2000, "ml", "volume"),
        ("1L", 1000, "ml", "volume"),
        ("6 pack", 6, "count", "count"),
        ("12", 12, "count", "count"),
        ("1.5kg", 1500, "g", "weight"),
        ("3×100g", 300, "g", "weight"),
        ("1,000 ml", 1000, "ml", "volume"),
        ("500 Grams", 500, "g", "weight"),
        ("Organic Chicken Breast Fillets 500g", 500, "g", "weight"),
        ("Free range eggs 12 pk", 12, "count", "count"),
    ],
)
def test_parse_size_normalises_units(text: str, amount: float, unit: str, kind: str) -> None:
    from product_validator.services.size_normalizer import parse_size

    size = parse_size(text)

    assert size is not None
    assert size.amount == amount
    assert size.unit == unit
    assert size.kind.value == kind


@pytest.mark.parametrize("text", ["banana", "", None, "large tray"])
def test_parse_size_returns_none_without_size(text: Optional[str]) -> None:
    from product_validator.services.size_normalizer import parse_size

    assert parse_size(text) is None


def test_parse_size_skips_unknown_unit_before_known_one() -> None:
    from product_validator.services.size_normalizer import parse_size

    size = parse_size("Chicken 2 fillets 450g")

    assert size is not None
    assert (size.amount, size.unit) == (450, "g")


def test_within_tolerance_weight_percent() -> None:
    from product_validator.models import Size
    from product_validator.services.size_normalizer import within_tolerance

    required = Size(amount=500, unit="g", kind="weight")

    assert within_tolerance(required, Size(amount=560, unit="g", kind="weight")) is True
    assert within_tolerance(required, Size(amount=600, unit="g", kind="weight")) is False


def test_within_tolerance_is_relative_to_required_size() -> None:
    from product_validator.models import Size
    from product_validator.services.size_normalizer import within_tolerance

    big = Size(amount=500, unit="g", kind="weight")
    small = Size(amount=430, unit="g", kind="weight")

    assert within_tolerance(big, small) is True
    assert within_tolerance(small, big) is False


def test_within_tolerance_rejects_cross_kind_and_missing() -> None:
    from product_validator.models import Size
    from product_validator.services.size_normalizer import within_tolerance

    grams = Size(amount=500, unit="g", kind="weight")
    millilitres = Size(amount=500, unit="ml", kind="volume")

    assert within_tolerance(grams, millilitres) is False
    assert within_tolerance(grams, None) is False
    assert within_tolerance(None, grams) is False


def test_within_tolerance_count_slack() -> None:
    from product_validator.models import Size
    from product_validator.services.size_normalizer import within_tolerance

    dozen = Size(amount=12, unit="count", kind="count")

    assert within_tolerance(dozen, Size(amount=11, unit="count", kind="count")) is True
    assert within_tolerance(dozen, Size(amount=10, unit="count", kind="count")) is False
    assert within_tolerance(dozen, Size(amount=10, unit="count", kind="count"), count_slack=2) is True


def test_quantity_to_size_uses_unit_tables() -> None:
    from product_validator.models import Quantity
    from product_validator.services.size_normalizer import quantity_to_size

    size = quantity_to_size(Quantity(amount=1, unit="kg"))

    assert size is not None
    assert (size.amount, size.unit) == (1000, "g")
    assert quantity_to_size(Quantity(amount=2, unit="tbsp")) is None
    assert quantity_to_size(None) is None
