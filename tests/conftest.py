from typing import Optional

import pytest

from tests.fakes import FakeClock


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def chicken_spec():
    from product_validator.models import IngredientSpec

    return IngredientSpec.model_validate(
        {"name": "chicken breast", "form": "raw", "quantity": {"amount": 500, "unit": "g"}}
    )


@pytest.fixture
def make_candidate():
    from product_validator.models import CandidateProduct

    def _make(title: str, category_path: Optional[list] = None, size_text: Optional[str] = None, product_id: str = "p-1"):
        return CandidateProduct.model_validate(
            {
                "productId": product_id,
                "title": title,
                "sizeText": size_text,
                "categoryPath": category_path or [],
                "price": 9.5,
            }
        )

    return _make
