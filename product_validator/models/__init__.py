"""Data models initialization."""
from product_validator.models.schemas import (
    SizeKind,
    IngredientForm,
    Verdict,
    Size,
    Quantity,
    IngredientSpec,
    CandidateProduct,
    RuleResult,
    JudgeItem,
    JudgeResult,
    ValidationSignals,
    ValidationOutput,
    ValidateProductsRequest,
    ValidateProductsResponse,
    ErrorResponse,
    HealthResponse,
)

__all__ = [
    "SizeKind",
    "IngredientForm",
    "Verdict",
    "Size",
    "Quantity",
    "IngredientSpec",
    "CandidateProduct",
    "RuleResult",
    "JudgeItem",
    "JudgeResult",
    "ValidationSignals",
    "ValidationOutput",
    "ValidateProductsRequest",
    "ValidateProductsResponse",
    "ErrorResponse",
    "HealthResponse",
]
