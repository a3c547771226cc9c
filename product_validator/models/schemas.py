"""Pydantic models for API requests and responses."""
from datetime import datetime
from typing import Optional, List, Dict, Literal, Union
from enum import Enum
from pydantic import BaseModel, Field, ConfigDict


class SizeKind(str, Enum):
    """Physical dimension a size is measured in."""
    WEIGHT = "weight"
    VOLUME = "volume"
    COUNT = "count"


class IngredientForm(str, Enum):
    """Preparation/physical state an ingredient must be bought in."""
    RAW = "raw"
    FRESH = "fresh"
    DRY = "dry"
    FROZEN = "frozen"
    COOKED = "cooked"
    CANNED = "canned"
    LIQUID = "liquid"
    POWDER = "powder"


class Verdict(str, Enum):
    """Decision for one (spec, candidate) pair."""
    PASS = "pass"
    FAIL = "fail"
    UNSURE = "unsure"

    @property
    def is_decisive(self) -> bool:
        return self is not Verdict.UNSURE


class Size(BaseModel):
    """Canonical quantity: grams, millilitres or item count."""
    model_config = ConfigDict(frozen=True)

    amount: float = Field(..., description="Amount in the canonical unit")
    unit: Literal["g", "ml", "count"] = Field(..., description="Canonical unit")
    kind: SizeKind = Field(..., description="weight, volume or count")


class Quantity(BaseModel):
    """Target quantity of an ingredient as supplied by the caller."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    amount: float = Field(..., gt=0, description="Numeric amount")
    unit: str = Field(..., min_length=1, description="Unit as written (g, kg, ml, l, pack, ...)")


class IngredientSpec(BaseModel):
    """What must be bought."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str = Field(..., min_length=1, description="Ingredient name, e.g. 'chicken breast'")
    form: Optional[IngredientForm] = Field(None, description="Required physical form")
    quantity: Optional[Quantity] = Field(None, description="Required quantity")


class CandidateProduct(BaseModel):
    """One store offering being evaluated against a spec."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    product_id: Optional[Union[str, int]] = Field(None, alias="productId", description="Retailer product id")
    title: str = Field(..., min_length=1, description="Product title as listed")
    size_text: Optional[str] = Field(None, alias="sizeText", description="Free-text package size")
    category_path: List[str] = Field(default_factory=list, alias="categoryPath", description="Category breadcrumb, outermost first")
    brand: Optional[str] = Field(None, description="Brand name")
    price: Optional[float] = Field(None, description="Shelf price")

    @property
    def joined_category(self) -> str:
        return ">".join(self.category_path)


class RuleResult(BaseModel):
    """Deterministic classifier outcome."""
    verdict: Verdict
    rule_conf: float = Field(..., ge=0.0, le=1.0)
    reason: str = ""


class JudgeItem(BaseModel):
    """One entry in the batch sent to the generative judge."""
    ingredient: str
    candidate_title: str
    candidate_category: Optional[str] = None
    candidate_size: Optional[str] = None


class JudgeResult(BaseModel):
    """One element of the judge's JSON array response."""
    verdict: Verdict = Verdict.UNSURE
    confidence: float = Field(0.5, ge=0.0, le=1.0)
    reason: str = ""


class ValidationSignals(BaseModel):
    """Per-source confidences behind a final decision."""
    rule_conf: float = Field(..., ge=0.0, le=1.0, description="Rule classifier confidence")
    ai_conf: Optional[float] = Field(None, ge=0.0, le=1.0, description="Judge confidence, present only when judged")


class ValidationOutput(BaseModel):
    """Decision for one (spec, candidate) pair."""
    model_config = ConfigDict(frozen=True)

    verdict: Verdict = Field(..., description="pass, fail or unsure")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Calibrated confidence")
    reason: str = Field("", description="Human-readable reason")
    signals: ValidationSignals

    @property
    def is_decisive(self) -> bool:
        return self.verdict.is_decisive


class ValidateProductsRequest(BaseModel):
    """Request body for the validate-products endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    spec: IngredientSpec
    candidates: List[CandidateProduct]
    model: Optional[str] = Field(None, description="Judge model/deployment override")


class ValidateProductsResponse(BaseModel):
    """Response body for the validate-products endpoint."""
    results: List[ValidationOutput]


class ErrorResponse(BaseModel):
    """Structured error body; never carries a stack trace."""
    error: str
    upstream_status: Optional[int] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(..., description="Overall health status")
    services: Dict[str, bool] = Field(..., description="Status of individual services")
    timestamp: datetime = Field(default_factory=datetime.utcnow)
