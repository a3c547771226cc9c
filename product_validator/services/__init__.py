"""Services initialization."""
from product_validator.services.size_normalizer import parse_size, within_tolerance
from product_validator.services.rule_classifier import rule_evaluate
from product_validator.services.validation_cache import ValidationCache, InMemoryValidationCache, cache_key
from product_validator.services.judge_client import JudgeClient
from product_validator.services.product_validator import ProductValidator, get_product_validator
from product_validator.services.selection import pick_candidate

__all__ = [
    "parse_size",
    "within_tolerance",
    "rule_evaluate",
    "ValidationCache",
    "InMemoryValidationCache",
    "cache_key",
    "JudgeClient",
    "ProductValidator",
    "get_product_validator",
    "pick_candidate",
]
