"""Validation orchestrator: cache, rules, one batched judge call, merge."""
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from pydantic import ValidationError

from product_validator.config import Settings, settings as default_settings
from product_validator.errors import InvalidPayloadError, UpstreamJudgeError
from product_validator.models import (
    CandidateProduct,
    IngredientSpec,
    JudgeItem,
    JudgeResult,
    RuleResult,
    ValidateProductsRequest,
    ValidationOutput,
    ValidationSignals,
    Verdict,
)
from product_validator.services.judge_client import JudgeClient
from product_validator.services.rule_classifier import rule_evaluate
from product_validator.services.validation_cache import (
    InMemoryValidationCache,
    ValidationCache,
    cache_key,
)
from product_validator.utils.logging import get_logger

logger = get_logger(__name__)


def describe_validation_error(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        location = ".".join(str(part) for part in err.get("loc", ())) or "body"
        parts.append(f"{location}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)


def parse_validate_request(payload: Any) -> ValidateProductsRequest:
    """Validate a raw `{spec, candidates, model?}` payload.

    Raises:
        InvalidPayloadError: If spec or candidates are missing or malformed
    """
    if not isinstance(payload, dict):
        raise InvalidPayloadError("Invalid payload: expected a JSON object with 'spec' and 'candidates'")
    try:
        return ValidateProductsRequest.model_validate(payload)
    except ValidationError as e:
        raise InvalidPayloadError(f"Invalid payload: {describe_validation_error(e)}") from e


@dataclass
class _Pending:
    index: int
    key: str
    rule: RuleResult
    item: JudgeItem


def merge_judgement(rule: RuleResult, judged: JudgeResult, min_confidence: float) -> ValidationOutput:
    """Combine a rule result with the judge's answer for the same item.

    The judge's pass/fail only stands at or above `min_confidence`;
    final confidence is the larger of the two sources.
    """
    verdict = judged.verdict if judged.confidence >= min_confidence else Verdict.UNSURE
    return ValidationOutput(
        verdict=verdict,
        confidence=max(rule.rule_conf, judged.confidence),
        reason=judged.reason,
        signals=ValidationSignals(rule_conf=rule.rule_conf, ai_conf=judged.confidence),
    )


class ProductValidator:
    """Classifies store candidates against an ingredient spec."""

    def __init__(
        self,
        cache: ValidationCache,
        judge: JudgeClient,
        settings: Optional[Settings] = None,
    ):
        self.cache = cache
        self.judge = judge
        self.settings = settings or default_settings

    def _is_cacheable(self, output: ValidationOutput) -> bool:
        return output.is_decisive and output.confidence >= self.settings.validator_cache_min_confidence

    def _remember(self, key: str, output: ValidationOutput) -> None:
        if self._is_cacheable(output):
            self.cache.set(key, output, self.settings.validator_cache_ttl_seconds)

    async def validate(
        self,
        spec: IngredientSpec,
        candidates: Sequence[CandidateProduct],
        model: Optional[str] = None,
    ) -> List[ValidationOutput]:
        """Validate every candidate, in input order.

        Args:
            spec: Required ingredient
            candidates: Store products to classify
            model: Judge model/deployment override

        Returns:
            One ValidationOutput per candidate, same order as `candidates`

        Raises:
            UpstreamJudgeError: If the judge call fails and the failure mode
                is "raise"
        """
        logger.info("Validating candidates", ingredient=spec.name, count=len(candidates), model=model)

        outputs: List[ValidationOutput] = []
        pending: List[_Pending] = []
        cache_hits = 0

        for index, candidate in enumerate(candidates):
            key = cache_key(spec, candidate)
            cached = self.cache.get(key)
            if cached is not None:
                cache_hits += 1
                outputs.append(cached)
                continue

            rule = rule_evaluate(spec, candidate, self.settings)
            output = ValidationOutput(
                verdict=rule.verdict,
                confidence=rule.rule_conf,
                reason=rule.reason,
                signals=ValidationSignals(rule_conf=rule.rule_conf),
            )
            outputs.append(output)

            if rule.verdict == Verdict.UNSURE:
                pending.append(_Pending(
                    index=index,
                    key=key,
                    rule=rule,
                    item=JudgeItem(
                        ingredient=spec.name,
                        candidate_title=candidate.title,
                        candidate_category=candidate.joined_category or None,
                        candidate_size=candidate.size_text,
                    ),
                ))
            else:
                self._remember(key, output)

        if pending:
            await self._judge_pending(spec, candidates, pending, outputs, model)

        logger.info(
            "Validation batch completed",
            ingredient=spec.name,
            count=len(outputs),
            cache_hits=cache_hits,
            judged=len(pending),
            passes=sum(1 for o in outputs if o.verdict == Verdict.PASS),
        )
        return outputs

    async def _judge_pending(
        self,
        spec: IngredientSpec,
        candidates: Sequence[CandidateProduct],
        pending: List[_Pending],
        outputs: List[ValidationOutput],
        model: Optional[str],
    ) -> None:
        try:
            judged = await self.judge.judge_batch([p.item for p in pending], model=model)
        except UpstreamJudgeError as e:
            if self.settings.validator_judge_failure_mode == "degrade":
                logger.warning(
                    "Judge unavailable; returning rule-only results",
                    ingredient=spec.name,
                    pending=len(pending),
                    status=e.status,
                    error=str(e),
                )
                return
            logger.error("Judge batch failed", ingredient=spec.name, pending=len(pending), status=e.status, error=str(e))
            raise

        for entry, result in zip(pending, judged):
            output = merge_judgement(entry.rule, result, self.settings.validator_judge_min_confidence)
            outputs[entry.index] = output
            logger.info(
                "Judged candidate",
                ingredient=spec.name,
                product=candidates[entry.index].title,
                verdict=output.verdict.value,
                confidence=output.confidence,
            )
            self._remember(entry.key, output)


# Global singleton instance
_product_validator: Optional[ProductValidator] = None


def get_product_validator() -> ProductValidator:
    """Get the process-wide validator with an in-memory cache.

    Returns:
        ProductValidator singleton
    """
    global _product_validator
    if _product_validator is None:
        _product_validator = ProductValidator(
            cache=InMemoryValidationCache(),
            judge=JudgeClient(),
        )
    return _product_validator
