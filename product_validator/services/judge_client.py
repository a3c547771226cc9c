"""Batched generative judge for candidates the rules could not decide."""
import asyncio
import json
import math
import time
from typing import Any, List, Optional, Protocol

from openai import APIStatusError, OpenAIError

from product_validator.azure.openai_client import get_openai_client
from product_validator.config import settings
from product_validator.errors import UpstreamJudgeError
from product_validator.models import JudgeItem, JudgeResult, Verdict
from product_validator.utils.logging import get_logger

logger = get_logger(__name__)

SYSTEM_PROMPT = (
    "You are a strict product-matching judge for grocery shopping. "
    "For each item, decide whether the candidate product is an acceptable purchase for the ingredient. "
    "Require the same base food and the same form (raw, dried, frozen, powdered and so on). "
    "The package size must be within ±15% of the ingredient's requirement when both are known. "
    "Reject products from unrelated categories such as sauces, desserts, drinks, supplements or meal kits. "
    "Return ONLY a JSON array with one element per input item, in the same order: "
    '[{"verdict": "pass|fail|unsure", "confidence": 0.0-1.0, "reason": "short explanation"}]. '
    "No markdown."
)

_VERDICTS = {v.value: v for v in Verdict}
_MAX_LOGGED_BODY = 2000


class ChatTransport(Protocol):
    def chat_completions_create(self, **kwargs: Any) -> Any: ...


def output_token_budget(item_count: int) -> int:
    """Completion token limit for a batch; grows with the number of items."""
    return max(
        settings.validator_judge_max_output_tokens,
        settings.validator_judge_tokens_per_item * item_count,
    )


def build_user_prompt(items: List[JudgeItem]) -> str:
    payload = [item.model_dump(exclude_none=True) for item in items]
    return f"Evaluate:\n{json.dumps(payload, indent=2, ensure_ascii=False)}\nReturn JSON only."


def _load_array(text: str) -> Optional[List[Any]]:
    """Parse the response as a JSON array, falling back to the first embedded one."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        data = None
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get("results"), list):
        return data["results"]

    decoder = json.JSONDecoder()
    start = text.find("[")
    while start != -1:
        try:
            candidate, _ = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            candidate = None
        if isinstance(candidate, list):
            return candidate
        start = text.find("[", start + 1)
    return None


def _coerce_result(element: Any) -> JudgeResult:
    if not isinstance(element, dict):
        return JudgeResult()

    verdict = _VERDICTS.get(str(element.get("verdict", "")).strip().lower(), Verdict.UNSURE)

    raw_conf = element.get("confidence")
    confidence = 0.5
    if isinstance(raw_conf, (int, float, str)) and not isinstance(raw_conf, bool):
        try:
            value = float(raw_conf)
        except ValueError:
            value = math.nan
        if math.isfinite(value):
            confidence = min(max(value, 0.0), 1.0)

    reason = element.get("reason")
    return JudgeResult(
        verdict=verdict,
        confidence=confidence,
        reason=reason if isinstance(reason, str) else "",
    )


def parse_judge_response(text: Optional[str], expected: int) -> List[JudgeResult]:
    """Turn raw judge output into exactly `expected` results.

    Args:
        text: Response text from the judge
        expected: Number of items that were sent

    Returns:
        One JudgeResult per item; missing or malformed elements default
        to an unsure verdict with confidence 0.5

    Raises:
        UpstreamJudgeError: If the text is empty, holds no JSON array, or
            holds an empty array for a non-empty batch
    """
    if text is None or not text.strip():
        raise UpstreamJudgeError("Judge returned an empty response")

    data = _load_array(text)
    if data is None:
        raise UpstreamJudgeError("Judge response is not a JSON array", body=text[:_MAX_LOGGED_BODY])

    if expected > 0 and not data:
        raise UpstreamJudgeError("Judge returned no results", body=text[:_MAX_LOGGED_BODY])

    if len(data) != expected:
        logger.warning("Judge returned unexpected number of results", expected=expected, received=len(data))

    results = [_coerce_result(element) for element in data[:expected]]
    results.extend(JudgeResult() for _ in range(expected - len(results)))
    return results


class JudgeClient:
    """Sends every undecided item of a validation request in one judge call."""

    def __init__(self, transport: Optional[ChatTransport] = None):
        self._transport = transport

    @property
    def transport(self) -> ChatTransport:
        if self._transport is None:
            self._transport = get_openai_client()
        return self._transport

    async def judge_batch(self, items: List[JudgeItem], model: Optional[str] = None) -> List[JudgeResult]:
        """Judge a batch of items with a single outbound request.

        Args:
            items: Items left undecided by the rule classifier
            model: Deployment/model override

        Returns:
            Results in the same order and length as `items`

        Raises:
            UpstreamJudgeError: On transport failure, non-success status,
                or an unparsable response
        """
        if not items:
            return []

        model_name = model or settings.azure_openai_deployment_name
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": build_user_prompt(items)},
        ]

        start = time.perf_counter()
        try:
            response = await asyncio.to_thread(
                self.transport.chat_completions_create,
                model=model_name,
                messages=messages,
                temperature=settings.validator_judge_temperature,
                max_tokens=output_token_budget(len(items)),
            )
        except APIStatusError as e:
            body = getattr(e.response, "text", None) or str(e)
            logger.error("Judge service returned an error", status_code=e.status_code, body=body[:_MAX_LOGGED_BODY])
            raise UpstreamJudgeError(
                f"Judge service returned status {e.status_code}",
                status=e.status_code,
                body=body,
            ) from e
        except (OpenAIError, RuntimeError) as e:
            logger.error("Judge call failed", error=str(e))
            raise UpstreamJudgeError(f"Judge call failed: {e}") from e
        except Exception as e:
            # Credential providers raise their own types (azure.core ClientAuthenticationError).
            logger.error("Judge call failed", error=str(e), error_type=type(e).__name__)
            raise UpstreamJudgeError(f"Judge call failed: {e}") from e

        latency_ms = round((time.perf_counter() - start) * 1000)
        logger.info("Judge batch completed", items=len(items), model=model_name, latency_ms=latency_ms)

        choices = getattr(response, "choices", None) or []
        text = choices[0].message.content if choices else None
        return parse_judge_response(text, expected=len(items))
