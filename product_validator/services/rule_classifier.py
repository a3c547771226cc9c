"""Deterministic rule classifier for one (spec, candidate) pair."""
from typing import List, Optional

from product_validator.config import Settings, settings as default_settings
from product_validator.models import CandidateProduct, IngredientSpec, RuleResult, Verdict
from product_validator.services.rules import (
    BANNED_CATEGORY_TOKENS,
    BANNED_TITLE_TOKENS,
    FORM_BANS,
    first_match,
)
from product_validator.services.size_normalizer import parse_size, quantity_to_size, within_tolerance

BASELINE_CONFIDENCE = 0.5
SIZE_MATCH_BONUS = 0.2
SIZE_MISMATCH_PENALTY = 0.2
NAME_MATCH_BONUS = 0.1
CATEGORY_PRESENT_BONUS = 0.1

BANNED_TOKEN_CONFIDENCE = 0.1
FORM_MISMATCH_CONFIDENCE = 0.2


def rule_evaluate(
    spec: IngredientSpec,
    candidate: CandidateProduct,
    settings: Optional[Settings] = None,
) -> RuleResult:
    """Classify a candidate against an ingredient spec without any I/O.

    Hard bans are checked first and short-circuit: banned category token,
    banned title token, then the form's ban list. Otherwise an additive score
    from a 0.5 baseline decides the verdict.

    Args:
        spec: Required ingredient
        candidate: Store product under evaluation
        settings: Threshold overrides (defaults to the global settings)

    Returns:
        RuleResult with verdict, rule confidence and reason
    """
    cfg = settings or default_settings
    title = candidate.title.lower()
    category = candidate.joined_category.lower()

    token = first_match(category, BANNED_CATEGORY_TOKENS)
    if token:
        return RuleResult(
            verdict=Verdict.FAIL,
            rule_conf=BANNED_TOKEN_CONFIDENCE,
            reason=f"banned category token '{token}'",
        )

    token = first_match(title, BANNED_TITLE_TOKENS)
    if token:
        return RuleResult(
            verdict=Verdict.FAIL,
            rule_conf=BANNED_TOKEN_CONFIDENCE,
            reason=f"banned title token '{token}'",
        )

    if spec.form is not None:
        token = first_match(title, FORM_BANS[spec.form])
        if token:
            return RuleResult(
                verdict=Verdict.FAIL,
                rule_conf=FORM_MISMATCH_CONFIDENCE,
                reason=f"form mismatch: '{token}' not acceptable for {spec.form.value}",
            )

    confidence = BASELINE_CONFIDENCE
    notes: List[str] = []

    required = quantity_to_size(spec.quantity)
    offered = parse_size(candidate.size_text or candidate.title)
    if required is not None and offered is not None:
        if within_tolerance(
            required,
            offered,
            percent_tolerance=cfg.validator_size_tolerance_percent,
            count_slack=cfg.validator_count_slack,
        ):
            confidence += SIZE_MATCH_BONUS
            notes.append("size within tolerance")
        else:
            confidence -= SIZE_MISMATCH_PENALTY
            notes.append("size outside tolerance")
    else:
        notes.append("size not comparable")

    if spec.name.lower() in title:
        confidence += NAME_MATCH_BONUS
        notes.append("name match")

    if candidate.category_path:
        confidence += CATEGORY_PRESENT_BONUS
        notes.append("category present")

    # Rounded so that e.g. 0.5 + 0.2 + 0.1 lands exactly on 0.8
    confidence = round(min(max(confidence, 0.0), cfg.validator_rule_confidence_ceiling), 4)

    if confidence >= cfg.validator_rule_pass_threshold:
        verdict = Verdict.PASS
    elif confidence <= cfg.validator_rule_fail_threshold:
        verdict = Verdict.FAIL
    else:
        verdict = Verdict.UNSURE

    return RuleResult(verdict=verdict, rule_conf=confidence, reason="; ".join(notes))
