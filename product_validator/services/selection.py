"""Caller-side pick of a product from validation results."""
from typing import Optional, Sequence, Tuple

from product_validator.models import CandidateProduct, ValidationOutput, Verdict


def pick_candidate(
    candidates: Sequence[CandidateProduct],
    results: Sequence[ValidationOutput],
    min_confidence: float = 0.7,
) -> Tuple[Optional[int], Optional[CandidateProduct]]:
    """Return the first passing candidate in input order, with its index.

    No ranking is applied: the retailer's ordering decides between
    several passing products.
    """
    if len(candidates) != len(results):
        raise ValueError("candidates and results must have the same length")
    for index, (candidate, result) in enumerate(zip(candidates, results)):
        if result.verdict == Verdict.PASS and result.confidence >= min_confidence:
            return index, candidate
    return None, None
