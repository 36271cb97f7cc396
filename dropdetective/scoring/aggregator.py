"""
Drop Detective Aggregator
=========================

Folds criterion scores into the 0-100 opportunity score and maps the total
to one of three insight tiers.

    total = floor(average(scores) * 10), clamped to 0..100
    no scores -> 50 (missing data is neither rewarded nor penalized)

Tiers (lower bound inclusive):
    >= 80   excellent
    60-79   moderate
    < 60    limited
"""

import math
from enum import Enum
from typing import Iterable, Optional, Union

from ..data.data_models import CriterionScore


DEFAULT_TOTAL_SCORE = 50
MAX_TOTAL_SCORE = 100

EXCELLENT_THRESHOLD = 80
MODERATE_THRESHOLD = 60


class InsightTier(Enum):
    """Total-score band driving the canned insight text."""
    EXCELLENT = "excellent"
    MODERATE = "moderate"
    LIMITED = "limited"


INSIGHT_TEXT = {
    InsightTier.EXCELLENT: (
        "This product has excellent potential for the Indian market "
        "with strong trend status and market fit."
    ),
    InsightTier.MODERATE: (
        "Good product with moderate potential. "
        "Consider optimizing ad creative and targeting."
    ),
    InsightTier.LIMITED: (
        "Limited potential for the Indian market. "
        "Consider alternatives with better market fit and higher urgency scores."
    ),
}


def compute_total_score(scores: Optional[Iterable[Union[CriterionScore, int, float]]]) -> int:
    """
    Aggregate criterion scores into a 0-100 total.

    Works on whatever scores are supplied: CriterionScore objects or bare
    numbers, any count.

    Args:
        scores: Criterion scores (None or empty allowed)

    Returns:
        Integer total in 0..100
    """
    if not scores:
        return DEFAULT_TOTAL_SCORE

    values = [s.score if isinstance(s, CriterionScore) else s for s in scores]
    if not values:
        return DEFAULT_TOTAL_SCORE

    total = math.floor(sum(values) * 10 / len(values))
    return max(0, min(MAX_TOTAL_SCORE, total))


def insight_tier(total: int) -> InsightTier:
    """Band a total score into its insight tier."""
    if total >= EXCELLENT_THRESHOLD:
        return InsightTier.EXCELLENT
    if total >= MODERATE_THRESHOLD:
        return InsightTier.MODERATE
    return InsightTier.LIMITED


def generate_insight(total: int) -> str:
    """Fixed display text for the tier of a total score."""
    return INSIGHT_TEXT[insight_tier(total)]
