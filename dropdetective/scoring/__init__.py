"""
Drop Detective Scoring Module
=============================

Heuristic opportunity scoring for dropshipping products.

Components:
    - ScoreGenerator: ten criterion scores, random or seeded
    - compute_total_score: 0-100 aggregate of criterion scores
    - generate_insight: fixed insight text per score tier

Usage:
    from dropdetective.scoring import ScoreGenerator, compute_total_score, generate_insight

    scores = ScoreGenerator().seeded_scores(video_link, product_link, index)
    total = compute_total_score(scores)
    print(total, generate_insight(total))
"""

from .criteria import (
    Criterion,
    CRITERIA,
    CRITERIA_NAMES,
    describe_criterion,
)
from .score_generator import ScoreGenerator, compute_seed
from .aggregator import (
    InsightTier,
    INSIGHT_TEXT,
    DEFAULT_TOTAL_SCORE,
    compute_total_score,
    insight_tier,
    generate_insight,
)

__all__ = [
    # Criteria
    "Criterion",
    "CRITERIA",
    "CRITERIA_NAMES",
    "describe_criterion",
    # Generation
    "ScoreGenerator",
    "compute_seed",
    # Aggregation
    "InsightTier",
    "INSIGHT_TEXT",
    "DEFAULT_TOTAL_SCORE",
    "compute_total_score",
    "insight_tier",
    "generate_insight",
]
