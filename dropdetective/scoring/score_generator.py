"""
Drop Detective Score Generator
==============================

Produces the ten criterion scores for a product.

Two modes:
    - random_scores(): uniform draws in [1, 10], used whenever no real
      analysis result is available (fallback scoring)
    - seeded_scores(): pseudo-deterministic scores derived from the
      video link, the product link and the product index

Seeded formula:
    seed    = (len(video_link) * len(product_link) + index) % 100
    score_i = max(1, min(10, ((seed + offset_i) % 10) + 1))

with offset_i = 7, 13, 19, 31, 37, 41, 53, 61, 67, 73 in criteria order.

The random source is injectable so fallback scores are reproducible in tests:

    generator = ScoreGenerator(rng=random.Random(42))
    generator.random_scores()
"""

import random
from typing import List, Optional

from .criteria import CRITERIA, MIN_CRITERION_SCORE, MAX_CRITERION_SCORE
from ..data.data_models import CriterionScore


class ScoreGenerator:
    """Generates canonical criterion score lists. Never raises."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def random_scores(self) -> List[CriterionScore]:
        """One independent uniform draw per criterion."""
        return [
            CriterionScore(
                name=criterion.name,
                score=self.rng.randint(MIN_CRITERION_SCORE, MAX_CRITERION_SCORE),
            )
            for criterion in CRITERIA
        ]

    def seeded_scores(self, video_link: str, product_link: str, index: int) -> List[CriterionScore]:
        """
        Reproducible scores for (video_link, product_link, index).

        Args:
            video_link: Creative folder link (may be empty)
            product_link: Product link (may be empty)
            index: Position of the product in the sheet

        Returns:
            Ten CriterionScore values in canonical order
        """
        seed = compute_seed(video_link, product_link, index)
        return [
            CriterionScore(name=criterion.name, score=_seeded_score(seed, criterion.seed_offset))
            for criterion in CRITERIA
        ]


def compute_seed(video_link: str, product_link: str, index: int) -> int:
    """Seed in 0..99 (Python's modulo keeps negative indexes in range)."""
    return (len(video_link or "") * len(product_link or "") + int(index)) % 100


def _seeded_score(seed: int, offset: int) -> int:
    return max(MIN_CRITERION_SCORE, min(MAX_CRITERION_SCORE, ((seed + offset) % 10) + 1))
