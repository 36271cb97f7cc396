"""
Criteria catalogue for Drop Detective scoring.

Every product is rated on the same ten criteria, always in the same order.
The order is part of the contract: score lists, CSV columns and persisted
breakdowns all follow it.

Each criterion carries:
- its display name
- the offset used by seeded scoring
- the description shown next to the score
"""

from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class Criterion:
    """One scored dimension."""
    name: str
    seed_offset: int
    description: str


CRITERIA: Tuple[Criterion, ...] = (
    Criterion("Trend Status", 7, "How popular the product currently is in market trends"),
    Criterion("Seasonality", 13, "How the product's demand fluctuates with seasons"),
    Criterion("Market Fit", 19, "How well the product fits the Indian market specifically"),
    Criterion("Urgency", 31, "How likely customers feel they need to buy now"),
    Criterion("Impulse Buy", 37, "How likely a customer is to purchase without planning"),
    Criterion("Solution Value", 41, "How effectively the product solves a real problem"),
    Criterion("Wow Factor", 53, "How impressive the product is at first glance"),
    Criterion("Virality", 61, "How likely the product is to be shared on social media"),
    Criterion("Ad Creative", 67, "How well the product can be marketed in ads"),
    Criterion("Target Clarity", 73, "How clear the target audience is for this product"),
)

CRITERIA_NAMES: Tuple[str, ...] = tuple(c.name for c in CRITERIA)

MIN_CRITERION_SCORE = 1
MAX_CRITERION_SCORE = 10

_DESCRIPTIONS: Dict[str, str] = {c.name: c.description for c in CRITERIA}


def describe_criterion(name: str) -> str:
    """Description for a criterion name, or a placeholder for unknown names."""
    return _DESCRIPTIONS.get(name, "No description available")
