"""
Drop Detective Results View
===========================

Read-only views over analyzed products: search, sort, pagination and CSV
export. Views never mutate the products they wrap.

    view = ResultsView(products).search("lamp").sort("highest")
    page = view.paginate(page=1, page_size=12)
    csv_text = view.export_csv()

CSV layout:
    "Product Name","Total Score",<ten criteria>,"Insights"
    strings double-quoted, numbers bare
"""

import csv
import io
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from ..data.data_models import AnalyzedProduct, CriterionScore
from ..scoring.aggregator import generate_insight, insight_tier
from ..scoring.criteria import CRITERIA_NAMES


SORT_OPTIONS = ("highest", "lowest", "name")
DEFAULT_SORT = "highest"
DEFAULT_PAGE_SIZE = 12

EXPORT_HEADER = ["Product Name", "Total Score", *CRITERIA_NAMES, "Insights"]


@dataclass
class ResultsPage:
    """One page of a results view (pages are 1-based)."""
    items: List[AnalyzedProduct] = field(default_factory=list)
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    total_items: int = 0

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(self.total_items / self.page_size))

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1


class ResultsView:
    """Immutable, chainable view over a list of analyzed products."""

    def __init__(self, products: Iterable[AnalyzedProduct]):
        self._products = tuple(products)

    @property
    def products(self) -> List[AnalyzedProduct]:
        return list(self._products)

    def __len__(self) -> int:
        return len(self._products)

    def search(self, term: Optional[str]) -> "ResultsView":
        """Case-insensitive substring match on product name."""
        if not term or not term.strip():
            return self
        needle = term.strip().lower()
        return ResultsView(p for p in self._products if needle in p.product_name.lower())

    def sort(self, option: Optional[str] = DEFAULT_SORT) -> "ResultsView":
        """
        Stable sort.

        Args:
            option: "highest" (total score desc), "lowest" (asc) or "name"

        Raises:
            ValueError: On an unknown sort option
        """
        option = option or DEFAULT_SORT
        if option == "highest":
            ordered = sorted(self._products, key=lambda p: p.total_score, reverse=True)
        elif option == "lowest":
            ordered = sorted(self._products, key=lambda p: p.total_score)
        elif option == "name":
            ordered = sorted(self._products, key=lambda p: p.product_name.lower())
        else:
            raise ValueError(f"Unknown sort option '{option}', expected one of {SORT_OPTIONS}")
        return ResultsView(ordered)

    def paginate(self, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> ResultsPage:
        """Slice one page; out-of-range page numbers are clamped."""
        if page_size < 1:
            raise ValueError("page_size must be positive")

        total_items = len(self._products)
        total_pages = max(1, math.ceil(total_items / page_size))
        page = min(max(1, page), total_pages)
        start = (page - 1) * page_size

        return ResultsPage(
            items=list(self._products[start:start + page_size]),
            page=page,
            page_size=page_size,
            total_items=total_items,
        )

    def export_csv(self) -> str:
        """CSV text of the products in view order."""
        return export_csv(self._products)

    def summary(self) -> Dict[str, Any]:
        """Headline figures for the view."""
        if not self._products:
            return {"count": 0, "average_score": None, "best_product": None, "fallback_count": 0}

        best = max(self._products, key=lambda p: p.total_score)
        return {
            "count": len(self._products),
            "average_score": round(sum(p.total_score for p in self._products) / len(self._products), 1),
            "best_product": best.product_name,
            "fallback_count": sum(1 for p in self._products if p.is_fallback),
        }


def export_csv(products: Iterable[AnalyzedProduct]) -> str:
    """
    Render products as CSV.

    Criteria missing from a product's score list are exported empty.
    """
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_NONNUMERIC)
    writer.writerow(EXPORT_HEADER)

    for product in products:
        criterion_cells = []
        for name in CRITERIA_NAMES:
            score = product.score_for(name)
            criterion_cells.append("" if score is None else score)

        writer.writerow([
            product.product_name,
            product.total_score,
            *criterion_cells,
            product.insights,
        ])

    return output.getvalue()


def score_badge(total_score: int) -> str:
    """Badge variant for a total score."""
    if total_score <= 50:
        return "destructive"
    if total_score <= 75:
        return "outline"
    return "default"


def criterion_color(score: int) -> str:
    """Display colour for a single criterion score."""
    if score <= 3:
        return "red"
    if score <= 7:
        return "yellow"
    return "green"


def product_from_record(record: Dict[str, Any]) -> AnalyzedProduct:
    """
    Rebuild an AnalyzedProduct from a stored record.

    Stored records carry no insight text, so the tier insight is used.
    """
    links = record.get("google_drive_links") or [""]
    score = int(record["score"])
    return AnalyzedProduct(
        product_name=record["name"],
        video_creative_folder_link=links[0],
        scores=[
            CriterionScore(name=item["name"], score=item["score"])
            for item in record.get("score_breakdown") or []
        ],
        total_score=score,
        insights=generate_insight(score),
    )


def to_card(product: AnalyzedProduct) -> Dict[str, Any]:
    """Product as a display card: scores plus badge and colours."""
    card = product.to_dict()
    card["badge"] = score_badge(product.total_score)
    card["tier"] = insight_tier(product.total_score).value
    card["scores"] = [
        {**item.to_dict(), "color": criterion_color(item.score)}
        for item in product.scores
    ]
    return card
