"""
Drop Detective Presentation Module
==================================

Search, sort, pagination and CSV export over analyzed products.
"""

from .results_view import (
    ResultsView,
    ResultsPage,
    SORT_OPTIONS,
    DEFAULT_SORT,
    DEFAULT_PAGE_SIZE,
    EXPORT_HEADER,
    export_csv,
    score_badge,
    criterion_color,
    product_from_record,
    to_card,
)

__all__ = [
    "ResultsView",
    "ResultsPage",
    "SORT_OPTIONS",
    "DEFAULT_SORT",
    "DEFAULT_PAGE_SIZE",
    "EXPORT_HEADER",
    "export_csv",
    "score_badge",
    "criterion_color",
    "product_from_record",
    "to_card",
]
