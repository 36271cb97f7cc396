"""
Drop Detective Storage Module
=============================

Persistence of analyzed products, keyed by (sheet_id, product name).
"""

from .results_store import (
    ResultsStore,
    InMemoryResultsStore,
    PostgresResultsStore,
    PersistenceError,
    build_results_store,
)

__all__ = [
    "ResultsStore",
    "InMemoryResultsStore",
    "PostgresResultsStore",
    "PersistenceError",
    "build_results_store",
]
