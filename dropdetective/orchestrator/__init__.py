"""
Drop Detective Orchestrator Module
==================================

Orchestration layer for sheet analysis.

Components:
    - SheetAnalysisPipeline: URL -> fetch -> parse -> batched analysis -> store
    - setup_logging: Structured logging configuration
    - CLI: Command-line interface (python -m dropdetective.orchestrator.cli)

Usage:
    from dropdetective.orchestrator import SheetAnalysisPipeline

    with SheetAnalysisPipeline() as pipeline:
        result = asyncio.run(pipeline.run(sheet_url))
"""

from .pipeline import SheetAnalysisPipeline
from .logging_config import setup_logging, JSONFormatter

__all__ = [
    "SheetAnalysisPipeline",
    "setup_logging",
    "JSONFormatter",
]
