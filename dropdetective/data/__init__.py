"""
Drop Detective Data Module
==========================

Spreadsheet intake for the analysis pipeline.

This module provides:
    - GoogleSheetsClient: Fetches raw cell values from a Google Sheet
    - SheetRowParser: Strict row decoder producing ProductStubs
    - Data models: ProductStub, CriterionScore, AnalyzedProduct, PipelineRunResult

Quick Start:
    from dropdetective.data import GoogleSheetsClient, SheetRowParser, extract_sheet_id

    sheet_id = extract_sheet_id("https://docs.google.com/spreadsheets/d/abc123/edit")
    values = GoogleSheetsClient().fetch_values(sheet_id)
    stubs = SheetRowParser().parse(values)

Required Environment Variables:
    GOOGLE_API_KEY: Google Sheets API key
"""

from .data_models import (
    ProductStatus,
    AnalysisSource,
    CriterionScore,
    ProductStub,
    AnalyzedProduct,
    PipelineRunResult,
)
from .sheet_parser import (
    SheetRowParser,
    ColumnMapping,
    ParseResult,
    InvalidSourceError,
    EmptyResultError,
    extract_sheet_id,
)
from .sheets_client import GoogleSheetsClient, SheetFetchError

__all__ = [
    # Data models
    "ProductStatus",
    "AnalysisSource",
    "CriterionScore",
    "ProductStub",
    "AnalyzedProduct",
    "PipelineRunResult",
    # Parsing
    "SheetRowParser",
    "ColumnMapping",
    "ParseResult",
    "InvalidSourceError",
    "EmptyResultError",
    "extract_sheet_id",
    # Fetch
    "GoogleSheetsClient",
    "SheetFetchError",
]
