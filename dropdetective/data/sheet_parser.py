"""
Drop Detective Sheet Row Parser
===============================

Validates the sheet URL and decodes raw spreadsheet rows into ProductStubs.

Row contract:
    - values[0] is the header row and is always discarded
    - column positions come from ColumnMapping, never from header text
    - rows with a missing/blank product name or creative link are dropped
      silently; survivors keep their input order

Usage:
    sheet_id = extract_sheet_id(url)   # raises InvalidSourceError
    stubs = SheetRowParser().parse(values)
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from .data_models import ProductStub


logger = logging.getLogger(__name__)


SHEETS_URL_MARKER = "docs.google.com/spreadsheets"
SHEET_ID_PATTERN = re.compile(r"/spreadsheets/d/([A-Za-z0-9_-]+)")


class InvalidSourceError(ValueError):
    """The source identifier is not a recognizable Google Sheets URL."""
    pass


class EmptyResultError(Exception):
    """The sheet yielded no valid product rows."""

    def __init__(self, sheet_id: str, rows_received: int = 0):
        self.sheet_id = sheet_id
        self.rows_received = rows_received
        super().__init__(
            f"No valid products found in sheet {sheet_id} "
            f"({rows_received} data rows received)"
        )


def extract_sheet_id(url: str) -> str:
    """
    Extract the sheet identifier from a Google Sheets URL.

    Args:
        url: e.g. https://docs.google.com/spreadsheets/d/<id>/edit#gid=0

    Returns:
        The sheet identifier

    Raises:
        InvalidSourceError: If the URL is not a Google Sheets URL
    """
    if not isinstance(url, str) or SHEETS_URL_MARKER not in url:
        raise InvalidSourceError("Invalid Google Sheets URL")

    match = SHEET_ID_PATTERN.search(url)
    if not match:
        raise InvalidSourceError("Invalid Google Sheet URL format")

    return match.group(1)


@dataclass(frozen=True)
class ColumnMapping:
    """Zero-based column positions. product_link_column=None disables it."""
    name_column: int = 0
    link_column: int = 1
    product_link_column: Optional[int] = 2

    @property
    def required_width(self) -> int:
        """Cells a row must have to carry both required fields."""
        return max(self.name_column, self.link_column) + 1

    @classmethod
    def from_config(cls, sheets_config) -> "ColumnMapping":
        product_link_column = sheets_config.product_link_column
        return cls(
            name_column=sheets_config.name_column,
            link_column=sheets_config.link_column,
            product_link_column=product_link_column if product_link_column >= 0 else None,
        )


@dataclass
class ParseResult:
    """Stubs plus row accounting for reporting."""
    stubs: List[ProductStub] = field(default_factory=list)
    rows_received: int = 0

    @property
    def rows_dropped(self) -> int:
        return self.rows_received - len(self.stubs)


class SheetRowParser:
    """Strict typed-row decoder for spreadsheet values."""

    def __init__(self, column_mapping: Optional[ColumnMapping] = None):
        self.columns = column_mapping or ColumnMapping()

    def parse(self, values: Optional[Sequence[Any]]) -> List[ProductStub]:
        """Decode rows into stubs (header discarded, bad rows dropped)."""
        return self.parse_with_stats(values).stubs

    def parse_with_stats(self, values: Optional[Sequence[Any]]) -> ParseResult:
        """
        Decode rows into stubs and count what was dropped.

        Args:
            values: Raw rows, values[0] being the header

        Returns:
            ParseResult (empty when values is None, empty or header-only)
        """
        result = ParseResult()
        if not values or len(values) < 2:
            return result

        data_rows = values[1:]
        result.rows_received = len(data_rows)

        # Sheet row numbers are 1-based and the header is row 1
        for row_number, row in enumerate(data_rows, start=2):
            stub = self._decode_row(row, row_number)
            if stub is not None:
                result.stubs.append(stub)

        logger.info(
            f"Parsed {len(result.stubs)} valid products from {result.rows_received} rows "
            f"({result.rows_dropped} dropped)"
        )
        return result

    def _decode_row(self, row: Any, row_number: int) -> Optional[ProductStub]:
        if not isinstance(row, (list, tuple)):
            logger.debug(f"Row {row_number}: not a row sequence, dropped")
            return None

        if len(row) < self.columns.required_width:
            logger.debug(f"Row {row_number}: {len(row)} cells, need {self.columns.required_width}, dropped")
            return None

        name_cell = row[self.columns.name_column]
        link_cell = row[self.columns.link_column]
        if not isinstance(name_cell, str) or not isinstance(link_cell, str):
            logger.debug(f"Row {row_number}: non-text required cell, dropped")
            return None

        product_name = name_cell.strip()
        creative_link = link_cell.strip()
        if not product_name or not creative_link:
            return None

        return ProductStub(
            product_name=product_name,
            video_creative_folder_link=creative_link,
            product_link=self._optional_cell(row, self.columns.product_link_column),
            row_number=row_number,
        )

    @staticmethod
    def _optional_cell(row: Sequence[Any], column: Optional[int]) -> str:
        if column is None or column >= len(row):
            return ""
        cell = row[column]
        return cell.strip() if isinstance(cell, str) else ""
