"""
Google Sheets Values Client
===========================

Fetches raw cell values from the Google Sheets v4 values API.

Configuration:
    GOOGLE_API_KEY: API key (from .env)
    SHEETS_RANGE: A1 range to read (default Sheet1!A:C)

Contract:
    fetch_values(sheet_id) -> list of rows, each a list of strings.
    values[0] is the header row. A sheet without values returns [].
"""

import logging
from typing import List, Optional

import requests

logger = logging.getLogger(__name__)


class SheetFetchError(Exception):
    """Google Sheets API error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class GoogleSheetsClient:
    """Thin requests-based client for spreadsheet values."""

    API_BASE = "https://sheets.googleapis.com/v4/spreadsheets"

    def __init__(
        self,
        api_key: Optional[str] = None,
        value_range: Optional[str] = None,
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize client.

        Args:
            api_key: Google API key (defaults to GOOGLE_API_KEY setting)
            value_range: A1 range to fetch (defaults to SHEETS_RANGE setting)
            timeout: Request timeout in seconds
            session: Optional requests session (for connection reuse / tests)
        """
        if api_key is None or value_range is None or timeout is None:
            from ..config import get_settings
            sheets = get_settings().sheets
            api_key = sheets.api_key if api_key is None else api_key
            value_range = sheets.value_range if value_range is None else value_range
            timeout = sheets.request_timeout if timeout is None else timeout

        self.api_key = api_key
        self.value_range = value_range
        self.timeout = timeout
        self._http = session or requests.Session()
        self._requests_made = 0

    @property
    def requests_made(self) -> int:
        return self._requests_made

    def fetch_values(self, sheet_id: str) -> List[List[str]]:
        """
        Fetch the configured range of a sheet.

        Args:
            sheet_id: Spreadsheet identifier

        Returns:
            Rows of cell strings (header first), [] when the sheet is empty

        Raises:
            SheetFetchError: On missing sheet id/API key or a non-200 response
        """
        if not sheet_id:
            raise SheetFetchError("Sheet ID is required", status_code=400)
        if not self.api_key:
            raise SheetFetchError("Google API key not configured. Set GOOGLE_API_KEY in .env")

        url = f"{self.API_BASE}/{sheet_id}/values/{self.value_range}"
        logger.info(f"Fetching sheet data for ID: {sheet_id}")

        try:
            response = self._http.get(
                url,
                params={"key": self.api_key},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise SheetFetchError(f"Failed to fetch Google Sheet data: {e}") from e
        self._requests_made += 1

        if response.status_code != 200:
            logger.error(f"Google Sheets API error {response.status_code}: {response.text[:200]}")
            raise SheetFetchError(
                f"Failed to fetch Google Sheet data: {response.status_code} - {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise SheetFetchError(f"Google Sheets API returned invalid JSON: {e}") from e

        values = data.get("values") if isinstance(data, dict) else None
        if not values:
            logger.warning(f"Google Sheet {sheet_id} is empty or has no data")
            return []

        return values
