"""
Tests for the Google Sheets values client.

Note: These tests use mocking to avoid actual API calls.
"""

import pytest
import requests
from unittest.mock import MagicMock, Mock

from dropdetective.data.sheets_client import GoogleSheetsClient, SheetFetchError


def _response(status_code=200, payload=None, text=""):
    response = Mock()
    response.status_code = status_code
    response.text = text
    response.json.return_value = payload
    return response


class TestGoogleSheetsClient:
    """Fetch behaviour against a mocked requests session."""

    def setup_method(self):
        self.session = MagicMock(spec=requests.Session)
        self.client = GoogleSheetsClient(
            api_key="test-key",
            value_range="Sheet1!A:C",
            timeout=5,
            session=self.session,
        )

    def test_fetch_values(self):
        values = [["Product", "Folder"], ["Lamp", "https://drive/1"]]
        self.session.get.return_value = _response(payload={"range": "Sheet1!A1:C2", "values": values})

        assert self.client.fetch_values("abc123") == values

        args, kwargs = self.session.get.call_args
        assert args[0] == "https://sheets.googleapis.com/v4/spreadsheets/abc123/values/Sheet1!A:C"
        assert kwargs["params"] == {"key": "test-key"}
        assert kwargs["timeout"] == 5
        assert self.client.requests_made == 1

    def test_empty_sheet_returns_empty_list(self):
        self.session.get.return_value = _response(payload={"range": "Sheet1!A:C"})
        assert self.client.fetch_values("abc123") == []

    def test_non_200_raises(self):
        self.session.get.return_value = _response(status_code=403, text="PERMISSION_DENIED")

        with pytest.raises(SheetFetchError) as exc_info:
            self.client.fetch_values("abc123")

        assert exc_info.value.status_code == 403
        assert "PERMISSION_DENIED" in str(exc_info.value)

    def test_network_error_raises(self):
        self.session.get.side_effect = requests.ConnectionError("boom")

        with pytest.raises(SheetFetchError, match="boom"):
            self.client.fetch_values("abc123")

    def test_invalid_json_raises(self):
        response = _response()
        response.json.side_effect = ValueError("no json")
        self.session.get.return_value = response

        with pytest.raises(SheetFetchError, match="invalid JSON"):
            self.client.fetch_values("abc123")

    def test_missing_sheet_id(self):
        with pytest.raises(SheetFetchError) as exc_info:
            self.client.fetch_values("")

        assert exc_info.value.status_code == 400
        assert str(exc_info.value) == "Sheet ID is required"
        self.session.get.assert_not_called()

    def test_missing_api_key(self):
        client = GoogleSheetsClient(api_key="", value_range="Sheet1!A:C", timeout=5, session=self.session)

        with pytest.raises(SheetFetchError, match="GOOGLE_API_KEY"):
            client.fetch_values("abc123")
        self.session.get.assert_not_called()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
