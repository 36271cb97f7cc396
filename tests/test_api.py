"""
Tests for the FastAPI application.

The app runs with an injected pipeline: fake sheets client, local analysis
and in-memory results store.
"""

import csv
import io

import pytest
from fastapi.testclient import TestClient

from dropdetective.analysis.analysis_service import VIDEO_INSIGHTS, LocalAnalysisService
from dropdetective.api import main
from dropdetective.config import AnalysisConfig, DatabaseConfig, Settings, SheetsConfig
from dropdetective.data.sheets_client import SheetFetchError
from dropdetective.orchestrator.pipeline import SheetAnalysisPipeline
from dropdetective.presentation.results_view import EXPORT_HEADER
from dropdetective.scoring.criteria import CRITERIA_NAMES
from dropdetective.storage.results_store import InMemoryResultsStore


SHEET_URL = "https://docs.google.com/spreadsheets/d/sheet123/edit"

VALUES = [
    ["Product Name", "Video Creative Folder", "Product Link"],
    ["Desk Lamp", "https://drive.google.com/drive/folders/lamp", "https://shop.in/lamp"],
    ["Mug Warmer", "https://drive.google.com/drive/folders/mug"],
    ["", "https://drive.google.com/drive/folders/none"],
    ["Phone Stand", "https://drive.google.com/drive/folders/stand"],
]


class FakeSheetsClient:
    def __init__(self, values=None, error=None):
        self.values = values if values is not None else VALUES
        self.error = error

    def fetch_values(self, sheet_id):
        if self.error is not None:
            raise self.error
        return self.values


class TestApi:
    """Endpoints against an in-process pipeline."""

    def setup_method(self):
        self.sheets = FakeSheetsClient()
        main.pipeline = SheetAnalysisPipeline(
            settings=Settings(
                sheets=SheetsConfig(api_key="test-key"),
                analysis=AnalysisConfig(service_url=""),
                database=DatabaseConfig(password=""),
            ),
            sheets_client=self.sheets,
            analysis_service=LocalAnalysisService(),
            results_store=InMemoryResultsStore(),
        )
        self._client = TestClient(main.app)
        self.client = self._client.__enter__()

    def teardown_method(self):
        self._client.__exit__(None, None, None)

    def _analyze(self):
        response = self.client.post("/api/analyze", json={"sheetUrl": SHEET_URL})
        assert response.status_code == 200
        return response.json()

    def test_health(self):
        response = self.client.get("/api/health")

        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy",
            "version": "0.1.0",
            "database": "memory",
            "sheets": "configured",
            "analysis": "local",
        }

    def test_analyze(self):
        data = self._analyze()

        assert data["sheet_id"] == "sheet123"
        assert data["rows_received"] == 4
        assert data["rows_dropped"] == 1
        assert data["fallback_count"] == 0
        assert data["persisted"] is True
        assert [p["product_name"] for p in data["products"]] == ["Desk Lamp", "Mug Warmer", "Phone Stand"]

        product = data["products"][0]
        assert [s["name"] for s in product["scores"]] == list(CRITERIA_NAMES)
        assert product["status"] == "complete"
        assert product["badge"] in ("destructive", "outline", "default")
        assert product["insights"] == VIDEO_INSIGHTS[0]

    def test_analyze_accepts_snake_case(self):
        response = self.client.post("/api/analyze", json={"sheet_url": SHEET_URL})
        assert response.status_code == 200

    def test_analyze_invalid_url(self):
        response = self.client.post("/api/analyze", json={"sheetUrl": "https://example.com/x"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid Google Sheets URL"

    def test_analyze_empty_sheet(self):
        self.sheets.values = [VALUES[0]]
        response = self.client.post("/api/analyze", json={"sheetUrl": SHEET_URL})
        assert response.status_code == 422

    def test_analyze_fetch_failure(self):
        self.sheets.error = SheetFetchError("Failed to fetch Google Sheet data: 403", status_code=403)
        response = self.client.post("/api/analyze", json={"sheetUrl": SHEET_URL})
        assert response.status_code == 502

    def test_results_not_found(self):
        assert self.client.get("/api/results/sheet123").status_code == 404

    def test_results_page(self):
        self._analyze()

        response = self.client.get("/api/results/sheet123", params={"sort": "name", "page_size": 2})

        assert response.status_code == 200
        data = response.json()
        assert data["total_items"] == 3
        assert data["total_pages"] == 2
        assert [p["product_name"] for p in data["products"]] == ["Desk Lamp", "Mug Warmer"]
        assert data["summary"]["count"] == 3

    def test_results_search(self):
        self._analyze()

        data = self.client.get("/api/results/sheet123", params={"search": "MUG"}).json()

        assert [p["product_name"] for p in data["products"]] == ["Mug Warmer"]

    def test_results_sorted_highest_by_default(self):
        self._analyze()

        totals = [p["total_score"] for p in self.client.get("/api/results/sheet123").json()["products"]]

        assert totals == sorted(totals, reverse=True)

    def test_results_bad_sort(self):
        self._analyze()
        assert self.client.get("/api/results/sheet123", params={"sort": "random"}).status_code == 400

    def test_results_bad_page_size(self):
        self._analyze()
        assert self.client.get("/api/results/sheet123", params={"page_size": 0}).status_code == 422

    def test_export(self):
        self._analyze()

        response = self.client.get("/api/results/sheet123/export", params={"sort": "name"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "product_analysis_sheet123_" in response.headers["content-disposition"]
        rows = list(csv.DictReader(io.StringIO(response.text)))
        assert list(rows[0].keys()) == EXPORT_HEADER
        assert [r["Product Name"] for r in rows] == ["Desk Lamp", "Mug Warmer", "Phone Stand"]

    def test_analyze_video_content(self):
        response = self.client.post("/api/analyze-video-content", json={
            "videoUrl": "https://drive/1",
            "productUrl": "https://shop/1",
            "productIndex": 2,
        })

        assert response.status_code == 200
        data = response.json()
        assert data["insights"] == VIDEO_INSIGHTS[2]
        assert [set(s.keys()) for s in data["scores"]] == [{"name", "score"}] * 10
        assert all(1 <= s["score"] <= 10 for s in data["scores"])

    def test_analyze_video_content_requires_video(self):
        response = self.client.post("/api/analyze-video-content", json={"productIndex": 1})

        assert response.status_code == 400
        assert response.json() == {"error": "Video URL is required"}

    def test_fetch_google_sheet(self):
        response = self.client.post("/api/fetch-google-sheet", json={"sheetId": "sheet123"})

        assert response.status_code == 200
        assert response.json() == {"values": VALUES}

    def test_fetch_google_sheet_requires_id(self):
        response = self.client.post("/api/fetch-google-sheet", json={})

        assert response.status_code == 400
        assert response.json() == {"error": "Sheet ID is required"}

    def test_fetch_google_sheet_failure(self):
        self.sheets.error = SheetFetchError("Failed to fetch Google Sheet data: 404 - not found", status_code=404)

        response = self.client.post("/api/fetch-google-sheet", json={"sheetId": "missing"})

        assert response.status_code == 404
        assert response.json()["error"] == "Failed to fetch Google Sheet data"
        assert "not found" in response.json()["details"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
