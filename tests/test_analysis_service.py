"""
Tests for the video analysis services.

The HTTP service runs against httpx.MockTransport, no network needed.
"""

import asyncio
import json

import httpx
import pytest

from dropdetective.analysis.analysis_service import (
    VIDEO_INSIGHTS,
    AnalysisServiceError,
    HttpAnalysisService,
    LocalAnalysisService,
    build_analysis_service,
    insight_for_index,
)
from dropdetective.config import AnalysisConfig
from dropdetective.scoring.criteria import CRITERIA_NAMES


SERVICE_URL = "https://analysis.test/api/analyze-video-content"

SCORES = [{"name": name, "score": 7} for name in CRITERIA_NAMES]


def _analyze(handler, product_index=0):
    """Run one HttpAnalysisService call against a mock handler."""
    async def go():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            service = HttpAnalysisService(SERVICE_URL, timeout=2.0, client=client)
            return await service.analyze("https://drive/1", "https://shop/1", product_index)
    return asyncio.run(go())


class TestHttpAnalysisService:
    """Remote analysis over HTTP."""

    def test_success(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"scores": SCORES, "insights": "Great hooks."})

        result = _analyze(handler, product_index=3)

        assert seen["url"] == SERVICE_URL
        assert seen["body"] == {
            "videoUrl": "https://drive/1",
            "productUrl": "https://shop/1",
            "productIndex": 3,
        }
        assert [s.score for s in result.scores] == [7] * 10
        assert result.insights == "Great hooks."

    def test_error_body(self):
        def handler(request):
            return httpx.Response(200, json={"error": "Video not reachable"})

        with pytest.raises(AnalysisServiceError) as exc_info:
            _analyze(handler)
        assert exc_info.value.message == "Video not reachable"

    def test_error_status_with_error_body(self):
        def handler(request):
            return httpx.Response(400, json={"error": "Video URL is required"})

        with pytest.raises(AnalysisServiceError) as exc_info:
            _analyze(handler)
        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Video URL is required"

    def test_server_error(self):
        def handler(request):
            return httpx.Response(500, text="Internal Server Error")

        with pytest.raises(AnalysisServiceError) as exc_info:
            _analyze(handler)
        assert exc_info.value.status_code == 500

    def test_malformed_body(self):
        def handler(request):
            return httpx.Response(200, json={"scores": [{"name": "Urgency"}]})

        with pytest.raises(AnalysisServiceError, match="Malformed response body"):
            _analyze(handler)

    def test_transport_error_propagates(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(httpx.TimeoutException):
            _analyze(handler)

    def test_requires_url(self):
        with pytest.raises(ValueError):
            HttpAnalysisService("")


class TestLocalAnalysisService:
    """In-process seeded analysis."""

    def setup_method(self):
        self.service = LocalAnalysisService()

    def test_deterministic(self):
        first = asyncio.run(self.service.analyze("https://drive/1", "https://shop/1", 4))
        second = asyncio.run(self.service.analyze("https://drive/1", "https://shop/1", 4))
        assert first == second
        assert [s.name for s in first.scores] == list(CRITERIA_NAMES)

    def test_insight_rotates_with_index(self):
        assert insight_for_index(0) == VIDEO_INSIGHTS[0]
        assert insight_for_index(13) == VIDEO_INSIGHTS[3]
        result = self.service.analyze_sync("https://drive/1", "", 11)
        assert result.insights == VIDEO_INSIGHTS[1]

    def test_missing_video_url(self):
        with pytest.raises(AnalysisServiceError) as exc_info:
            self.service.analyze_sync("", "https://shop/1", 0)
        assert exc_info.value.message == "Video URL is required"
        assert exc_info.value.status_code == 400


class TestBuildAnalysisService:
    """Service selection from configuration."""

    def test_local_without_url(self):
        assert isinstance(build_analysis_service(AnalysisConfig(service_url="")), LocalAnalysisService)

    def test_remote_with_url(self):
        service = build_analysis_service(AnalysisConfig(service_url=SERVICE_URL, request_timeout=9.0))
        assert isinstance(service, HttpAnalysisService)
        assert service.timeout == 9.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
