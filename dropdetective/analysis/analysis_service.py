"""
Video Analysis Services
=======================

Implementations of the video analysis contract:

    request  {videoUrl, productUrl, productIndex}
    success  {scores: [{name, score}], insights}
    error    {error}

Services:
    - HttpAnalysisService: calls a remote analysis endpoint with httpx
    - LocalAnalysisService: answers in-process with seeded scores

Failure semantics (consumed by VideoAnalysisClient):
    - structured errors (error body, non-2xx status, malformed body)
      raise AnalysisServiceError
    - transport failures (connection errors, timeouts) propagate as the
      httpx exception they are
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

import httpx
from pydantic import BaseModel, ValidationError

from ..data.data_models import CriterionScore
from ..scoring.score_generator import ScoreGenerator

logger = logging.getLogger(__name__)


class AnalysisServiceError(Exception):
    """The analysis service answered with an explicit error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


@dataclass
class AnalysisResult:
    """Successful analysis of one product."""
    scores: List[CriterionScore] = field(default_factory=list)
    insights: str = ""


class ScoreItemBody(BaseModel):
    """One entry of the service's score list."""
    name: str
    score: int


class AnalysisResponseBody(BaseModel):
    """Success body of the analysis service."""
    scores: List[ScoreItemBody]
    insights: str = ""

    def to_result(self) -> AnalysisResult:
        return AnalysisResult(
            scores=[CriterionScore(name=s.name, score=s.score) for s in self.scores],
            insights=self.insights,
        )


class AnalysisService(ABC):
    """Video analysis service contract."""

    @abstractmethod
    async def analyze(self, video_url: str, product_url: str, product_index: int) -> AnalysisResult:
        """Analyze one product's creatives."""
        pass


class HttpAnalysisService(AnalysisService):
    """
    Remote analysis endpoint over HTTP.

    Each call is bounded by `timeout`; an expired call raises
    httpx.TimeoutException and takes the transport-failure path.
    """

    def __init__(
        self,
        service_url: str,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        if not service_url:
            raise ValueError("service_url is required")
        self.service_url = service_url
        self.timeout = timeout
        self._client = client

    async def analyze(self, video_url: str, product_url: str, product_index: int) -> AnalysisResult:
        payload = {
            "videoUrl": video_url,
            "productUrl": product_url,
            "productIndex": product_index,
        }

        if self._client is not None:
            response = await self._client.post(self.service_url, json=payload, timeout=self.timeout)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.service_url, json=payload)

        return parse_analysis_response(response)


def parse_analysis_response(response: httpx.Response) -> AnalysisResult:
    """
    Turn an analysis service response into a result.

    Raises:
        AnalysisServiceError: Non-2xx status, error body or malformed body
    """
    try:
        body = response.json()
    except ValueError:
        raise AnalysisServiceError(
            f"Malformed response body (status {response.status_code})",
            status_code=response.status_code,
        )

    error = body.get("error") if isinstance(body, dict) else None

    if not response.is_success:
        raise AnalysisServiceError(
            error or f"Analysis service returned {response.status_code}",
            status_code=response.status_code,
        )

    if error:
        raise AnalysisServiceError(str(error), status_code=response.status_code)

    try:
        return AnalysisResponseBody.model_validate(body).to_result()
    except ValidationError as e:
        raise AnalysisServiceError(
            f"Malformed response body: {e.error_count()} validation errors",
            status_code=response.status_code,
        )


# Canned video-analysis insights, rotated by product index
VIDEO_INSIGHTS = (
    "This product shows excellent potential for the Indian market with strong trend status and engaging video creatives.",
    "Good product with moderate potential. The video creative conveys clear value proposition and targets the right audience.",
    "Limited potential based on video analysis. Consider improving production quality and emphasizing unique selling points.",
    "Strong market fit detected in video content. Emotional triggers and clear problem-solution demonstration present.",
    "Video creative lacks urgency triggers. Consider adding time-limited offers or scarcity elements to improve performance.",
    "High virality potential detected. Video creative includes shareable moments and relatable scenarios.",
    "Product demonstrates good solution value in video. Clear before/after scenarios resonate well with target audience.",
    "Video creative analysis indicates seasonality alignment. Perfect timing for current market trends in India.",
    "Target audience clarity is strong in this video. Specific demographic targeting evident in creative approach.",
    "Impulse buy potential is high. Video creative creates immediate desire through effective emotional triggers.",
)


class LocalAnalysisService(AnalysisService):
    """
    In-process analysis.

    Scores are seeded from the links and index, so the same product always
    gets the same analysis. Used when no ANALYSIS_SERVICE_URL is configured
    and behind the /api/analyze-video-content endpoint.
    """

    def __init__(self, score_generator: Optional[ScoreGenerator] = None):
        self.score_generator = score_generator or ScoreGenerator()

    async def analyze(self, video_url: str, product_url: str, product_index: int) -> AnalysisResult:
        return self.analyze_sync(video_url, product_url, product_index)

    def analyze_sync(self, video_url: str, product_url: str, product_index: int) -> AnalysisResult:
        if not video_url:
            raise AnalysisServiceError("Video URL is required", status_code=400)

        logger.debug(f"Analyzing video content for product #{product_index}: {video_url}")
        return AnalysisResult(
            scores=self.score_generator.seeded_scores(video_url, product_url or "", product_index),
            insights=insight_for_index(product_index),
        )


def insight_for_index(index: int) -> str:
    return VIDEO_INSIGHTS[index % len(VIDEO_INSIGHTS)]


def build_analysis_service(analysis_config=None) -> AnalysisService:
    """Remote service when a URL is configured, local analysis otherwise."""
    if analysis_config is None:
        from ..config import get_settings
        analysis_config = get_settings().analysis

    if analysis_config.service_url:
        logger.info(f"Using remote analysis service: {analysis_config.service_url}")
        return HttpAnalysisService(
            analysis_config.service_url,
            timeout=analysis_config.request_timeout,
        )

    logger.info("ANALYSIS_SERVICE_URL not set - using local analysis")
    return LocalAnalysisService()
