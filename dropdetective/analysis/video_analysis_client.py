"""
Drop Detective Video Analysis Client
====================================

Analyzes one ProductStub through an AnalysisService and always returns a
complete AnalyzedProduct. Failures never reach the caller:

    1. service success        -> service scores and insight
    2. AnalysisServiceError   -> random scores, SERVICE_ERROR_INSIGHT
       (also a result that is not a well-formed AnalysisResult)
    3. any other exception    -> random scores, TRANSPORT_ERROR_INSIGHT

In every case the total is recomputed by the aggregator.
"""

import logging
from typing import List, Optional

from .analysis_service import AnalysisResult, AnalysisService, AnalysisServiceError
from ..data.data_models import AnalysisSource, AnalyzedProduct, CriterionScore, ProductStub
from ..scoring.aggregator import compute_total_score, generate_insight
from ..scoring.score_generator import ScoreGenerator

logger = logging.getLogger(__name__)


SERVICE_ERROR_INSIGHT = "Could not analyze video content. Using estimated scores."
TRANSPORT_ERROR_INSIGHT = "Error analyzing video. Using estimated scores."


class VideoAnalysisClient:
    """Failure-proof wrapper around an analysis service."""

    def __init__(
        self,
        service: AnalysisService,
        score_generator: Optional[ScoreGenerator] = None,
    ):
        self.service = service
        self.score_generator = score_generator or ScoreGenerator()

    async def analyze_one(self, stub: ProductStub, index: int) -> AnalyzedProduct:
        """
        Analyze a single product.

        Args:
            stub: Product to analyze
            index: Absolute position of the product in the run

        Returns:
            AnalyzedProduct with status complete
        """
        try:
            result = await self.service.analyze(
                video_url=stub.video_creative_folder_link,
                product_url=stub.product_link,
                product_index=index,
            )
            return self._settle(stub, result)
        except AnalysisServiceError as e:
            logger.warning(
                f"Analysis service error for '{stub.product_name}' (#{index}): {e.message}",
                extra={"product": stub.product_name, "index": index},
            )
            return self._fallback(stub, SERVICE_ERROR_INSIGHT, AnalysisSource.SERVICE_ERROR)
        except Exception as e:
            logger.error(
                f"Error analyzing video for '{stub.product_name}' (#{index}): {e}",
                extra={"product": stub.product_name, "index": index},
            )
            return self._fallback(stub, TRANSPORT_ERROR_INSIGHT, AnalysisSource.TRANSPORT_ERROR)

    def _settle(self, stub: ProductStub, result: AnalysisResult) -> AnalyzedProduct:
        """
        Turn a service result into a product.

        Raises:
            AnalysisServiceError: The result is not a well-formed AnalysisResult
        """
        if not isinstance(result, AnalysisResult):
            raise AnalysisServiceError(f"Malformed analysis result: {type(result).__name__}")
        if not isinstance(result.scores, list):
            raise AnalysisServiceError("Malformed analysis result: scores is not a list")
        for item in result.scores:
            if (not isinstance(item, CriterionScore)
                    or not isinstance(item.score, int) or isinstance(item.score, bool)):
                raise AnalysisServiceError(f"Malformed analysis result: bad score entry {item!r}")
        if result.insights is not None and not isinstance(result.insights, str):
            raise AnalysisServiceError("Malformed analysis result: insights is not text")

        total = compute_total_score(result.scores)
        insights = result.insights.strip() if result.insights else ""
        return AnalyzedProduct.from_stub(
            stub,
            scores=result.scores,
            total_score=total,
            insights=insights or generate_insight(total),
            analysis_source=AnalysisSource.SERVICE,
        )

    def _fallback(self, stub: ProductStub, insights: str, source: AnalysisSource) -> AnalyzedProduct:
        scores: List[CriterionScore] = self.score_generator.random_scores()
        return AnalyzedProduct.from_stub(
            stub,
            scores=scores,
            total_score=compute_total_score(scores),
            insights=insights,
            analysis_source=source,
        )
