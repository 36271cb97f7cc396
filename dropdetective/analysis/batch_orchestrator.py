"""
Drop Detective Batch Analysis Orchestrator
==========================================

Runs the video analysis client over every stub in fixed-size batches.

Execution model:
    - stubs are split into consecutive chunks of `batch_size` (default 5)
    - chunks run strictly one after another
    - calls inside a chunk run concurrently (asyncio.gather)
    - each call writes its own slot of a pre-sized output buffer, addressed
      by its absolute index (chunk_start + offset), so output order always
      equals input order whatever the completion order

After the last chunk the full result set is saved to the results store on a
best-effort basis. If anything escapes the batch loop itself, every stub is
returned with estimated scores instead.

Usage:
    orchestrator = BatchAnalysisOrchestrator(VideoAnalysisClient(service))
    products = await orchestrator.analyze_all(stubs, sheet_id="abc123")
"""

import asyncio
import logging
import time
from typing import Callable, List, Optional, Sequence

from .video_analysis_client import VideoAnalysisClient
from ..data.data_models import AnalysisSource, AnalyzedProduct, ProductStub
from ..scoring.aggregator import compute_total_score
from ..scoring.score_generator import ScoreGenerator
from ..storage.results_store import ResultsStore

logger = logging.getLogger(__name__)


DEFAULT_BATCH_SIZE = 5

PIPELINE_ERROR_INSIGHT = "Error in analysis pipeline. Using estimated scores."

ProgressCallback = Callable[[int, int], None]


class BatchAnalysisOrchestrator:
    """Bounded-concurrency analysis of a whole sheet."""

    def __init__(
        self,
        client: VideoAnalysisClient,
        batch_size: int = DEFAULT_BATCH_SIZE,
        results_store: Optional[ResultsStore] = None,
        score_generator: Optional[ScoreGenerator] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            client: Per-product analysis client
            batch_size: Calls in flight per chunk
            results_store: Where the finished set is saved (optional)
            score_generator: Random source for the pipeline-level fallback
            progress_callback: Called with (done, total) after each chunk
        """
        if batch_size < 1:
            raise ValueError("batch_size must be positive")

        self.client = client
        self.batch_size = batch_size
        self.results_store = results_store
        self.score_generator = score_generator or ScoreGenerator()
        self.progress_callback = progress_callback

        # Outcome of the last save attempt (None = not attempted)
        self.last_persisted: Optional[bool] = None

    async def analyze_all(
        self,
        stubs: Sequence[ProductStub],
        sheet_id: Optional[str] = None,
    ) -> List[AnalyzedProduct]:
        """
        Analyze every stub, preserving input order.

        Args:
            stubs: Products to analyze
            sheet_id: Key for persistence (results are not saved without it)

        Returns:
            One AnalyzedProduct per stub, index-aligned with the input
        """
        self.last_persisted = None
        stubs = list(stubs)
        if not stubs:
            return []

        start = time.monotonic()
        try:
            results = await self._run_batches(stubs)
        except Exception as e:
            logger.error(
                f"Analysis pipeline failed, using estimated scores for {len(stubs)} products: {e}",
                exc_info=True,
                extra={"sheet_id": sheet_id},
            )
            return self._fallback_all(stubs)

        elapsed = time.monotonic() - start
        logger.info(
            f"Analyzed {len(results)} products in {elapsed:.2f}s",
            extra={"sheet_id": sheet_id, "duration": round(elapsed, 3)},
        )

        await self._persist(sheet_id, results)
        return results

    async def _run_batches(self, stubs: List[ProductStub]) -> List[AnalyzedProduct]:
        total = len(stubs)
        results: List[Optional[AnalyzedProduct]] = [None] * total

        for batch_number, chunk_start in enumerate(range(0, total, self.batch_size), start=1):
            chunk = stubs[chunk_start:chunk_start + self.batch_size]
            logger.debug(
                f"Batch {batch_number}: products {chunk_start}-{chunk_start + len(chunk) - 1}",
                extra={"batch": batch_number},
            )

            # Every call of the chunk settles before the first failure is raised
            outcomes = await asyncio.gather(*(
                self._analyze_into(results, stub, chunk_start + offset)
                for offset, stub in enumerate(chunk)
            ), return_exceptions=True)
            for outcome in outcomes:
                if isinstance(outcome, BaseException):
                    raise outcome

            done = chunk_start + len(chunk)
            if self.progress_callback is not None:
                self.progress_callback(done, total)

        missing = [i for i, r in enumerate(results) if r is None]
        if missing:
            raise RuntimeError(f"No analysis result for positions {missing}")

        return results

    async def _analyze_into(self, results: List[Optional[AnalyzedProduct]], stub: ProductStub, index: int):
        results[index] = await self.client.analyze_one(stub, index)

    def _fallback_all(self, stubs: List[ProductStub]) -> List[AnalyzedProduct]:
        fallback = []
        for stub in stubs:
            scores = self.score_generator.random_scores()
            fallback.append(AnalyzedProduct.from_stub(
                stub,
                scores=scores,
                total_score=compute_total_score(scores),
                insights=PIPELINE_ERROR_INSIGHT,
                analysis_source=AnalysisSource.PIPELINE_ERROR,
            ))
        return fallback

    async def _persist(self, sheet_id: Optional[str], results: List[AnalyzedProduct]):
        """Save results; failures are logged and never raised."""
        if self.results_store is None or not sheet_id:
            return

        try:
            await asyncio.to_thread(self.results_store.save_results, sheet_id, results)
            self.last_persisted = True
        except Exception as e:
            self.last_persisted = False
            logger.error(
                f"Failed to save results for sheet {sheet_id}: {e}",
                extra={"sheet_id": sheet_id},
            )
