"""
Drop Detective Sheet Analysis Pipeline
======================================

End-to-end analysis of one Google Sheet:

1. Validate the sheet URL (InvalidSourceError, before any fetch)
2. Fetch the sheet values (SheetFetchError on API failure)
3. Decode rows into product stubs (EmptyResultError when none survive)
4. Analyze all stubs in batches, with fallback scoring
5. Save results (best effort, inside the orchestrator)

Only steps 1-3 can stop a run. Everything after degrades to estimated
scores so a run always yields a complete, explained result set.

Usage:
    from dropdetective.orchestrator import SheetAnalysisPipeline

    with SheetAnalysisPipeline() as pipeline:
        result = asyncio.run(pipeline.run(sheet_url))
"""

import asyncio
import uuid
import logging
from collections import OrderedDict
from datetime import datetime
from typing import List, Optional

from ..analysis.analysis_service import AnalysisService, build_analysis_service
from ..analysis.batch_orchestrator import BatchAnalysisOrchestrator, ProgressCallback
from ..analysis.video_analysis_client import VideoAnalysisClient
from ..config import Settings, get_settings
from ..data.data_models import AnalyzedProduct, PipelineRunResult
from ..data.sheet_parser import ColumnMapping, EmptyResultError, SheetRowParser, extract_sheet_id
from ..data.sheets_client import GoogleSheetsClient
from ..presentation.results_view import product_from_record
from ..scoring.score_generator import ScoreGenerator
from ..session import SessionManager
from ..storage.results_store import ResultsStore, build_results_store

logger = logging.getLogger(__name__)

# Sheets whose latest run is kept in memory (oldest evicted first)
MAX_CACHED_SHEETS = 20


class SheetAnalysisPipeline:
    """
    Sheet-to-results orchestrator.

    Components are created lazily from settings unless injected, so tests
    can swap any collaborator.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        sheets_client: Optional[GoogleSheetsClient] = None,
        analysis_service: Optional[AnalysisService] = None,
        results_store: Optional[ResultsStore] = None,
        score_generator: Optional[ScoreGenerator] = None,
        column_mapping: Optional[ColumnMapping] = None,
        session_manager: Optional[SessionManager] = None,
        max_cached_sheets: int = MAX_CACHED_SHEETS,
    ):
        self.settings = settings or get_settings()
        self._sheets_client = sheets_client
        self._analysis_service = analysis_service
        self._results_store = results_store
        self._own_store = results_store is None
        self.score_generator = score_generator or ScoreGenerator()
        self.parser = SheetRowParser(column_mapping or ColumnMapping.from_config(self.settings.sheets))
        self.session_manager = session_manager

        # Latest results per sheet, with their full insight text
        self._latest: "OrderedDict[str, List[AnalyzedProduct]]" = OrderedDict()
        self.max_cached_sheets = max_cached_sheets

        logger.info(
            f"SheetAnalysisPipeline initialized: "
            f"batch_size={self.settings.analysis.batch_size}, "
            f"columns={self.parser.columns}"
        )

    @property
    def sheets_client(self) -> GoogleSheetsClient:
        """Lazy-initialize the Sheets client."""
        if self._sheets_client is None:
            sheets = self.settings.sheets
            self._sheets_client = GoogleSheetsClient(
                api_key=sheets.api_key,
                value_range=sheets.value_range,
                timeout=sheets.request_timeout,
            )
        return self._sheets_client

    @property
    def analysis_service(self) -> AnalysisService:
        """Lazy-initialize the analysis service."""
        if self._analysis_service is None:
            self._analysis_service = build_analysis_service(self.settings.analysis)
        return self._analysis_service

    @property
    def results_store(self) -> ResultsStore:
        """Lazy-initialize the results store."""
        if self._results_store is None:
            self._results_store = build_results_store(self.settings.database)
        return self._results_store

    def close(self):
        """Clean up resources."""
        if self._own_store and self._results_store is not None:
            self._results_store.close()
            self._results_store = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    # =========================================================================
    # MAIN ORCHESTRATION
    # =========================================================================

    async def run(
        self,
        sheet_url: str,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> PipelineRunResult:
        """
        Analyze every product of a sheet.

        Args:
            sheet_url: Google Sheets URL
            progress_callback: Called with (done, total) after each batch

        Returns:
            PipelineRunResult with products in sheet order

        Raises:
            InvalidSourceError: Malformed sheet URL (nothing fetched)
            SheetFetchError: The sheet could not be fetched
            EmptyResultError: No valid product rows in the sheet
        """
        sheet_id = extract_sheet_id(sheet_url)
        run_id = str(uuid.uuid4())

        result = PipelineRunResult(
            run_id=run_id,
            sheet_id=sheet_id,
            started_at=datetime.utcnow(),
            requested_by=self._requested_by(),
        )
        logger.info(f"=== Starting sheet analysis (run_id={run_id}, sheet={sheet_id}) ===",
                    extra={"run_id": run_id, "sheet_id": sheet_id})

        values = await asyncio.to_thread(self.sheets_client.fetch_values, sheet_id)
        parsed = self.parser.parse_with_stats(values)
        result.rows_received = parsed.rows_received
        result.rows_dropped = parsed.rows_dropped

        if not parsed.stubs:
            logger.warning(f"No valid products in sheet {sheet_id}", extra={"run_id": run_id})
            raise EmptyResultError(sheet_id, parsed.rows_received)

        orchestrator = BatchAnalysisOrchestrator(
            VideoAnalysisClient(self.analysis_service, self.score_generator),
            batch_size=self.settings.analysis.batch_size,
            results_store=self.results_store,
            score_generator=self.score_generator,
            progress_callback=progress_callback,
        )
        result.products = await orchestrator.analyze_all(parsed.stubs, sheet_id=sheet_id)
        result.persisted = bool(orchestrator.last_persisted)
        result.completed_at = datetime.utcnow()

        self._remember(sheet_id, result.products)

        logger.info(
            f"=== Sheet analysis complete: {len(result.products)} products, "
            f"{result.fallback_count} estimated, {result.duration_seconds:.1f}s ===",
            extra={"run_id": run_id, "sheet_id": sheet_id, "duration": result.duration_seconds},
        )
        return result

    def get_results(self, sheet_id: str) -> List[AnalyzedProduct]:
        """
        Results of a sheet: this process's latest run, else the results store.

        Returns:
            Analyzed products ([] when the sheet was never analyzed)
        """
        if sheet_id in self._latest:
            return list(self._latest[sheet_id])

        records = self.results_store.load_results(sheet_id)
        return [product_from_record(r) for r in records]

    def _remember(self, sheet_id: str, products: List[AnalyzedProduct]):
        self._latest[sheet_id] = products
        self._latest.move_to_end(sheet_id)
        while len(self._latest) > self.max_cached_sheets:
            evicted, _ = self._latest.popitem(last=False)
            logger.debug(f"Evicted cached results of sheet {evicted}")

    def _requested_by(self) -> Optional[str]:
        if self.session_manager is None or self.session_manager.current is None:
            return None
        return self.session_manager.current.user_id
