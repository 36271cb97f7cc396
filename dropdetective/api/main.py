"""
Drop Detective FastAPI Application
==================================

REST API for the sheet analysis pipeline.

Endpoints:
    GET  /api/health                       - Health check
    POST /api/analyze                      - Analyze a Google Sheet
    GET  /api/results/{sheet_id}           - Search/sort/paginate results
    GET  /api/results/{sheet_id}/export    - Export results as CSV
    POST /api/analyze-video-content        - Video analysis service
    POST /api/fetch-google-sheet           - Raw sheet values

Usage:
    uvicorn dropdetective.api.main:app --reload --port 8000

    Or with CLI:
    python -m dropdetective.api.main
"""

from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from contextlib import asynccontextmanager
import asyncio
import logging
import os
from datetime import datetime
from typing import Optional

from .models import (
    AnalyzeRequest,
    AnalyzeResponse,
    CriterionScoreModel,
    FetchSheetRequest,
    FetchSheetResponse,
    HealthResponse,
    ProductModel,
    ResultsPageResponse,
    VideoAnalysisRequest,
    VideoAnalysisResponse,
)
from ..analysis.analysis_service import AnalysisServiceError, LocalAnalysisService
from ..data.sheet_parser import EmptyResultError, InvalidSourceError
from ..data.sheets_client import SheetFetchError
from ..orchestrator.pipeline import SheetAnalysisPipeline
from ..presentation.results_view import DEFAULT_PAGE_SIZE, DEFAULT_SORT, ResultsView

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Services
pipeline: Optional[SheetAnalysisPipeline] = None
local_analysis: Optional[LocalAnalysisService] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    global pipeline, local_analysis

    logger.info("Starting Drop Detective API...")

    if pipeline is None:
        pipeline = SheetAnalysisPipeline()
    if local_analysis is None:
        local_analysis = LocalAnalysisService()

    logger.info("Services initialized")

    yield

    pipeline.close()
    pipeline = None
    local_analysis = None
    logger.info("Shutting down Drop Detective API...")


app = FastAPI(
    title="Drop Detective API",
    description="Dropshipping product evaluation for the Indian market",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS configuration
# In production, set CORS_ORIGINS env var (comma-separated)
_default_origins = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://localhost:8080",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
    "http://127.0.0.1:8080",
]
_extra_origins = os.getenv("CORS_ORIGINS", "")
if _extra_origins:
    _default_origins.extend([o.strip() for o in _extra_origins.split(",") if o.strip()])

app.add_middleware(
    CORSMiddleware,
    allow_origins=_default_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# HEALTH ENDPOINT
# ============================================================================

@app.get("/api/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.

    Reports which collaborators are configured:
    - results store (postgres / memory)
    - Google Sheets API key
    - analysis service (remote / local)
    """
    settings = pipeline.settings

    return HealthResponse(
        status="healthy" if settings.sheets.api_key else "degraded",
        version=settings.app_version,
        database="postgres" if settings.database.enabled else "memory",
        sheets="configured" if settings.sheets.api_key else "not_configured",
        analysis="remote" if settings.analysis.service_url else "local",
    )


# ============================================================================
# ANALYSIS ENDPOINTS
# ============================================================================

@app.post("/api/analyze", response_model=AnalyzeResponse)
async def analyze_sheet(request: AnalyzeRequest):
    """
    Analyze every product of a Google Sheet.

    Errors:
        400 - not a Google Sheets URL
        422 - the sheet has no valid product rows
        502 - the sheet could not be fetched
    """
    try:
        result = await pipeline.run(request.sheetUrl)
    except InvalidSourceError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except EmptyResultError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except SheetFetchError as e:
        raise HTTPException(status_code=502, detail=str(e))
    except Exception as e:
        logger.error(f"Error analyzing sheet: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return AnalyzeResponse(
        run_id=result.run_id,
        sheet_id=result.sheet_id,
        rows_received=result.rows_received,
        rows_dropped=result.rows_dropped,
        fallback_count=result.fallback_count,
        persisted=result.persisted,
        duration_seconds=result.duration_seconds,
        products=[ProductModel.from_product(p) for p in result.products],
    )


def _results_view(sheet_id: str, search: Optional[str], sort: str) -> ResultsView:
    try:
        products = pipeline.get_results(sheet_id)
    except Exception as e:
        logger.error(f"Error loading results for {sheet_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    if not products:
        raise HTTPException(status_code=404, detail=f"No results for sheet {sheet_id}")

    try:
        return ResultsView(products).search(search).sort(sort)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/api/results/{sheet_id}", response_model=ResultsPageResponse)
async def get_results(
    sheet_id: str,
    search: Optional[str] = Query(None, description="Filter by product name"),
    sort: str = Query(DEFAULT_SORT, description="highest, lowest or name"),
    page: int = Query(1, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100),
):
    """Search, sort and paginate the results of an analyzed sheet."""
    view = _results_view(sheet_id, search, sort)
    results_page = view.paginate(page=page, page_size=page_size)

    return ResultsPageResponse(
        sheet_id=sheet_id,
        page=results_page.page,
        page_size=results_page.page_size,
        total_items=results_page.total_items,
        total_pages=results_page.total_pages,
        sort=sort,
        search=search,
        summary=view.summary(),
        products=[ProductModel.from_product(p) for p in results_page.items],
    )


@app.get("/api/results/{sheet_id}/export")
async def export_results_csv(
    sheet_id: str,
    search: Optional[str] = Query(None),
    sort: str = Query(DEFAULT_SORT),
):
    """
    Export results as CSV file.

    Rows follow the same search and sort as the results endpoint.
    """
    view = _results_view(sheet_id, search, sort)
    filename = f"product_analysis_{sheet_id}_{datetime.utcnow().strftime('%Y%m%d_%H%M')}.csv"

    return StreamingResponse(
        iter([view.export_csv()]),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


# ============================================================================
# SERVICE CONTRACT ENDPOINTS
# ============================================================================

@app.post(
    "/api/analyze-video-content",
    response_model=VideoAnalysisResponse,
    response_model_exclude_none=True,
)
async def analyze_video_content(request: VideoAnalysisRequest):
    """
    Video analysis service.

    Returns {scores, insights}, or {error} with status 400 when the video
    URL is missing.
    """
    try:
        result = local_analysis.analyze_sync(
            request.videoUrl or "",
            request.productUrl,
            request.productIndex,
        )
    except AnalysisServiceError as e:
        return JSONResponse(status_code=e.status_code or 400, content={"error": e.message})

    return VideoAnalysisResponse(
        scores=[CriterionScoreModel(name=s.name, score=s.score) for s in result.scores],
        insights=result.insights,
    )


@app.post("/api/fetch-google-sheet", response_model=FetchSheetResponse)
async def fetch_google_sheet(request: FetchSheetRequest):
    """Raw values of a sheet (first row = headers)."""
    if not request.sheetId:
        return JSONResponse(status_code=400, content={"error": "Sheet ID is required"})

    try:
        values = await asyncio.to_thread(pipeline.sheets_client.fetch_values, request.sheetId)
    except SheetFetchError as e:
        logger.error(f"Error fetching sheet {request.sheetId}: {e}")
        return JSONResponse(
            status_code=e.status_code or 502,
            content={"error": "Failed to fetch Google Sheet data", "details": str(e)},
        )

    return FetchSheetResponse(values=values)


# ============================================================================
# MAIN
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    print("=" * 60)
    print("DROP DETECTIVE API SERVER")
    print("=" * 60)
    print()
    print("Starting server at http://localhost:8000")
    print()
    print("API Documentation:")
    print("  - Swagger UI: http://localhost:8000/docs")
    print("  - ReDoc:      http://localhost:8000/redoc")
    print()
    print("=" * 60)

    uvicorn.run(
        "dropdetective.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )
