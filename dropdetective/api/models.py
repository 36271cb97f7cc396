"""
Drop Detective API Models
=========================

Pydantic models for API request/response serialization.
Requests accept camelCase or snake_case keys; responses use snake_case.
"""

from pydantic import BaseModel, Field
from typing import List, Dict, Optional, Any

from ..data.data_models import AnalyzedProduct
from ..presentation.results_view import criterion_color, score_badge
from ..scoring.aggregator import insight_tier


class CriterionScoreModel(BaseModel):
    """One criterion score."""
    name: str
    score: int
    color: Optional[str] = None


class ProductModel(BaseModel):
    """Analyzed product as shown on a result card."""
    productName: str = Field(alias="product_name")
    productLink: str = Field("", alias="product_link")
    videoCreativeFolderLink: str = Field(alias="video_creative_folder_link")
    rowNumber: Optional[int] = Field(None, alias="row_number")

    scores: List[CriterionScoreModel] = Field(default_factory=list)
    totalScore: int = Field(alias="total_score")
    insights: str
    status: str
    analysisSource: str = Field(alias="analysis_source")

    # Display helpers
    badge: str
    tier: str

    class Config:
        populate_by_name = True

    @classmethod
    def from_product(cls, product: AnalyzedProduct) -> "ProductModel":
        return cls(
            product_name=product.product_name,
            product_link=product.product_link,
            video_creative_folder_link=product.video_creative_folder_link,
            row_number=product.row_number,
            scores=[
                CriterionScoreModel(name=s.name, score=s.score, color=criterion_color(s.score))
                for s in product.scores
            ],
            total_score=product.total_score,
            insights=product.insights,
            status=product.status.value,
            analysis_source=product.analysis_source.value,
            badge=score_badge(product.total_score),
            tier=insight_tier(product.total_score).value,
        )


class AnalyzeRequest(BaseModel):
    """Request to analyze a sheet."""
    sheetUrl: str = Field(alias="sheet_url")

    class Config:
        populate_by_name = True


class AnalyzeResponse(BaseModel):
    """Outcome of a sheet analysis run."""
    runId: str = Field(alias="run_id")
    sheetId: str = Field(alias="sheet_id")
    rowsReceived: int = Field(alias="rows_received")
    rowsDropped: int = Field(alias="rows_dropped")
    fallbackCount: int = Field(alias="fallback_count")
    persisted: bool
    durationSeconds: Optional[float] = Field(None, alias="duration_seconds")
    products: List[ProductModel]

    class Config:
        populate_by_name = True


class ResultsPageResponse(BaseModel):
    """One page of a sheet's results."""
    sheetId: str = Field(alias="sheet_id")
    page: int
    pageSize: int = Field(alias="page_size")
    totalItems: int = Field(alias="total_items")
    totalPages: int = Field(alias="total_pages")
    sort: str
    search: Optional[str] = None
    summary: Dict[str, Any] = Field(default_factory=dict)
    products: List[ProductModel]

    class Config:
        populate_by_name = True


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    database: str
    sheets: str
    analysis: str


class VideoAnalysisRequest(BaseModel):
    """Video analysis service request."""
    videoUrl: Optional[str] = Field(None, alias="video_url")
    productUrl: str = Field("", alias="product_url")
    productIndex: int = Field(0, alias="product_index")

    class Config:
        populate_by_name = True


class VideoAnalysisResponse(BaseModel):
    """Video analysis service success response."""
    scores: List[CriterionScoreModel]
    insights: str


class FetchSheetRequest(BaseModel):
    """Raw sheet values request."""
    sheetId: Optional[str] = Field(None, alias="sheet_id")

    class Config:
        populate_by_name = True


class FetchSheetResponse(BaseModel):
    """Raw sheet values (values[0] is the header row)."""
    values: List[List[str]] = Field(default_factory=list)
