"""
Drop Detective Data Models
==========================

Dataclasses representing the records flowing through the analysis pipeline.

Models:
    - ProductStub: A validated spreadsheet row awaiting analysis
    - CriterionScore: One named criterion score
    - AnalyzedProduct: A stub plus its scores, total and insight
    - PipelineRunResult: Outcome of one end-to-end sheet analysis
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any


class ProductStatus(Enum):
    """Analysis lifecycle of a product."""
    ANALYZING = "analyzing"
    COMPLETE = "complete"


class AnalysisSource(Enum):
    """Which outcome produced a product's scores."""
    SERVICE = "service"
    SERVICE_ERROR = "service_error"        # structured error -> fallback
    TRANSPORT_ERROR = "transport_error"    # call raised -> fallback
    PIPELINE_ERROR = "pipeline_error"      # batch loop failed -> fallback


@dataclass(frozen=True)
class CriterionScore:
    """A single criterion score (1..10 when generated)."""
    name: str
    score: int

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "score": self.score}


@dataclass(frozen=True)
class ProductStub:
    """
    One spreadsheet row after validation.

    Only built for rows whose product name and creative link are non-empty
    after trimming.
    """
    product_name: str
    video_creative_folder_link: str
    product_link: str = ""
    row_number: Optional[int] = None
    status: ProductStatus = ProductStatus.ANALYZING


@dataclass(frozen=True)
class AnalyzedProduct:
    """
    A product with its settled scores.

    Created once per ProductStub by the video analysis client and never
    mutated afterwards.
    """
    product_name: str
    video_creative_folder_link: str
    scores: List[CriterionScore]
    total_score: int
    insights: str
    product_link: str = ""
    row_number: Optional[int] = None
    status: ProductStatus = ProductStatus.COMPLETE
    analysis_source: AnalysisSource = AnalysisSource.SERVICE

    @classmethod
    def from_stub(
        cls,
        stub: ProductStub,
        scores: List[CriterionScore],
        total_score: int,
        insights: str,
        analysis_source: AnalysisSource = AnalysisSource.SERVICE,
    ) -> "AnalyzedProduct":
        """Complete a stub with its analysis outcome."""
        return cls(
            product_name=stub.product_name,
            video_creative_folder_link=stub.video_creative_folder_link,
            product_link=stub.product_link,
            row_number=stub.row_number,
            scores=list(scores),
            total_score=total_score,
            insights=insights,
            status=ProductStatus.COMPLETE,
            analysis_source=analysis_source,
        )

    @property
    def is_fallback(self) -> bool:
        """True when the scores are estimates rather than analysis output."""
        return self.analysis_source != AnalysisSource.SERVICE

    def score_for(self, criterion_name: str) -> Optional[int]:
        """Score of a named criterion, None if the product has no such score."""
        for item in self.scores:
            if item.name == criterion_name:
                return item.score
        return None

    def to_db_dict(self, sheet_id: str) -> Dict[str, Any]:
        """
        Convert to the persisted record.

        Returns:
            Dictionary matching the analyzed_products table columns
        """
        return {
            "sheet_id": sheet_id,
            "name": self.product_name,
            "score": self.total_score,
            "score_breakdown": [s.to_dict() for s in self.scores],
            "google_drive_links": [self.video_creative_folder_link],
            "status": ProductStatus.COMPLETE.value,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Format JSON."""
        return {
            "product_name": self.product_name,
            "product_link": self.product_link,
            "video_creative_folder_link": self.video_creative_folder_link,
            "row_number": self.row_number,
            "scores": [s.to_dict() for s in self.scores],
            "total_score": self.total_score,
            "insights": self.insights,
            "status": self.status.value,
            "analysis_source": self.analysis_source.value,
        }


@dataclass
class PipelineRunResult:
    """Result of one end-to-end sheet analysis."""
    run_id: str
    sheet_id: str
    started_at: datetime
    completed_at: Optional[datetime] = None
    products: List[AnalyzedProduct] = field(default_factory=list)

    # Counts
    rows_received: int = 0
    rows_dropped: int = 0

    persisted: bool = False
    requested_by: Optional[str] = None

    @property
    def fallback_count(self) -> int:
        """Products whose scores are estimates."""
        return sum(1 for p in self.products if p.is_fallback)

    @property
    def duration_seconds(self) -> Optional[float]:
        """Calculate duration in seconds."""
        if self.completed_at is None:
            return None
        return (self.completed_at - self.started_at).total_seconds()

    def get_summary(self) -> Dict[str, Any]:
        """Get pipeline run summary."""
        return {
            "run_id": self.run_id,
            "sheet_id": self.sheet_id,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_seconds": self.duration_seconds,
            "rows_received": self.rows_received,
            "rows_dropped": self.rows_dropped,
            "products_analyzed": len(self.products),
            "fallback_count": self.fallback_count,
            "persisted": self.persisted,
            "requested_by": self.requested_by,
        }
