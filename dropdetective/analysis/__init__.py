"""
Drop Detective Analysis Module
==============================

Video analysis of spreadsheet products.

Components:
    - AnalysisService: service contract (HttpAnalysisService, LocalAnalysisService)
    - VideoAnalysisClient: per-product analysis with score fallbacks
    - BatchAnalysisOrchestrator: batched, order-preserving analysis of a sheet

Usage:
    from dropdetective.analysis import (
        BatchAnalysisOrchestrator, VideoAnalysisClient, build_analysis_service,
    )

    client = VideoAnalysisClient(build_analysis_service())
    products = await BatchAnalysisOrchestrator(client).analyze_all(stubs)
"""

from .analysis_service import (
    AnalysisService,
    AnalysisResult,
    AnalysisServiceError,
    HttpAnalysisService,
    LocalAnalysisService,
    build_analysis_service,
)
from .video_analysis_client import (
    VideoAnalysisClient,
    SERVICE_ERROR_INSIGHT,
    TRANSPORT_ERROR_INSIGHT,
)
from .batch_orchestrator import (
    BatchAnalysisOrchestrator,
    DEFAULT_BATCH_SIZE,
    PIPELINE_ERROR_INSIGHT,
)

__all__ = [
    # Services
    "AnalysisService",
    "AnalysisResult",
    "AnalysisServiceError",
    "HttpAnalysisService",
    "LocalAnalysisService",
    "build_analysis_service",
    # Client
    "VideoAnalysisClient",
    "SERVICE_ERROR_INSIGHT",
    "TRANSPORT_ERROR_INSIGHT",
    # Orchestrator
    "BatchAnalysisOrchestrator",
    "DEFAULT_BATCH_SIZE",
    "PIPELINE_ERROR_INSIGHT",
]
