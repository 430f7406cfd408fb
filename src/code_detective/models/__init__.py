"""Code Detective data models.

This module exports all core entities used throughout the application:
- FileArtifact: One ingested file with its language tag
- IngestionBatch: Ordered, capacity-bounded set of artifacts
- AnalysisRequest: Code submission for the analysis service
- AnalysisResult: Completed analysis (suggestions, metrics, score)
- Suggestion, Metrics: Parts of an analysis result
- Severity, Category: Finding classification
"""

from code_detective.models.analysis import (
    AnalysisRequest,
    AnalysisResult,
    Category,
    Metrics,
    Severity,
    Suggestion,
)
from code_detective.models.ingestion import FileArtifact, IngestionBatch

__all__ = [
    "FileArtifact",
    "IngestionBatch",
    "AnalysisRequest",
    "AnalysisResult",
    "Suggestion",
    "Metrics",
    "Severity",
    "Category",
]
