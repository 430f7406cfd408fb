"""Analysis service access.

Provides the HTTP client for the external analysis service (POST /analyze,
GET /health) and its error type.
"""

from code_detective.service.client import (
    AnalysisServiceClient,
    AnalysisServiceError,
    HealthStatus,
)

__all__ = ["AnalysisServiceClient", "AnalysisServiceError", "HealthStatus"]
