"""HTTP client for the external analysis service.

The service exposes two endpoints:
- POST /analyze: AnalysisRequest body, AnalysisResult on success, or an error
  payload with a human-readable "detail" string
- GET /health: {"status": "..."}

Remote errors are translated into AnalysisServiceError carrying a message that
can be shown to the user as-is.
"""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from code_detective.config import ServiceConfig
from code_detective.models.analysis import AnalysisRequest, AnalysisResult
from code_detective.utils.logging import get_logger

logger = get_logger(__name__)

ANALYZE_FAILED_MESSAGE = "Failed to analyze code"
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"
SERVICE_UNAVAILABLE_MESSAGE = "Backend service is not available"


class AnalysisServiceError(Exception):
    """Error reported by, or while reaching, the analysis service.

    Attributes:
        status_code: HTTP status of the failed response, None for transport errors
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass
class HealthStatus:
    """Result of a health probe.

    Attributes:
        available: Whether the service answered successfully
        status: Status string reported by the service ("unavailable" on failure)
        message: Human-readable context
    """

    available: bool
    status: str
    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "available": self.available,
            "status": self.status,
            "message": self.message,
        }


def extract_detail(response: httpx.Response) -> str | None:
    """Return the service's "detail" string from an error response, if any."""
    try:
        payload = response.json()
    except ValueError:
        return None

    if isinstance(payload, dict):
        detail = payload.get("detail")
        if isinstance(detail, str) and detail.strip():
            return detail
    return None


class AnalysisServiceClient:
    """Synchronous client for the analysis service.

    Usage:
        with AnalysisServiceClient.from_config(config.service) as client:
            result = client.analyze(request)
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 60.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Service root URL
            timeout: Request timeout in seconds
            transport: Optional transport (tests inject httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    @classmethod
    def from_config(
        cls,
        config: ServiceConfig,
        transport: httpx.BaseTransport | None = None,
    ) -> "AnalysisServiceClient":
        """Create a client from service configuration."""
        return cls(config.base_url, timeout=config.timeout, transport=transport)

    def __enter__(self) -> "AnalysisServiceClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Release the underlying connection pool."""
        self._client.close()

    def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        """Submit code for analysis.

        Args:
            request: Validated analysis request

        Returns:
            AnalysisResult decoded from the response

        Raises:
            AnalysisServiceError: On transport failure, non-2xx status or an
                undecodable response body
        """
        logger.info(
            "Submitting %d characters of %s for analysis",
            len(request.code),
            request.language,
        )

        try:
            response = self._client.post("/analyze", json=request.to_dict())
        except httpx.HTTPError as e:
            logger.warning("Analysis request failed: %s", e)
            raise AnalysisServiceError(ANALYZE_FAILED_MESSAGE) from e

        if response.is_error:
            detail = extract_detail(response)
            logger.warning(
                "Analysis service returned HTTP %d: %s",
                response.status_code,
                detail or "no detail",
            )
            raise AnalysisServiceError(
                detail or ANALYZE_FAILED_MESSAGE,
                status_code=response.status_code,
            )

        try:
            result = AnalysisResult.from_dict(response.json())
        except ValueError as e:
            logger.error("Analysis response could not be decoded: %s", e)
            raise AnalysisServiceError(
                UNEXPECTED_ERROR_MESSAGE,
                status_code=response.status_code,
            ) from e

        logger.structured(
            logging.INFO,
            f"Analysis complete: score {result.overall_score:.1f}, "
            f"{len(result.suggestions)} suggestion(s)",
            score=result.overall_score,
            suggestions=len(result.suggestions),
        )
        return result

    def health(self) -> HealthStatus:
        """Probe the service health endpoint.

        Never raises: any failure is reported as an unavailable status.
        """
        try:
            response = self._client.get("/health")
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.debug("Health check failed: %s", e)
            return HealthStatus(
                available=False,
                status="unavailable",
                message=SERVICE_UNAVAILABLE_MESSAGE,
            )

        status = payload.get("status") if isinstance(payload, dict) else None
        return HealthStatus(
            available=True,
            status=str(status) if status is not None else "unknown",
            message=f"Service reachable at {self.base_url}",
        )
