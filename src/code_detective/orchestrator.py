"""Request orchestration between editor state, ingestion and the service.

The orchestrator resolves the code to analyze from the active input mode,
validates it locally, and submits it. Only one request may be in flight, and a
response that arrives after reset() belongs to a finished session and is
discarded instead of being applied.
"""

from collections.abc import Iterable
from enum import Enum

from code_detective.ingestion.pipeline import IngestionPipeline
from code_detective.models.analysis import AnalysisRequest, AnalysisResult
from code_detective.models.ingestion import IngestionBatch
from code_detective.service.client import AnalysisServiceClient, AnalysisServiceError
from code_detective.utils.logging import get_logger

logger = get_logger(__name__)

EMPTY_CODE_MESSAGE = "Please enter some code to analyze"
IN_PROGRESS_MESSAGE = "An analysis is already in progress"
DEFAULT_LANGUAGE = "python"


class InputMode(Enum):
    """Where the code to analyze comes from."""

    DIRECT = "direct"
    UPLOAD = "upload"


class SubmissionValidationError(ValueError):
    """Submission rejected locally; nothing was sent to the service."""


class SubmissionInProgressError(RuntimeError):
    """A request is already outstanding for this session."""


class RequestOrchestrator:
    """Builds analysis requests and owns the current analysis result.

    The orchestrator subscribes to the ingestion pipeline: a non-empty batch
    switches to upload mode, an empty batch back to direct entry.

    Attributes:
        code: Directly entered code (direct mode)
        language: Language tag for directly entered code
        context: Optional free-text focus hint
        focus_areas: Optional focus topics
    """

    def __init__(
        self,
        client: AnalysisServiceClient,
        pipeline: IngestionPipeline | None = None,
    ) -> None:
        self._client = client
        self._pipeline = pipeline or IngestionPipeline()
        self._pipeline.subscribe(self._on_batch_changed)

        self.code = ""
        self.language = DEFAULT_LANGUAGE
        self.context = ""
        self.focus_areas: list[str] = []

        self._mode = InputMode.UPLOAD if len(self._pipeline.batch) else InputMode.DIRECT
        self._selected_index = 0
        self._result: AnalysisResult | None = None
        self._error: str | None = None
        self._session = 0
        self._in_flight = False

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def pipeline(self) -> IngestionPipeline:
        return self._pipeline

    @property
    def mode(self) -> InputMode:
        return self._mode

    @property
    def result(self) -> AnalysisResult | None:
        """Most recent successful analysis of this session."""
        return self._result

    @property
    def error(self) -> str | None:
        """User-facing message of the last failed submission."""
        return self._error

    @property
    def is_loading(self) -> bool:
        return self._in_flight

    @property
    def selected_index(self) -> int:
        return self._selected_index

    def use_direct_input(self) -> None:
        """Switch to direct code entry, keeping the uploaded batch."""
        self._mode = InputMode.DIRECT

    def select(self, index: int) -> None:
        """Select an uploaded artifact and switch to upload mode.

        Raises:
            IndexError: If no artifact exists at index
        """
        batch = self._pipeline.batch
        if index < 0 or index >= len(batch):
            raise IndexError(f"No artifact at index {index} (batch holds {len(batch)})")
        self._selected_index = index
        self._mode = InputMode.UPLOAD

    def _on_batch_changed(self, batch: IngestionBatch) -> None:
        if len(batch) == 0:
            self._selected_index = 0
            self._mode = InputMode.DIRECT
            return

        self._selected_index = min(self._selected_index, len(batch) - 1)
        self._mode = InputMode.UPLOAD

    # -------------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------------

    def build_request(self) -> AnalysisRequest:
        """Build a request from the active input mode.

        Raises:
            SubmissionValidationError: If the resolved code is empty or blank
        """
        file_path: str | None = None
        if self._mode is InputMode.UPLOAD and len(self._pipeline.batch):
            artifact = self._pipeline.batch[self._selected_index]
            code, language, file_path = artifact.content, artifact.language, artifact.source_name
        else:
            code, language = self.code, self.language

        code = code.strip()
        if not code:
            raise SubmissionValidationError(EMPTY_CODE_MESSAGE)

        return AnalysisRequest(
            code=code,
            language=language,
            file_path=file_path,
            context=self.context.strip() or None,
            focus_areas=_clean_focus_areas(self.focus_areas),
        )

    def submit(self) -> AnalysisResult | None:
        """Submit the current input for analysis.

        On success the result replaces any previous one. On failure `error` is
        set and the previous result is kept.

        Returns:
            The new result, or None if reset() was called while the request
            was outstanding (the late response is discarded)

        Raises:
            SubmissionValidationError: Code is blank; no request was sent
            SubmissionInProgressError: Another request is outstanding
            AnalysisServiceError: The service failed or was unreachable
        """
        if self._in_flight:
            raise SubmissionInProgressError(IN_PROGRESS_MESSAGE)

        try:
            request = self.build_request()
        except SubmissionValidationError as e:
            self._error = str(e)
            raise

        session = self._session
        self._in_flight = True
        self._error = None
        try:
            result = self._client.analyze(request)
        except AnalysisServiceError as e:
            if session == self._session:
                self._error = str(e)
            raise
        finally:
            if session == self._session:
                self._in_flight = False

        if session != self._session:
            logger.info("Discarding analysis response from a previous session")
            return None

        self._result = result
        return result

    def reset(self) -> None:
        """Start a new session.

        Clears the result, error, editor fields and uploaded batch. Any request
        still outstanding will have its response discarded.
        """
        self._session += 1
        self._in_flight = False
        self._result = None
        self._error = None
        self.code = ""
        self.language = DEFAULT_LANGUAGE
        self.context = ""
        self.focus_areas = []
        self._pipeline.clear()
        logger.debug("Started analysis session %d", self._session)


def _clean_focus_areas(areas: Iterable[str]) -> tuple[str, ...] | None:
    cleaned = tuple(area.strip() for area in areas if area and area.strip())
    return cleaned or None
