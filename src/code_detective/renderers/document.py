"""Format-independent report document model.

build_document() turns an AnalysisResult into a ReportDocument holding every
display decision (grade bucket, labels, ordering, omitted fields). The HTML and
Markdown templates only lay this model out, so the two formats cannot drift.

Input comes from an external service, so building never fails on odd values:
negative line numbers and out-of-range scores are displayed as received, and a
non-finite score lands in the lowest grade bucket.
"""

import math
from dataclasses import dataclass, field
from enum import Enum

from code_detective.models.analysis import AnalysisResult, Severity, Suggestion
from code_detective.renderers.filters import format_number, humanize_tag

REPORT_TITLE = "Code Review Report"


class Grade(Enum):
    """Score bucket used for labels, emoji and color classes."""

    TOP = "top"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    CRITICAL = "critical"

    @property
    def emoji(self) -> str:
        return _GRADE_EMOJI[self]


_GRADE_EMOJI = {
    Grade.TOP: "🏆",
    Grade.HIGH: "😊",
    Grade.MEDIUM: "😐",
    Grade.LOW: "😟",
    Grade.CRITICAL: "💥",
}

# Lower bound of each bucket, checked from the top
_GRADE_THRESHOLDS: tuple[tuple[float, Grade], ...] = (
    (9.0, Grade.TOP),
    (8.0, Grade.HIGH),
    (6.0, Grade.MEDIUM),
    (4.0, Grade.LOW),
)


class SeverityTier(Enum):
    """Color tier of a finding in structured markup."""

    RED = "red"
    AMBER = "amber"
    BLUE = "blue"


_SEVERITY_TIERS = {
    Severity.CRITICAL: SeverityTier.RED,
    Severity.ERROR: SeverityTier.RED,
    Severity.WARNING: SeverityTier.AMBER,
    Severity.INFO: SeverityTier.BLUE,
}


def grade_for(score: float) -> Grade:
    """Map an overall score to its grade bucket.

    Examples:
        >>> grade_for(8.4)
        <Grade.HIGH: 'high'>
        >>> grade_for(3.99)
        <Grade.CRITICAL: 'critical'>
    """
    if not math.isfinite(score):
        return Grade.CRITICAL
    for threshold, grade in _GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return Grade.CRITICAL


def progress_for(score: float) -> int:
    """Score as a 0-100 progress value (score x 10, clamped)."""
    if not math.isfinite(score):
        return 0
    return max(0, min(100, round(score * 10)))


@dataclass(frozen=True)
class MetricTile:
    """One tile of the metrics grid."""

    label: str
    value: str


@dataclass(frozen=True)
class IssueView:
    """Display form of a Suggestion.

    Optional fields stay None (or empty) when the source omitted them, and
    templates skip them entirely.
    """

    number: int
    title: str
    severity: str
    severity_label: str
    tier: str
    category: str
    category_label: str
    location: str
    description: str
    explanation: str
    suggested_fix: str | None = None
    code_example: str | None = None
    learning_resources: tuple[str, ...] = ()


@dataclass(frozen=True)
class ReportDocument:
    """Everything a report format needs, in display order."""

    title: str
    score: str
    grade: Grade
    progress: int
    summary: str
    metrics: tuple[MetricTile, ...]
    issues: tuple[IssueView, ...] = field(default_factory=tuple)
    learning_points: tuple[str, ...] = field(default_factory=tuple)
    next_steps: tuple[str, ...] = field(default_factory=tuple)


def _location(suggestion: Suggestion) -> str:
    location = f"Line {suggestion.line_number}"
    if suggestion.column_number is not None:
        location += f", Column {suggestion.column_number}"
    return location


def build_issue(number: int, suggestion: Suggestion) -> IssueView:
    """Build the display form of one suggestion."""
    return IssueView(
        number=number,
        title=suggestion.title,
        severity=suggestion.severity.value,
        severity_label=humanize_tag(suggestion.severity.value),
        tier=_SEVERITY_TIERS.get(suggestion.severity, SeverityTier.BLUE).value,
        category=suggestion.type.value,
        category_label=humanize_tag(suggestion.type.value),
        location=_location(suggestion),
        description=suggestion.description,
        explanation=suggestion.explanation,
        suggested_fix=suggestion.suggested_fix or None,
        code_example=suggestion.code_example or None,
        learning_resources=tuple(suggestion.learning_resources or ()),
    )


def build_document(result: AnalysisResult) -> ReportDocument:
    """Build the report document for an analysis result."""
    metrics = result.metrics
    maintainability = format_number(metrics.maintainability_index, 0)
    if math.isfinite(metrics.maintainability_index):
        maintainability += "%"

    tiles = (
        MetricTile("Lines of Code", str(metrics.lines_of_code)),
        MetricTile("Complexity Score", format_number(metrics.complexity_score, 1)),
        MetricTile("Maintainability", maintainability),
        MetricTile("Total Issues", str(len(result.suggestions))),
    )

    return ReportDocument(
        title=REPORT_TITLE,
        score=format_number(result.overall_score, 1),
        grade=grade_for(result.overall_score),
        progress=progress_for(result.overall_score),
        summary=result.summary,
        metrics=tiles,
        issues=tuple(
            build_issue(number, suggestion)
            for number, suggestion in enumerate(result.suggestions, start=1)
        ),
        learning_points=tuple(p for p in result.learning_points if p.strip()),
        next_steps=tuple(s for s in result.next_steps if s.strip()),
    )
