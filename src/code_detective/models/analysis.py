"""Analysis request and result entities.

This module contains the canonical payload exchanged with the analysis service:
- Severity / Category: Finding classification enums
- Suggestion: A single finding attached to a line of the submitted code
- Metrics: Quantitative measurements of the submitted code
- AnalysisResult: Complete, read-only analysis returned by the service
- AnalysisRequest: Code submission sent to the service

Field names and order follow the service wire format. Results are frozen:
a new submission supersedes a result, it never mutates one.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Severity(Enum):
    """Urgency tier of a finding."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class Category(Enum):
    """Topical classification of a finding."""

    PERFORMANCE = "performance"
    SECURITY = "security"
    MAINTAINABILITY = "maintainability"
    READABILITY = "readability"
    BEST_PRACTICES = "best_practices"
    BUG_FIX = "bug_fix"


# =============================================================================
# Decoding helpers
# =============================================================================


def _require(data: dict[str, Any], key: str, owner: str) -> Any:
    if key not in data or data[key] is None:
        raise ValueError(f"{owner}: missing required field '{key}'")
    return data[key]


def _as_int(value: Any, key: str, owner: str) -> int:
    # bool is an int subclass but never a valid count
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{owner}: field '{key}' must be a number, got {type(value).__name__}")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"{owner}: field '{key}' must be an integer, got {value}")
    return int(value)


def _as_float(value: Any, key: str, owner: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{owner}: field '{key}' must be a number, got {type(value).__name__}")
    return float(value)


def _as_str(value: Any, key: str, owner: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{owner}: field '{key}' must be a string, got {type(value).__name__}")
    return value


def _as_str_tuple(value: Any, key: str, owner: str) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"{owner}: field '{key}' must be a list, got {type(value).__name__}")
    return tuple(_as_str(item, key, owner) for item in value)


def _as_enum(enum_cls: type[Enum], value: Any, key: str, owner: str) -> Any:
    try:
        return enum_cls(value)
    except ValueError:
        valid = ", ".join(member.value for member in enum_cls)
        raise ValueError(f"{owner}: invalid {key} '{value}'. Valid: {valid}") from None


# =============================================================================
# Result entities
# =============================================================================


@dataclass(frozen=True)
class Suggestion:
    """Single finding reported by the analysis service.

    Attributes:
        line_number: 1-based line the finding refers to
        severity: Urgency tier
        type: Topical category
        title: One-line headline
        description: What the issue is
        explanation: Why it matters (rationale)
        column_number: Optional 1-based column
        suggested_fix: Optional prose describing the fix
        code_example: Optional code showing a better approach
        learning_resources: Optional ordered list of links or references
    """

    line_number: int
    severity: Severity
    type: Category
    title: str
    description: str
    explanation: str
    column_number: int | None = None
    suggested_fix: str | None = None
    code_example: str | None = None
    learning_resources: tuple[str, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary in wire field order."""
        return {
            "line_number": self.line_number,
            "column_number": self.column_number,
            "severity": self.severity.value,
            "type": self.type.value,
            "title": self.title,
            "description": self.description,
            "explanation": self.explanation,
            "suggested_fix": self.suggested_fix,
            "code_example": self.code_example,
            "learning_resources": (
                list(self.learning_resources) if self.learning_resources is not None else None
            ),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Suggestion":
        """Create a suggestion from a decoded payload.

        Raises:
            ValueError: If a required field is missing or has the wrong type
        """
        owner = "suggestion"
        if not isinstance(data, dict):
            raise ValueError(f"{owner}: expected an object, got {type(data).__name__}")

        column = data.get("column_number")
        resources = data.get("learning_resources")
        fix = data.get("suggested_fix")
        example = data.get("code_example")

        return cls(
            line_number=_as_int(_require(data, "line_number", owner), "line_number", owner),
            severity=_as_enum(Severity, _require(data, "severity", owner), "severity", owner),
            type=_as_enum(Category, _require(data, "type", owner), "type", owner),
            title=_as_str(_require(data, "title", owner), "title", owner),
            description=_as_str(_require(data, "description", owner), "description", owner),
            explanation=_as_str(_require(data, "explanation", owner), "explanation", owner),
            column_number=_as_int(column, "column_number", owner) if column is not None else None,
            suggested_fix=_as_str(fix, "suggested_fix", owner) if fix is not None else None,
            code_example=_as_str(example, "code_example", owner) if example is not None else None,
            learning_resources=(
                _as_str_tuple(resources, "learning_resources", owner)
                if resources is not None
                else None
            ),
        )


@dataclass(frozen=True)
class Metrics:
    """Quantitative measurements of the analyzed code.

    Attributes:
        lines_of_code: Non-negative line count
        complexity_score: Non-negative complexity estimate
        maintainability_index: Maintainability on a bounded (percentage) scale
        duplicate_lines: Non-negative count of duplicated lines
        test_coverage: Optional coverage percentage in [0, 100]
    """

    lines_of_code: int
    complexity_score: float
    maintainability_index: float
    duplicate_lines: int = 0
    test_coverage: float | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary in wire field order."""
        return {
            "lines_of_code": self.lines_of_code,
            "complexity_score": self.complexity_score,
            "maintainability_index": self.maintainability_index,
            "duplicate_lines": self.duplicate_lines,
            "test_coverage": self.test_coverage,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Metrics":
        """Create metrics from a decoded payload."""
        owner = "metrics"
        if not isinstance(data, dict):
            raise ValueError(f"{owner}: expected an object, got {type(data).__name__}")

        coverage = data.get("test_coverage")
        return cls(
            lines_of_code=_as_int(_require(data, "lines_of_code", owner), "lines_of_code", owner),
            complexity_score=_as_float(
                _require(data, "complexity_score", owner), "complexity_score", owner
            ),
            maintainability_index=_as_float(
                _require(data, "maintainability_index", owner), "maintainability_index", owner
            ),
            duplicate_lines=_as_int(data.get("duplicate_lines", 0), "duplicate_lines", owner),
            test_coverage=(
                _as_float(coverage, "test_coverage", owner) if coverage is not None else None
            ),
        )


@dataclass(frozen=True)
class AnalysisResult:
    """Completed analysis returned by the analysis service.

    Serves as the single input to report rendering. Created atomically from a
    successful response and never modified afterwards.

    Attributes:
        suggestions: Findings in the order the service reported them
        metrics: Code measurements
        overall_score: Quality score on a 0-10 scale
        summary: Narrative summary of the analysis
        learning_points: Ordered takeaways
        next_steps: Ordered recommended actions
    """

    suggestions: tuple[Suggestion, ...]
    metrics: Metrics
    overall_score: float
    summary: str
    learning_points: tuple[str, ...] = field(default_factory=tuple)
    next_steps: tuple[str, ...] = field(default_factory=tuple)

    @property
    def has_suggestions(self) -> bool:
        """Check if any findings were reported."""
        return len(self.suggestions) > 0

    def get_suggestions_by_severity(self, severity: Severity) -> list[Suggestion]:
        """Get findings of a specific severity, in reported order."""
        return [s for s in self.suggestions if s.severity == severity]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "suggestions": [s.to_dict() for s in self.suggestions],
            "metrics": self.metrics.to_dict(),
            "overall_score": self.overall_score,
            "summary": self.summary,
            "learning_points": list(self.learning_points),
            "next_steps": list(self.next_steps),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AnalysisResult":
        """Create a result from a decoded service response or snapshot.

        Raises:
            ValueError: If the payload does not describe a valid result
        """
        owner = "analysis result"
        if not isinstance(data, dict):
            raise ValueError(f"{owner}: expected an object, got {type(data).__name__}")

        raw_suggestions = data.get("suggestions", [])
        if not isinstance(raw_suggestions, list):
            raise ValueError(f"{owner}: field 'suggestions' must be a list")

        return cls(
            suggestions=tuple(Suggestion.from_dict(item) for item in raw_suggestions),
            metrics=Metrics.from_dict(_require(data, "metrics", owner)),
            overall_score=_as_float(
                _require(data, "overall_score", owner), "overall_score", owner
            ),
            summary=_as_str(data.get("summary", ""), "summary", owner),
            learning_points=_as_str_tuple(
                data.get("learning_points", []), "learning_points", owner
            ),
            next_steps=_as_str_tuple(data.get("next_steps", []), "next_steps", owner),
        )


# =============================================================================
# Request entity
# =============================================================================


@dataclass(frozen=True)
class AnalysisRequest:
    """Code submission for the analysis service.

    Attributes:
        code: Source code to analyze (never blank)
        language: Canonical language tag
        file_path: Name of the uploaded file the code came from
        context: Free-text hint about what to focus on
        focus_areas: Distinct focus topics, first occurrence wins
    """

    code: str
    language: str
    file_path: str | None = None
    context: str | None = None
    focus_areas: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        """Validate the request."""
        if not self.code or not self.code.strip():
            raise ValueError("Code to analyze cannot be empty")
        if not self.language or not self.language.strip():
            raise ValueError("Language cannot be empty")

        if self.focus_areas is not None:
            # Frozen dataclass: normalize through object.__setattr__
            object.__setattr__(self, "focus_areas", tuple(dict.fromkeys(self.focus_areas)))

    def to_dict(self) -> dict[str, Any]:
        """Convert to the request body, omitting absent optional fields."""
        payload: dict[str, Any] = {"code": self.code, "language": self.language}
        if self.file_path:
            payload["file_path"] = self.file_path
        if self.context:
            payload["context"] = self.context
        if self.focus_areas:
            payload["focus_areas"] = list(self.focus_areas)
        return payload
