"""Shared pytest fixtures for Code Detective tests.

This module provides common fixtures used across unit and integration tests.
Fixtures are organized by category:
- Configuration fixtures: Test configs for various scenarios
- Payload fixtures: Raw service responses as decoded JSON
- Analysis fixtures: Pre-built analysis results for testing renderers
- Source fixtures: Sample uploads for ingestion tests
"""

import json
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

from code_detective.models.analysis import (
    AnalysisResult,
    Category,
    Metrics,
    Severity,
    Suggestion,
)
from tests.fixtures import SAMPLE_RESPONSE_PATH

# =============================================================================
# Logging Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def restore_package_logger() -> Iterator[None]:
    """Undo logging setup done by CLI invocations so caplog keeps working."""
    logger = logging.getLogger("code_detective")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_response_path() -> Path:
    """Return the path to a saved service response."""
    return SAMPLE_RESPONSE_PATH


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def minimal_config() -> dict[str, Any]:
    """Return a minimal valid configuration."""
    return {
        "service": {
            "base_url": "http://localhost:8000",
        }
    }


@pytest.fixture
def full_config() -> dict[str, Any]:
    """Return a complete configuration with all options."""
    return {
        "service": {
            "base_url": "https://review.example.com/api/",
            "timeout": 30,
        },
        "ingestion": {
            "max_files": 5,
            "max_workers": 2,
        },
        "export": {
            "output_dir": "out/reports",
            "base_name": "review",
            "formats": ["html", "json"],
            "include_timestamp": False,
        },
    }


# =============================================================================
# Payload Fixtures
# =============================================================================


@pytest.fixture
def response_payload() -> dict[str, Any]:
    """Return a decoded analysis service response."""
    return json.loads(SAMPLE_RESPONSE_PATH.read_text(encoding="utf-8"))


# =============================================================================
# Analysis Fixtures
# =============================================================================


@pytest.fixture
def sql_injection() -> Suggestion:
    """A critical security finding with every optional field set."""
    return Suggestion(
        line_number=12,
        column_number=8,
        severity=Severity.CRITICAL,
        type=Category.SECURITY,
        title="SQL injection in user lookup",
        description="The query is built with string formatting.",
        explanation="Attackers can read or modify any table.",
        suggested_fix="Use a parameterized query.",
        code_example='cursor.execute("SELECT * FROM users WHERE id = %s", (user_id,))',
        learning_resources=("https://owasp.org/www-community/attacks/SQL_Injection",),
    )


@pytest.fixture
def naming_hint() -> Suggestion:
    """An info-level readability finding with no optional fields."""
    return Suggestion(
        line_number=3,
        severity=Severity.INFO,
        type=Category.READABILITY,
        title="Short variable name",
        description="The variable 'x' does not describe its content.",
        explanation="Descriptive names make code easier to follow.",
    )


@pytest.fixture
def loop_warning() -> Suggestion:
    """A warning-level performance finding."""
    return Suggestion(
        line_number=20,
        severity=Severity.WARNING,
        type=Category.BEST_PRACTICES,
        title="Quadratic membership test",
        description="A list is searched inside a loop.",
        explanation="Lookups in a set are constant time.",
        suggested_fix="Convert the list to a set before the loop.",
    )


@pytest.fixture
def sample_metrics() -> Metrics:
    """Return typical metrics."""
    return Metrics(
        lines_of_code=42,
        complexity_score=3.25,
        maintainability_index=71.6,
        duplicate_lines=4,
        test_coverage=55.0,
    )


@pytest.fixture
def sample_result(
    sql_injection: Suggestion,
    naming_hint: Suggestion,
    loop_warning: Suggestion,
    sample_metrics: Metrics,
) -> AnalysisResult:
    """Return a complete analysis result (score 8.4, three findings)."""
    return AnalysisResult(
        suggestions=(sql_injection, naming_hint, loop_warning),
        metrics=sample_metrics,
        overall_score=8.4,
        summary="Solid structure with one serious security issue.",
        learning_points=(
            "Never build SQL from user input",
            "Prefer sets for membership tests",
        ),
        next_steps=("Parameterize all queries", "Add tests for the lookup path"),
    )


@pytest.fixture
def empty_result() -> AnalysisResult:
    """Return a result with no findings, learning points or next steps."""
    return AnalysisResult(
        suggestions=(),
        metrics=Metrics(lines_of_code=5, complexity_score=1.0, maintainability_index=95.0),
        overall_score=9.6,
        summary="Nothing to report.",
    )


# =============================================================================
# Source Fixtures
# =============================================================================


@pytest.fixture
def python_source() -> str:
    """Return sample Python source code for ingestion tests."""
    return '''"""Sample module for testing."""


def lookup(cursor, user_id):
    query = "SELECT * FROM users WHERE id = %s" % user_id
    return cursor.execute(query)
'''


@pytest.fixture
def javascript_source() -> str:
    """Return sample JavaScript source code for ingestion tests."""
    return '''function main() {
    console.log("Hello, World!");
}

module.exports = { main };
'''
