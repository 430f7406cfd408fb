"""Code Detective report templates.

This module provides Jinja2-based rendering of analysis results with
deterministic output: identical results produce identical documents.
"""

from code_detective.templates.renderer import ReportFormat, ReportRenderer

__all__ = ["ReportFormat", "ReportRenderer"]
