"""Report renderer for exported documents.

Renders an AnalysisResult to HTML or Markdown with Jinja2 templates, or to a
JSON snapshot. All output is deterministic - the same result and format always
produce the same bytes. A generation timestamp appears only when passed in.
"""

from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

from jinja2 import Environment, PackageLoader, TemplateError, select_autoescape

from code_detective.config import DetectiveConfig
from code_detective.models.analysis import AnalysisResult
from code_detective.renderers.document import build_document
from code_detective.renderers.filters import code_fence, humanize_tag, markdown_block, single_line
from code_detective.renderers.snapshot import encode_snapshot
from code_detective.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_BASE_NAME = "code-review-report"


class ReportFormat(Enum):
    """Exportable document formats.

    HTML is the structured markup report, MARKDOWN the structured text report,
    JSON the lossless snapshot.
    """

    HTML = "html"
    MARKDOWN = "markdown"
    JSON = "json"

    @property
    def extension(self) -> str:
        return _EXTENSIONS[self]

    @classmethod
    def parse(cls, value: str) -> "ReportFormat":
        """Parse a format name or file extension ("md" is accepted for Markdown).

        Raises:
            ValueError: If the name is not a known format
        """
        normalized = value.strip().lower().lstrip(".")
        for fmt in cls:
            if normalized in (fmt.value, fmt.extension):
                return fmt
        valid = ", ".join(fmt.value for fmt in cls)
        raise ValueError(f"Invalid report format: {value}. Valid: {valid}")


_EXTENSIONS = {
    ReportFormat.HTML: "html",
    ReportFormat.MARKDOWN: "md",
    ReportFormat.JSON: "json",
}

_TEMPLATES = {
    ReportFormat.HTML: "report.html.j2",
    ReportFormat.MARKDOWN: "report.md.j2",
}


def format_datetime(dt: datetime | str | None) -> str:
    """Format datetime for display in report footers.

    Args:
        dt: Datetime object or ISO string

    Returns:
        Formatted date string
    """
    if dt is None:
        return "N/A"

    if isinstance(dt, str):
        try:
            dt = datetime.fromisoformat(dt)
        except ValueError:
            return dt

    # Ensure UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC).strftime("%Y-%m-%d %H:%M:%S UTC")


class ReportRenderer:
    """Renders analysis results to exportable documents.

    The renderer is stateless between calls: each render consumes exactly one
    AnalysisResult.

    Usage:
        renderer = ReportRenderer(config)
        html = renderer.render(result, ReportFormat.HTML)
        paths = renderer.export_all(result, Path("reports"))
    """

    def __init__(self, config: DetectiveConfig | None = None) -> None:
        """Initialize the report renderer.

        Args:
            config: Code Detective configuration (export defaults)
        """
        self.config = config

        # Autoescape the HTML template; Markdown is plain text
        self._env = Environment(
            loader=PackageLoader("code_detective", "templates"),
            autoescape=select_autoescape(["html", "htm", "xml", "html.j2"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

        self._env.filters["humanize_tag"] = humanize_tag
        self._env.filters["single_line"] = single_line
        self._env.filters["markdown_block"] = markdown_block
        self._env.filters["code_fence"] = code_fence

    @property
    def base_name(self) -> str:
        """Base file name for exported documents."""
        if self.config is not None:
            return self.config.export.base_name
        return DEFAULT_BASE_NAME

    def filename_for(self, fmt: ReportFormat, base_name: str | None = None) -> str:
        """Deterministic export file name, e.g. "code-review-report.md"."""
        return f"{base_name or self.base_name}.{fmt.extension}"

    def render(
        self,
        result: AnalysisResult,
        fmt: ReportFormat,
        generated_at: datetime | None = None,
    ) -> str:
        """Render an analysis result.

        Args:
            result: Analysis result from the service
            fmt: Target document format
            generated_at: Optional timestamp for the footer (HTML/Markdown only)

        Returns:
            Rendered document

        Raises:
            ValueError: If the template cannot be loaded or rendered
        """
        if fmt is ReportFormat.JSON:
            return encode_snapshot(result)

        template_name = _TEMPLATES[fmt]
        try:
            template = self._env.get_template(template_name)
        except TemplateError as e:
            logger.error("Failed to load template %s: %s", template_name, e)
            raise ValueError(f"Template not found: {template_name}") from e

        context = self._build_context(result, generated_at)

        try:
            rendered = template.render(**context)
        except TemplateError as e:
            logger.error("Template rendering failed: %s", e)
            raise ValueError(f"Template rendering failed: {e}") from e

        logger.debug("Rendered %s report (%d characters)", fmt.value, len(rendered))
        return rendered

    def _build_context(
        self,
        result: AnalysisResult,
        generated_at: datetime | None,
    ) -> dict[str, Any]:
        return {
            "doc": build_document(result),
            "generated_at": format_datetime(generated_at) if generated_at else None,
        }

    def render_to_file(
        self,
        result: AnalysisResult,
        fmt: ReportFormat,
        output_dir: Path,
        base_name: str | None = None,
        generated_at: datetime | None = None,
    ) -> Path:
        """Render an analysis result and write it to output_dir.

        Returns:
            Path to the written file
        """
        content = self.render(result, fmt, generated_at)

        output_dir.mkdir(parents=True, exist_ok=True)
        output_path = output_dir / self.filename_for(fmt, base_name)
        output_path.write_text(content, encoding="utf-8")
        logger.info("Wrote %s report to %s", fmt.value, output_path)

        return output_path

    def export_all(
        self,
        result: AnalysisResult,
        output_dir: Path,
        formats: list[ReportFormat] | None = None,
        base_name: str | None = None,
        generated_at: datetime | None = None,
    ) -> list[Path]:
        """Write one document per format.

        Args:
            result: Analysis result to export
            output_dir: Directory for the exported files
            formats: Formats to write (defaults to config, then all formats)
            base_name: Base file name (defaults to config)
            generated_at: Optional footer timestamp

        Returns:
            Paths of the written files, in format order
        """
        if formats is None:
            if self.config is not None:
                formats = [ReportFormat.parse(name) for name in self.config.export.formats]
            else:
                formats = list(ReportFormat)

        return [
            self.render_to_file(result, fmt, output_dir, base_name, generated_at)
            for fmt in formats
        ]
