"""Code Detective CLI interface.

Commands:
- analyze: Submit code or files to the analysis service and export reports
- export: Re-render a saved JSON snapshot as HTML, Markdown or JSON
- classify: Show the language tag detected for file names
- health: Probe the analysis service
- init: Initialize Code Detective configuration

Global options:
- --config: Path to configuration file
- --verbose: Enable verbose output with timestamps
- --quiet: Suppress info messages
- --ci: JSON log output
- --version: Show version and exit
"""

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer

from code_detective import __version__
from code_detective.config import DetectiveConfig, create_default_config, load_config
from code_detective.utils.logging import configure_from_cli, get_logger

if TYPE_CHECKING:
    from code_detective.models.analysis import AnalysisResult
    from code_detective.templates.renderer import ReportFormat

app = typer.Typer(
    name="code-detective",
    help="Submit code for review and export the findings as reports",
    add_completion=False,
    no_args_is_help=True,
)

# Global state
_config: DetectiveConfig | None = None
_logger = get_logger()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"code-detective {__version__}")
        raise typer.Exit()


def _current_config() -> DetectiveConfig:
    return _config if _config is not None else DetectiveConfig()


@app.callback()
def main(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output with timestamps",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress info messages (warnings and errors only)",
        ),
    ] = False,
    ci: Annotated[
        bool,
        typer.Option(
            "--ci",
            help="Enable CI mode with JSON log output",
        ),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """Code Detective - code review submission and report export.

    Classify and batch source files, send them to the analysis service,
    and export the findings as HTML, Markdown or JSON.
    """
    global _config

    configure_from_cli(verbose=verbose, quiet=quiet, ci=ci)

    try:
        _config = load_config(config_path=config)
        if _config.config_path:
            _logger.debug(f"Loaded config from: {_config.config_path}")
    except FileNotFoundError as e:
        _logger.error(str(e))
        raise typer.Exit(1)
    except (ValueError, OSError) as e:
        _logger.error(f"Failed to load config: {e}")
        raise typer.Exit(1)


def _parse_formats(names: list[str] | None) -> list["ReportFormat"] | None:
    from code_detective.templates.renderer import ReportFormat

    if not names:
        return None
    try:
        return [ReportFormat.parse(name) for name in names]
    except ValueError as e:
        _logger.error(str(e))
        raise typer.Exit(1)


# =============================================================================
# classify command
# =============================================================================


@app.command()
def classify(
    names: Annotated[
        list[str],
        typer.Argument(help="File names to classify (files need not exist)"),
    ],
) -> None:
    """Show the language tag for each file name.

    Unknown or missing extensions are reported as plaintext.
    """
    from code_detective.ingestion.languages import classify as classify_name

    for name in names:
        typer.echo(f"{name}\t{classify_name(name)}")


# =============================================================================
# analyze command
# =============================================================================


@app.command()
def analyze(
    files: Annotated[
        list[Path] | None,
        typer.Argument(
            help="Source files to upload (first one is analyzed unless --select is given)",
        ),
    ] = None,
    code: Annotated[
        str | None,
        typer.Option(
            "--code",
            help="Analyze this code directly instead of an uploaded file",
        ),
    ] = None,
    language: Annotated[
        str,
        typer.Option(
            "--language",
            "-l",
            help="Language of --code (uploads are classified by extension)",
        ),
    ] = "python",
    context: Annotated[
        str,
        typer.Option(
            "--context",
            help="What the reviewer should focus on",
        ),
    ] = "",
    focus: Annotated[
        list[str] | None,
        typer.Option(
            "--focus",
            help="Focus area (repeatable), e.g. security",
        ),
    ] = None,
    select: Annotated[
        int,
        typer.Option(
            "--select",
            "-s",
            min=1,
            help="Which uploaded file to analyze (1 = first)",
        ),
    ] = 1,
    output_dir: Annotated[
        Path | None,
        typer.Option(
            "--output-dir",
            "-o",
            help="Report directory (overrides config)",
            file_okay=False,
        ),
    ] = None,
    formats: Annotated[
        list[str] | None,
        typer.Option(
            "--format",
            "-f",
            help="Report format (repeatable): html, markdown, json",
        ),
    ] = None,
    no_export: Annotated[
        bool,
        typer.Option(
            "--no-export",
            help="Print the summary only, write no report files",
        ),
    ] = False,
) -> None:
    """Submit code for analysis and export the findings.

    Exit codes:
        0: Analysis completed
        1: Validation or service error
        2: Completed, but some files were unsupported or unreadable
    """
    from code_detective.ingestion.languages import is_supported
    from code_detective.ingestion.pipeline import IngestionPipeline, LocalFile
    from code_detective.orchestrator import RequestOrchestrator, SubmissionValidationError
    from code_detective.service.client import AnalysisServiceClient, AnalysisServiceError
    from code_detective.templates.renderer import ReportRenderer

    config = _current_config()
    report_formats = _parse_formats(formats)
    warnings: list[str] = []

    pipeline = IngestionPipeline(
        capacity=config.ingestion.max_files,
        max_workers=config.ingestion.max_workers,
    )

    with AnalysisServiceClient.from_config(config.service) as client:
        orchestrator = RequestOrchestrator(client, pipeline)

        if files:
            uploads = []
            for path in files:
                if is_supported(path.name):
                    uploads.append(LocalFile(path))
                else:
                    warnings.append(f"Unsupported file type, skipped: {path.name}")

            batch = pipeline.ingest(uploads)
            for name in pipeline.skipped:
                warnings.append(f"Could not read file, skipped: {name}")
            dropped = len(uploads) - len(batch) - len(pipeline.skipped)
            if dropped > 0:
                _logger.info(
                    f"Batch limit of {batch.capacity} files reached, dropped {dropped} file(s)"
                )

            if len(batch):
                try:
                    orchestrator.select(select - 1)
                except IndexError:
                    _logger.error(f"--select {select} is out of range (batch holds {len(batch)})")
                    raise typer.Exit(1)

        if code is not None:
            orchestrator.code = code
            orchestrator.language = language
            orchestrator.use_direct_input()

        orchestrator.context = context
        orchestrator.focus_areas = list(focus or [])

        for warning in warnings:
            _logger.warning(warning)

        try:
            result = orchestrator.submit()
        except SubmissionValidationError as e:
            _logger.error(str(e))
            raise typer.Exit(1)
        except AnalysisServiceError as e:
            _logger.error(f"Analysis failed: {e}")
            raise typer.Exit(1)

    if result is None:
        _logger.error("Analysis response was discarded")
        raise typer.Exit(1)

    _echo_summary(result)

    if not no_export:
        renderer = ReportRenderer(config=config)
        generated_at = datetime.now(UTC) if config.export.include_timestamp else None
        try:
            paths = renderer.export_all(
                result,
                output_dir or Path(config.export.output_dir),
                formats=report_formats,
                generated_at=generated_at,
            )
        except (ValueError, OSError) as e:
            _logger.error(f"Export failed: {e}")
            raise typer.Exit(1)

        for path in paths:
            typer.echo(f"📄 Report written to: {path}")

    raise typer.Exit(2 if warnings else 0)


def _echo_summary(result: "AnalysisResult") -> None:
    from code_detective.models.analysis import Severity
    from code_detective.renderers.document import grade_for

    grade = grade_for(result.overall_score)
    typer.echo(f"\n{grade.emoji} Overall score: {result.overall_score:.1f}/10 ({grade.value})")
    if result.summary:
        typer.echo(f"   {result.summary}")

    typer.echo(f"\n🐛 {len(result.suggestions)} issue(s) found")
    for severity in Severity:
        count = len(result.get_suggestions_by_severity(severity))
        if count:
            typer.echo(f"   • {severity.value}: {count}")
    typer.echo()


# =============================================================================
# export command
# =============================================================================


@app.command()
def export(
    snapshot: Annotated[
        Path,
        typer.Argument(
            help="JSON snapshot or saved service response",
            exists=True,
            dir_okay=False,
        ),
    ],
    formats: Annotated[
        list[str] | None,
        typer.Option(
            "--format",
            "-f",
            help="Report format (repeatable): html, markdown, json",
        ),
    ] = None,
    output_dir: Annotated[
        Path | None,
        typer.Option(
            "--output-dir",
            "-o",
            help="Report directory (overrides config)",
            file_okay=False,
        ),
    ] = None,
    base_name: Annotated[
        str | None,
        typer.Option(
            "--base-name",
            help="Report file name without extension (overrides config)",
        ),
    ] = None,
    timestamp: Annotated[
        bool,
        typer.Option(
            "--timestamp/--no-timestamp",
            help="Add a generation timestamp footer",
        ),
    ] = False,
) -> None:
    """Render a saved analysis result as report files.

    Without --timestamp the output is byte-for-byte reproducible.
    """
    from code_detective.renderers.snapshot import decode_snapshot
    from code_detective.templates.renderer import ReportRenderer

    config = _current_config()
    report_formats = _parse_formats(formats)

    try:
        result = decode_snapshot(snapshot.read_text(encoding="utf-8"))
    except (ValueError, OSError) as e:
        _logger.error(f"Invalid snapshot {snapshot}: {e}")
        raise typer.Exit(1)

    renderer = ReportRenderer(config=config)
    try:
        paths = renderer.export_all(
            result,
            output_dir or Path(config.export.output_dir),
            formats=report_formats,
            base_name=base_name,
            generated_at=datetime.now(UTC) if timestamp else None,
        )
    except (ValueError, OSError) as e:
        _logger.error(f"Export failed: {e}")
        raise typer.Exit(1)

    for path in paths:
        typer.echo(f"📄 Report written to: {path}")


# =============================================================================
# health command
# =============================================================================


@app.command()
def health(
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output result as JSON",
        ),
    ] = False,
) -> None:
    """Check that the analysis service is reachable.

    Exit codes:
        0: Service available
        1: Service unavailable
    """
    from code_detective.service.client import AnalysisServiceClient

    config = _current_config()
    with AnalysisServiceClient.from_config(config.service) as client:
        status = client.health()

    if json_output:
        typer.echo(json.dumps(status.to_dict(), indent=2))
    elif status.available:
        typer.echo(f"✅ Analysis service is up ({status.status}) at {config.service.base_url}")
    else:
        typer.echo(f"❌ {status.message} at {config.service.base_url}")

    raise typer.Exit(0 if status.available else 1)


# =============================================================================
# init command
# =============================================================================


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            help="Overwrite existing config",
        ),
    ] = False,
) -> None:
    """Initialize Code Detective configuration.

    Creates .code-detective/config.yaml with default settings.
    """
    config_dir = Path(".code-detective")
    config_dir.mkdir(exist_ok=True)
    config_file = config_dir / "config.yaml"

    if config_file.exists() and not force:
        _logger.error(f"Config already exists: {config_file}")
        _logger.info("Use --force to overwrite")
        raise typer.Exit(1)

    config_file.write_text(create_default_config(), encoding="utf-8")
    _logger.info(f"Created config: {config_file}")

    typer.echo("\n✅ Code Detective configuration initialized")
    typer.echo(f"   Config: {config_file}")


if __name__ == "__main__":
    app()
