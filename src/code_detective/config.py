"""Code Detective configuration system.

Configuration is YAML-based with minimal CLI overrides (--output-dir, --format).
Supports environment variable substitution (${VAR}) in config files.

Configuration file discovery (in priority order):
1. CLI --config argument
2. ./.code-detective/config.yaml
3. ./code-detective.yaml
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

API_URL_ENV = "CODE_DETECTIVE_API_URL"
DEFAULT_API_URL = "http://localhost:8000"

VALID_EXPORT_FORMATS = frozenset({"html", "markdown", "json"})

# =============================================================================
# Configuration Dataclasses
# =============================================================================


def _default_api_url() -> str:
    return os.environ.get(API_URL_ENV) or DEFAULT_API_URL


@dataclass
class ServiceConfig:
    """Analysis service connection settings.

    Attributes:
        base_url: Service root URL (POST /analyze, GET /health)
        timeout: Request timeout in seconds
    """

    base_url: str = field(default_factory=_default_api_url)
    timeout: float = 60.0

    def __post_init__(self) -> None:
        """Validate service configuration."""
        if not self.base_url or not self.base_url.strip():
            raise ValueError("Service base_url cannot be empty")
        self.base_url = self.base_url.strip().rstrip("/")

        if self.timeout <= 0:
            raise ValueError(f"Service timeout must be positive (got {self.timeout})")


@dataclass
class IngestionConfig:
    """File ingestion settings.

    Attributes:
        max_files: Batch capacity (extra uploads are dropped)
        max_workers: Threads used to read uploads concurrently
    """

    max_files: int = 10
    max_workers: int = 4

    def __post_init__(self) -> None:
        """Validate ingestion configuration."""
        if self.max_files < 1:
            raise ValueError(f"max_files must be at least 1 (got {self.max_files})")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1 (got {self.max_workers})")


@dataclass
class ExportConfig:
    """Report export settings.

    Attributes:
        output_dir: Directory for exported reports
        base_name: File name shared by every exported format
        formats: Formats written by default (html, markdown, json)
        include_timestamp: Add a generation timestamp footer to HTML/Markdown
    """

    output_dir: str = "reports"
    base_name: str = "code-review-report"
    formats: list[str] = field(default_factory=lambda: ["html", "markdown", "json"])
    include_timestamp: bool = True

    def __post_init__(self) -> None:
        """Validate export configuration."""
        if not self.base_name or not self.base_name.strip():
            raise ValueError("Export base_name cannot be empty")
        if "/" in self.base_name or "\\" in self.base_name:
            raise ValueError(f"Export base_name must be a plain file name: {self.base_name}")

        self.formats = [f.strip().lower() for f in self.formats]
        invalid = [f for f in self.formats if f not in VALID_EXPORT_FORMATS]
        if invalid:
            raise ValueError(
                f"Invalid export format(s): {', '.join(invalid)}. "
                f"Valid: {sorted(VALID_EXPORT_FORMATS)}"
            )


@dataclass
class DetectiveConfig:
    """Top-level Code Detective configuration.

    Attributes:
        service: Analysis service connection
        ingestion: Upload batch settings
        export: Report export settings
    """

    service: ServiceConfig = field(default_factory=ServiceConfig)
    ingestion: IngestionConfig = field(default_factory=IngestionConfig)
    export: ExportConfig = field(default_factory=ExportConfig)

    # Runtime overrides (set by CLI)
    _config_path: Path | None = field(default=None, repr=False)

    @property
    def config_path(self) -> Path | None:
        """Get the path to the config file that was loaded."""
        return self._config_path


# =============================================================================
# Environment Variable Substitution
# =============================================================================


def substitute_env_vars(value: Any) -> Any:
    """Substitute environment variables in config values.

    Supports ${VAR} syntax for environment variable substitution.
    Example: ${CODE_DETECTIVE_API_URL} -> value of CODE_DETECTIVE_API_URL

    Args:
        value: Config value (string, dict, list, or other)

    Returns:
        Value with environment variables substituted
    """
    if isinstance(value, str):
        # Pattern: ${VAR_NAME}
        pattern = re.compile(r"\$\{([^}]+)\}")

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ValueError(f"Environment variable not set: {var_name}")
            return env_value

        return pattern.sub(replace_var, value)

    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}

    elif isinstance(value, list):
        return [substitute_env_vars(v) for v in value]

    return value


# =============================================================================
# Config File Discovery
# =============================================================================


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find configuration file in standard locations.

    Search order:
    1. ./.code-detective/config.yaml
    2. ./code-detective.yaml

    Args:
        start_path: Starting directory for search (defaults to cwd)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_path is None:
        start_path = Path.cwd()

    start_path = start_path.resolve()

    candidates = [
        start_path / ".code-detective" / "config.yaml",
        start_path / "code-detective.yaml",
    ]

    for candidate in candidates:
        if candidate.exists():
            return candidate

    return None


# =============================================================================
# Config Loading
# =============================================================================


def load_config_from_dict(data: dict[str, Any]) -> DetectiveConfig:
    """Load configuration from a dictionary.

    Args:
        data: Configuration dictionary

    Returns:
        DetectiveConfig instance

    Raises:
        ValueError: If a value is invalid or a referenced env var is unset
    """
    # Apply environment variable substitution
    data = substitute_env_vars(data)

    config = DetectiveConfig()

    if "service" in data:
        service_data = data["service"] or {}
        config.service = ServiceConfig(
            base_url=service_data.get("base_url", config.service.base_url),
            timeout=float(service_data.get("timeout", config.service.timeout)),
        )

    if "ingestion" in data:
        ingestion_data = data["ingestion"] or {}
        config.ingestion = IngestionConfig(
            max_files=int(ingestion_data.get("max_files", config.ingestion.max_files)),
            max_workers=int(ingestion_data.get("max_workers", config.ingestion.max_workers)),
        )

    if "export" in data:
        export_data = data["export"] or {}
        config.export = ExportConfig(
            output_dir=str(export_data.get("output_dir", config.export.output_dir)),
            base_name=str(export_data.get("base_name", config.export.base_name)),
            formats=list(export_data.get("formats", config.export.formats)),
            include_timestamp=bool(
                export_data.get("include_timestamp", config.export.include_timestamp)
            ),
        )

    return config


def load_config(
    config_path: Path | None = None,
    auto_discover: bool = True,
) -> DetectiveConfig:
    """Load configuration from file.

    Args:
        config_path: Explicit path to config file
        auto_discover: Whether to search for config file if not specified

    Returns:
        DetectiveConfig instance

    Raises:
        FileNotFoundError: If config_path specified but doesn't exist
    """
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        found_path = config_path
    elif auto_discover:
        found_path = find_config_file()
    else:
        found_path = None

    if found_path is not None:
        with open(found_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        config = load_config_from_dict(data)
        config._config_path = found_path
    else:
        config = DetectiveConfig()

    return config


def create_default_config() -> str:
    """Create default configuration YAML content.

    Returns:
        YAML string with default configuration and comments
    """
    return '''# Code Detective Configuration

# Analysis service (POST /analyze, GET /health)
service:
  base_url: "http://localhost:8000"
  # base_url: "${CODE_DETECTIVE_API_URL}"
  timeout: 60             # seconds

# Upload batch settings
ingestion:
  max_files: 10           # extra uploads are dropped
  max_workers: 4          # concurrent file reads

# Report export settings
export:
  output_dir: "reports"
  base_name: "code-review-report"
  formats:                # html, markdown, json
    - html
    - markdown
    - json
  include_timestamp: true # footer timestamp in html/markdown
'''
