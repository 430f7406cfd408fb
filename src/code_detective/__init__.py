"""Code Detective - code review submission and report export.

Code Detective prepares source code for an external analysis service and turns
the returned findings into shareable reports.

Components:
- ingestion: Classify uploaded files by language and batch them
- service: HTTP client for the analysis service
- orchestrator: Build requests, guard against stale responses
- templates / renderers: Deterministic HTML, Markdown and JSON reports
"""

import logging

from code_detective.utils.logging import get_logger

__version__ = "0.1.0"
__author__ = "Code Detective Contributors"

get_logger().addHandler(logging.NullHandler())
