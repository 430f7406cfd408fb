"""Test fixtures for Code Detective.

Saved analysis service payloads used by model, renderer and CLI tests.

Responses:
- responses/sample_response.json: A successful POST /analyze response body
"""

from pathlib import Path

# Path to fixtures directory
FIXTURES_DIR = Path(__file__).parent

# Saved service responses
RESPONSES_DIR = FIXTURES_DIR / "responses"

SAMPLE_RESPONSE_PATH = RESPONSES_DIR / "sample_response.json"
