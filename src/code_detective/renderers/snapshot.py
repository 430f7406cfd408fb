"""Lossless JSON snapshot of an AnalysisResult.

Field order follows the data model, optional fields are written as null, and
non-ASCII text is kept as-is, so encoding is deterministic and
decode_snapshot(encode_snapshot(result)) == result.
"""

import json

from code_detective.models.analysis import AnalysisResult


def encode_snapshot(result: AnalysisResult) -> str:
    """Serialize a result to an indented JSON document (trailing newline included)."""
    return json.dumps(result.to_dict(), indent=2, ensure_ascii=False) + "\n"


def decode_snapshot(text: str) -> AnalysisResult:
    """Rebuild a result from a snapshot or a raw service response body.

    Raises:
        ValueError: If the text is not JSON or does not describe a result
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Snapshot is not valid JSON: {e}") from e

    return AnalysisResult.from_dict(data)
