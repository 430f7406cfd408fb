"""Report building blocks shared by every output format.

- document: Format-independent report model (grades, labels, ordering)
- snapshot: Lossless JSON encoding of an analysis result
- filters: Jinja2 filters for the HTML and Markdown templates
"""

from code_detective.renderers.document import Grade, ReportDocument, build_document, grade_for
from code_detective.renderers.snapshot import decode_snapshot, encode_snapshot

__all__ = [
    "Grade",
    "ReportDocument",
    "build_document",
    "grade_for",
    "decode_snapshot",
    "encode_snapshot",
]
