"""File ingestion (classification and batching of uploads).

- languages: Extension to language tag lookup
- pipeline: Concurrent reading into a capacity-bounded batch
"""

from code_detective.ingestion.languages import (
    PLAINTEXT,
    SUPPORTED_EXTENSIONS,
    classify,
    is_supported,
)
from code_detective.ingestion.pipeline import (
    IngestionPipeline,
    LocalFile,
    RawFile,
    UploadedFile,
    read_artifact,
)

__all__ = [
    "PLAINTEXT",
    "SUPPORTED_EXTENSIONS",
    "classify",
    "is_supported",
    "IngestionPipeline",
    "LocalFile",
    "RawFile",
    "UploadedFile",
    "read_artifact",
]
