"""Ingestion entities.

- FileArtifact: One accepted upload, normalized and language-tagged
- IngestionBatch: Ordered, capacity-bounded snapshot of accepted artifacts

Both are immutable. Every batch operation returns a new snapshot.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

DEFAULT_CAPACITY = 10


@dataclass(frozen=True)
class FileArtifact:
    """Normalized content and metadata of an uploaded file.

    Attributes:
        source_name: Original filename
        content: Decoded text content
        language: Canonical language tag from the extension table
        size_bytes: Size of the raw blob
        line_count: Number of newline-delimited segments
    """

    source_name: str
    content: str
    language: str
    size_bytes: int
    line_count: int

    @classmethod
    def from_content(
        cls,
        source_name: str,
        content: str,
        language: str,
        size_bytes: int,
    ) -> "FileArtifact":
        """Create an artifact, deriving the line count from the content."""
        return cls(
            source_name=source_name,
            content=content,
            language=language,
            size_bytes=size_bytes,
            line_count=len(content.split("\n")),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary (content excluded) for listings."""
        return {
            "source_name": self.source_name,
            "language": self.language,
            "size_bytes": self.size_bytes,
            "line_count": self.line_count,
        }


@dataclass(frozen=True)
class IngestionBatch:
    """Ordered collection of artifacts, first-uploaded first.

    Attributes:
        artifacts: Accepted artifacts in order of first addition
        capacity: Maximum number of artifacts the batch may hold
    """

    artifacts: tuple[FileArtifact, ...] = field(default_factory=tuple)
    capacity: int = DEFAULT_CAPACITY

    def __post_init__(self) -> None:
        """Validate the capacity bound."""
        if self.capacity < 1:
            raise ValueError(f"Batch capacity must be at least 1 (got {self.capacity})")
        if len(self.artifacts) > self.capacity:
            raise ValueError(
                f"Batch holds {len(self.artifacts)} artifacts, capacity is {self.capacity}"
            )

    def __len__(self) -> int:
        return len(self.artifacts)

    def __iter__(self) -> Iterator[FileArtifact]:
        return iter(self.artifacts)

    def __getitem__(self, index: int) -> FileArtifact:
        return self.artifacts[index]

    @property
    def remaining(self) -> int:
        """Number of free slots."""
        return self.capacity - len(self.artifacts)

    @property
    def is_full(self) -> bool:
        return self.remaining == 0

    @property
    def total_lines(self) -> int:
        return sum(a.line_count for a in self.artifacts)

    @property
    def total_bytes(self) -> int:
        return sum(a.size_bytes for a in self.artifacts)

    def extended(self, incoming: Iterable[FileArtifact]) -> "IngestionBatch":
        """Return a batch with incoming artifacts appended, truncated to capacity."""
        accepted = tuple(incoming)[: self.remaining]
        return IngestionBatch(artifacts=self.artifacts + accepted, capacity=self.capacity)

    def without(self, index: int) -> "IngestionBatch":
        """Return a batch without the artifact at index.

        Raises:
            IndexError: If index is out of range (negative indexes are rejected)
        """
        if index < 0 or index >= len(self.artifacts):
            raise IndexError(f"No artifact at index {index} (batch holds {len(self.artifacts)})")
        return IngestionBatch(
            artifacts=self.artifacts[:index] + self.artifacts[index + 1 :],
            capacity=self.capacity,
        )

    def cleared(self) -> "IngestionBatch":
        """Return an empty batch with the same capacity."""
        return IngestionBatch(capacity=self.capacity)
