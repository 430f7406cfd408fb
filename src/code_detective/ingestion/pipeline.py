"""File ingestion pipeline.

Turns uploaded file handles into language-tagged artifacts and maintains the
current IngestionBatch. Reads run concurrently, but the new batch is published
only once every read has completed or been skipped.

Usage:
    pipeline = IngestionPipeline(capacity=10)
    pipeline.subscribe(on_batch_changed)
    batch = pipeline.ingest([LocalFile(Path("app.py")), UploadedFile("x.js", b"...")])
"""

from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from code_detective.ingestion.languages import classify
from code_detective.models.ingestion import DEFAULT_CAPACITY, FileArtifact, IngestionBatch
from code_detective.utils.logging import get_logger

logger = get_logger(__name__)

BatchListener = Callable[[IngestionBatch], None]


class RawFile(Protocol):
    """Uploaded file handle: a name and a way to read its bytes."""

    @property
    def name(self) -> str: ...

    def read(self) -> bytes: ...


@dataclass(frozen=True)
class UploadedFile:
    """In-memory upload (e.g. a multipart form part)."""

    name: str
    data: bytes

    def read(self) -> bytes:
        return self.data


@dataclass(frozen=True)
class LocalFile:
    """File on disk, read on demand."""

    path: Path

    @property
    def name(self) -> str:
        return self.path.name

    def read(self) -> bytes:
        return self.path.read_bytes()


def read_artifact(handle: RawFile) -> FileArtifact:
    """Read and normalize a single upload.

    Content is decoded as UTF-8. Binary content is not rejected: undecodable
    bytes become replacement characters.

    Raises:
        OSError: If the handle cannot be read
    """
    data = handle.read()
    content = data.decode("utf-8", errors="replace")
    return FileArtifact.from_content(
        source_name=handle.name,
        content=content,
        language=classify(handle.name),
        size_bytes=len(data),
    )


class IngestionPipeline:
    """Owns the current batch and notifies listeners of every change.

    Listeners are called in subscription order, after the batch has been
    replaced, with the new snapshot.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY, max_workers: int = 4) -> None:
        """Initialize the pipeline with an empty batch.

        Args:
            capacity: Maximum number of artifacts in the batch
            max_workers: Threads used to read files concurrently
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1 (got {max_workers})")
        self._batch = IngestionBatch(capacity=capacity)
        self._max_workers = max_workers
        self._listeners: list[BatchListener] = []
        self._skipped: list[str] = []

    @property
    def batch(self) -> IngestionBatch:
        """Current batch snapshot."""
        return self._batch

    @property
    def skipped(self) -> list[str]:
        """Names of files skipped by the last ingest because they could not be read."""
        return list(self._skipped)

    def subscribe(self, listener: BatchListener) -> None:
        """Register a listener for batch changes."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: BatchListener) -> None:
        """Remove a previously registered listener."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def ingest(self, files: Sequence[RawFile]) -> IngestionBatch:
        """Read incoming files and append them to the batch.

        Only the first `remaining` files are considered; the rest are dropped
        without error. Unreadable files are logged and skipped.

        Args:
            files: Incoming file handles, in upload order

        Returns:
            The new batch snapshot
        """
        remaining = self._batch.remaining
        candidates = list(files[:remaining])
        if len(files) > remaining:
            logger.debug(
                "Batch has %d free slot(s); dropping %d file(s)",
                remaining,
                len(files) - remaining,
            )

        artifacts = self._read_all(candidates)
        self._publish(self._batch.extended(artifacts))

        logger.info(
            "Ingested %d file(s); batch now holds %d of %d",
            len(artifacts),
            len(self._batch),
            self._batch.capacity,
        )
        return self._batch

    def remove(self, index: int) -> IngestionBatch:
        """Remove the artifact at index, keeping the order of the rest.

        Raises:
            IndexError: If index is out of range
        """
        batch = self._batch.without(index)
        logger.debug("Removed %s from batch", self._batch[index].source_name)
        self._publish(batch)
        return self._batch

    def clear(self) -> IngestionBatch:
        """Remove every artifact from the batch."""
        self._publish(self._batch.cleared())
        return self._batch

    def _read_all(self, handles: list[RawFile]) -> list[FileArtifact]:
        """Read handles concurrently, preserving input order."""
        self._skipped = []
        if not handles:
            return []

        results: list[FileArtifact | None] = [None] * len(handles)
        with ThreadPoolExecutor(max_workers=min(self._max_workers, len(handles))) as executor:
            futures = [executor.submit(read_artifact, handle) for handle in handles]
            for position, future in enumerate(futures):
                try:
                    results[position] = future.result()
                except Exception as e:
                    name = handles[position].name
                    logger.warning("Skipping unreadable file %s: %s", name, e)
                    self._skipped.append(name)

        return [artifact for artifact in results if artifact is not None]

    def _publish(self, batch: IngestionBatch) -> None:
        self._batch = batch
        for listener in list(self._listeners):
            listener(batch)
