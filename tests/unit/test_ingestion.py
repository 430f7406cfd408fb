"""Unit tests for ingestion models and pipeline."""

from pathlib import Path

import pytest

from code_detective.ingestion.pipeline import (
    IngestionPipeline,
    LocalFile,
    UploadedFile,
    read_artifact,
)
from code_detective.models.ingestion import FileArtifact, IngestionBatch


def _artifact(name: str) -> FileArtifact:
    return FileArtifact.from_content(name, "x = 1\n", "python", 6)


def _uploads(*names: str) -> list[UploadedFile]:
    return [UploadedFile(name, f"# {name}\n".encode()) for name in names]


class BrokenFile:
    """Upload handle whose read always fails."""

    def __init__(self, name: str) -> None:
        self.name = name

    def read(self) -> bytes:
        raise OSError("device not ready")


class ClosedFile:
    """Upload handle that was closed before it could be read."""

    name = "closed.py"

    def read(self) -> bytes:
        raise ValueError("I/O operation on closed file.")


class TestFileArtifact:
    """Tests for FileArtifact."""

    def test_line_count_from_content(self) -> None:
        """Test counting newline-delimited segments."""
        artifact = FileArtifact.from_content("a.py", "a\nb\nc", "python", 5)
        assert artifact.line_count == 3

    def test_trailing_newline_counts_a_segment(self) -> None:
        """Test that a trailing newline adds an empty final segment."""
        artifact = FileArtifact.from_content("a.py", "a\nb\n", "python", 4)
        assert artifact.line_count == 3

    def test_empty_content_is_one_segment(self) -> None:
        """Test the empty file edge case."""
        assert FileArtifact.from_content("a.py", "", "python", 0).line_count == 1

    def test_is_immutable(self) -> None:
        """Test that artifacts cannot be modified."""
        artifact = _artifact("a.py")
        with pytest.raises(AttributeError):
            artifact.language = "go"  # type: ignore[misc]

    def test_to_dict_excludes_content(self) -> None:
        """Test the listing representation."""
        data = _artifact("a.py").to_dict()
        assert data == {
            "source_name": "a.py",
            "language": "python",
            "size_bytes": 6,
            "line_count": 2,
        }


class TestIngestionBatch:
    """Tests for IngestionBatch snapshots."""

    def test_default_capacity(self) -> None:
        """Test the default maximum of 10 artifacts."""
        batch = IngestionBatch()
        assert batch.capacity == 10
        assert batch.remaining == 10
        assert len(batch) == 0

    def test_extended_truncates_to_capacity(self) -> None:
        """Test that extra artifacts are dropped."""
        batch = IngestionBatch(capacity=3).extended(_artifact(f"{i}.py") for i in range(5))
        assert [a.source_name for a in batch] == ["0.py", "1.py", "2.py"]
        assert batch.is_full

    def test_extended_returns_new_snapshot(self) -> None:
        """Test that the original batch is untouched."""
        original = IngestionBatch()
        updated = original.extended([_artifact("a.py")])
        assert len(original) == 0
        assert len(updated) == 1

    def test_without_preserves_order(self) -> None:
        """Test removing from the middle."""
        batch = IngestionBatch().extended(_artifact(n) for n in ["a.py", "b.py", "c.py"])
        assert [a.source_name for a in batch.without(1)] == ["a.py", "c.py"]

    @pytest.mark.parametrize("index", [-1, 3, 10])
    def test_without_rejects_bad_index(self, index: int) -> None:
        """Test out-of-range removal."""
        batch = IngestionBatch().extended(_artifact(n) for n in ["a.py", "b.py", "c.py"])
        with pytest.raises(IndexError):
            batch.without(index)

    def test_cleared_keeps_capacity(self) -> None:
        """Test clearing the batch."""
        batch = IngestionBatch(capacity=4).extended([_artifact("a.py")]).cleared()
        assert len(batch) == 0
        assert batch.capacity == 4

    def test_totals(self) -> None:
        """Test aggregate line and byte counts."""
        batch = IngestionBatch().extended([_artifact("a.py"), _artifact("b.py")])
        assert batch.total_lines == 4
        assert batch.total_bytes == 12

    def test_rejects_overfull_construction(self) -> None:
        """Test the capacity invariant at construction."""
        with pytest.raises(ValueError, match="capacity"):
            IngestionBatch(artifacts=(_artifact("a.py"), _artifact("b.py")), capacity=1)

    def test_rejects_zero_capacity(self) -> None:
        """Test that capacity must be positive."""
        with pytest.raises(ValueError):
            IngestionBatch(capacity=0)


class TestReadArtifact:
    """Tests for read_artifact()."""

    def test_reads_local_file(self, tmp_path: Path, python_source: str) -> None:
        """Test reading a file from disk."""
        path = tmp_path / "lookup.py"
        path.write_text(python_source, encoding="utf-8")

        artifact = read_artifact(LocalFile(path))

        assert artifact.source_name == "lookup.py"
        assert artifact.language == "python"
        assert artifact.content == python_source
        assert artifact.size_bytes == len(python_source.encode("utf-8"))
        assert artifact.line_count == len(python_source.split("\n"))

    def test_size_counts_bytes_not_characters(self) -> None:
        """Test that multi-byte text is measured in bytes."""
        artifact = read_artifact(UploadedFile("greet.js", "// héllo".encode()))
        assert artifact.size_bytes == 9
        assert artifact.content == "// héllo"

    def test_binary_content_is_passed_through(self) -> None:
        """Test that undecodable bytes do not reject the file."""
        artifact = read_artifact(UploadedFile("blob.json", b"\xff\xfe{}"))
        assert artifact.language == "json"
        assert artifact.size_bytes == 4
        assert artifact.content.endswith("{}")

    def test_missing_local_file_raises(self, tmp_path: Path) -> None:
        """Test that read errors propagate from a single read."""
        with pytest.raises(OSError):
            read_artifact(LocalFile(tmp_path / "missing.py"))


class TestIngestionPipeline:
    """Tests for IngestionPipeline."""

    def test_ingest_preserves_upload_order(self) -> None:
        """Test that artifacts keep the order of the input."""
        pipeline = IngestionPipeline(max_workers=4)
        batch = pipeline.ingest(_uploads("a.py", "b.js", "c.go", "d.rb"))

        assert [a.source_name for a in batch] == ["a.py", "b.js", "c.go", "d.rb"]
        assert [a.language for a in batch] == ["python", "javascript", "go", "ruby"]

    def test_ingest_beyond_capacity(self) -> None:
        """Test 8 held + 5 incoming at capacity 10: first 2 accepted."""
        pipeline = IngestionPipeline(capacity=10)
        pipeline.ingest(_uploads(*[f"held{i}.py" for i in range(8)]))

        batch = pipeline.ingest(_uploads("n1.py", "n2.py", "n3.py", "n4.py", "n5.py"))

        assert len(batch) == 10
        assert [a.source_name for a in batch][-2:] == ["n1.py", "n2.py"]
        assert pipeline.skipped == []

    def test_ingest_into_full_batch_is_noop(self) -> None:
        """Test that a full batch accepts nothing and raises nothing."""
        pipeline = IngestionPipeline(capacity=2)
        pipeline.ingest(_uploads("a.py", "b.py"))

        batch = pipeline.ingest(_uploads("c.py"))

        assert [a.source_name for a in batch] == ["a.py", "b.py"]

    def test_unreadable_file_is_skipped(self) -> None:
        """Test partial failure: the rest of the batch is still ingested."""
        pipeline = IngestionPipeline()
        files = [*_uploads("a.py"), BrokenFile("bad.py"), *_uploads("c.py")]

        batch = pipeline.ingest(files)

        assert [a.source_name for a in batch] == ["a.py", "c.py"]
        assert pipeline.skipped == ["bad.py"]

    def test_any_read_failure_is_skipped(self) -> None:
        """Test that a non-OSError read failure does not abort the batch."""
        pipeline = IngestionPipeline()
        files = [*_uploads("a.py"), ClosedFile(), *_uploads("b.py")]

        batch = pipeline.ingest(files)

        assert [a.source_name for a in batch] == ["a.py", "b.py"]
        assert pipeline.skipped == ["closed.py"]

    def test_skipped_resets_on_next_ingest(self) -> None:
        """Test that skipped names refer to the last call only."""
        pipeline = IngestionPipeline()
        pipeline.ingest([BrokenFile("bad.py")])
        pipeline.ingest(_uploads("ok.py"))
        assert pipeline.skipped == []

    def test_unreadable_file_logs_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that skipped files are logged."""
        pipeline = IngestionPipeline()
        with caplog.at_level("WARNING", logger="code_detective"):
            pipeline.ingest([BrokenFile("bad.py")])
        assert "bad.py" in caplog.text

    def test_remove_preserves_order(self) -> None:
        """Test removing one artifact."""
        pipeline = IngestionPipeline()
        pipeline.ingest(_uploads("a.py", "b.py", "c.py"))

        batch = pipeline.remove(0)

        assert [a.source_name for a in batch] == ["b.py", "c.py"]

    def test_remove_out_of_range(self) -> None:
        """Test that a bad index raises and leaves the batch intact."""
        pipeline = IngestionPipeline()
        pipeline.ingest(_uploads("a.py"))

        with pytest.raises(IndexError):
            pipeline.remove(5)
        assert len(pipeline.batch) == 1

    def test_clear(self) -> None:
        """Test emptying the batch."""
        pipeline = IngestionPipeline(capacity=3)
        pipeline.ingest(_uploads("a.py", "b.py"))

        batch = pipeline.clear()

        assert len(batch) == 0
        assert batch.capacity == 3

    def test_listener_receives_each_snapshot(self) -> None:
        """Test notifications for ingest, remove and clear."""
        pipeline = IngestionPipeline()
        seen: list[int] = []
        pipeline.subscribe(lambda batch: seen.append(len(batch)))

        pipeline.ingest(_uploads("a.py", "b.py"))
        pipeline.remove(0)
        pipeline.clear()

        assert seen == [2, 1, 0]

    def test_listener_sees_published_batch(self) -> None:
        """Test that listeners run after the batch has been replaced."""
        pipeline = IngestionPipeline()
        observed: list[bool] = []
        pipeline.subscribe(lambda batch: observed.append(pipeline.batch is batch))

        pipeline.ingest(_uploads("a.py"))

        assert observed == [True]

    def test_no_notification_for_failed_remove(self) -> None:
        """Test that failed operations publish nothing."""
        pipeline = IngestionPipeline()
        calls: list[int] = []
        pipeline.subscribe(lambda batch: calls.append(len(batch)))

        with pytest.raises(IndexError):
            pipeline.remove(0)

        assert calls == []

    def test_listeners_called_in_subscription_order(self) -> None:
        """Test notification ordering."""
        pipeline = IngestionPipeline()
        order: list[str] = []
        pipeline.subscribe(lambda batch: order.append("first"))
        pipeline.subscribe(lambda batch: order.append("second"))

        pipeline.clear()

        assert order == ["first", "second"]

    def test_unsubscribe(self) -> None:
        """Test removing a listener."""
        pipeline = IngestionPipeline()
        calls: list[int] = []

        def listener(batch: IngestionBatch) -> None:
            calls.append(len(batch))

        pipeline.subscribe(listener)
        pipeline.unsubscribe(listener)
        pipeline.clear()

        assert calls == []

    def test_invalid_worker_count(self) -> None:
        """Test that at least one reader thread is required."""
        with pytest.raises(ValueError):
            IngestionPipeline(max_workers=0)
