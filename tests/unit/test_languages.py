"""Unit tests for language classification."""

import pytest

from code_detective.ingestion.languages import (
    EXTENSION_LANGUAGES,
    LANGUAGES,
    PLAINTEXT,
    SUPPORTED_EXTENSIONS,
    classify,
    is_supported,
)


class TestClassify:
    """Tests for classify()."""

    def test_python_script(self) -> None:
        """Test the canonical example."""
        assert classify("script.py") == "python"

    def test_readme_without_extension(self) -> None:
        """Test that a name without an extension is plaintext."""
        assert classify("README") == PLAINTEXT

    @pytest.mark.parametrize(
        ("filename", "expected"),
        [
            ("app.jsx", "javascript"),
            ("index.tsx", "typescript"),
            ("main.c", "cpp"),
            ("lib.cxx", "cpp"),
            ("page.htm", "html"),
            ("model.rb", "ruby"),
            ("Program.cs", "csharp"),
            ("Main.kt", "kotlin"),
            ("View.swift", "swift"),
        ],
    )
    def test_known_extensions(self, filename: str, expected: str) -> None:
        """Test a sample of the extension table."""
        assert classify(filename) == expected

    @pytest.mark.parametrize("filename", ["SCRIPT.PY", "Script.Py", "script.pY"])
    def test_extension_is_case_insensitive(self, filename: str) -> None:
        """Test that extension matching ignores case."""
        assert classify(filename) == "python"

    def test_uses_last_extension(self) -> None:
        """Test that only the text after the last dot counts."""
        assert classify("bundle.min.js") == "javascript"
        assert classify("notes.py.txt") == PLAINTEXT

    @pytest.mark.parametrize("filename", ["", ".", "archive.", "data.xyz", "Makefile"])
    def test_unknown_is_plaintext(self, filename: str) -> None:
        """Test that unknown or missing extensions never fail."""
        assert classify(filename) == PLAINTEXT

    def test_name_without_dot_is_its_own_extension(self) -> None:
        """Test that a dotless name is looked up as a whole."""
        assert classify("go") == "go"
        assert classify("C") == "cpp"

    def test_directory_dots_are_ignored(self) -> None:
        """Test that dots in directory names are not extensions."""
        assert classify("src/v1.2/Makefile") == PLAINTEXT
        assert classify("src\\pkg.old\\util.go") == "go"

    def test_dotfile_uses_suffix(self) -> None:
        """Test that a leading-dot name is treated as an extension."""
        assert classify(".py") == "python"


class TestExtensionTable:
    """Tests for the extension table constants."""

    def test_table_is_read_only(self) -> None:
        """Test that the lookup table cannot be modified."""
        with pytest.raises(TypeError):
            EXTENSION_LANGUAGES["txt"] = "text"  # type: ignore[index]

    def test_supported_extensions_are_dotted(self) -> None:
        """Test the upload allow-list format."""
        assert ".py" in SUPPORTED_EXTENSIONS
        assert all(ext.startswith(".") for ext in SUPPORTED_EXTENSIONS)
        assert len(SUPPORTED_EXTENSIONS) == len(EXTENSION_LANGUAGES)

    def test_languages_are_distinct(self) -> None:
        """Test that each language tag appears once."""
        assert len(LANGUAGES) == len(set(LANGUAGES))
        assert PLAINTEXT not in LANGUAGES

    def test_is_supported(self) -> None:
        """Test the allow-list check."""
        assert is_supported("main.GO") is True
        assert is_supported("README") is False
        assert is_supported("go") is False
        assert is_supported("image.png") is False
