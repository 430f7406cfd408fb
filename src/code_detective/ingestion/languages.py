"""Language classification by file extension.

Maps a filename to the canonical language tag the analysis service expects.
Unknown or missing extensions map to "plaintext"; classification never fails.
"""

from types import MappingProxyType

PLAINTEXT = "plaintext"

EXTENSION_LANGUAGES: MappingProxyType[str, str] = MappingProxyType(
    {
        "py": "python",
        "js": "javascript",
        "jsx": "javascript",
        "ts": "typescript",
        "tsx": "typescript",
        "java": "java",
        "cpp": "cpp",
        "cc": "cpp",
        "cxx": "cpp",
        "c": "cpp",
        "go": "go",
        "html": "html",
        "htm": "html",
        "css": "css",
        "json": "json",
        "sql": "sql",
        "php": "php",
        "rb": "ruby",
        "cs": "csharp",
        "kt": "kotlin",
        "swift": "swift",
    }
)

# Upload allow-list, e.g. ".py"
SUPPORTED_EXTENSIONS: tuple[str, ...] = tuple(sorted(f".{ext}" for ext in EXTENSION_LANGUAGES))

LANGUAGES: tuple[str, ...] = tuple(sorted(set(EXTENSION_LANGUAGES.values())))


def _basename(filename: str) -> str:
    return filename.replace("\\", "/").rsplit("/", 1)[-1]


def _extension(filename: str) -> str:
    # Text after the last dot; the whole name when there is none
    return _basename(filename).rsplit(".", 1)[-1].lower()


def classify(filename: str) -> str:
    """Return the language tag for a filename.

    Args:
        filename: Any filename, with or without a path or extension

    Returns:
        Language tag such as "python", or "plaintext" when unknown

    Examples:
        >>> classify("script.py")
        'python'
        >>> classify("Component.TSX")
        'typescript'
        >>> classify("README")
        'plaintext'
    """
    return EXTENSION_LANGUAGES.get(_extension(filename), PLAINTEXT)


def is_supported(filename: str) -> bool:
    """Check if a filename passes the upload allow-list (a dotted extension is required)."""
    return "." in _basename(filename) and _extension(filename) in EXTENSION_LANGUAGES
