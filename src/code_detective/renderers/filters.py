"""Jinja2 filters for report rendering.

Text arriving from the analysis service is untrusted. HTML escaping is left to
Jinja2 autoescape; the filters here keep Markdown structure intact and format
tags and numbers consistently across formats.
"""

import math
import re

_BACKTICK_RUN_RE = re.compile(r"`+")
_WHITESPACE_RE = re.compile(r"\s+")
_LINE_BREAK_RE = re.compile(r"\r\n?|\n")
# Line-leading ATX headings, fences and setext underlines
_BLOCK_MARKER_RE = re.compile(r"^([ \t]*)(#|`{3}|~{3}|=+[ \t]*$|-+[ \t]*$)")


def humanize_tag(value: str) -> str:
    """Turn an enum tag into a display label.

    Examples:
        >>> humanize_tag("best_practices")
        'Best Practices'
        >>> humanize_tag("critical")
        'Critical'
    """
    return value.replace("_", " ").title()


def single_line(text: str | None) -> str:
    """Collapse all whitespace runs (including newlines) into single spaces.

    Used for Markdown headings and list items, where a newline in the value
    would break out of the surrounding construct.
    """
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text).strip()


def markdown_block(text: str | None) -> str:
    """Escape line-leading block markers in a multi-line paragraph.

    Line breaks are kept, but a line opening with a heading marker, a code
    fence or a setext underline gets a backslash so it stays paragraph text.

    Examples:
        >>> markdown_block("intro\\n```\\nmore")
        'intro\\n\\\\```\\nmore'
        >>> markdown_block("why\\n# Heading")
        'why\\n\\\\# Heading'
    """
    if not text:
        return ""
    lines = _LINE_BREAK_RE.split(text.strip())
    return "\n".join(_BLOCK_MARKER_RE.sub(r"\1\\\2", line) for line in lines)


def code_fence(code: str | None) -> str:
    """Return a backtick fence longer than any backtick run inside code.

    Examples:
        >>> code_fence("print(1)")
        '```'
        >>> code_fence("```nested```")
        '````'
    """
    longest = max((len(run) for run in _BACKTICK_RUN_RE.findall(code or "")), default=0)
    return "`" * max(3, longest + 1)


def format_number(value: float, digits: int = 1) -> str:
    """Format a number with fixed decimals; non-finite values render as "N/A"."""
    if not math.isfinite(value):
        return "N/A"
    return f"{value:.{digits}f}"
