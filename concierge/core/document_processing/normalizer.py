"""Cleanup of raw extracted PDF text before classification and chunking."""

import re

BOILERPLATE_PATTERNS = [
    r"proprietary\s*\+\s*confidential",
    r"proprietary\s+and\s+confidential",
    r"©\s*\d{4}",
    r"all\s+rights\s+reserved\.?",
]

_BOILERPLATE_RE = re.compile("|".join(BOILERPLATE_PATTERNS), re.IGNORECASE)
_PAGE_NUMBER_RE = re.compile(r"\d+")
_EXCESS_BLANK_LINES_RE = re.compile(r"\n{3,}")


def _strip_boilerplate(line: str) -> str:
    # Removing one phrase can bring two halves of another together
    while True:
        cleaned = _BOILERPLATE_RE.sub("", line)
        if cleaned == line:
            return line
        line = cleaned


def normalize_content(text: str) -> str:
    """
    Normalize extracted text.

    Line endings become LF, boilerplate stamps and page-number lines are
    removed, every line is trimmed and runs of blank lines collapse to one.
    Applying this to its own output returns the same string.

    Args:
        text: Raw extracted text

    Returns:
        Cleaned text
    """
    if not text:
        return ""

    text = text.replace("\r\n", "\n").replace("\r", "\n")

    lines = []
    for line in text.split("\n"):
        line = _strip_boilerplate(line).strip()
        if _PAGE_NUMBER_RE.fullmatch(line):
            continue
        lines.append(line)

    cleaned = "\n".join(lines)
    cleaned = _EXCESS_BLANK_LINES_RE.sub("\n\n", cleaned)
    return cleaned.strip()
