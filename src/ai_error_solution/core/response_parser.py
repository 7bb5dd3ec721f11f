"""Parser for free-form model answers.

The model is asked for an explanation, likely causes, suggested fixes and
documentation links, but it answers in prose. This module pulls those
sections out with line-based heuristics:

- A header is a line naming the section and carrying a colon or ``**``
- Capture stops at a reference/link section, at the next numbered
  section, or at two consecutive blank lines
- URLs are collected separately, anywhere in the text

Parsing never fails. When a section cannot be located the first 200
characters of the answer are returned in its place, so the caller always
has something to show.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from ai_error_solution.models.analysis import StructuredAnalysis

EXPLANATION_KEYWORDS = ("explanation", "plain-english", "what happened")
CAUSES_KEYWORDS = ("causes", "likely causes", "reasons")
FIXES_KEYWORDS = ("fixes", "suggested fixes", "solutions", "fix")

# Words marking the documentation/links section that ends any other section
REFERENCE_SECTION_WORDS = ("documentation", "reference", "link")

FALLBACK_LENGTH = 200
FALLBACK_SUFFIX = "..."

# Numbered, bulleted, or "Capitalized text:" lines
SECTION_START_PATTERN = re.compile(r"^\d+\.|^-|^•|^[A-Z][^:]{3,}:")
NUMBERED_HEADER_PATTERN = re.compile(r"^\d+\.\s+[A-Z]")
URL_PATTERN = re.compile(r"https?://\S+")
URL_TRAILING_PUNCTUATION = re.compile(r"[),.\]>]+$")


def _is_header(lower_line: str, keywords: tuple[str, ...]) -> bool:
    """Check if a lowercased line introduces one of the keyword sections."""
    return any(kw in lower_line for kw in keywords) and (
        ":" in lower_line or "**" in lower_line
    )


def _ends_capture(line: str, keywords: tuple[str, ...]) -> bool:
    """Check if a line closes the section being captured.

    The reference-section check runs before the numbered-header check.
    """
    lower_line = line.lower()

    if SECTION_START_PATTERN.match(line) and any(
        word in lower_line for word in REFERENCE_SECTION_WORDS
    ):
        return True

    if NUMBERED_HEADER_PATTERN.match(line):
        return not any(kw in lower_line for kw in keywords)

    return False


def _is_blank(lines: list[str], index: int) -> bool:
    return index < len(lines) and not lines[index].strip()


def _fallback(text: str) -> str:
    return text[:FALLBACK_LENGTH] + FALLBACK_SUFFIX


def extract_section(text: str, keywords: Iterable[str]) -> str:
    """Extract the body of the section introduced by one of ``keywords``.

    Args:
        text: Raw model answer
        keywords: Lowercase words naming the section, matched as substrings

    Returns:
        The captured lines, stripped and newline-joined, or the first 200
        characters of ``text`` followed by "..." when nothing was captured
    """
    keywords = tuple(keywords)
    lines = text.split("\n")
    capturing = False
    captured: list[str] = []

    for i, line in enumerate(lines):
        if _is_header(line.lower(), keywords):
            capturing = True
            continue

        if not capturing:
            continue

        if _ends_capture(line, keywords):
            break

        if line.strip():
            captured.append(line.strip())

            if _is_blank(lines, i + 1) and _is_blank(lines, i + 2):
                break

    return "\n".join(captured) or _fallback(text)


def extract_references(text: str) -> list[str]:
    """Return every http(s) URL in ``text`` in order of appearance.

    Duplicates are kept. Trailing ``)``, ``]``, ``>``, ``,`` and ``.``
    characters are stripped from each URL.
    """
    return [URL_TRAILING_PUNCTUATION.sub("", url) for url in URL_PATTERN.findall(text)]


def parse_ai_response(raw: str) -> StructuredAnalysis:
    """Split a raw model answer into a ``StructuredAnalysis``."""
    return StructuredAnalysis(
        explanation=extract_section(raw, EXPLANATION_KEYWORDS),
        causes=extract_section(raw, CAUSES_KEYWORDS),
        fixes=extract_section(raw, FIXES_KEYWORDS),
        references=tuple(extract_references(raw)),
        raw=raw,
    )
