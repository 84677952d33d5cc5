"""Outbound message processing — turn one model reply into WhatsApp bursts.

A single long WhatsApp message reads like an email. People send several
short ones instead, so every reply is split into chunks of a few short
lines before delivery.
"""

import re

# The persona asks the model to mark message breaks with a literal "\n"
# (backslash + n). Real newlines count as breaks too.
LINE_BREAK_MARKER = "\\n"

DEFAULT_MAX_LINES = 3
DEFAULT_MAX_CHARS_PER_LINE = 100

_NEWLINE_RE = re.compile(r"\r\n|\r|\n")


# ============================================================
# LINE WRAPPING
# ============================================================

def _paragraphs(text: str) -> list[str]:
    """Split on break markers, dropping blank paragraphs."""
    normalized = text.replace(LINE_BREAK_MARKER, "\n")
    return [p for p in _NEWLINE_RE.split(normalized) if p.strip()]


def _wrap_paragraph(paragraph: str, max_chars_per_line: int) -> list[str]:
    """Greedily repack a long paragraph's words into lines.

    A word longer than the limit is kept whole on its own line.
    """
    lines = []
    current = ""
    for word in paragraph.split():
        if not current:
            current = word
        elif len(current) + 1 + len(word) <= max_chars_per_line:
            current = f"{current} {word}"
        else:
            lines.append(current)
            current = word
    if current:
        lines.append(current)
    return lines


def wrap_lines(text: str, max_chars_per_line: int = DEFAULT_MAX_CHARS_PER_LINE) -> list[str]:
    """Return every line split_message() would emit, in order."""
    lines = []
    for paragraph in _paragraphs(text):
        if len(paragraph) <= max_chars_per_line:
            lines.append(paragraph)
        else:
            lines.extend(_wrap_paragraph(paragraph, max_chars_per_line))
    return lines


# ============================================================
# MESSAGE SPLITTING
# ============================================================

def split_message(
    text: str,
    max_lines: int = DEFAULT_MAX_LINES,
    max_chars_per_line: int = DEFAULT_MAX_CHARS_PER_LINE,
) -> list[str]:
    """Split a reply into chunks of at most ``max_lines`` short lines.

    Paragraphs (separated by a literal ``\\n`` marker or a newline) no
    longer than ``max_chars_per_line`` stay as one line; longer ones are
    word-wrapped. Lines are then grouped in order, ``max_lines`` per chunk.

    Args:
        text: Reply text to split
        max_lines: Maximum lines per chunk
        max_chars_per_line: Maximum characters per line

    Returns:
        List of chunks, each a newline-joined group of lines. Empty for
        empty or whitespace-only input.
    """
    max_lines = max(1, max_lines)
    chunks = []
    current: list[str] = []

    for line in wrap_lines(text, max_chars_per_line):
        if len(current) >= max_lines:
            chunks.append("\n".join(current))
            current = []
        current.append(line)

    if current:
        chunks.append("\n".join(current))

    return chunks
