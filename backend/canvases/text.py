"""Conversion between canvas list fields and their multi-line text form."""
import re

LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


def text_to_lines(text):
    """
    Split a text blob into canvas entries, one per line.
    Empty lines are dropped; lines holding only whitespace are kept as-is.
    """
    if not text:
        return []
    return [line for line in LINE_BREAK_RE.split(text) if line != ""]


def lines_to_text(lines):
    """Join canvas entries back into the text blob shown in the editor."""
    return "\n".join(lines or [])


def has_line_break(entry):
    return LINE_BREAK_RE.search(entry) is not None
