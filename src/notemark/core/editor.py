"""Structural editing of raw note text.

Every function takes the full note content and returns new content. Lines the
edit does not target are carried over byte for byte. User-facing line numbers
are content lines (1-based, frontmatter excluded); conversion to physical
indices goes through ``lines`` on each call.
"""

import re

from .errors import (
    HeadingNotFoundError,
    InvalidLineRangeError,
    MissingOptionError,
    UnknownPositionError,
    ValidationError,
)
from .lines import SEPARATOR_RE, content_line_count, join_lines, split_lines, to_physical
from .model import ContentLine, InsertOptions

HEADING_RE = re.compile(r"^(#{1,6})\s+(.+)$")
BOLD_MARKER_RE = re.compile(r"^\*\*(?!\s)([^*]+?)\*\*:?$")
ATX_CLOSING_RE = re.compile(r"\s+#+$")

MAX_HEADING_HINTS = 15


def _split_new_text(text: str) -> list[str]:
    # A single trailing newline is taken as accidental, not as a blank line.
    if text.endswith("\n"):
        text = text[:-1]
    return text.split("\n")


def normalize_heading(text: str) -> str:
    """Reduce heading text to a comparable key.

    ``"## Work"``, ``"## Work ##"``, ``"**Work**:"``, ``"**Work:**"`` and
    ``"work"`` all normalize to ``"work"``.
    """
    t = text.strip()
    if re.match(r"^#{1,6}\s+", t):
        t = ATX_CLOSING_RE.sub("", re.sub(r"^#{1,6}\s+", "", t))
    t = t.rstrip(":").strip()
    for wrap in ("**", "__"):
        if len(t) >= 4 and t.startswith(wrap) and t.endswith(wrap):
            t = t[2:-2]
            break
    t = t.rstrip(":")
    t = re.sub(r"\s+", " ", t).strip()
    return t.casefold()


def section_boundary_text(line: str) -> str | None:
    """Display text of a section boundary line, or None for ordinary lines."""
    stripped = line.strip()
    if SEPARATOR_RE.match(stripped):
        return None
    m = HEADING_RE.match(stripped)
    if m:
        return ATX_CLOSING_RE.sub("", m.group(2)).strip()
    m = BOLD_MARKER_RE.match(stripped)
    if m:
        return m.group(1).rstrip(":").strip()
    return None


def list_section_headings(lines: list[str], start: int = 0) -> list[str]:
    return [
        text
        for text in (section_boundary_text(ln) for ln in lines[start:])
        if text is not None
    ]


def find_heading(lines: list[str], heading: str, start: int = 0) -> int:
    """Index of the first section boundary matching ``heading``."""
    wanted = normalize_heading(heading)
    for i in range(start, len(lines)):
        text = section_boundary_text(lines[i])
        if text is not None and normalize_heading(text) == wanted:
            return i
    available = list_section_headings(lines, start)[:MAX_HEADING_HINTS]
    raise HeadingNotFoundError(heading, available)


def find_section(lines: list[str], heading: str, start: int = 0) -> tuple[int, int]:
    """
    Locate a section by heading.

    Returns (heading_index, end_index) where end_index is the index of the next
    section boundary or len(lines).
    """
    heading_index = find_heading(lines, heading, start)
    for i in range(heading_index + 1, len(lines)):
        if section_boundary_text(lines[i]) is not None:
            return heading_index, i
    return heading_index, len(lines)


def _section_insert_index(lines: list[str], heading: str, start: int) -> int:
    heading_index, end_index = find_section(lines, heading, start)
    last = end_index - 1
    while last > heading_index and lines[last].strip() == "":
        last -= 1
    return last + 1


def _require_heading(options: InsertOptions) -> str:
    if not options.heading:
        raise MissingOptionError(
            f"Heading is required for {options.position} position"
        )
    return options.heading


def insert_at(content: str, text: str, options: InsertOptions) -> str:
    """Insert ``text`` into ``content`` at the requested position."""
    position = options.position
    heading = options.heading

    if position == "start" and heading:
        position = "after-heading"
    elif position == "end" and heading:
        position = "in-section"

    if position == "end":
        if content == "":
            return text
        if content.endswith("\n"):
            return content + text
        return content + "\n" + text

    lines = split_lines(content)
    body_start = to_physical(content, ContentLine(1))
    new_lines = _split_new_text(text)

    if position == "start":
        index = body_start
    elif position == "after-heading":
        index = find_heading(lines, _require_heading(options), body_start) + 1
    elif position == "in-section":
        index = _section_insert_index(lines, _require_heading(options), body_start)
    elif position == "at-line":
        line = options.line
        if line is None:
            raise MissingOptionError("Line number is required for at-line position")
        if line < 1:
            raise ValidationError(
                f"Valid line number is required for at-line position (1-indexed), got {line}"
            )
        index = to_physical(content, line)
        while len(lines) < index:
            lines.append("")
    else:
        raise UnknownPositionError(position)

    lines[index:index] = new_lines
    return join_lines(lines)


def _physical_range(
    content: str, start_line: ContentLine, end_line: ContentLine
) -> tuple[int, int]:
    if start_line < 1 or end_line < start_line:
        raise InvalidLineRangeError(start_line, end_line)
    total = content_line_count(content)
    if start_line > total:
        raise InvalidLineRangeError(
            start_line,
            end_line,
            f"start line {start_line} exceeds content length ({total} lines)",
        )
    # end is exclusive: one past the last content line, clamped
    last = ContentLine(min(end_line, total))
    return to_physical(content, start_line), to_physical(content, last) + 1


def delete_lines(content: str, start_line: ContentLine, end_line: ContentLine) -> str:
    """Delete content lines start_line..end_line (1-based, inclusive).

    An end line past the end of the note is clamped.
    """
    start, end = _physical_range(content, start_line, end_line)
    lines = split_lines(content)
    del lines[start:end]
    return join_lines(lines)


def get_lines(content: str, start_line: ContentLine, end_line: ContentLine) -> list[str]:
    """The content lines delete_lines would remove for the same range."""
    start, end = _physical_range(content, start_line, end_line)
    return split_lines(content)[start:end]


def replace_lines(
    content: str, start_line: ContentLine, end_line: ContentLine, text: str
) -> str:
    start, end = _physical_range(content, start_line, end_line)
    lines = split_lines(content)
    lines[start:end] = _split_new_text(text)
    return join_lines(lines)


def edit_line(content: str, line: ContentLine, text: str) -> str:
    """Replace a single content line."""
    total = content_line_count(content)
    if line < 1 or line > total:
        raise InvalidLineRangeError(
            line, line, f"line {line} does not exist (note has {total} lines)"
        )
    lines = split_lines(content)
    lines[to_physical(content, line)] = text
    return join_lines(lines)
