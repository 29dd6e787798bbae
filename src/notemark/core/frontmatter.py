"""Frontmatter detection, parsing and serialization.

A frontmatter block is only recognised when line 0 is ``---`` and every line up
to the closing ``---`` is a ``key: value`` pair. A blank line or any other text
before the closer invalidates the whole block, so a thematic break further down
the body can never be mistaken for the end of frontmatter.
"""

import re

from .errors import ValidationError
from .model import ParsedNote

DELIMITER = "---"
_KEY_VALUE = re.compile(r"^(\S+):\s*(.*)$")
_KEY = re.compile(r"^\S+$")


def scan_frontmatter(lines: list[str]) -> int | None:
    """Return the index of the closing delimiter, or None if there is no valid block."""
    if not lines or lines[0].strip() != DELIMITER:
        return None
    for i in range(1, len(lines)):
        line = lines[i]
        if line.strip() == DELIMITER:
            return i
        if not _KEY_VALUE.match(line):
            return None
    return None


def frontmatter_line_count(content: str) -> int:
    """Number of physical lines taken by frontmatter, both delimiters included."""
    closing = scan_frontmatter(content.split("\n"))
    return 0 if closing is None else closing + 1


def parse_note(content: str) -> ParsedNote:
    lines = content.split("\n")
    closing = scan_frontmatter(lines)
    if closing is None:
        return ParsedNote(frontmatter=None, body=content, has_frontmatter=False)

    frontmatter: dict[str, str] = {}
    for line in lines[1:closing]:
        m = _KEY_VALUE.match(line)
        if m:
            frontmatter[m.group(1)] = m.group(2).strip()

    return ParsedNote(
        frontmatter=frontmatter,
        body="\n".join(lines[closing + 1 :]),
        has_frontmatter=True,
    )


def serialize_frontmatter(frontmatter: dict[str, str]) -> str:
    out = [DELIMITER]
    for key, value in frontmatter.items():
        out.append(f"{key}: {value}")
    out.append(DELIMITER)
    return "\n".join(out)


def reconstruct_note(parsed: ParsedNote) -> str:
    # A note without meaningful frontmatter never gains an empty block.
    if not parsed.frontmatter:
        return parsed.body
    return serialize_frontmatter(parsed.frontmatter) + "\n" + parsed.body


def set_property(content: str, key: str, value: str) -> str:
    """Set a frontmatter property, creating the block if needed.

    Keys and values that would serialize into an unparseable block are
    rejected before anything is written.
    """
    if not _KEY.match(key) or "\n" in key:
        raise ValidationError(
            f"Invalid frontmatter key: {key!r} (must be non-empty with no whitespace)"
        )
    if "\n" in value or "\r" in value:
        raise ValidationError(f"Frontmatter value for {key!r} must be a single line")
    parsed = parse_note(content)
    if parsed.frontmatter is None:
        parsed.frontmatter = {}
    parsed.frontmatter[key] = value
    return reconstruct_note(parsed)


def remove_property(content: str, key: str) -> str:
    """Remove a frontmatter property; a note without frontmatter is returned as is."""
    parsed = parse_note(content)
    if parsed.frontmatter is None:
        return content
    parsed.frontmatter.pop(key, None)
    return reconstruct_note(parsed)


def extract_title(content: str) -> str:
    """Title of a note: its first body line without heading markers."""
    body = parse_note(content).body
    first_line = body.split("\n")[0]
    return re.sub(r"^#{1,6}\s*", "", first_line).strip() or "Untitled"
