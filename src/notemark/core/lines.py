"""Conversion between content line numbers and physical line indices.

Content lines are what a user sees: 1-based, frontmatter excluded. Physical
lines are what the file holds: 0-based, frontmatter included. The frontmatter
line count is the only conversion constant and is recomputed from the content
on every call.
"""

import re

from .frontmatter import frontmatter_line_count
from .model import ContentLine, PhysicalLine

# Thematic break; shared by the classifier and section detection
SEPARATOR_RE = re.compile(r"^(?:---+|\*\*\*+|___+)$")


def count_indent_level(line: str) -> int:
    """Tabs count one level each; every two leading spaces count one level."""
    tabs = 0
    spaces = 0
    for ch in line:
        if ch == "\t":
            tabs += 1
        elif ch == " ":
            spaces += 1
        else:
            break
    return tabs + spaces // 2


def split_lines(content: str) -> list[str]:
    return content.split("\n")


def join_lines(lines: list[str]) -> str:
    return "\n".join(lines)


def to_physical(content: str, line: ContentLine) -> PhysicalLine:
    return PhysicalLine(frontmatter_line_count(content) + line - 1)


def to_content(content: str, index: PhysicalLine) -> ContentLine | None:
    """Inverse of to_physical; None for indices inside the frontmatter block."""
    offset = frontmatter_line_count(content)
    if index < offset:
        return None
    return ContentLine(index - offset + 1)


def content_line_count(content: str) -> int:
    return len(split_lines(content)) - frontmatter_line_count(content)
