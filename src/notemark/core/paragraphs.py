"""Line classification into typed paragraphs.

``classify`` walks an ordered table of rules and returns the first match.
The order matters: earlier rules shadow later ones (a separator is never a
bullet, the first body line is always a title), so new rules must be slotted
in deliberately rather than appended.
"""

import re
from collections.abc import Callable, Collection

from .frontmatter import frontmatter_line_count
from .lines import SEPARATOR_RE, count_indent_level, split_lines
from .model import (
    DEFAULT_MARKERS,
    STATUS_BY_CHAR,
    ContentLine,
    Heading,
    Paragraph,
    ParagraphMetadata,
    ParagraphType,
    PhysicalLine,
    TaskMarkerConfig,
)
from .tasks import (
    CHECKBOX_RE,
    extract_mentions,
    extract_priority,
    extract_scheduled_date,
    extract_tags,
)

HEADING_RE = re.compile(r"^(#{1,6})\s+(.+)$")
QUOTE_RE = re.compile(r"^>\s?")
PLAIN_MARKER_RE = re.compile(r"^(\s*)([*+-])\s+(.+)$")

Rule = Callable[[str, str, bool, TaskMarkerConfig], ParagraphMetadata | None]


def content_meta(meta: ParagraphMetadata, text: str) -> ParagraphMetadata:
    """Fill tags, mentions, scheduled date and priority from ``text``."""
    meta.content = text
    meta.tags = extract_tags(text)
    meta.mentions = extract_mentions(text)
    meta.scheduled_date = extract_scheduled_date(text)
    meta.priority = extract_priority(text)
    return meta


def _marker_line(
    type: ParagraphType,
    indent: str,
    marker: str,
    text: str,
    has_checkbox: bool,
    status: str | None = None,
) -> ParagraphMetadata:
    meta = ParagraphMetadata(
        type=type,
        indent_level=count_indent_level(indent),
        marker=marker,
        has_checkbox=has_checkbox,
        task_status=status,  # type: ignore[arg-type]
    )
    return content_meta(meta, text)


def _empty(line, trimmed, is_first_line, config):
    if trimmed == "":
        return ParagraphMetadata(type="empty")
    return None


def _separator(line, trimmed, is_first_line, config):
    if SEPARATOR_RE.match(trimmed):
        return ParagraphMetadata(type="separator")
    return None


def _heading(line, trimmed, is_first_line, config):
    m = HEADING_RE.match(trimmed)
    if not m:
        return None
    meta = ParagraphMetadata(
        type="title" if is_first_line else "heading",
        heading_level=len(m.group(1)),
    )
    return content_meta(meta, m.group(2))


def _first_line_title(line, trimmed, is_first_line, config):
    if not is_first_line:
        return None
    return ParagraphMetadata(
        type="title",
        heading_level=1,
        content=trimmed,
        tags=extract_tags(trimmed),
        mentions=extract_mentions(trimmed),
    )


def _quote(line, trimmed, is_first_line, config):
    if not trimmed.startswith(">"):
        return None
    text = QUOTE_RE.sub("", trimmed, count=1)
    return ParagraphMetadata(
        type="quote",
        content=text,
        tags=extract_tags(text),
        mentions=extract_mentions(text),
        scheduled_date=extract_scheduled_date(text),
    )


def _checkbox(line, trimmed, is_first_line, config):
    m = CHECKBOX_RE.match(line)
    if not m:
        return None
    indent, marker, status_char, text = m.groups()
    status = STATUS_BY_CHAR.get(status_char)
    if status is None:
        # unknown bracket character: not a checkbox, let the plain rule decide
        return None
    type = "checklist" if marker == "+" else "task"
    return _marker_line(type, indent, marker, text, True, status)


def _plain_marker(line, trimmed, is_first_line, config):
    m = PLAIN_MARKER_RE.match(line)
    if not m:
        return None
    indent, marker, text = m.groups()
    if marker == "+":
        return _marker_line("checklist", indent, marker, text, False)
    if config.is_task_marker(marker):
        return _marker_line("task", indent, marker, text, False, "open")
    return _marker_line("bullet", indent, marker, text, False)


def _text(line, trimmed, is_first_line, config):
    meta = ParagraphMetadata(type="text", indent_level=count_indent_level(line))
    return content_meta(meta, trimmed)


RULES: tuple[tuple[str, Rule], ...] = (
    ("empty", _empty),
    ("separator", _separator),
    ("heading", _heading),
    ("first-line-title", _first_line_title),
    ("quote", _quote),
    ("checkbox", _checkbox),
    ("plain-marker", _plain_marker),
    ("text", _text),
)


def classify(
    line: str,
    line_index: int,
    is_first_line: bool,
    config: TaskMarkerConfig | None = None,
) -> ParagraphMetadata:
    """
    Classify a single physical line.

    ``is_first_line`` must be decided by the caller, which knows where the
    body starts after frontmatter. ``line_index`` is informational only.
    """
    config = config or DEFAULT_MARKERS
    trimmed = line.strip()
    for _name, rule in RULES[:-1]:
        meta = rule(line, trimmed, is_first_line, config)
        if meta is not None:
            return meta
    return _text(line, trimmed, is_first_line, config)


def parse_paragraphs(
    content: str, config: TaskMarkerConfig | None = None
) -> list[Paragraph]:
    """Classify every body line; frontmatter lines are not paragraphs."""
    lines = split_lines(content)
    offset = frontmatter_line_count(content)
    paragraphs = []
    for i in range(offset, len(lines)):
        paragraphs.append(
            Paragraph(
                line_index=PhysicalLine(i),
                line=ContentLine(i - offset + 1),
                raw=lines[i],
                meta=classify(lines[i], i, i == offset, config),
            )
        )
    return paragraphs


def search_paragraphs(
    content: str,
    query: str,
    config: TaskMarkerConfig | None = None,
    types: Collection[str] | None = None,
) -> list[Paragraph]:
    """Paragraphs whose raw line contains ``query`` (case-insensitive)."""
    needle = query.casefold()
    return [
        p
        for p in parse_paragraphs(content, config)
        if needle in p.raw.casefold() and (not types or p.meta.type in types)
    ]


def extract_headings(content: str) -> list[Heading]:
    headings = []
    for i, line in enumerate(split_lines(content)):
        m = HEADING_RE.match(line)
        if m:
            headings.append(
                Heading(
                    level=len(m.group(1)),
                    text=m.group(2).strip(),
                    line_index=PhysicalLine(i),
                )
            )
    return headings
