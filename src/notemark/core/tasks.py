"""Task extraction, task line construction and in-place task updates."""

import re
from collections.abc import Iterable

from .editor import insert_at
from .errors import LineIndexError, NotATaskError, ValidationError
from .lines import count_indent_level, join_lines, split_lines
from .model import (
    DEFAULT_MARKERS,
    STATUS_BY_CHAR,
    STATUS_MARKERS,
    InsertOptions,
    ParagraphType,
    PhysicalLine,
    Position,
    Task,
    TaskMarkerConfig,
    TaskStatus,
)

TAG_RE = re.compile(r"#[\w/-]+")
MENTION_RE = re.compile(r"@[\w-]+")
SCHEDULED_DATE_RE = re.compile(r">(\d{4}-\d{2}-\d{2})")
PRIORITY_RE = re.compile(r"(!{1,3})(?!\w)")

CHECKBOX_RE = re.compile(r"^(\s*)([*+-])\s*\[(.)\]\s*(.*)$")
PLAIN_TASK_RE = re.compile(r"^(\s*)([*-])\s+(.+)$")

# Prefixes kept verbatim by update_content
CHECKBOX_PREFIX_RE = re.compile(r"^(\s*[*+-]\s*\[.\]\s*)")
PLAIN_PREFIX_RE = re.compile(r"^(\s*[*+-]\s+)")
# The bracket of an existing checkbox, split around its status character
CHECKBOX_BRACKET_RE = re.compile(r"^(\s*[*+-]\s*\[)(.)(\])")
PLAIN_MARKER_RE = re.compile(r"^(\s*)([*+-])\s+(.*)$")

RAW_MARKER_RE = re.compile(r"^\s*[*+-](?:\s*\[.\]\s*|\s+)")


def extract_tags(text: str) -> list[str]:
    return TAG_RE.findall(text)


def extract_mentions(text: str) -> list[str]:
    return MENTION_RE.findall(text)


def extract_scheduled_date(text: str) -> str | None:
    m = SCHEDULED_DATE_RE.search(text)
    return m.group(1) if m else None


def extract_priority(text: str) -> int | None:
    """
    Priority from a run of 1-3 ``!`` not followed by a word character.

    ``"Buy milk !!"`` is 2 and so is ``"Buy milk!!"``; ``"!important"`` has
    no priority.
    """
    m = PRIORITY_RE.search(text)
    return len(m.group(1)) if m else None


def strip_raw_markers(text: str) -> str:
    """Drop a list marker and checkbox echoed at the start of ``text``."""
    return RAW_MARKER_RE.sub("", text, count=1)


def parse_task_line(
    line: str, line_index: PhysicalLine, config: TaskMarkerConfig | None = None
) -> Task | None:
    config = config or DEFAULT_MARKERS

    m = CHECKBOX_RE.match(line)
    if m:
        indent, marker, status_char, content = m.groups()
        status = STATUS_BY_CHAR.get(status_char)
        if status is None:
            return None
        return _task(line, line_index, indent, marker, content, status, True)

    m = PLAIN_TASK_RE.match(line)
    if m and config.is_task_marker(m.group(2)):
        indent, marker, content = m.groups()
        return _task(line, line_index, indent, marker, content, "open", False)

    return None


def _task(
    line: str,
    line_index: PhysicalLine,
    indent: str,
    marker: str,
    content: str,
    status: str,
    has_checkbox: bool,
) -> Task:
    return Task(
        line_index=line_index,
        content=content.strip(),
        raw_line=line,
        status=status,  # type: ignore[arg-type]
        indent_level=count_indent_level(indent),
        has_checkbox=has_checkbox,
        marker=marker,
        tags=extract_tags(content),
        mentions=extract_mentions(content),
        scheduled_date=extract_scheduled_date(content),
        priority=extract_priority(content),
    )


def parse_tasks(content: str, config: TaskMarkerConfig | None = None) -> list[Task]:
    """All task lines of a note, indexed by physical line."""
    tasks = []
    for i, line in enumerate(split_lines(content)):
        task = parse_task_line(line, PhysicalLine(i), config)
        if task:
            tasks.append(task)
    return tasks


def filter_tasks_by_status(
    tasks: list[Task], status: str | Iterable[str] | None = None
) -> list[Task]:
    if not status:
        return tasks
    statuses = {status} if isinstance(status, str) else set(status)
    return [t for t in tasks if t.status in statuses]


def _check_status(status: str) -> None:
    if status not in STATUS_MARKERS:
        raise ValidationError(
            f"Unknown task status: {status!r} (expected one of {', '.join(STATUS_MARKERS)})"
        )


def build_line(
    content: str,
    type: ParagraphType,
    *,
    heading_level: int | None = None,
    task_status: TaskStatus | None = None,
    indent_level: int | None = None,
    priority: int | None = None,
    has_checkbox: bool | None = None,
    config: TaskMarkerConfig | None = None,
) -> str:
    """Build the markdown line a paragraph of ``type`` should contain."""
    config = config or DEFAULT_MARKERS
    indent = "\t" * (indent_level or 0)
    priority_suffix = " " + "!" * priority if priority else ""

    if type in ("title", "heading"):
        level = heading_level or (1 if type == "title" else 2)
        return f"{'#' * level} {content}"

    if type == "task":
        content = strip_raw_markers(content)
        status = task_status or "open"
        _check_status(status)
        marker = config.todo_character
        want_checkbox = config.checkbox_default if has_checkbox is None else has_checkbox
        # A bare marker can only express an open task.
        if want_checkbox or status != "open":
            return f"{indent}{marker} {STATUS_MARKERS[status]} {content}{priority_suffix}"
        return f"{indent}{marker} {content}{priority_suffix}"

    if type == "checklist":
        content = strip_raw_markers(content)
        status = task_status or "open"
        _check_status(status)
        want_checkbox = True if has_checkbox is None else has_checkbox
        if want_checkbox or status != "open":
            return f"{indent}+ {STATUS_MARKERS[status]} {content}{priority_suffix}"
        return f"{indent}+ {content}{priority_suffix}"

    if type == "bullet":
        return f"{indent}- {strip_raw_markers(content)}"
    if type == "quote":
        return f"> {content}"
    if type == "separator":
        return "---"
    if type == "empty":
        return ""
    return content


def _target_line(lines: list[str], line_index: PhysicalLine) -> str:
    if line_index < 0 or line_index >= len(lines):
        raise LineIndexError(line_index, len(lines))
    return lines[line_index]


def update_status(content: str, line_index: PhysicalLine, new_status: TaskStatus) -> str:
    """Set the status of the task on physical line ``line_index``.

    A checkbox line only has its bracket character replaced; a bare marker line
    gains a checkbox after its original marker.
    """
    _check_status(new_status)
    lines = split_lines(content)
    line = _target_line(lines, line_index)
    status_char = STATUS_MARKERS[new_status][1]

    m = CHECKBOX_BRACKET_RE.match(line)
    if m:
        lines[line_index] = m.group(1) + status_char + m.group(3) + line[m.end() :]
        return join_lines(lines)

    m = PLAIN_MARKER_RE.match(line)
    if m:
        indent, marker, rest = m.groups()
        lines[line_index] = f"{indent}{marker} {STATUS_MARKERS[new_status]} {rest}"
        return join_lines(lines)

    raise NotATaskError(line_index, line)


def update_content(content: str, line_index: PhysicalLine, new_text: str) -> str:
    """Replace the text of a task, keeping its marker and checkbox untouched."""
    lines = split_lines(content)
    line = _target_line(lines, line_index)
    new_text = strip_raw_markers(new_text)

    for prefix_re in (CHECKBOX_PREFIX_RE, PLAIN_PREFIX_RE):
        m = prefix_re.match(line)
        if m:
            lines[line_index] = m.group(1) + new_text
            return join_lines(lines)

    raise NotATaskError(line_index, line)


def add_task(
    content: str,
    text: str,
    position: Position = "end",
    heading: str | None = None,
    *,
    status: TaskStatus | None = None,
    priority: int | None = None,
    indent_level: int | None = None,
    config: TaskMarkerConfig | None = None,
) -> str:
    """Add a task line formatted with the configured marker style."""
    task_line = build_line(
        text,
        "task",
        task_status=status,
        priority=priority,
        indent_level=indent_level,
        config=config,
    )
    return insert_at(content, task_line, InsertOptions(position=position, heading=heading))
