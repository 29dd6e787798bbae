from __future__ import annotations
from dataclasses import dataclass, field
from typing import Literal, NewType

TaskStatus = Literal["open", "done", "cancelled", "scheduled"]
ParagraphType = Literal[
    "title",
    "heading",
    "task",
    "checklist",
    "bullet",
    "quote",
    "separator",
    "text",
    "empty",
]
Position = Literal["start", "end", "after-heading", "at-line", "in-section"]

# 1-based, frontmatter excluded (what users see)
ContentLine = NewType("ContentLine", int)
# 0-based, frontmatter included (what the file holds)
PhysicalLine = NewType("PhysicalLine", int)

TASK_STATUSES: tuple[TaskStatus, ...] = ("open", "done", "cancelled", "scheduled")
PARAGRAPH_TYPES: tuple[ParagraphType, ...] = (
    "title",
    "heading",
    "task",
    "checklist",
    "bullet",
    "quote",
    "separator",
    "text",
    "empty",
)

STATUS_MARKERS: dict[str, str] = {
    "open": "[ ]",
    "done": "[x]",
    "cancelled": "[-]",
    "scheduled": "[>]",
}

STATUS_BY_CHAR: dict[str, str] = {
    " ": "open",
    "x": "done",
    "-": "cancelled",
    ">": "scheduled",
}


@dataclass(frozen=True)
class TaskMarkerConfig:
    """Which list markers mean "to-do" and how new tasks are written.

    Mirrors the host application's preferences: when both or neither marker is
    a to-do marker, the default character decides; checkbox style is used
    when neither marker alone denotes a task, unless set explicitly.
    """

    is_asterisk_todo: bool = True
    is_dash_todo: bool = False
    default_todo_character: str = "*"
    use_checkbox: bool | None = None

    @property
    def checkbox_default(self) -> bool:
        if self.use_checkbox is not None:
            return self.use_checkbox
        return not self.is_asterisk_todo and not self.is_dash_todo

    @property
    def todo_character(self) -> str:
        if self.is_asterisk_todo and not self.is_dash_todo:
            return "*"
        if self.is_dash_todo and not self.is_asterisk_todo:
            return "-"
        return self.default_todo_character

    @property
    def task_prefix(self) -> str:
        if self.checkbox_default:
            return f"{self.todo_character} [ ] "
        return f"{self.todo_character} "

    def is_task_marker(self, char: str) -> bool:
        """Whether a bare ``char`` marker (no checkbox) denotes an open task."""
        if char == "*":
            return self.is_asterisk_todo
        if char == "-":
            return self.is_dash_todo
        return False


DEFAULT_MARKERS = TaskMarkerConfig()


@dataclass
class ParsedNote:
    frontmatter: dict[str, str] | None
    body: str
    has_frontmatter: bool


@dataclass
class ParagraphMetadata:
    type: ParagraphType
    indent_level: int = 0
    content: str = ""
    heading_level: int | None = None
    marker: str | None = None  # "*", "-" or "+"
    has_checkbox: bool | None = None
    task_status: TaskStatus | None = None
    tags: list[str] = field(default_factory=list)
    mentions: list[str] = field(default_factory=list)
    scheduled_date: str | None = None
    priority: int | None = None


@dataclass
class Paragraph:
    line_index: PhysicalLine
    line: ContentLine
    raw: str
    meta: ParagraphMetadata


@dataclass
class Task:
    line_index: PhysicalLine
    content: str
    raw_line: str
    status: TaskStatus
    indent_level: int
    has_checkbox: bool
    marker: str
    tags: list[str] = field(default_factory=list)
    mentions: list[str] = field(default_factory=list)
    scheduled_date: str | None = None
    priority: int | None = None


@dataclass(frozen=True)
class Heading:
    level: int
    text: str
    line_index: PhysicalLine


@dataclass(frozen=True)
class InsertOptions:
    position: Position
    heading: str | None = None
    line: ContentLine | None = None
