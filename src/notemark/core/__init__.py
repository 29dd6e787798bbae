"""Line-addressable markdown note content: parsing and structural editing."""

from .editor import delete_lines, edit_line, insert_at, replace_lines
from .frontmatter import (
    frontmatter_line_count,
    parse_note,
    reconstruct_note,
    remove_property,
    serialize_frontmatter,
    set_property,
)
from .model import InsertOptions, TaskMarkerConfig
from .paragraphs import classify, parse_paragraphs
from .tasks import add_task, build_line, parse_tasks, update_content, update_status

__all__ = [
    "InsertOptions",
    "TaskMarkerConfig",
    "add_task",
    "build_line",
    "classify",
    "delete_lines",
    "edit_line",
    "frontmatter_line_count",
    "insert_at",
    "parse_note",
    "parse_paragraphs",
    "parse_tasks",
    "reconstruct_note",
    "remove_property",
    "replace_lines",
    "serialize_frontmatter",
    "set_property",
    "update_content",
    "update_status",
]
