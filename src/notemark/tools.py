"""Agent-facing note operations.

Each operation reads the current note from the store, runs one core
transform, saves the result and answers a JSON-ready dict. Core failures are
reported as ``{"success": False, "error": ...}`` rather than raised, so an
agent can correct its request without a second lookup.
"""

import functools
import logging
from dataclasses import asdict
from typing import Any, Callable

from .core import editor, frontmatter, paragraphs, tasks
from .core.errors import MissingOptionError, NoteEditError, NotFoundError, ValidationError
from .core.lines import content_line_count
from .core.model import ContentLine, InsertOptions, Paragraph, PhysicalLine, Task
from .core.ports import NoteStore, PreferencesProvider, StoredNote
from .guard import ConfirmationGuard

logger = logging.getLogger(__name__)


class NoteNotFoundError(NotFoundError):
    def __init__(self, ref: str):
        self.ref = ref
        super().__init__(f"Note not found: {ref}")


def _tool(method: Callable[..., dict[str, Any]]) -> Callable[..., dict[str, Any]]:
    @functools.wraps(method)
    def wrapper(self: "NoteTools", *args: Any, **kwargs: Any) -> dict[str, Any]:
        try:
            return method(self, *args, **kwargs)
        except (NoteEditError, ValueError, OSError) as e:
            logger.debug("%s failed: %s", method.__name__, e)
            return {"success": False, "error": str(e)}

    return wrapper


def paragraph_to_dict(p: Paragraph) -> dict[str, Any]:
    item: dict[str, Any] = {"line": p.line, "line_index": p.line_index, "raw": p.raw}
    item.update({k: v for k, v in asdict(p.meta).items() if v is not None})
    return item


def task_to_dict(t: Task) -> dict[str, Any]:
    return {k: v for k, v in asdict(t).items() if v is not None}


class NoteTools:
    def __init__(
        self,
        store: NoteStore,
        preferences: PreferencesProvider,
        guard: ConfirmationGuard | None = None,
    ):
        self.store = store
        self.preferences = preferences
        self.guard = guard

    def _load(self, filename: str) -> StoredNote:
        note = self.store.get(filename)
        if note is None:
            raise NoteNotFoundError(filename)
        return note

    def _save(self, note: StoredNote, content: str) -> None:
        self.store.save(note.filename, content)

    def _confirm(
        self, token: str | None, tool: str, target: str, action: str
    ) -> dict[str, Any] | None:
        """None when allowed to proceed, else the failure response."""
        if self.guard is None:
            return None
        result = self.guard.consume(token, tool, target, action)
        if result.ok:
            return None
        return {
            "success": False,
            "error": (
                f"Confirmation token {result.reason}. "
                "Call again with dry_run=true to get a fresh confirmation_token."
            ),
        }

    def _preview(self, tool: str, target: str, action: str, **extra: Any) -> dict[str, Any]:
        response: dict[str, Any] = {"success": True, "dry_run": True, **extra}
        if self.guard is not None:
            confirmation = self.guard.issue(tool, target, action)
            response["confirmation_token"] = confirmation.token
            response["confirmation_expires_at"] = confirmation.expires_at_iso()
        return response

    # --- reading -----------------------------------------------------------

    @_tool
    def get_preferences(self) -> dict[str, Any]:
        """Marker style and week start, so callers can write matching lines."""
        markers = self.preferences.task_markers()
        return {
            "success": True,
            "task_prefix": markers.task_prefix,
            "is_asterisk_todo": markers.is_asterisk_todo,
            "is_dash_todo": markers.is_dash_todo,
            "use_checkbox": markers.checkbox_default,
            "first_day_of_week": self.preferences.first_day_of_week(),
        }

    @_tool
    def get_paragraphs(
        self,
        filename: str,
        start_line: int | None = None,
        end_line: int | None = None,
        offset: int = 0,
        limit: int = 200,
    ) -> dict[str, Any]:
        note = self._load(filename)
        all_paragraphs = paragraphs.parse_paragraphs(
            note.content, self.preferences.task_markers()
        )
        total = len(all_paragraphs)
        start = min(max(start_line or 1, 1), max(total, 1))
        end = min(max(end_line or total, start), max(total, start))
        in_range = all_paragraphs[start - 1 : end]
        offset = max(offset, 0)
        limit = min(max(limit, 1), 1000)
        page = in_range[offset : offset + limit]
        has_more = offset + len(page) < len(in_range)

        return {
            "success": True,
            "note": {"filename": note.filename, "title": note.title},
            "line_count": total,
            "range_start_line": start,
            "range_end_line": end,
            "returned_line_count": len(page),
            "offset": offset,
            "limit": limit,
            "has_more": has_more,
            "next_cursor": offset + len(page) if has_more else None,
            "lines": [paragraph_to_dict(p) for p in page],
        }

    @_tool
    def search_paragraphs(
        self, filename: str, query: str, types: list[str] | None = None
    ) -> dict[str, Any]:
        note = self._load(filename)
        matches = paragraphs.search_paragraphs(
            note.content, query, self.preferences.task_markers(), types
        )
        return {
            "success": True,
            "query": query,
            "count": len(matches),
            "matches": [paragraph_to_dict(p) for p in matches],
        }

    @_tool
    def list_tasks(self, filename: str, status: str | list[str] | None = None) -> dict[str, Any]:
        note = self._load(filename)
        found = tasks.parse_tasks(note.content, self.preferences.task_markers())
        found = tasks.filter_tasks_by_status(found, status)
        return {
            "success": True,
            "count": len(found),
            "tasks": [task_to_dict(t) for t in found],
        }

    # --- tasks -------------------------------------------------------------

    @_tool
    def add_task(
        self,
        filename: str,
        text: str,
        position: str = "end",
        heading: str | None = None,
        status: str | None = None,
        priority: int | None = None,
        indent_level: int | None = None,
    ) -> dict[str, Any]:
        note = self._load(filename)
        content = tasks.add_task(
            note.content,
            text,
            position,  # type: ignore[arg-type]
            heading,
            status=status,  # type: ignore[arg-type]
            priority=priority,
            indent_level=indent_level,
            config=self.preferences.task_markers(),
        )
        self._save(note, content)
        return {"success": True, "message": f"Task added at {position}"}

    @_tool
    def complete_task(self, filename: str, line_index: int) -> dict[str, Any]:
        return self.update_task(filename, line_index, status="done")

    @_tool
    def update_task(
        self,
        filename: str,
        line_index: int,
        text: str | None = None,
        status: str | None = None,
    ) -> dict[str, Any]:
        if text is None and status is None:
            raise MissingOptionError("update_task needs text and/or status")
        note = self._load(filename)
        content = note.content
        index = PhysicalLine(line_index)
        if status is not None:
            content = tasks.update_status(content, index, status)  # type: ignore[arg-type]
        if text is not None:
            content = tasks.update_content(content, index, text)
        self._save(note, content)
        return {
            "success": True,
            "line_index": line_index,
            "line": content.split("\n")[line_index],
        }

    # --- content edits -----------------------------------------------------

    @_tool
    def insert(
        self,
        filename: str,
        text: str,
        position: str,
        heading: str | None = None,
        line: int | None = None,
        type: str | None = None,
    ) -> dict[str, Any]:
        note = self._load(filename)
        if type:
            text = tasks.build_line(text, type, config=self.preferences.task_markers())  # type: ignore[arg-type]
        options = InsertOptions(
            position=position,  # type: ignore[arg-type]
            heading=heading,
            line=None if line is None else ContentLine(line),
        )
        content = editor.insert_at(note.content, text, options)
        self._save(note, content)
        return {"success": True, "message": f"Content inserted at {position}"}

    @_tool
    def delete_lines(
        self,
        filename: str,
        start_line: int,
        end_line: int,
        dry_run: bool = False,
        confirmation_token: str | None = None,
    ) -> dict[str, Any]:
        note = self._load(filename)
        first, last = ContentLine(start_line), ContentLine(end_line)
        action = f"delete {start_line}-{end_line}"
        if dry_run:
            removed = editor.get_lines(note.content, first, last)
            return self._preview(
                "delete_lines", note.filename, action, lines_to_delete=removed
            )
        denied = self._confirm(confirmation_token, "delete_lines", note.filename, action)
        if denied:
            return denied
        content = editor.delete_lines(note.content, first, last)
        self._save(note, content)
        return {
            "success": True,
            "message": f"Lines {start_line}-{end_line} deleted",
            "line_count": content_line_count(content),
        }

    @_tool
    def replace_lines(
        self,
        filename: str,
        start_line: int,
        end_line: int,
        text: str,
        dry_run: bool = False,
        confirmation_token: str | None = None,
    ) -> dict[str, Any]:
        note = self._load(filename)
        first, last = ContentLine(start_line), ContentLine(end_line)
        action = f"replace {start_line}-{end_line}"
        if dry_run:
            replaced = editor.get_lines(note.content, first, last)
            return self._preview(
                "replace_lines", note.filename, action, lines_to_replace=replaced
            )
        denied = self._confirm(confirmation_token, "replace_lines", note.filename, action)
        if denied:
            return denied
        content = editor.replace_lines(note.content, first, last, text)
        self._save(note, content)
        return {"success": True, "message": f"Lines {start_line}-{end_line} replaced"}

    @_tool
    def edit_line(
        self, filename: str, line: int, text: str, allow_empty: bool = False
    ) -> dict[str, Any]:
        if not allow_empty and not text.strip():
            raise ValidationError(
                "Empty line content is blocked for edit_line. "
                "Use delete_lines or set allow_empty=true."
            )
        note = self._load(filename)
        target = ContentLine(line)
        content = editor.edit_line(note.content, target, text)
        original = editor.get_lines(note.content, target, target)[0]
        self._save(note, content)
        return {
            "success": True,
            "message": f"Line {line} updated",
            "original_line": original,
            "new_line": text,
        }

    # --- frontmatter -------------------------------------------------------

    @_tool
    def get_properties(self, filename: str) -> dict[str, Any]:
        note = self._load(filename)
        return {
            "success": True,
            "frontmatter": frontmatter.parse_note(note.content).frontmatter or {},
        }

    @_tool
    def set_property(self, filename: str, key: str, value: str) -> dict[str, Any]:
        note = self._load(filename)
        self._save(note, frontmatter.set_property(note.content, key, value))
        return {"success": True, "message": f'Property "{key}" set to "{value}"'}

    @_tool
    def remove_property(self, filename: str, key: str) -> dict[str, Any]:
        note = self._load(filename)
        self._save(note, frontmatter.remove_property(note.content, key))
        return {"success": True, "message": f'Property "{key}" removed'}
