"""Exceptions raised by the note content core."""


class NoteEditError(Exception):
    """Base class for every failure raised by the core."""


class ValidationError(NoteEditError, ValueError):
    """A request argument is out of range or missing."""


class InvalidLineRangeError(ValidationError):
    def __init__(self, start_line: int, end_line: int, detail: str | None = None):
        self.start_line = start_line
        self.end_line = end_line
        msg = f"Invalid line range: {start_line}-{end_line}"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)


class LineIndexError(ValidationError, IndexError):
    def __init__(self, line_index: int, line_count: int):
        self.line_index = line_index
        self.line_count = line_count
        super().__init__(
            f"Invalid line index: {line_index} (note has {line_count} lines)"
        )


class MissingOptionError(ValidationError):
    pass


class UnknownPositionError(ValidationError):
    def __init__(self, position: str):
        self.position = position
        super().__init__(f"Unknown position: {position}")


class NotFoundError(NoteEditError, LookupError):
    """Something the caller referred to does not exist in the note."""


class HeadingNotFoundError(NotFoundError):
    def __init__(self, heading: str, available: list[str]):
        self.heading = heading
        self.available = available
        msg = f'Heading "{heading}" not found.'
        if available:
            msg += " Available headings: " + ", ".join(f'"{h}"' for h in available)
        else:
            msg += " Available headings: none"
        super().__init__(msg)


class NotATaskError(NotFoundError):
    def __init__(self, line_index: int, line: str):
        self.line_index = line_index
        self.line = line
        super().__init__(f"Line {line_index} is not a task: {line!r}")
