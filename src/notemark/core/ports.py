from dataclasses import dataclass
from typing import Iterable, Protocol

from .model import TaskMarkerConfig


@dataclass
class StoredNote:
    filename: str
    content: str
    title: str


class NoteStore(Protocol):
    """
    Owns the raw note text. The core never touches storage; callers read,
    transform and save whole files.
    """

    def get(self, ref: str) -> StoredNote | None:
        pass

    def list(self, folder: str | None = None) -> Iterable[str]:
        pass

    def save(self, filename: str, content: str) -> None:
        pass


class PreferencesProvider(Protocol):
    """
    Read-only user preferences, injected into classifier and builder calls.
    """

    def task_markers(self) -> TaskMarkerConfig:
        pass

    def first_day_of_week(self) -> int:
        pass
