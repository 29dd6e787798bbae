from pathlib import Path
from typing import Iterable

from ..core.frontmatter import extract_title
from ..core.ports import NoteStore, StoredNote


class FsNoteStore(NoteStore):
    """Notes as files under one root; filenames are root-relative POSIX paths."""

    def __init__(self, root: Path, extension: str = ".md"):
        self.root = root
        self.extension = extension

    def _path(self, filename: str) -> Path:
        if not filename.endswith(self.extension):
            filename += self.extension
        root = self.root.resolve()
        p = (root / filename).resolve()
        if not p.is_relative_to(root):
            raise ValueError(f"Note path escapes store root: {filename}")
        return p

    def _filename(self, p: Path) -> str:
        return p.relative_to(self.root.resolve()).as_posix()

    def get(self, ref: str) -> StoredNote | None:
        p = self._path(ref)
        if not p.is_file():
            return None
        content = p.read_text(encoding="utf-8")
        return StoredNote(
            filename=self._filename(p),
            content=content,
            title=extract_title(content),
        )

    def save(self, filename: str, content: str) -> None:
        p = self._path(filename)
        p.parent.mkdir(parents=True, exist_ok=True)
        # Atomic write using temp file
        tmp_path = p.with_name(p.name + ".tmp")
        try:
            tmp_path.write_text(content, encoding="utf-8")
            tmp_path.replace(p)
        except Exception:
            if tmp_path.exists():
                tmp_path.unlink()
            raise

    def list(self, folder: str | None = None) -> Iterable[str]:
        base = self.root.resolve()
        if folder:
            base = (base / folder).resolve()
            if not base.is_relative_to(self.root.resolve()):
                raise ValueError(f"Folder escapes store root: {folder}")
        if not base.exists():
            return []
        return sorted(self._filename(p) for p in base.rglob(f"*{self.extension}"))
