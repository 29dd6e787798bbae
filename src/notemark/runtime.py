"""Runtime wiring helper for CLI and server entry points."""

from dataclasses import dataclass
from pathlib import Path

from .adapters.fs_store import FsNoteStore
from .adapters.preferences import StaticPreferences
from .config import NotemarkConfig, load_config
from .guard import ConfirmationGuard
from .tools import NoteTools


@dataclass
class Runtime:
    """Container for all wired components."""
    store: FsNoteStore
    preferences: StaticPreferences
    guard: ConfirmationGuard
    tools: NoteTools
    config: NotemarkConfig


def build_runtime(
    root: Path | None = None,
    config_path: Path | None = None,
    guarded: bool = True,
) -> Runtime:
    """Build and wire all components for a notes directory."""
    config = load_config(config_path=config_path, root=root)

    if root is None:
        root = config.store.root

    store = FsNoteStore(root, extension=config.store.extension)
    preferences = StaticPreferences(config.preferences)
    guard = ConfirmationGuard(ttl_seconds=config.guard.ttl_seconds)
    tools = NoteTools(store, preferences, guard if guarded else None)

    return Runtime(
        store=store,
        preferences=preferences,
        guard=guard,
        tools=tools,
        config=config,
    )
