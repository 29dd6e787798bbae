"""Configuration loader for notemark.toml."""

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .core.model import TaskMarkerConfig

CONFIG_FILENAME = "notemark.toml"


def from_nsweekday(value: int) -> int:
    """Convert 1=Sunday..7=Saturday to 0=Sunday..6=Saturday."""
    return (value - 1) % 7


@dataclass
class StoreConfig:
    """Note store configuration."""
    root: Path
    extension: str = ".md"


@dataclass
class PreferencesConfig:
    """User preferences injected into parsing and line building."""
    task_markers: TaskMarkerConfig = field(default_factory=TaskMarkerConfig)
    first_day_of_week: int = 1  # 0=Sunday


@dataclass
class GuardConfig:
    """Confirmation token settings for destructive operations."""
    ttl_seconds: int = 600


@dataclass
class ServerConfig:
    """Local JSON API settings."""
    host: str = "127.0.0.1"
    port: int = 8765


@dataclass
class NotemarkConfig:
    """Complete notemark configuration."""
    store: StoreConfig
    preferences: PreferencesConfig
    guard: GuardConfig
    server: ServerConfig


def _task_markers(prefs: dict[str, Any]) -> TaskMarkerConfig:
    default_char = prefs.get("default_todo_character", "*")
    if default_char not in ("*", "-"):
        raise ValueError(
            f"default_todo_character must be '*' or '-', got {default_char!r}"
        )
    return TaskMarkerConfig(
        is_asterisk_todo=prefs.get("asterisk_todo", True),
        is_dash_todo=prefs.get("dash_todo", False),
        default_todo_character=default_char,
        use_checkbox=prefs.get("use_checkbox"),
    )


def load_config(config_path: Path | None = None, root: Path | None = None) -> NotemarkConfig:
    """
    Load configuration from notemark.toml.

    Search order:
    1. config_path (if provided)
    2. cwd/notemark.toml
    3. root/notemark.toml

    Args:
        config_path: Explicit path to config file
        root: Notes root directory for fallback search

    Returns:
        NotemarkConfig with resolved settings
    """
    toml_data: dict[str, Any] = {}

    search_paths = []
    if config_path:
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / CONFIG_FILENAME)
    if root:
        search_paths.append(root / CONFIG_FILENAME)

    for path in search_paths:
        if path.exists():
            with open(path, "rb") as f:
                toml_data = tomllib.load(f)
            break

    store_data = toml_data.get("store", {})
    store_config = StoreConfig(
        root=Path(store_data.get("root", root or Path("./notes"))),
        extension=store_data.get("extension", ".md"),
    )

    prefs_data = toml_data.get("preferences", {})
    if "ns_first_day_of_week" in prefs_data:
        # Host application numbering, 1=Sunday..7=Saturday
        ns_day = prefs_data["ns_first_day_of_week"]
        if not 1 <= ns_day <= 7:
            raise ValueError(f"ns_first_day_of_week must be 1-7, got {ns_day}")
        first_day = from_nsweekday(ns_day)
    else:
        first_day = prefs_data.get("first_day_of_week", 1)
    if not 0 <= first_day <= 6:
        raise ValueError(f"first_day_of_week must be 0-6, got {first_day}")
    prefs_config = PreferencesConfig(
        task_markers=_task_markers(prefs_data),
        first_day_of_week=first_day,
    )

    guard_data = toml_data.get("guard", {})
    guard_config = GuardConfig(ttl_seconds=guard_data.get("ttl_seconds", 600))

    server_data = toml_data.get("server", {})
    server_config = ServerConfig(
        host=server_data.get("host", "127.0.0.1"),
        port=server_data.get("port", 8765),
    )

    return NotemarkConfig(
        store=store_config,
        preferences=prefs_config,
        guard=guard_config,
        server=server_config,
    )
