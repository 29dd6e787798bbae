from ..config import PreferencesConfig
from ..core.model import TaskMarkerConfig
from ..core.ports import PreferencesProvider


class StaticPreferences(PreferencesProvider):
    """Preferences read once from configuration."""

    def __init__(self, config: PreferencesConfig):
        self.config = config

    def task_markers(self) -> TaskMarkerConfig:
        return self.config.task_markers

    def first_day_of_week(self) -> int:
        return self.config.first_day_of_week
