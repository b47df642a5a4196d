from itinerary_editor.configs.settings import (
    MAX_ACTIVITIES_PER_DAY,
    MAX_DAYS,
    EditorConfig,
    Settings,
    file_logger,
    settings,
)

__all__ = [
    "EditorConfig",
    "MAX_ACTIVITIES_PER_DAY",
    "MAX_DAYS",
    "Settings",
    "file_logger",
    "settings",
]
