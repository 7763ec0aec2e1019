from .settings import (
    InferenceSettings,
    ScoringSettings,
    load_settings,
    save_settings,
    settings_path,
)

__all__ = [
    "InferenceSettings",
    "ScoringSettings",
    "load_settings",
    "save_settings",
    "settings_path",
]
