
from .core import (
    DEFAULT_OUTPUT_FILE,
    DEFAULT_VERIFY_FILE,
    ExportOptions,
    LoggingSettings,
    Settings,
    load_settings,
)

__all__ = [
    "DEFAULT_OUTPUT_FILE",
    "DEFAULT_VERIFY_FILE",
    "ExportOptions",
    "LoggingSettings",
    "Settings",
    "load_settings",
]
