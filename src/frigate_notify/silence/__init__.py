"""
Camera silencing: the guard that suppresses notifications while a camera
is silenced, the updater that extends the window after a notification,
and the stores that persist the table.
"""

from .store import (
    FileSilenceStore,
    HomeAssistantSilenceStore,
    MemorySilenceStore,
    SilenceStore,
)
from .table import (
    SilenceTable,
    SilenceUpdate,
    check_silence,
    parse_silence_table,
    plan_silence_update,
)

__all__ = [
    # Stores
    "FileSilenceStore",
    "HomeAssistantSilenceStore",
    "MemorySilenceStore",
    "SilenceStore",
    # Table
    "SilenceTable",
    "SilenceUpdate",
    "check_silence",
    "parse_silence_table",
    "plan_silence_update",
]
