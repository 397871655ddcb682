"""Storage module for LifeQuest persistence.

Provides:
- SQLite key-value store for save data
- Save manager with backup, quota recovery, export and import
- Debounced saver that coalesces rapid writes
"""

from lifequest.storage.database import KeyValueStore, StoredValue, get_store
from lifequest.storage.debounce import DebouncedSaver
from lifequest.storage.save_manager import SaveManager, serialize_state, trim_journal

__all__ = [
    "KeyValueStore",
    "StoredValue",
    "get_store",
    "DebouncedSaver",
    "SaveManager",
    "serialize_state",
    "trim_journal",
]
