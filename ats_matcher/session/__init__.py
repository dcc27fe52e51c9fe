from .history import HISTORY_CAPACITY, HistoryLedger
from .manager import HISTORY_KEY, JOB_DESCRIPTION_KEY, RESUME_KEY, SessionStateManager
from .storage import InMemoryStore, KeyValueStore, SqliteStore

__all__ = [
    "HISTORY_CAPACITY",
    "HISTORY_KEY",
    "JOB_DESCRIPTION_KEY",
    "RESUME_KEY",
    "HistoryLedger",
    "InMemoryStore",
    "KeyValueStore",
    "SessionStateManager",
    "SqliteStore",
]
