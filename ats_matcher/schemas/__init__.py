from .analysis import (
    Document,
    DocumentInput,
    FileInput,
    HistoryEntry,
    MatchLevel,
    ScoringResult,
    SessionState,
    TextInput,
)

__all__ = [
    "Document",
    "DocumentInput",
    "TextInput",
    "FileInput",
    "MatchLevel",
    "ScoringResult",
    "HistoryEntry",
    "SessionState",
]
