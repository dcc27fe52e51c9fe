from __future__ import annotations

from collections.abc import Iterable, Iterator

from ats_matcher.schemas.analysis import HistoryEntry

HISTORY_CAPACITY = 10


class HistoryLedger:
    """Most-recent-first record of past analyses, bounded by ``capacity``.

    Ledgers are values: ``append`` and ``clear`` return new ledgers and
    leave the receiver untouched.
    """

    __slots__ = ("_entries", "_capacity")

    def __init__(self, entries: Iterable[HistoryEntry] = (), capacity: int = HISTORY_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("History capacity must be at least 1.")
        self._capacity = capacity
        self._entries: tuple[HistoryEntry, ...] = tuple(entries)[:capacity]

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def entries(self) -> tuple[HistoryEntry, ...]:
        return self._entries

    @property
    def latest(self) -> HistoryEntry | None:
        return self._entries[0] if self._entries else None

    def append(self, entry: HistoryEntry) -> HistoryLedger:
        return HistoryLedger((entry, *self._entries), capacity=self._capacity)

    def clear(self) -> HistoryLedger:
        return HistoryLedger((), capacity=self._capacity)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HistoryLedger):
            return NotImplemented
        return self._entries == other._entries and self._capacity == other._capacity

    def __repr__(self) -> str:
        return f"HistoryLedger(size={len(self._entries)}, capacity={self._capacity})"
