"""Session history of completed try-on runs."""

from collections import deque
from typing import Iterator

from ..models.history import HistoryEntry
from ..models.image import EncodedImage


class HistoryStore:
    """Append-only log of try-on results, newest first.

    Entries live for the whole session; there is no eviction.
    """

    def __init__(self):
        self._entries: deque[HistoryEntry] = deque()

    def append(self, entry: HistoryEntry) -> None:
        self._entries.appendleft(entry)

    def restore(self, entry: HistoryEntry) -> EncodedImage:
        """The result image to display for `entry`."""
        return entry.result_image

    def get(self, index: int) -> HistoryEntry:
        """Entry at `index` in display order. Raises IndexError."""
        if index < 0:
            raise IndexError(index)
        return self._entries[index]

    @property
    def entries(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(self._entries)
