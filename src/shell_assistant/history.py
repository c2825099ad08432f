"""Command history with up/down recall.

The session keeps every entered line, oldest first.  A
``HistoryCursor`` walks that list the way arrow keys do in a terminal:
``back`` moves toward older lines and stops at the oldest, ``forward``
moves toward newer lines and, past the newest, clears the input.
"""

from collections.abc import Sequence

# Cursor value meaning "not recalling anything".
NOT_RECALLING = -1


class HistoryCursor:
    """Recall position over a history list.

    Position 0 is the most recent entry.  The cursor reads the list it
    is given on every move, so entries appended later are seen.
    """

    def __init__(self, entries: Sequence[str]) -> None:
        """Attach a cursor to *entries* (oldest first)."""
        self._entries = entries
        self._index = NOT_RECALLING

    def _entry(self, index: int) -> str:
        return self._entries[len(self._entries) - 1 - index]

    def back(self) -> str | None:
        """Move to the next older entry and return it.

        Returns:
            The recalled line, or ``None`` if the history is empty.

        """
        if not self._entries:
            return None
        self._index = min(self._index + 1, len(self._entries) - 1)
        return self._entry(self._index)

    def forward(self) -> str:
        """Move to the next newer entry and return it.

        Moving past the newest entry stops recalling and returns ``""``.
        """
        if self._index > 0:
            self._index -= 1
            return self._entry(self._index)
        self._index = NOT_RECALLING
        return ""

    def reset(self) -> None:
        """Stop recalling (called whenever a new line is entered)."""
        self._index = NOT_RECALLING
