"""What happened in a session, for the ``/api/log`` endpoint and tests.

Every line typed, every ``cd`` that moved the working directory, every
error shown to the user and every suggestion request is recorded here.
Nothing is written to disk: the record belongs to its ``Session`` and
goes when a page reload replaces that session.
"""

from dataclasses import dataclass
from enum import IntEnum


class LogLevel(IntEnum):
    """How much an event matters.

    Typed lines are DEBUG, directory changes and suggestion requests
    INFO, errors shown to the user WARNING, and collaborator failures
    ERROR.
    """

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEntry:
    """One recorded event.

    Attributes:
        level: Importance of the event.
        message: What happened, e.g. ``"cd /home/user -> /etc"``.
        source: Module that recorded it: ``"shell"``, ``"session"``
            or ``"suggest"``.

    """

    level: LogLevel
    message: str
    source: str

    def __str__(self) -> str:
        """Render as ``[WARNING] shell: message``."""
        return f"[{self.level.name}] {self.source}: {self.message}"

    def to_dict(self) -> dict[str, str]:
        """Return the entry as sent by ``/api/log``."""
        return {"level": self.level.name, "source": self.source, "message": self.message}


class Logger:
    """Events of one session, oldest first."""

    def __init__(self) -> None:
        """Start with no events."""
        self._entries: list[LogEntry] = []

    @property
    def entries(self) -> list[LogEntry]:
        """Return a snapshot of every event so far."""
        return list(self._entries)

    def log(self, level: LogLevel, message: str, *, source: str) -> None:
        """Record *message* from *source* at *level*."""
        self._entries.append(LogEntry(level=level, message=message, source=source))

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
    ) -> list[LogEntry]:
        """Select events, e.g. only warnings or only the collaborator's.

        Args:
            min_level: Drop events below this level.
            source: Keep only events recorded by this module.

        Returns:
            The matching events, oldest first.

        """
        result = list(self._entries)
        if min_level is not None:
            result = [e for e in result if e.level >= min_level]
        if source is not None:
            result = [e for e in result if e.source == source]
        return result
