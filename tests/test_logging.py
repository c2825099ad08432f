"""Tests for the session event log.

The logger records structured entries for session events: commands,
directory changes, refused writes, and AI suggestions.
"""

from shell_assistant.logging import LogEntry, Logger, LogLevel
from shell_assistant.session import Session


class _Fixed:
    def suggest(self, query: str) -> str:
        return "echo"


class TestLogLevel:
    """Verify log level ordering."""

    def test_levels_are_ordered(self) -> None:
        """DEBUG < INFO < WARNING < ERROR."""
        assert LogLevel.DEBUG < LogLevel.INFO
        assert LogLevel.INFO < LogLevel.WARNING
        assert LogLevel.WARNING < LogLevel.ERROR


class TestLogEntry:
    """Verify log entry structure."""

    def test_entry_str(self) -> None:
        """String representation should include level, source, and message."""
        entry = LogEntry(level=LogLevel.WARNING, message="read-only", source="shell")
        assert str(entry) == "[WARNING] shell: read-only"

    def test_to_dict(self) -> None:
        """The JSON form names the level."""
        entry = LogEntry(level=LogLevel.INFO, message="hi", source="session")
        assert entry.to_dict() == {"level": "INFO", "source": "session", "message": "hi"}


class TestLogger:
    """Verify the append-only buffer."""

    def test_entries_in_order(self) -> None:
        """Entries come back in the order logged."""
        logger = Logger()
        logger.log(LogLevel.INFO, "first", source="a")
        logger.log(LogLevel.ERROR, "second", source="b")
        assert [e.message for e in logger.entries] == ["first", "second"]

    def test_entries_is_a_copy(self) -> None:
        """Mutating the returned list does not touch the log."""
        logger = Logger()
        logger.log(LogLevel.INFO, "x", source="a")
        logger.entries.clear()
        assert len(logger.entries) == 1

    def test_filter_by_level(self) -> None:
        """min_level keeps entries at or above the level."""
        logger = Logger()
        logger.log(LogLevel.DEBUG, "d", source="a")
        logger.log(LogLevel.WARNING, "w", source="a")
        logger.log(LogLevel.ERROR, "e", source="a")
        assert [e.message for e in logger.filter(min_level=LogLevel.WARNING)] == ["w", "e"]

    def test_filter_by_source(self) -> None:
        """source keeps entries from one component."""
        logger = Logger()
        logger.log(LogLevel.INFO, "x", source="shell")
        logger.log(LogLevel.INFO, "y", source="session")
        assert [e.message for e in logger.filter(source="shell")] == ["x"]


class TestSessionLogging:
    """Verify what a session records."""

    def test_start_logged(self) -> None:
        """Starting a session is logged."""
        session = Session(collaborator=_Fixed())
        assert "session started" in session.logger.entries[0].message

    def test_commands_logged_at_debug(self) -> None:
        """Each entered line is logged."""
        session = Session(collaborator=_Fixed())
        session.run("pwd")
        debug = [e for e in session.logger.entries if e.level is LogLevel.DEBUG]
        assert debug[-1].message.endswith("$ pwd")

    def test_directory_change_logged(self) -> None:
        """A cd that succeeds is logged at INFO."""
        session = Session(collaborator=_Fixed())
        session.run("cd /etc")
        messages = [e.message for e in session.logger.filter(source="shell")]
        assert "cd /home/user -> /etc" in messages

    def test_delegation_logged(self) -> None:
        """Asking for and settling a suggestion are both logged."""
        session = Session(collaborator=_Fixed())
        session.run("frobnicate")
        messages = [e.message for e in session.logger.filter(source="session")]
        assert any("asking for a suggestion" in m for m in messages)
        assert "suggestion settled" in messages
