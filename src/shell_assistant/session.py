"""Terminal session — the state a user types into.

A ``Session`` owns everything that lives as long as one open terminal:
its own copy of the file system, the working directory, the command
history and recall cursor, the scrollback, and the simulated gauges.
It feeds each entered line to the ``Shell`` and applies the result.

Lines the shell does not recognise go to the AI collaborator.  That
round trip is the only slow step, so the session is a two-state
machine:

    IDLE ──submit(unknown line)──▶ AWAITING_COLLABORATOR
    AWAITING_COLLABORATOR ──settle()──▶ IDLE

``submit`` shows a "Thinking..." line and returns at once; ``settle``
asks the collaborator and swaps that line for the answer.  While a
suggestion is outstanding every new submission is refused with
``SessionBusyError``, so output from two commands never interleaves.
``run`` does both steps for callers that can simply wait (the REPL).
"""

from __future__ import annotations

import random
import threading
from dataclasses import dataclass
from enum import StrEnum

from shell_assistant import lines
from shell_assistant.completer import Completer
from shell_assistant.env import Settings
from shell_assistant.filesystem import DirectoryNode, create_filesystem, get_node
from shell_assistant.history import HistoryCursor
from shell_assistant.lines import DisplayLine, LineKind
from shell_assistant.logging import Logger, LogLevel
from shell_assistant.shell import Shell, ShellContext
from shell_assistant.suggest import Collaborator, apology, get_command_suggestion

TITLE = "Python Shell Assistant"
THINKING = "Thinking..."

# Gauge ranges at session start; the cpu/mem commands use wider ones.
_START_CPU_RANGE = (5, 24)
_START_MEM_RANGE = (30, 69)


class SessionState(StrEnum):
    """Whether the session accepts input."""

    IDLE = "idle"
    AWAITING_COLLABORATOR = "awaiting_collaborator"


class SessionBusyError(RuntimeError):
    """Raised when a line is submitted while a suggestion is outstanding."""


class NothingPendingError(RuntimeError):
    """Raised by ``settle`` when no line is waiting for a suggestion."""


@dataclass
class ResourceGauges:
    """Simulated CPU and memory usage, in percent.

    The numbers are random and say nothing about the host machine.
    """

    cpu: int
    mem: int


def welcome_banner() -> DisplayLine:
    """Return the line shown when a session starts."""
    return DisplayLine(
        LineKind.BANNER,
        TITLE,
        (
            ("Welcome to the AI-powered terminal.",),
            ("Type help to see available commands.",),
            ("For non-supported commands, AI will try to suggest a shell command.",),
            ('Example: "list files sorted by size"',),
        ),
    )


class Session:
    """One simulated terminal: state, scrollback, and the command loop."""

    def __init__(
        self,
        *,
        collaborator: Collaborator,
        settings: Settings | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """Start a session with a fresh copy of the file system.

        Args:
            collaborator: Service asked for suggestions on unknown lines.
            settings: Configuration; defaults apply when omitted.
            rng: Random source for the gauges (seed it in tests).

        Raises:
            ValueError: If the configured home is not a directory in the tree.

        """
        self._settings = settings or Settings()
        self._collaborator = collaborator
        self._rng = rng or random.Random()
        self._shell = Shell(rng=self._rng)
        self._logger = Logger()
        self._lock = threading.Lock()

        self._tree = create_filesystem()
        if not isinstance(get_node(self._tree, self._settings.home), DirectoryNode):
            msg = f"Home directory {self._settings.home} does not exist"
            raise ValueError(msg)
        self._cwd = self._settings.home
        self._history: list[str] = []
        self._cursor = HistoryCursor(self._history)
        self._scrollback: list[DisplayLine] = [welcome_banner()]
        self._gauges = ResourceGauges(
            cpu=self._rng.randint(*_START_CPU_RANGE),
            mem=self._rng.randint(*_START_MEM_RANGE),
        )
        self._state = SessionState.IDLE
        self._pending_query: str | None = None
        self._pending_line: DisplayLine | None = None
        self._completer = Completer(self)

        self._logger.log(LogLevel.INFO, f"session started in {self._cwd}", source="session")

    # -- Read-only views -------------------------------------------------

    @property
    def shell(self) -> Shell:
        """Return the command interpreter."""
        return self._shell

    @property
    def tree(self) -> DirectoryNode:
        """Return this session's file system."""
        return self._tree

    @property
    def cwd(self) -> str:
        """Return the current working directory."""
        return self._cwd

    @property
    def state(self) -> SessionState:
        """Return the current state."""
        return self._state

    @property
    def history(self) -> list[str]:
        """Return entered lines, oldest first."""
        return list(self._history)

    @property
    def scrollback(self) -> list[DisplayLine]:
        """Return the lines currently on screen, oldest first."""
        return list(self._scrollback)

    @property
    def gauges(self) -> ResourceGauges:
        """Return the latest simulated readings."""
        return ResourceGauges(cpu=self._gauges.cpu, mem=self._gauges.mem)

    @property
    def logger(self) -> Logger:
        """Return the session's event log."""
        return self._logger

    @property
    def completer(self) -> Completer:
        """Return the tab completer bound to this session."""
        return self._completer

    # -- Command loop ------------------------------------------------------

    def submit(self, line: str) -> list[DisplayLine]:
        """Enter *line* and apply what the shell returns.

        Blank lines are ignored.  If the line needs the collaborator,
        the session moves to ``AWAITING_COLLABORATOR`` and the returned
        lines end with the "Thinking..." placeholder; call ``settle``
        to finish.

        Returns:
            The lines appended to the scrollback by this call.

        Raises:
            SessionBusyError: If a suggestion is still outstanding.

        """
        with self._lock:
            if self._state is SessionState.AWAITING_COLLABORATOR:
                msg = "a command is still running"
                raise SessionBusyError(msg)

            stripped = line.strip()
            if not stripped:
                return []

            context = ShellContext(
                cwd=self._cwd,
                tree=self._tree,
                history=tuple(self._history),
                home=self._settings.home,
            )
            self._history.append(stripped)
            self._cursor.reset()
            self._logger.log(LogLevel.DEBUG, f"{self._cwd} $ {stripped}", source="shell")

            added = [lines.command(self._cwd, stripped)]
            result = self._shell.execute(stripped, context)

            if result.clear:
                self._scrollback.clear()
                return []
            if result.dir_change is not None:
                self._logger.log(
                    LogLevel.INFO, f"cd {self._cwd} -> {result.dir_change}", source="shell"
                )
                self._cwd = result.dir_change
            if result.gauge is not None:
                name, value = result.gauge
                setattr(self._gauges, name, value)
            for out in result.lines:
                if out.kind is LineKind.ERROR:
                    self._logger.log(LogLevel.WARNING, out.text, source="shell")
            added.extend(result.lines)

            if result.delegate is not None:
                self._pending_query = result.delegate
                self._pending_line = DisplayLine(LineKind.PENDING, THINKING)
                added.append(self._pending_line)
                self._state = SessionState.AWAITING_COLLABORATOR
                self._logger.log(
                    LogLevel.INFO, f"asking for a suggestion: {result.delegate!r}", source="session"
                )

            self._scrollback.extend(added)
            return added

    def settle(self) -> DisplayLine:
        """Ask the collaborator about the pending line and show its answer.

        The "Thinking..." placeholder is replaced by the suggestion, or
        by an apology if the collaborator failed.  The session returns
        to ``IDLE`` either way.

        Returns:
            The suggestion line that replaced the placeholder.

        Raises:
            NothingPendingError: If no line is awaiting a suggestion, or
                another caller is already settling it.

        """
        with self._lock:
            query = self._pending_query
            if self._state is not SessionState.AWAITING_COLLABORATOR or query is None:
                msg = "no command is waiting for a suggestion"
                raise NothingPendingError(msg)
            # Claimed: the state stays AWAITING_COLLABORATOR until the finally below.
            self._pending_query = None

        suggestion = DisplayLine(LineKind.SUGGESTION, apology(query))
        try:
            # The lock is not held here so status can be read while waiting.
            text = get_command_suggestion(query, self._collaborator, logger=self._logger)
            suggestion = DisplayLine(LineKind.SUGGESTION, text)
        finally:
            with self._lock:
                self._replace_pending(suggestion)
                self._pending_line = None
                self._state = SessionState.IDLE
                self._logger.log(LogLevel.INFO, "suggestion settled", source="session")
        return suggestion

    def run(self, line: str) -> list[DisplayLine]:
        """Submit *line* and, if needed, wait for the suggestion.

        Returns:
            The lines the command left in the scrollback.

        """
        added = self.submit(line)
        if self._state is SessionState.AWAITING_COLLABORATOR:
            suggestion = self.settle()
            added = [suggestion if out.kind is LineKind.PENDING else out for out in added]
        return added

    def _replace_pending(self, replacement: DisplayLine) -> None:
        for i, out in enumerate(self._scrollback):
            if out is self._pending_line:
                self._scrollback[i] = replacement
                return
        self._scrollback.append(replacement)

    # -- Input helpers -----------------------------------------------------

    def recall_back(self) -> str | None:
        """Return the next older history entry, or ``None`` if there is none."""
        return self._cursor.back()

    def recall_forward(self) -> str:
        """Return the next newer history entry, or ``""`` past the newest."""
        return self._cursor.forward()

    def status(self) -> dict[str, object]:
        """Return a JSON-serializable snapshot for status polling."""
        with self._lock:
            return {
                "cwd": self._cwd,
                "state": str(self._state),
                "cpu": self._gauges.cpu,
                "mem": self._gauges.mem,
            }
