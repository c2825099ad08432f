"""The shell — command interpreter for the simulated terminal.

The shell reads a command line, splits it into a command name and
arguments, dispatches to the matching handler, and returns a
``CommandResult`` describing what should happen: lines to show, and
optionally a new working directory, a cleared screen, or a hand-off to
the AI collaborator.

Design choices:
    - **Returns results, not prints.**  The caller (a session) applies
      the result; the shell never touches the scrollback.
    - **State comes in, never lives here.**  The current directory,
      the file system, and the history arrive in a ``ShellContext`` on
      every call, so the shell can be tested with any context.
    - **Command dispatch via a dict.**  Adding a command means writing
      a method and adding one dict entry.
    - **Unknown commands are not errors.**  They come back as a
      delegation request carrying the full line.
"""

import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import TypeAlias

from shell_assistant import lines
from shell_assistant.filesystem import (
    HOME_DIR,
    DirectoryNode,
    PathNotFoundError,
    require_directory,
    resolve_path,
)
from shell_assistant.lines import DisplayLine, LineKind

# Recognised command names, in the order ``help`` shows them.
COMMANDS: tuple[str, ...] = (
    "ls",
    "cd",
    "pwd",
    "mkdir",
    "rm",
    "cpu",
    "mem",
    "clear",
    "help",
    "history",
)

# Inclusive ranges for the simulated gauges.
CPU_RANGE = (5, 34)
MEM_RANGE = (30, 79)


@dataclass
class ShellContext:
    """Everything a command may read.

    Attributes:
        cwd: The canonical current directory.
        tree: The session's file system.
        history: Previously entered lines, oldest first.
        home: The directory ``~`` and a bare ``cd`` go to.

    """

    cwd: str
    tree: DirectoryNode
    history: Sequence[str] = ()
    home: str = HOME_DIR


@dataclass
class CommandResult:
    """What a command asks the session to do.

    Attributes:
        lines: Output lines to append to the scrollback.
        dir_change: New working directory, if the command changed it.
        clear: True if the scrollback should be emptied.
        delegate: The full line to send to the AI collaborator.
        gauge: A ``(name, percent)`` reading from ``cpu`` or ``mem``.

    """

    lines: list[DisplayLine] = field(default_factory=list)  # pyright: ignore[reportUnknownVariableType]
    dir_change: str | None = None
    clear: bool = False
    delegate: str | None = None
    gauge: tuple[str, int] | None = None


# Type alias for a command handler: takes args and context, returns a result.
_Handler: TypeAlias = Callable[[list[str], ShellContext], CommandResult]


def _output(*out: DisplayLine) -> CommandResult:
    return CommandResult(lines=list(out))


def _read_only(name: str) -> DisplayLine:
    # The tree is never written; create/remove commands only report it.
    return lines.error(f"{name}: Read-only file system.")


class Shell:
    """Command interpreter over an explicit ``ShellContext``."""

    def __init__(self, *, rng: random.Random | None = None) -> None:
        """Create a shell.

        Args:
            rng: Random source for the ``cpu`` and ``mem`` gauges.

        """
        self._rng = rng or random.Random()

        # Command dispatch table — maps command names to handler methods.
        self._commands: dict[str, _Handler] = {
            "ls": self._cmd_ls,
            "cd": self._cmd_cd,
            "pwd": self._cmd_pwd,
            "mkdir": self._cmd_mkdir,
            "rm": self._cmd_rm,
            "cpu": self._cmd_cpu,
            "mem": self._cmd_mem,
            "clear": self._cmd_clear,
            "help": self._cmd_help,
            "history": self._cmd_history,
        }

    @property
    def command_names(self) -> list[str]:
        """Return the recognised command names in display order."""
        return list(COMMANDS)

    def execute(self, line: str, context: ShellContext) -> CommandResult:
        """Parse and run one command line.

        Args:
            line: The raw input (e.g. ``"ls Documents"``).
            context: Current directory, file system, and history.

        Returns:
            The result to apply.  An empty line yields an empty result;
            an unknown command yields ``delegate`` set to the full line.

        """
        parts = line.split()
        if not parts:
            return CommandResult()

        name, args = parts[0], parts[1:]
        handler = self._commands.get(name)
        if handler is None:
            return CommandResult(delegate=line.strip())

        return handler(args, context)

    # -- Command handlers ------------------------------------------------

    def _cmd_help(self, _args: list[str], _context: ShellContext) -> CommandResult:
        """List available commands."""
        return _output(lines.names("Available commands:", self.command_names))

    @staticmethod
    def _cmd_clear(_args: list[str], _context: ShellContext) -> CommandResult:
        """Empty the scrollback."""
        return CommandResult(clear=True)

    @staticmethod
    def _cmd_history(_args: list[str], context: ShellContext) -> CommandResult:
        """Show earlier lines, most recent first, numbered from 0."""
        if not context.history:
            return _output(lines.text("No history."))
        recent_first = reversed(context.history)
        return _output(*(lines.text(f"{i}: {entry}") for i, entry in enumerate(recent_first)))

    @staticmethod
    def _cmd_pwd(_args: list[str], context: ShellContext) -> CommandResult:
        """Print the working directory."""
        return _output(lines.text(context.cwd))

    @staticmethod
    def _cmd_ls(args: list[str], context: ShellContext) -> CommandResult:
        """List directory contents, tagging each entry as file or dir."""
        path = resolve_path(context.cwd, args[0], context.home) if args else context.cwd
        try:
            node = require_directory(context.tree, path, shown_as=args[0] if args else ".")
        except PathNotFoundError as e:
            return _output(lines.error(f"ls: {e}"))
        entries = tuple((name, str(child.kind)) for name, child in node.children.items())
        return _output(DisplayLine(LineKind.ENTRIES, items=entries))

    @staticmethod
    def _cmd_cd(args: list[str], context: ShellContext) -> CommandResult:
        """Change the working directory; no argument means home."""
        if not args:
            return CommandResult(dir_change=resolve_path(context.cwd, "~", context.home))

        path = resolve_path(context.cwd, args[0], context.home)
        try:
            require_directory(context.tree, path, shown_as=args[0])
        except PathNotFoundError as e:
            return _output(lines.error(f"cd: {e}"))
        return CommandResult(dir_change=path)

    @staticmethod
    def _cmd_mkdir(_args: list[str], _context: ShellContext) -> CommandResult:
        """Refuse to create a directory."""
        return _output(_read_only("mkdir"))

    @staticmethod
    def _cmd_rm(_args: list[str], _context: ShellContext) -> CommandResult:
        """Refuse to remove anything."""
        return _output(_read_only("rm"))

    def _cmd_cpu(self, _args: list[str], _context: ShellContext) -> CommandResult:
        """Report a fresh simulated CPU reading."""
        usage = self._rng.randint(*CPU_RANGE)
        return CommandResult(
            lines=[lines.key_value("CPU Usage", f"{usage}%")],
            gauge=("cpu", usage),
        )

    def _cmd_mem(self, _args: list[str], _context: ShellContext) -> CommandResult:
        """Report a fresh simulated memory reading."""
        usage = self._rng.randint(*MEM_RANGE)
        return CommandResult(
            lines=[lines.key_value("Memory Usage", f"{usage}%")],
            gauge=("mem", usage),
        )
