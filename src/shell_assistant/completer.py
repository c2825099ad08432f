"""Tab completion for the simulated terminal.

The completer separates **what to complete** (pure logic, fully
testable) from **how to wire it** (the browser's Tab key, or readline
in the REPL).

- ``complete_input(line)`` is the browser behaviour: one candidate
  fills in the partial word plus a space, several are returned as a
  hint, none leaves the input alone.
- ``complete(text, state)`` is the readline callback; it delegates to
  ``completions(text, line)``.

Matching is case-sensitive, like the commands and file names it
completes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from shell_assistant.filesystem import DirectoryNode, get_node

if TYPE_CHECKING:
    from shell_assistant.session import Session

# Commands whose argument is a path in the current directory.
_PATH_COMMANDS: frozenset[str] = frozenset(["cd", "ls", "rm"])


@dataclass(frozen=True)
class Completion:
    """Outcome of pressing Tab.

    Attributes:
        text: The input after completion (unchanged unless exactly one
            candidate matched).
        hints: Candidates to show when more than one matched.

    """

    text: str
    hints: tuple[str, ...] = ()


class Completer:
    """Context-aware tab completer attached to a session."""

    def __init__(self, session: Session) -> None:
        """Create a completer that reads commands, cwd, and tree from *session*."""
        self._session = session

    def complete_input(self, line: str) -> Completion:
        """Complete the last word of *line*.

        The first word, or any word typed after a trailing space,
        completes against command names.  A later word after ``cd``,
        ``ls`` or ``rm`` completes against names in the current
        directory.
        """
        parts = line.split(" ")
        partial = parts.pop()

        if not parts or line.endswith(" "):
            candidates = self._complete_commands(partial)
        elif parts[0] in _PATH_COMMANDS:
            candidates = self._complete_children(partial)
        else:
            candidates = []

        if len(candidates) == 1:
            return Completion(text=" ".join([*parts, candidates[0]]) + " ")
        return Completion(text=line, hints=tuple(candidates))

    def complete(self, text: str, state: int) -> str | None:
        """Readline callback — return the *state*-th candidate for *text*.

        Returns:
            The candidate at *state*, or ``None`` when exhausted.

        """
        import readline  # noqa: PLC0415  # not available on Windows

        candidates = self.completions(text, readline.get_line_buffer())
        if state < len(candidates):
            return candidates[state]
        return None

    def completions(self, text: str, line: str) -> list[str]:
        """Return completion candidates for the word *text* within *line*."""
        words = line.lstrip().split()

        # No words yet, or still typing the first word → command completion
        if not words or (len(words) == 1 and not line.endswith(" ")):
            return self._complete_commands(text)

        if words[0] in _PATH_COMMANDS:
            return self._complete_children(text)
        return []

    # -- private completers ------------------------------------------------

    def _complete_commands(self, text: str) -> list[str]:
        """Complete command names from the shell's dispatch table."""
        return [cmd for cmd in self._session.shell.command_names if cmd.startswith(text)]

    def _complete_children(self, text: str) -> list[str]:
        """Complete names of entries in the current directory."""
        node = get_node(self._session.tree, self._session.cwd)
        if not isinstance(node, DirectoryNode):
            return []
        return [name for name in node.children if name.startswith(text)]
