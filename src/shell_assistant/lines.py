"""Structured display lines for the terminal scrollback.

Commands never produce markup.  They return ``DisplayLine`` records
that carry a ``kind`` tag and a small payload, and the front end
decides how to draw each kind (the browser page uses icons and colours,
the REPL prints plain text).

Design choices:
    - **Frozen dataclass** — a line is a value; once in the scrollback
      it is replaced, never edited.
    - **One record type with a kind tag** — the set of layouts is small
      and closed, and ``to_dict`` gives the JSON shape directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class LineKind(StrEnum):
    """Layout hint for a display line."""

    BANNER = "banner"
    COMMAND = "command"
    TEXT = "text"
    NAMES = "names"
    ENTRIES = "entries"
    KEYVALUE = "keyvalue"
    ERROR = "error"
    PENDING = "pending"
    SUGGESTION = "suggestion"


@dataclass(frozen=True)
class DisplayLine:
    """A single entry in the scrollback.

    Attributes:
        kind: How the line should be laid out.
        text: Main text (a message, a path, a suggestion...).
        items: Extra payload; names for ``NAMES``, ``(name, tag)`` pairs
            for ``ENTRIES``, a ``(key, value)`` pair for ``KEYVALUE``.

    """

    kind: LineKind
    text: str = ""
    items: tuple[tuple[str, ...], ...] = field(default=())

    def __str__(self) -> str:
        """Render as plain text for terminals without layout support."""
        match self.kind:
            case LineKind.BANNER:
                return "\n".join([self.text, *(item[0] for item in self.items)])
            case LineKind.COMMAND:
                return f"{self.items[0][0]} > {self.text}" if self.items else f"> {self.text}"
            case LineKind.NAMES:
                names = "  ".join(item[0] for item in self.items)
                return f"{self.text}\n{names}" if self.text else names
            case LineKind.ENTRIES:
                return "  ".join(
                    f"{name}/" if tag == "dir" else name for name, tag in self.items
                )
            case LineKind.KEYVALUE:
                key, value = self.items[0]
                return f"{key}: {value}"
            case LineKind.SUGGESTION:
                return f"Command not found. AI suggests:\n  {self.text}"
            case _:
                return self.text

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serializable mapping for the web front end."""
        return {"kind": str(self.kind), "text": self.text, "items": [list(i) for i in self.items]}


def text(message: str) -> DisplayLine:
    """Build a plain text line."""
    return DisplayLine(LineKind.TEXT, message)


def error(message: str) -> DisplayLine:
    """Build an error line."""
    return DisplayLine(LineKind.ERROR, message)


def command(cwd: str, line: str) -> DisplayLine:
    """Build the echo of an entered line with its prompt directory."""
    return DisplayLine(LineKind.COMMAND, line, ((cwd,),))


def names(title: str, values: list[str]) -> DisplayLine:
    """Build a list-of-names line with an optional title."""
    return DisplayLine(LineKind.NAMES, title, tuple((v,) for v in values))


def key_value(key: str, value: str) -> DisplayLine:
    """Build a single key/value line."""
    return DisplayLine(LineKind.KEYVALUE, items=((key, value),))
