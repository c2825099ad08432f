"""Tests for the REPL (Read-Eval-Print Loop).

The REPL is the interactive terminal front end.  Since it involves
I/O, we test its pure helpers directly and drive ``run()`` with
patched ``input``.
"""

from unittest.mock import patch

from shell_assistant.repl import build_prompt, format_banner, render, run
from shell_assistant.session import Session, welcome_banner


class _Fixed:
    def suggest(self, query: str) -> str:
        return "ls -S"

    def __enter__(self) -> "_Fixed":
        return self

    def __exit__(self, *args: object) -> None:
        return None


class TestREPLHelpers:
    """Verify REPL helper functions."""

    def test_prompt_shows_cwd(self) -> None:
        """The prompt shows the working directory."""
        session = Session(collaborator=_Fixed())
        assert build_prompt(session) == "/home/user > "
        session.run("cd /etc")
        assert build_prompt(session) == "/etc > "

    def test_format_banner(self) -> None:
        """The banner shows the title and the help hint."""
        banner = format_banner(welcome_banner())
        assert "Python Shell Assistant" in banner
        assert "Type help" in banner

    def test_render_skips_echo(self) -> None:
        """Rendered output omits the echoed command line."""
        session = Session(collaborator=_Fixed())
        assert render(session.run("pwd")) == "/home/user"

    def test_render_entries(self) -> None:
        """Directories are marked with a trailing slash."""
        session = Session(collaborator=_Fixed())
        assert render(session.run("ls")) == "Documents/  Downloads/  README.md"

    def test_render_suggestion(self) -> None:
        """A suggestion shows the not-found notice and the command."""
        session = Session(collaborator=_Fixed())
        text = render(session.run("sort by size"))
        assert "Command not found. AI suggests:" in text
        assert "ls -S" in text


class TestRun:
    """Verify the loop end to end with scripted input."""

    def test_commands_then_eof(self, capsys) -> None:  # noqa: ANN001
        """Output is printed and Ctrl+D ends the loop."""
        inputs = iter(["cd Documents", "ls", "sort by size"])

        def fake_input(_prompt: str) -> str:
            try:
                return next(inputs)
            except StopIteration:
                raise EOFError from None

        with (
            patch("shell_assistant.repl.create_collaborator", return_value=_Fixed()),
            patch("builtins.input", side_effect=fake_input),
            patch("shell_assistant.repl.readline"),
        ):
            run()

        out = capsys.readouterr().out
        assert "Python Shell Assistant" in out
        assert "report.txt" in out
        assert "ls -S" in out

    def test_ctrl_c(self, capsys) -> None:  # noqa: ANN001
        """Ctrl+C ends the loop with a notice."""
        with (
            patch("shell_assistant.repl.create_collaborator", return_value=_Fixed()),
            patch("builtins.input", side_effect=KeyboardInterrupt),
            patch("shell_assistant.repl.readline"),
        ):
            run()
        assert "Interrupted." in capsys.readouterr().out
