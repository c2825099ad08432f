"""Interactive REPL (Read-Eval-Print Loop) for the simulated terminal.

The browser page is the main front end; this module runs the same
session in a real terminal:

    1. **Read** — display a prompt and read user input.
    2. **Eval** — pass the line to ``session.run()``.
    3. **Print** — display the lines it produced.
    4. **Loop** — repeat until Ctrl+D or Ctrl+C.

Up/down recall comes from readline's own history, which is fed every
entered line.  The helper functions (``build_prompt``,
``format_banner``, ``render``) are pure and testable.  The ``run()``
function is the I/O entrypoint.
"""

import os
import readline

from shell_assistant.env import Settings
from shell_assistant.lines import DisplayLine
from shell_assistant.session import Session, welcome_banner
from shell_assistant.suggest import create_collaborator

_BANNER_WIDTH = 38


def format_banner(banner: DisplayLine) -> str:
    """Format the welcome banner for printing to the console."""
    border = "=" * _BANNER_WIDTH
    title, *body = str(banner).splitlines()
    header = f"\n  {border}\n    {title}\n  {border}\n\n"
    return header + "\n".join(f"  {line}" for line in body) + "\n"


def build_prompt(session: Session) -> str:
    """Build the prompt string showing the working directory.

    Returns:
        A prompt like ``/home/user > ``.

    """
    return f"{session.cwd} > "


def render(out: list[DisplayLine]) -> str:
    """Render command output, skipping the echo of the entered line."""
    return "\n".join(str(line) for line in out[1:])


def run() -> None:
    """Start a session and run the interactive REPL.

    This is the ``shell-assistant`` console entry point.  It handles:
    - Settings from the environment and the AI collaborator.
    - Tab completion via readline.
    - The read-eval-print loop, including ``clear``.
    - Graceful handling of Ctrl+C and Ctrl+D.
    """
    settings = Settings.from_environ(os.environ)
    with create_collaborator(settings) as collaborator:
        session = Session(collaborator=collaborator, settings=settings)

        # Wire up tab completion via readline.
        readline.set_completer(session.completer.complete)
        readline.set_completer_delims(" \t")
        readline.parse_and_bind("tab: complete")

        print(format_banner(welcome_banner()))  # noqa: T201

        try:
            while True:
                try:
                    line = input(build_prompt(session))
                except EOFError:
                    # Ctrl+D — graceful exit
                    print()  # noqa: T201
                    break

                out = session.run(line)
                if line.strip() and not out:
                    # Only clear leaves nothing behind, not even the echo.
                    print("\033[2J\033[H", end="")  # noqa: T201
                elif len(out) > 1:
                    print(render(out))  # noqa: T201

        except KeyboardInterrupt:
            # Ctrl+C — graceful exit
            print("\nInterrupted.")  # noqa: T201
