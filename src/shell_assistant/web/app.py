"""Flask application factory for the browser terminal.

The ``create_app`` function returns a Flask app with these endpoints:

- ``GET /`` — start a fresh session and render the terminal page.
- ``POST /api/execute`` — enter a command line and return its lines.
- ``POST /api/suggest`` — finish a pending AI suggestion.
- ``POST /api/complete`` — tab-complete the current input.
- ``POST /api/history`` — recall an older or newer history entry.
- ``GET /api/status`` — working directory, state, and gauges.
- ``GET /api/log`` — the session's event log, optionally filtered by
  ``?level=`` and ``?source=``.

The page submits a line, shows the "Thinking..." line it gets back,
and, when the response says ``pending``, calls ``/api/suggest`` before
it re-enables the input.

Loading the page starts a new session: the working directory, history,
scrollback and gauges of the previous one are discarded, along with its
copy of the file system.
"""

from __future__ import annotations

import os

from flask import Flask, Response, jsonify, render_template, request

from shell_assistant.env import Settings
from shell_assistant.lines import DisplayLine
from shell_assistant.logging import LogLevel
from shell_assistant.session import (
    TITLE,
    NothingPendingError,
    Session,
    SessionBusyError,
    SessionState,
)
from shell_assistant.suggest import Collaborator, create_collaborator

_HTTP_BAD_REQUEST = 400
_HTTP_CONFLICT = 409


def _dump(out: list[DisplayLine]) -> list[dict[str, object]]:
    return [line.to_dict() for line in out]


def create_app(
    *,
    settings: Settings | None = None,
    collaborator: Collaborator | None = None,
) -> Flask:
    """Create and configure the Flask application.

    Args:
        settings: Configuration; read from the environment when omitted.
        collaborator: Suggestion service; built from *settings* when omitted.

    Returns:
        A configured Flask application ready to serve.

    """
    settings = settings or Settings.from_environ(os.environ)
    collaborator = collaborator or create_collaborator(settings)
    session = Session(collaborator=collaborator, settings=settings)

    app = Flask(__name__)

    @app.route("/")
    def index() -> str:  # pyright: ignore[reportUnusedFunction]
        """Start a new session and render the terminal HTML page."""
        nonlocal session
        session = Session(collaborator=collaborator, settings=settings)
        return render_template(
            "index.html",
            title=TITLE,
            scrollback=_dump(session.scrollback),
            cwd=session.cwd,
        )

    @app.route("/api/execute", methods=["POST"])
    def execute() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Enter a command line and return JSON output.

        Expects JSON body: ``{"command": "..."}``

        Returns:
            JSON with ``lines``, ``clear``, ``cwd`` and ``pending`` fields,
            or 409 while a suggestion is outstanding.

        """
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or not isinstance(data.get("command"), str):
            return jsonify({"error": "Missing 'command' field"}), _HTTP_BAD_REQUEST

        command: str = data["command"]
        try:
            out = session.submit(command)
        except SessionBusyError as e:
            return jsonify({"error": str(e)}), _HTTP_CONFLICT

        return jsonify(
            {
                "lines": _dump(out),
                "clear": bool(command.strip()) and not out,
                "cwd": session.cwd,
                "pending": session.state is SessionState.AWAITING_COLLABORATOR,
            }
        )

    @app.route("/api/suggest", methods=["POST"])
    def suggest() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Ask the collaborator about the pending line.

        Returns:
            JSON with the suggestion in ``lines``, or 409 when nothing
            is pending.

        """
        try:
            line = session.settle()
        except NothingPendingError as e:
            return jsonify({"error": str(e)}), _HTTP_CONFLICT
        return jsonify({"lines": _dump([line]), "cwd": session.cwd, "pending": False})

    @app.route("/api/complete", methods=["POST"])
    def complete() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Tab-complete the input.

        Expects JSON body: ``{"input": "..."}``

        Returns:
            JSON with the new ``input`` and any ``hints``.

        """
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or not isinstance(data.get("input"), str):
            return jsonify({"error": "Missing 'input' field"}), _HTTP_BAD_REQUEST
        completion = session.completer.complete_input(data["input"])
        return jsonify({"input": completion.text, "hints": list(completion.hints)})

    @app.route("/api/history", methods=["POST"])
    def history() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Move the history cursor.

        Expects JSON body: ``{"direction": "back" | "forward"}``

        Returns:
            JSON with the recalled ``input`` (``null`` when there is
            nothing to recall).

        """
        data = request.get_json(silent=True)
        direction = data.get("direction") if isinstance(data, dict) else None
        if direction == "back":
            return jsonify({"input": session.recall_back()})
        if direction == "forward":
            return jsonify({"input": session.recall_forward()})
        return jsonify({"error": "direction must be 'back' or 'forward'"}), _HTTP_BAD_REQUEST

    @app.route("/api/status")
    def status() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return session status for polling."""
        return jsonify(session.status())

    @app.route("/api/log")
    def log() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Return the session's event log, oldest first.

        Query parameters ``level`` (a level name such as ``warning``)
        and ``source`` narrow the entries returned.

        Returns:
            JSON with ``entries``, or 400 for an unknown level.

        """
        level_name = request.args.get("level")
        min_level = None
        if level_name is not None:
            try:
                min_level = LogLevel[level_name.upper()]
            except KeyError:
                return jsonify({"error": f"Unknown level {level_name!r}"}), _HTTP_BAD_REQUEST
        entries = session.logger.filter(min_level=min_level, source=request.args.get("source"))
        return jsonify({"entries": [entry.to_dict() for entry in entries]})

    return app


def main() -> None:
    """Run the web UI development server.

    This is the ``shell-assistant-web`` console entry point.
    """
    settings = Settings.from_environ(os.environ)
    app = create_app(settings=settings)
    app.run(debug=True, port=settings.port)
