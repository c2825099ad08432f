"""Browser-based terminal for Shell Assistant.

This package provides a Flask application that serves the simulated
terminal as a single web page backed by a small JSON API.

The ``create_app`` factory in ``app.py`` starts a session and serves:

- ``GET /`` — HTML terminal page.
- ``POST /api/execute`` — enter a command line.
- ``POST /api/suggest`` — finish a pending AI suggestion.
- ``POST /api/complete`` / ``POST /api/history`` — input helpers.
- ``GET /api/status`` — working directory, state, and gauges.
"""
