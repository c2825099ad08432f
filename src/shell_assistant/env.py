"""Configuration from environment variables.

Settings arrive as ``KEY=VALUE`` string pairs, the way a process
inherits them from its parent.  ``Settings.from_environ`` reads the
``SHELL_ASSISTANT_*`` ones, fills in defaults and checks the values;
the rest of the package only ever sees the typed ``Settings``.

Recognised variables:

- ``SHELL_ASSISTANT_HOME`` — the directory ``~`` stands for.
- ``SHELL_ASSISTANT_AI_URL`` — base URL of an OpenAI-compatible API.
- ``SHELL_ASSISTANT_AI_MODEL`` — model name sent with each request.
- ``SHELL_ASSISTANT_AI_KEY`` — API key (falls back to ``OPENAI_API_KEY``).
- ``SHELL_ASSISTANT_AI_TIMEOUT`` — seconds before a suggestion gives up.
- ``SHELL_ASSISTANT_PORT`` — port for the web development server.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from shell_assistant.filesystem import HOME_DIR, ROOT_DIR, resolve_path

_DEFAULTS: dict[str, str] = {
    "SHELL_ASSISTANT_HOME": HOME_DIR,
    "SHELL_ASSISTANT_AI_URL": "https://api.openai.com/v1",
    "SHELL_ASSISTANT_AI_MODEL": "gpt-4o-mini",
    "SHELL_ASSISTANT_AI_KEY": "",
    "SHELL_ASSISTANT_AI_TIMEOUT": "20",
    "SHELL_ASSISTANT_PORT": "8080",
}


def _lookup(env: Mapping[str, str], key: str) -> str:
    return env.get(key) or _DEFAULTS[key]


def _parse_float(env: Mapping[str, str], key: str) -> float:
    raw = _lookup(env, key)
    try:
        value = float(raw)
    except ValueError:
        msg = f"{key} must be a number, got {raw!r}"
        raise ValueError(msg) from None
    if value <= 0:
        msg = f"{key} must be positive, got {raw!r}"
        raise ValueError(msg)
    return value


def _parse_port(env: Mapping[str, str], key: str) -> int:
    raw = _lookup(env, key)
    try:
        value = int(raw)
    except ValueError:
        msg = f"{key} must be a whole number, got {raw!r}"
        raise ValueError(msg) from None
    if value <= 0:
        msg = f"{key} must be positive, got {raw!r}"
        raise ValueError(msg)
    return value


@dataclass(frozen=True)
class Settings:
    """Typed configuration for a session and its front ends."""

    home: str = HOME_DIR
    ai_url: str = _DEFAULTS["SHELL_ASSISTANT_AI_URL"]
    ai_model: str = _DEFAULTS["SHELL_ASSISTANT_AI_MODEL"]
    ai_key: str = ""
    ai_timeout: float = 20.0
    port: int = 8080

    @classmethod
    def from_environ(cls, environ: Mapping[str, str]) -> Settings:
        """Build settings from a mapping such as ``os.environ``.

        The home directory is normalised, so ``/home/user/`` and
        ``/home//user`` both become ``/home/user``.

        Args:
            environ: Variables to read; unknown keys are ignored.

        Raises:
            ValueError: If a numeric variable does not parse, the port
                is not a whole number, or the home directory is not
                absolute.

        """
        home = _lookup(environ, "SHELL_ASSISTANT_HOME")
        if not home.startswith("/"):
            msg = f"SHELL_ASSISTANT_HOME must be an absolute path, got {home!r}"
            raise ValueError(msg)

        return cls(
            # Relative to the root, so empty, "." and ".." segments are folded.
            home=resolve_path(ROOT_DIR, "." + home),
            ai_url=_lookup(environ, "SHELL_ASSISTANT_AI_URL").rstrip("/"),
            ai_model=_lookup(environ, "SHELL_ASSISTANT_AI_MODEL"),
            ai_key=environ.get("SHELL_ASSISTANT_AI_KEY") or environ.get("OPENAI_API_KEY", ""),
            ai_timeout=_parse_float(environ, "SHELL_ASSISTANT_AI_TIMEOUT"),
            port=_parse_port(environ, "SHELL_ASSISTANT_PORT"),
        )
