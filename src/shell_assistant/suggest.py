"""AI fallback — ask a language model for an equivalent shell command.

When the shell does not recognise a command, the whole line is handed
to a **collaborator**: anything with a ``suggest(query) -> str``
method.  The shell never sees how the collaborator works, only that it
returns one line of text or raises ``CollaboratorError``.

``ChatCompletionsCollaborator`` is the production collaborator.  It
posts one request to an OpenAI-compatible ``/chat/completions``
endpoint with httpx and reads the first choice back.  The request is
bounded by a timeout; expiry is reported like any other failure.

``get_command_suggestion`` is the boundary the session calls.  It
turns every failure into a fixed apology that names the query, so a
broken network never reaches the terminal as a traceback.
"""

from __future__ import annotations

from typing import Any, Protocol

import httpx

from shell_assistant.env import Settings
from shell_assistant.logging import Logger, LogLevel

PROMPT_TEMPLATE = (
    "Translate the following natural language query into a terminal command:\n\n"
    "Query: {query}\n\nCommand: "
)

_SYSTEM_PROMPT = "Reply with a single shell command on one line and nothing else."

EMPTY_QUERY_MESSAGE = "Please provide a query."


class CollaboratorError(Exception):
    """Raised when the collaborator cannot produce a suggestion."""


class Collaborator(Protocol):
    """Text-in, text-out suggestion service."""

    def suggest(self, query: str) -> str:
        """Return a one-line shell command for *query*.

        Raises:
            CollaboratorError: If no suggestion could be produced.

        """
        ...


def apology(query: str) -> str:
    """Return the user-facing message shown when a suggestion fails."""
    return f'Sorry, I could not generate a command for: "{query}"'


def _first_line(content: str) -> str:
    """Strip code fences and return the first non-blank line."""
    for raw in content.strip().splitlines():
        line = raw.strip()
        if line and not line.startswith("```"):
            return line.strip("`").strip()
    return ""


class ChatCompletionsCollaborator:
    """Collaborator backed by an OpenAI-compatible chat completions API.

    Attributes:
        base_url: API root, e.g. ``https://api.openai.com/v1``.
        model: Model name sent with every request.
        timeout: Seconds before the request is abandoned.

    """

    def __init__(
        self,
        base_url: str,
        model: str,
        *,
        api_key: str = "",
        timeout: float = 20.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Create the collaborator.

        Args:
            base_url: API root the ``/chat/completions`` path is appended to.
            model: Model name.
            api_key: Bearer token; omitted from the request when empty.
            timeout: Request timeout in seconds.
            transport: Custom transport (e.g. ``httpx.MockTransport`` in tests).

        """
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            headers=headers,
            transport=transport,
        )

    def close(self) -> None:
        """Close the HTTP client and release resources."""
        self._client.close()

    def __enter__(self) -> ChatCompletionsCollaborator:
        """Enter context manager."""
        return self

    def __exit__(self, *args: object) -> None:
        """Exit context manager and close the client."""
        self.close()

    def suggest(self, query: str) -> str:
        """Ask the model to translate *query* into a shell command.

        Raises:
            CollaboratorError: On connection failure, timeout, an error
                status, or a response without a usable command.

        """
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": _SYSTEM_PROMPT},
                {"role": "user", "content": PROMPT_TEMPLATE.format(query=query)},
            ],
        }
        try:
            response = self._client.post("/chat/completions", json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.TimeoutException as e:
            msg = f"suggestion request timed out after {self.timeout}s"
            raise CollaboratorError(msg) from e
        except httpx.HTTPStatusError as e:
            msg = f"suggestion request failed with HTTP {e.response.status_code}"
            raise CollaboratorError(msg) from e
        except (httpx.HTTPError, ValueError) as e:
            msg = f"suggestion request failed: {e}"
            raise CollaboratorError(msg) from e

        try:
            content = body["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            msg = "suggestion response had no message content"
            raise CollaboratorError(msg) from e

        command = _first_line(str(content or ""))
        if not command:
            msg = "suggestion response was empty"
            raise CollaboratorError(msg)
        return command


def get_command_suggestion(
    query: str,
    collaborator: Collaborator,
    *,
    logger: Logger | None = None,
) -> str:
    """Return a suggested command for *query*, or a message explaining why not.

    Never raises: any collaborator failure, ``CollaboratorError`` or
    otherwise, is logged and replaced by the apology text.

    Args:
        query: The line the user typed.
        collaborator: The service to ask.
        logger: Optional log to record failures in.

    """
    query = query.strip()
    if not query:
        return EMPTY_QUERY_MESSAGE
    try:
        return collaborator.suggest(query)
    except Exception as e:  # noqa: BLE001 - any failure becomes the apology
        if logger is not None:
            logger.log(LogLevel.ERROR, f"no suggestion for {query!r}: {e}", source="suggest")
        return apology(query)


def create_collaborator(settings: Settings) -> ChatCompletionsCollaborator:
    """Build the production collaborator from configuration."""
    return ChatCompletionsCollaborator(
        settings.ai_url,
        settings.ai_model,
        api_key=settings.ai_key,
        timeout=settings.ai_timeout,
    )
