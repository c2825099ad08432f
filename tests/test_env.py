"""Tests for configuration.

``Settings.from_environ`` turns ``SHELL_ASSISTANT_*`` variables into
typed settings.
"""

import pytest

from shell_assistant.env import Settings
from shell_assistant.filesystem import HOME_DIR
from shell_assistant.session import Session


class _Fixed:
    def suggest(self, query: str) -> str:
        return "ls"


class TestSettings:
    """Verify parsing settings from environment variables."""

    def test_defaults(self) -> None:
        """An empty environment yields the defaults."""
        settings = Settings.from_environ({})
        assert settings.home == HOME_DIR
        assert settings.ai_url == "https://api.openai.com/v1"
        assert settings.ai_timeout == 20.0
        assert settings.port == 8080
        assert settings.ai_key == ""

    def test_overrides(self) -> None:
        """Prefixed variables override the defaults."""
        settings = Settings.from_environ(
            {
                "SHELL_ASSISTANT_HOME": "/etc",
                "SHELL_ASSISTANT_AI_URL": "http://localhost:11434/v1/",
                "SHELL_ASSISTANT_AI_MODEL": "llama3",
                "SHELL_ASSISTANT_AI_KEY": "k",
                "SHELL_ASSISTANT_AI_TIMEOUT": "2.5",
                "SHELL_ASSISTANT_PORT": "9000",
                "UNRELATED": "x",
            }
        )
        assert settings == Settings(
            home="/etc",
            ai_url="http://localhost:11434/v1",
            ai_model="llama3",
            ai_key="k",
            ai_timeout=2.5,
            port=9000,
        )

    def test_openai_key_fallback(self) -> None:
        """OPENAI_API_KEY is used when no dedicated key is set."""
        assert Settings.from_environ({"OPENAI_API_KEY": "sk"}).ai_key == "sk"

    def test_bad_timeout(self) -> None:
        """A non-numeric timeout is rejected."""
        with pytest.raises(ValueError, match="SHELL_ASSISTANT_AI_TIMEOUT"):
            Settings.from_environ({"SHELL_ASSISTANT_AI_TIMEOUT": "soon"})

    def test_non_positive_timeout(self) -> None:
        """A zero timeout is rejected."""
        with pytest.raises(ValueError, match="positive"):
            Settings.from_environ({"SHELL_ASSISTANT_AI_TIMEOUT": "0"})

    def test_relative_home(self) -> None:
        """The home directory must be absolute."""
        with pytest.raises(ValueError, match="absolute"):
            Settings.from_environ({"SHELL_ASSISTANT_HOME": "home/user"})

    def test_home_is_normalised(self) -> None:
        """A trailing slash or doubled separators are dropped from home."""
        assert Settings.from_environ({"SHELL_ASSISTANT_HOME": "/home/user/"}).home == HOME_DIR
        assert Settings.from_environ({"SHELL_ASSISTANT_HOME": "/home//./user"}).home == HOME_DIR
        assert Settings.from_environ({"SHELL_ASSISTANT_HOME": "/"}).home == "/"

    def test_fractional_port(self) -> None:
        """The port must be a whole number."""
        with pytest.raises(ValueError, match="whole number"):
            Settings.from_environ({"SHELL_ASSISTANT_PORT": "8080.9"})

    def test_non_positive_port(self) -> None:
        """A negative port is rejected."""
        with pytest.raises(ValueError, match="positive"):
            Settings.from_environ({"SHELL_ASSISTANT_PORT": "-1"})

    def test_pwd_shows_normalised_home(self) -> None:
        """A session started with a trailing-slash home prints it without one."""
        settings = Settings.from_environ({"SHELL_ASSISTANT_HOME": "/home/user/"})
        session = Session(collaborator=_Fixed(), settings=settings)
        assert session.run("pwd")[-1].text == HOME_DIR
