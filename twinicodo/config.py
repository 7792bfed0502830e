"""Configuration management."""

import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Callable, Optional

from .models.credentials import Cookie, Credentials

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path.home() / ".config" / "twinicodo" / "config.json"


def config_path() -> Path:
    """Return the config file location (``TWINICODO_CONFIG_FILE`` or the default)."""
    path = os.getenv("TWINICODO_CONFIG_FILE", "")
    return Path(path).expanduser() if path else DEFAULT_CONFIG_FILE


@dataclass
class SystemConfig:
    """Twitter credentials from environment variables or the config file."""

    authorization_token: str
    csrf_token: str
    cookie_auth_token: str
    cookie_twitter_sess: str
    cookie_ct0: str

    @classmethod
    def from_cookie(
        cls, authorization_token: str, csrf_token: str, cookie: str
    ) -> "SystemConfig":
        """Build a configuration from the raw values copied out of a browser.

        Raises:
            CookieParseError: If the cookie lacks a required field
        """
        parsed = Cookie.parse(cookie)
        return cls(
            authorization_token=authorization_token.strip(),
            csrf_token=csrf_token.strip(),
            cookie_auth_token=parsed.auth_token,
            cookie_twitter_sess=parsed.twitter_sess,
            cookie_ct0=parsed.ct0,
        )

    @classmethod
    def from_env(cls) -> Optional["SystemConfig"]:
        """Load configuration from ``TWITTER_*`` environment variables.

        Returns None when none of them is set.

        Raises:
            ValueError: If only some of the variables are set
            CookieParseError: If ``TWITTER_COOKIE`` lacks a required field
        """
        names = ("TWITTER_BEARER_TOKEN", "TWITTER_CSRF_TOKEN", "TWITTER_COOKIE")
        values = [os.getenv(name, "") for name in names]
        if not any(values):
            return None

        missing = [name for name, value in zip(names, values) if not value]
        if missing:
            raise ValueError(
                f"Incomplete Twitter credentials in environment.\n"
                f"  - Missing: {', '.join(missing)}\n"
                f"  - Set all of {', '.join(names)} or none of them"
            )
        return cls.from_cookie(*values)

    @classmethod
    def load(cls, path: Optional[Path] = None) -> Optional["SystemConfig"]:
        """Load configuration from the JSON config file.

        Returns None if the file does not exist.

        Raises:
            ValueError: If the file is not valid JSON or lacks a field
        """
        path = path or config_path()
        if not path.exists():
            return None

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(
                f"Invalid JSON in config file {path}: {e}\n"
                f"  - Fix the file or run with --reset to recreate it"
            ) from e

        try:
            return cls(**{name: str(data[name]) for name in cls.__dataclass_fields__})
        except (KeyError, TypeError) as e:
            raise ValueError(
                f"Missing field {e} in config file {path}\n"
                f"  - Run with --reset to recreate it"
            ) from e

    def store(self, path: Optional[Path] = None) -> Path:
        """Persist configuration as JSON, readable by the current user only."""
        path = path or config_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(asdict(self), f, indent=2)
        path.chmod(0o600)
        return path

    def validate(self) -> None:
        """Validate configuration."""
        if not self.authorization_token:
            raise ValueError("Authorization bearer token is required")
        if not self.csrf_token:
            raise ValueError("CSRF token is required")
        if not self.cookie_auth_token:
            raise ValueError("Cookie auth_token is required")
        if not self.cookie_twitter_sess:
            raise ValueError("Cookie _twitter_sess is required")
        if not self.cookie_ct0:
            raise ValueError("Cookie ct0 is required")

    def to_credentials(self) -> Credentials:
        return Credentials(
            authorization_token=self.authorization_token,
            csrf_token=self.csrf_token,
            cookie=Cookie(
                auth_token=self.cookie_auth_token,
                twitter_sess=self.cookie_twitter_sess,
                ct0=self.cookie_ct0,
            ),
        )


def prompt_config(input_fn: Callable[[str], str] = input) -> SystemConfig:
    """Ask for the bearer token, csrf token and cookie on the terminal.

    Raises:
        CookieParseError: If the entered cookie lacks a required field
    """
    logger.info("🔑 Please provide Twitter auth information!")
    authorization_token = input_fn("Authorization bearer token: ")
    csrf_token = input_fn("CSRF token: ")
    cookie = input_fn("Cookie: ")
    return SystemConfig.from_cookie(authorization_token, csrf_token, cookie)
