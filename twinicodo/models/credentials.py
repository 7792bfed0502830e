"""Twitter web credentials: cookie fields and outbound auth headers."""

import re
from dataclasses import dataclass
from typing import Dict

from ..sources.base import AuthHeaderError, CookieParseError

# Visible ASCII plus horizontal tab
_HEADER_VALUE_RE = re.compile(r"^[\t\x20-\x7e]*$")


def cookie_map(raw: str) -> Dict[str, str]:
    """Split a ``key=value; key=value`` cookie header into a dict.

    Parts without ``=`` are skipped; a repeated key keeps its last value.
    """
    pairs = {}
    for part in raw.split(";"):
        key, sep, value = part.strip().partition("=")
        if sep:
            pairs[key.strip()] = value.strip()
    return pairs


@dataclass
class Cookie:
    """The three cookie fields required by the web search API."""

    auth_token: str
    twitter_sess: str
    ct0: str

    @classmethod
    def parse(cls, raw: str) -> "Cookie":
        """Parse a raw cookie header string.

        Args:
            raw: Cookie header as copied from the browser

        Returns:
            Cookie with the three required fields

        Raises:
            CookieParseError: If ``auth_token``, ``_twitter_sess`` or ``ct0`` is missing
        """
        pairs = cookie_map(raw)
        values = []
        for field in ("auth_token", "_twitter_sess", "ct0"):
            value = pairs.get(field)
            if not value:
                raise CookieParseError(field)
            values.append(value)
        return cls(*values)

    def __str__(self) -> str:
        return f"auth_token={self.auth_token}; _twitter_sess={self.twitter_sess}; ct0={self.ct0}"


@dataclass
class Credentials:
    """Everything needed to authenticate a search request."""

    authorization_token: str
    csrf_token: str
    cookie: Cookie

    def headers(self) -> Dict[str, str]:
        """Build the authorization, csrf and cookie headers.

        Raises:
            AuthHeaderError: If a value contains characters illegal in a header
        """
        headers = {
            "authorization": f"Bearer {self.authorization_token}",
            "x-csrf-token": self.csrf_token,
            "cookie": str(self.cookie),
        }
        for name, value in headers.items():
            if not _HEADER_VALUE_RE.match(value):
                raise AuthHeaderError(name)
        return headers
