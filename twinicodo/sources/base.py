"""Errors shared by the search API adapters."""

from typing import Optional


class TwitterError(Exception):
    """Base exception for Twitter search errors."""

    pass


class AuthHeaderError(TwitterError):
    """Raised when a credential cannot be encoded as an HTTP header value."""

    def __init__(self, header: str):
        self.header = header
        super().__init__(f"invalid value for header {header}")


class CookieParseError(TwitterError):
    """Raised when a required cookie field is missing from the cookie string."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"cookie {field} missing")


class NetworkError(TwitterError):
    """Raised on transport failures and non-success HTTP statuses."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class DecodeError(TwitterError):
    """Raised when a response or a tweet identifier cannot be decoded."""

    pass
