"""Decoding of adaptive search pages into canonical tweets."""

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Any, List, Optional

from pydantic import ValidationError

from ..models.raw_response import RawResponse, RawUser
from ..models.tweet import Tweet, User
from .base import DecodeError

logger = logging.getLogger(__name__)

# Custom epoch of snowflake ids, in milliseconds since the Unix epoch
TWITTER_EPOCH_MS = 1288834974657
CURSOR_ENTRY_ID = "sq-cursor-bottom"

_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ID_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def snowflake_to_millis(tweet_id: str) -> int:
    """Decode the creation instant embedded in a snowflake id.

    Args:
        tweet_id: Tweet id as a decimal string

    Returns:
        Milliseconds since the Unix epoch

    Raises:
        DecodeError: If the id is not a 64-bit decimal integer
    """
    if not isinstance(tweet_id, str) or not _ID_RE.fullmatch(tweet_id):
        raise DecodeError(f"invalid tweet id {tweet_id!r}")
    value = int(tweet_id)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise DecodeError(f"tweet id {tweet_id!r} out of 64-bit range")
    return (value >> 22) + TWITTER_EPOCH_MS


def snowflake_to_datetime(tweet_id: str) -> datetime:
    """Decode a snowflake id into an aware UTC datetime."""
    return _UNIX_EPOCH + timedelta(milliseconds=snowflake_to_millis(tweet_id))


def parse_response(payload: Any) -> RawResponse:
    """Validate a decoded JSON payload as one search page.

    Raises:
        DecodeError: If a consumed field is missing or has the wrong shape
    """
    try:
        return RawResponse.model_validate(payload)
    except ValidationError as e:
        raise DecodeError(f"unexpected search response: {e}") from e


def _to_user(raw: RawUser) -> User:
    return User(
        screen_name=raw.screen_name,
        name=raw.name,
        id_str=raw.id_str,
        extra=dict(raw.model_extra or {}),
    )


def decode_response(response: RawResponse) -> List[Tweet]:
    """Convert every tweet of a page into a ``Tweet``.

    Authors are resolved from the page's user map; a missing user leaves
    ``Tweet.user`` unset.

    Raises:
        DecodeError: If any tweet id cannot be decoded
    """
    users = response.global_objects.users
    tweets = []
    for raw in response.global_objects.tweets.values():
        raw_user = users.get(raw.user_id_str)
        if raw_user is None:
            logger.debug(f"No user {raw.user_id_str} for tweet {raw.id_str}")
        tweets.append(
            Tweet(
                id=raw.id_str,
                created_at=snowflake_to_datetime(raw.id_str),
                full_text=raw.full_text,
                user_id=raw.user_id_str,
                user=_to_user(raw_user) if raw_user is not None else None,
                extra=dict(raw.model_extra or {}),
            )
        )
    return tweets


def find_next_cursor(response: RawResponse) -> Optional[str]:
    """Return the bottom cursor of a page, or None if there is none."""
    for instruction in response.timeline.instructions:
        for entry in instruction.entries():
            if entry.entry_id == CURSOR_ENTRY_ID:
                operation = entry.content.operation
                return operation.cursor.value if operation else None
    return None
