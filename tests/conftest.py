"""Shared test fixtures and utilities."""

from datetime import datetime, timedelta, timezone
from typing import Optional
from unittest.mock import MagicMock

import pytest
import requests

from twinicodo.models.credentials import Cookie, Credentials
from twinicodo.models.tweet import Tweet, User

TWITTER_EPOCH_MS = 1288834974657


def tweet_id_at(millis: int, sequence: int = 0) -> str:
    """Build a snowflake id whose embedded creation time is ``millis``."""
    return str(((millis - TWITTER_EPOCH_MS) << 22) | sequence)


def create_raw_tweet(
    tweet_id: str,
    full_text: str = "hello",
    user_id: str = "1",
    **extra,
) -> dict:
    """Helper to create a raw tweet record as returned by the search API."""
    raw = {
        "id_str": tweet_id,
        "full_text": full_text,
        "user_id": int(user_id),
        "user_id_str": user_id,
    }
    raw.update(extra)
    return raw


def create_raw_user(user_id: str = "1", screen_name: str = "alice") -> dict:
    """Helper to create a raw user record."""
    return {
        "id": int(user_id),
        "id_str": user_id,
        "name": screen_name.title(),
        "screen_name": screen_name,
    }


def create_cursor_entry(value: str) -> dict:
    return {
        "entryId": "sq-cursor-bottom",
        "sortIndex": "0",
        "content": {"operation": {"cursor": {"value": value, "cursorType": "Bottom"}}},
    }


def create_page(
    tweets: Optional[list] = None,
    users: Optional[list] = None,
    cursor: Optional[str] = None,
    replace: bool = False,
) -> dict:
    """Helper to create one adaptive search page.

    Args:
        tweets: Raw tweet records
        users: Raw user records
        cursor: Bottom cursor value; no cursor entry when None
        replace: Deliver the cursor through a ``replaceEntry`` instruction

    Returns:
        Decoded JSON payload
    """
    instructions = [
        {
            "addEntries": {
                "entries": [
                    {
                        "entryId": "sq-cursor-top",
                        "sortIndex": "999999999",
                        "content": {"operation": {"cursor": {"value": "top-cursor"}}},
                    }
                ]
            }
        }
    ]
    if cursor is not None:
        if replace:
            instructions.append(
                {
                    "replaceEntry": {
                        "entryIdToReplace": "sq-cursor-bottom",
                        "entry": create_cursor_entry(cursor),
                    }
                }
            )
        else:
            instructions[0]["addEntries"]["entries"].append(create_cursor_entry(cursor))

    return {
        "globalObjects": {
            "tweets": {t["id_str"]: t for t in tweets or []},
            "users": {u["id_str"]: u for u in users or []},
        },
        "timeline": {"id": "search-6706999999999999999", "instructions": instructions},
    }


def create_mock_response(payload=None, status_code: int = 200) -> MagicMock:
    """Helper to create a mock ``requests`` response."""
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(
            f"{status_code} Client Error", response=response
        )
    else:
        response.raise_for_status.return_value = None
    return response


def create_tweet(
    seconds: Optional[int],
    full_text: str = "hello",
    tweet_id: str = "1",
    screen_name: Optional[str] = "alice",
) -> Tweet:
    """Helper to create a decoded tweet created ``seconds`` after the epoch."""
    created_at = None
    if seconds is not None:
        created_at = datetime(1970, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=seconds)
    return Tweet(
        id=tweet_id,
        created_at=created_at,
        full_text=full_text,
        user_id="1",
        user=User(screen_name=screen_name) if screen_name else None,
    )


@pytest.fixture
def credentials():
    """Valid credentials."""
    return Credentials(
        authorization_token="bearer-token",
        csrf_token="csrf-token",
        cookie=Cookie(auth_token="A", twitter_sess="B", ct0="C"),
    )


@pytest.fixture
def mock_session():
    """Create a mock ``requests.Session``."""
    session = MagicMock()
    session.headers = {}
    return session


@pytest.fixture
def base_millis():
    """Creation time of the first sample tweet (2020-08-02T16:25:21.282Z)."""
    return 1596385521282
