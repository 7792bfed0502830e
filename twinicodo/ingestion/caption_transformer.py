"""Conversion of fetched tweets into timed comments."""

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

from ..models.chat import Chat
from ..models.tweet import Tweet

logger = logging.getLogger(__name__)

_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class TextCleaner:
    """Strips hashtags and bare URLs from tweet text."""

    def __init__(self):
        self.hashtag_re = re.compile(r"#\w+[ \t]*")
        self.url_re = re.compile(r"(?:https?|ftp)://\S+[ \t]*")

    def clean(self, text: str) -> str:
        """Remove hashtags first, then URLs, and trim the result."""
        text = self.hashtag_re.sub("", text).strip()
        return self.url_re.sub("", text).strip()


def _created_at(tweet: Tweet) -> datetime:
    return tweet.created_at if tweet.created_at is not None else _UNIX_EPOCH


def _timestamp(tweet: Tweet) -> int:
    """Creation time in whole seconds; tweets without one count as epoch 0."""
    if tweet.created_at is None:
        return 0
    return (tweet.created_at - _UNIX_EPOCH) // timedelta(seconds=1)


class CaptionTransformer:
    """Sorts tweets by creation time and maps them to comments."""

    def __init__(self, cleaner: Optional[TextCleaner] = None):
        """Initialize the transformer.

        Args:
            cleaner: Text cleaner shared across runs (built once if not given)
        """
        self.cleaner = cleaner if cleaner is not None else TextCleaner()

    def transform(self, tweets: Iterable[Tweet]) -> List[Chat]:
        """Convert tweets from any number of pages into ordered comments.

        The first comment's creation time is the origin every ``vpos`` is
        measured from.

        Args:
            tweets: Tweets in any order

        Returns:
            Comments sorted by creation time
        """
        ordered = sorted(tweets, key=_created_at)

        chats = []
        origin = None
        for tweet in ordered:
            date = _timestamp(tweet)
            if origin is None:
                origin = date
            chats.append(
                Chat(
                    date=date,
                    vpos=date - origin,
                    content=self.cleaner.clean(tweet.full_text),
                    user_id=tweet.user.screen_name if tweet.user else None,
                    id=tweet.id,
                    mail=None,
                )
            )

        logger.debug(f"Converted {len(chats)} tweets into comments")
        return chats
