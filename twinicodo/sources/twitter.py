"""Twitter adaptive search adapter with cursor pagination."""

import logging
from typing import Iterator, List, Optional

import requests

from ..models.credentials import Credentials
from ..models.query import Query
from ..models.tweet import Tweet
from .base import DecodeError, NetworkError
from .decoder import decode_response, find_next_cursor, parse_response

logger = logging.getLogger(__name__)

SEARCH_URL = "https://api.twitter.com/2/search/adaptive.json"

# Sent verbatim with every search request
DEFAULT_PARAMS = [
    ("include_profile_interstitial_type", "1"),
    ("include_blocking", "1"),
    ("include_blocked_by", "1"),
    ("include_followed_by", "1"),
    ("include_want_retweets", "1"),
    ("include_mute_edge", "1"),
    ("include_can_dm", "1"),
    ("include_can_media_tag", "1"),
    ("skip_status", "1"),
    ("cards_platform", "Web-12"),
    ("include_cards", "1"),
    ("include_ext_alt_text", "true"),
    ("include_quote_count", "true"),
    ("include_reply_count", "1"),
    ("tweet_mode", "extended"),
    ("include_entities", "true"),
    ("include_user_entities", "true"),
    ("include_ext_media_color", "true"),
    ("include_ext_media_availability", "true"),
    ("send_error_codes", "true"),
    ("simple_quoted_tweet", "true"),
    ("tweet_search_mode", "live"),
    ("count", "100"),  # API default is 20
    ("query_source", "typed_query"),
    ("pc", "1"),
    ("spelling_corrections", "1"),
    ("ext", "mediaStats%2ChighlightedLabel"),
]


class SearchPaginator:
    """Pull-based walk over the search result pages of one query.

    Each ``next_page()`` call issues at most one request. The paginator is
    finished after a page without tweets, a page without a bottom cursor, or
    the first error.
    """

    def __init__(self, session: requests.Session, query: Query, timeout: float = 30):
        self.session = session
        self.query = str(query)
        self.timeout = timeout
        self.cursor: Optional[str] = None
        self.finished = False
        self.pages_fetched = 0

    def _params(self) -> list:
        params = list(DEFAULT_PARAMS)
        params.append(("q", self.query))
        if self.cursor is not None:
            params.append(("cursor", self.cursor))
        return params

    def next_page(self) -> Optional[List[Tweet]]:
        """Fetch and decode the next page.

        Returns:
            Tweets of the page, or None once the stream is exhausted

        Raises:
            NetworkError: On transport failure or non-success status
            DecodeError: If the page cannot be decoded
        """
        if self.finished:
            return None

        # Any failure below is terminal for this paginator
        self.finished = True
        try:
            response = self.session.get(SEARCH_URL, params=self._params(), timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            logger.error(f"Search request failed: {e}")
            raise NetworkError(f"Search request failed: {e}", status_code=status_code) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Search request failed: {e}")
            raise NetworkError(f"Search request failed: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise DecodeError(f"Malformed JSON in search response: {e}") from e

        raw = parse_response(payload)
        tweets = decode_response(raw)
        cursor = find_next_cursor(raw)
        self.pages_fetched += 1

        if tweets and cursor is not None:
            self.cursor = cursor
            self.finished = False
        else:
            logger.debug(
                f"Search finished after {self.pages_fetched} pages "
                f"(tweets: {len(tweets)}, cursor: {cursor is not None})"
            )
        return tweets

    def __iter__(self) -> Iterator[List[Tweet]]:
        while True:
            page = self.next_page()
            if page is None:
                return
            yield page


class TwitterSearchAdapter:
    """Adaptive search client authenticated with browser credentials."""

    def __init__(
        self,
        credentials: Credentials,
        session: Optional[requests.Session] = None,
        timeout: float = 30,
    ):
        """Initialize the search adapter.

        Args:
            credentials: Bearer token, csrf token and cookie fields
            session: Optional HTTP session for testing
            timeout: Per-request timeout in seconds

        Raises:
            AuthHeaderError: If a credential is not a valid header value
        """
        headers = credentials.headers()
        self.session = session if session is not None else requests.Session()
        self.session.headers.update(headers)
        self.timeout = timeout

    def paginate(self, query: Query) -> SearchPaginator:
        """Start a new paginated search for ``query``."""
        logger.debug(f"Starting search for {str(query)!r}")
        return SearchPaginator(self.session, query, timeout=self.timeout)

    def search_tweets(self, query: Query) -> Iterator[List[Tweet]]:
        """Yield every page of tweets for ``query``, one request per page."""
        yield from self.paginate(query)
