"""Search-to-XML export orchestration."""

import asyncio
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Tuple, Union

from ..models.query import Query
from ..models.results import ExportResult, FetchResult
from ..models.tweet import Tweet
from ..publishers.nicodo_xml import save_xml
from ..sources.twitter import TwitterSearchAdapter
from .caption_transformer import CaptionTransformer

logger = logging.getLogger(__name__)


def _describe_page(tweets: List[Tweet]) -> str:
    first = tweets[0]
    screen_name = first.user.screen_name if first.user else ""
    created_at = first.created_at.isoformat() if first.created_at else ""
    text = first.full_text[:20].replace("\n", "")
    return f"{len(tweets)} tweets: {screen_name}/{first.id} {created_at} {text}"


class SearchIngestor:
    """Fetches every search page, converts the tweets and writes the XML."""

    def __init__(
        self,
        search_adapter: TwitterSearchAdapter,
        transformer: Optional[CaptionTransformer] = None,
    ) -> None:
        """Initialize search ingestor.

        Args:
            search_adapter: Handles search API communication
            transformer: Converts tweets into comments
        """
        self.search = search_adapter
        self.transformer = transformer if transformer is not None else CaptionTransformer()

    async def fetch_all_tweets(self, query: Query) -> Tuple[List[Tweet], FetchResult]:
        """Walk all pages for ``query`` one request at a time.

        Raises:
            NetworkError: On the first failed request
            DecodeError: On the first page that cannot be decoded
        """
        start_time = datetime.now(timezone.utc)
        paginator = self.search.paginate(query)

        tweets: List[Tweet] = []
        while True:
            page = await asyncio.to_thread(paginator.next_page)
            if page is None:
                break
            if page:
                logger.info(_describe_page(page))
            tweets.extend(page)

        execution_time = int((datetime.now(timezone.utc) - start_time).total_seconds() * 1000)
        logger.info(f"📥 Fetched {len(tweets)} tweets in {paginator.pages_fetched} pages")
        return tweets, FetchResult(
            pages_fetched=paginator.pages_fetched,
            tweets_fetched=len(tweets),
            execution_time_ms=execution_time,
        )

    async def export(self, query: Query, output_path: Union[str, Path]) -> ExportResult:
        """Search ``query`` and save the comments to ``output_path``.

        The output file is only opened once every page has been fetched and
        converted, and is not created at all when nothing was found.

        Raises:
            TwitterError: If fetching or decoding fails
            XMLWriteError: If the file cannot be written
        """
        start_time = datetime.now(timezone.utc)

        tweets, fetched = await self.fetch_all_tweets(query)
        chats = self.transformer.transform(tweets)

        if not chats:
            logger.warning("No tweet found.")
            status = "no_data"
            written = 0
            output = None
        else:
            written = await asyncio.to_thread(save_xml, output_path, chats)
            status = "success"
            output = str(output_path)

        execution_time = int((datetime.now(timezone.utc) - start_time).total_seconds() * 1000)
        return ExportResult(
            query=str(query),
            output_path=output,
            pages_fetched=fetched.pages_fetched,
            tweets_fetched=fetched.tweets_fetched,
            chats_written=written,
            status=status,
            execution_time_ms=execution_time,
        )
