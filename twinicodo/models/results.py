"""Result models for export operations."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class FetchResult:
    """Result of walking every search page for a query."""

    pages_fetched: int
    tweets_fetched: int
    execution_time_ms: int


@dataclass
class ExportResult:
    """Result of a search-to-XML export."""

    query: str
    output_path: Optional[str]
    pages_fetched: int
    tweets_fetched: int
    chats_written: int
    status: str  # "success", "no_data"
    execution_time_ms: int
