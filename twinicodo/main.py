"""Search tweets and save them as a niconico comment XML file."""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Callable, Optional, Sequence

from dateutil import parser as date_parser
from dotenv import load_dotenv

from .config import SystemConfig, prompt_config
from .ingestion.search_ingestor import SearchIngestor
from .models.query import Query
from .publishers.nicodo_xml import XMLWriteError
from .sources.base import TwitterError
from .sources.twitter import TwitterSearchAdapter

logger = logging.getLogger(__name__)


def _date(value: str) -> str:
    """Normalize a date argument to ``YYYY-MM-DD``."""
    try:
        return date_parser.isoparse(value).date().isoformat()
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}: {e}") from e


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="twinicodo",
        description="A command line tool to search tweets and convert into niconico XML file",
    )
    parser.add_argument("text", help="Search text.")
    parser.add_argument("--since", "-s", type=_date, help="Oldest date to search (YYYY-MM-DD).")
    parser.add_argument("--until", "-u", type=_date, help="Newest date to search (YYYY-MM-DD).")
    parser.add_argument(
        "--output",
        "-o",
        help="Output XML path (default: <text>_<since>_<until>.xml).",
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Ask for Twitter credentials again and overwrite the stored ones.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    return parser


def default_output(query: Query) -> str:
    parts = [p for p in (query.text, query.since, query.until) if p]
    return "_".join(parts) + ".xml"


def resolve_config(reset: bool, input_fn: Callable[[str], str] = input) -> SystemConfig:
    """Return valid credentials, prompting and storing them when needed.

    Environment variables win over the config file; ``reset`` skips both.
    """
    settings = None
    if not reset:
        settings = SystemConfig.from_env() or SystemConfig.load()
        if settings is not None:
            try:
                settings.validate()
            except ValueError as e:
                logger.warning(f"⚠️  Stored configuration invalid: {e}")
                settings = None

    if settings is None:
        settings = prompt_config(input_fn)
        settings.validate()
        path = settings.store()
        logger.info(f"✅ Configuration saved to {path}")

    return settings


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the search export."""
    args = _build_parser().parse_args(argv)

    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    query = Query(text=args.text, since=args.since, until=args.until)
    output = args.output or default_output(query)

    try:
        settings = resolve_config(args.reset)
        logger.info("✅ Configuration loaded")

        timeout = float(os.getenv("SEARCH_TIMEOUT_SECONDS", "30"))
        adapter = TwitterSearchAdapter(settings.to_credentials(), timeout=timeout)
        ingestor = SearchIngestor(adapter)

        logger.info(f"🔎 Searching {str(query)!r}...")
        result = asyncio.run(ingestor.export(query, output))

        if result.status == "success":
            logger.info(f"✅ {result.chats_written} tweets are saved to {result.output_path}!")
        return 0

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 1
    except (TwitterError, XMLWriteError, ValueError, OSError, EOFError) as e:
        logger.error(f"❌ {e}", exc_info=args.verbose)
        return 1


if __name__ == "__main__":
    sys.exit(main())
