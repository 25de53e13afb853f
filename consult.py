#!/usr/bin/env python3
"""Archivist CLI - book recommendations from a local catalog."""
import argparse
import asyncio
import sys
import json
from tabulate import tabulate
from archivist.archive import Archive
from archivist.client import CatalogClient
from archivist.config import Config
from archivist.errors import LoadFailure, NotReadyRejection
from archivist.models import QueryResult
import logging

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False):
    """Configure root logging."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )


def build_archive(args, config: Config, sync_client: bool = True) -> Archive:
    """Create an archive from CLI flags and config."""
    client = None
    if sync_client:
        client = CatalogClient(
            timeout=config.DEFAULT_TIMEOUT,
            max_retries=config.DEFAULT_MAX_RETRIES
        )
    delay = args.delay if getattr(args, "delay", None) is not None else config.CONSULT_DELAY
    return Archive(
        client=client,
        delay=delay,
        fallback_pool=config.FALLBACK_POOL_SIZE,
        min_score=config.MIN_MATCH_SCORE
    )


def format_rating(result: QueryResult) -> str:
    """Rating line, or Unrated."""
    if result.cover.rating:
        return f"Rating: {result.cover.rating}/5 ({result.cover.count} votes)"
    return "Unrated"


def cover_panel(result: QueryResult) -> str:
    """Cover URL, or a text-only panel when there is none."""
    if result.cover.cover_url:
        return result.cover.cover_url
    return f"[ {result.recommendation.title} ]\n[ {result.recommendation.author} ]"


def display_result(result: QueryResult, format_type: str):
    """Display a result in the specified format."""
    if format_type == "table":
        rows = [
            ["Title", result.recommendation.title],
            ["Author", result.recommendation.author],
            ["Rating", format_rating(result)],
            ["Cover", cover_panel(result)],
            ["Reason", result.recommendation.reason]
        ]
        print("\n" + tabulate(rows, tablefmt="grid"))
    
    elif format_type == "json":
        print(json.dumps(result.to_dict(), indent=2))
    
    elif format_type == "compact":
        print(f"{result.recommendation.title} - {result.recommendation.author}")


async def run_query(archive: Archive, query: str, format_type: str) -> bool:
    """Consult the archive once. Blank queries are ignored."""
    query = query.strip()
    if not query:
        return False
    
    logger.info("Consulting local archives...")
    result = await archive.consult(query)
    display_result(result, format_type)
    return True


async def query_command(args, config: Config):
    """Load the catalog asynchronously and answer a single query."""
    archive = build_archive(args, config, sync_client=False)
    await archive.aload(args.catalog or config.CATALOG_SOURCE, timeout=config.DEFAULT_TIMEOUT)
    await run_query(archive, args.query, args.format)


def interactive_command(args, config: Config):
    """Load the catalog once, then answer queries read from stdin."""
    archive = build_archive(args, config)
    try:
        archive.load(args.catalog or config.CATALOG_SOURCE)
        
        print("Type a mood, theme or title. Empty line or Ctrl-D to quit.")
        while True:
            try:
                line = input("> ")
            except EOFError:
                break
            if not line.strip():
                break
            try:
                asyncio.run(run_query(archive, line, args.format))
            except NotReadyRejection as e:
                logger.error(f"❌ {e}")
    finally:
        archive.client.close()


def show_stats(args, config: Config):
    """Show catalog statistics."""
    archive = build_archive(args, config)
    try:
        archive.load(args.catalog or config.CATALOG_SOURCE)
        catalog = archive.catalog
        
        print("\n" + "=" * 50)
        print("CATALOG STATISTICS")
        print("=" * 50)
        print(f"Indexed volumes: {len(catalog)}")
        print(f"With cover image: {sum(1 for b in catalog if b.cover_image)}")
        print(f"With awards: {sum(1 for b in catalog if b.awards)}")
        print(f"Fallback pool: {min(archive.fallback_pool, len(catalog))}")
        print("=" * 50 + "\n")
    finally:
        archive.client.close()


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Archivist - book recommendations from a local catalog",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Ask for something sad
  %(prog)s query "a sad story"
  
  # No artificial pause, JSON output
  %(prog)s query "future war" --delay 0 --format json
  
  # Keep asking
  %(prog)s --catalog books.csv interactive
  
  # Show statistics
  %(prog)s stats
        """
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--catalog", help="Catalog CSV path or URL (default: $CATALOG_SOURCE)")
    
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")
    
    # Query command
    query_parser = subparsers.add_parser("query", help="Recommend one book")
    query_parser.add_argument("query", help="Mood, theme or title")
    query_parser.add_argument("--format", choices=["table", "json", "compact"], default="table", help="Output format")
    query_parser.add_argument("--delay", type=float, help="Pause before scoring in seconds (default: $CONSULT_DELAY)")
    
    # Interactive command
    interactive_parser = subparsers.add_parser("interactive", help="Answer queries from stdin")
    interactive_parser.add_argument("--format", choices=["table", "json", "compact"], default="table", help="Output format")
    interactive_parser.add_argument("--delay", type=float, help="Pause before scoring in seconds")
    
    # Stats command
    subparsers.add_parser("stats", help="Show catalog statistics")
    
    args = parser.parse_args()
    
    if not args.command:
        parser.print_help()
        sys.exit(1)
    
    configure_logging(args.verbose)
    config = Config()
    
    try:
        if args.command == "query":
            asyncio.run(query_command(args, config))
        
        elif args.command == "interactive":
            interactive_command(args, config)
        
        elif args.command == "stats":
            show_stats(args, config)
    
    except LoadFailure as e:
        logger.error(f"❌ Could not load catalog: {e}")
        sys.exit(1)
    except NotReadyRejection as e:
        logger.error(f"❌ {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("\n⚠️  Interrupted by user")
        sys.exit(0)


if __name__ == "__main__":
    main()
