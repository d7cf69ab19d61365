"""Manual crawler runner for testing and debugging board selectors.

Lists a category and fetches details for the first few items, printing what
would be stored. Nothing is written to the database or object storage.

Usage:
    python scripts/run_crawler.py --crawler ppomppu
    python scripts/run_crawler.py --crawler ppomppu --category freeboard
    python scripts/run_crawler.py --crawler quasarzone --category qb_saleinfo --limit 5
"""

import argparse
import asyncio
import os
import sys

# Add backend to path so we can import hotdeal modules without installing
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "backend"))

from hotdeal.core.log_config import build_logger
from hotdeal.scrapers.factory import CrawlerFactory
from hotdeal.scrapers.register_crawlers import register_all_crawlers


async def run_crawler(crawler_name: str, category: str = None, limit: int = 10, verbose: bool = False):
    """Run a crawler and display the results.

    Args:
        crawler_name: Crawler identifier (e.g. "ppomppu")
        category: Category to list (defaults to the crawler's first supported one)
        limit: Maximum number of details to fetch
        verbose: Also print debug logs
    """
    levels = ["debug", "info", "warning", "error"] if verbose else ["warning", "error"]
    factory = register_all_crawlers(CrawlerFactory(logger=build_logger(levels)))

    crawler = factory.create_crawler(crawler_name)
    if crawler is None:
        print(f"\n❌ Error: Unknown crawler '{crawler_name}'")
        print("\n📋 Available crawlers:")
        for name in sorted(factory.get_registered_crawlers()):
            print(f"   - {name}")
        return

    category = category or sorted(crawler.supported_categories())[0]
    if category not in crawler.supported_categories():
        print(f"\n❌ Error: '{crawler_name}' does not support category '{category}'")
        print(f"   Supported: {', '.join(sorted(crawler.supported_categories()))}")
        return

    print(f"\n{'='*70}")
    print(f"  Running {crawler_name.upper()} crawler  (category: {category}, channel: {factory.channel_id(crawler_name)})")
    print(f"{'='*70}\n")

    items = await crawler.list_items(category)
    if not items:
        print("⚠️  No items found.\n")
        return

    print(f"✅ Listed {len(items)} items, fetching {min(limit, len(items))} details\n")

    for i, item in enumerate(items[:limit], 1):
        detail = await crawler.fetch_detail(category, item.external_id)
        if detail is None:
            print(f"[{i}] #{item.external_id}  ⚠️  detail unavailable\n")
            continue

        print(f"[{i}] #{item.external_id} {detail.title}")
        print(f"    🏪 Seller: {detail.seller or item.seller or '-'}")
        print(f"    📁 Category: {detail.category_subtitle or item.category_subtitle or '-'}")
        print(f"    💰 Price: {_format_price(detail.price, detail.currency)}")
        print(f"    🚚 Free shipping: {'Y' if detail.free_shipping else 'N'}")
        print(f"    🖼️  Thumbnail: {detail.thumbnail_url or '-'}")
        print(f"    🔗 Link: {(detail.product_link or '-')[:80]}")
        print()


def _format_price(price: int, currency: str) -> str:
    """Format a price stored in the currency's smallest unit."""
    if not price:
        return "-"
    if currency == "KRW":
        return f"{price:,}원"
    elif currency == "USD":
        return f"${price / 100:,.2f}"
    else:
        return f"{price:,} {currency}"


def main():
    """Parse arguments and run the crawler."""
    parser = argparse.ArgumentParser(
        description="Run a board crawler without storing anything",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/run_crawler.py --crawler ppomppu
  python scripts/run_crawler.py --crawler quasarzone --limit 5
        """,
    )
    parser.add_argument("--crawler", required=True, help="Crawler name (e.g., 'ppomppu', 'quasarzone')")
    parser.add_argument("--category", help="Category id (e.g., 'ppomppu', 'freeboard', 'qb_saleinfo')")
    parser.add_argument("--limit", type=int, default=10, help="Maximum number of details to fetch (default: 10)")
    parser.add_argument("--verbose", action="store_true", help="Print debug logs")
    args = parser.parse_args()

    asyncio.run(run_crawler(args.crawler, args.category, args.limit, args.verbose))


if __name__ == "__main__":
    main()
