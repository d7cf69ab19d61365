"""Command-line entry point for a single ingestion run.

Usage:
    hotdeal-ingest
    hotdeal-ingest --config /etc/hotdeal/config.json
    hotdeal-ingest --create-tables
"""

import argparse
import asyncio
import sys
from typing import List, Optional

import httpx

from hotdeal.config import Settings, load_settings
from hotdeal.core.exceptions import StorageError
from hotdeal.core.log_config import build_logger
from hotdeal.db.session import create_engine
from hotdeal.scrapers.factory import CrawlerFactory
from hotdeal.scrapers.ingestion_service import IngestionService, RunSummary
from hotdeal.scrapers.register_crawlers import register_all_crawlers
from hotdeal.scrapers.utils.rate_limiter import DomainRateLimiter
from hotdeal.services.image_relocator import ImageRelocator
from hotdeal.services.object_storage import S3Storage
from hotdeal.services.product_store import ProductStore


EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_STORAGE_ERROR = 2


async def run_ingestion(settings: Settings, logger, create_tables: bool = False) -> RunSummary:
    """Wire collaborators from settings and run every crawl target once.

    Raises:
        StorageConnectionError: If the database is unreachable
        StorageError: If the products table cannot be created
    """
    store = ProductStore(create_engine(settings), logger=logger)

    async with httpx.AsyncClient(timeout=settings.http_timeout, follow_redirects=True) as http_client:
        factory = register_all_crawlers(CrawlerFactory(
            http_client=http_client,
            rate_limiter=DomainRateLimiter(),
            logger=logger,
            timeout=settings.http_timeout,
        ))

        relocator = None
        if settings.image_relocation_enabled:
            storage = S3Storage(
                bucket=settings.bucket,
                region=settings.region,
                access_key_id=settings.access_key_id,
                secret_access_key=settings.secret_access_key,
            )
            relocator = ImageRelocator(storage, http_client=http_client, logger=logger)
            logger.info("image_relocation_enabled", **storage.describe())
        else:
            logger.warning("image_relocation_disabled", reason="bucket or credentials not configured")

        service = IngestionService(
            factory,
            store,
            relocator=relocator,
            logger=logger,
            max_workers=settings.max_workers,
            image_folder=settings.image_folder,
        )

        try:
            if create_tables:
                await store.connect()
                await store.create_schema()
            return await service.run(settings.crawl_targets)
        finally:
            await store.close()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Collect hot deals and store new ones")
    parser.add_argument("--config", help="Path to config.json (default: ./config.json if present)")
    parser.add_argument("--create-tables", action="store_true", help="Create the products table before running")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    result = load_settings(args.config)
    if not result.ok:
        print(f"[hotdeal] failed to load configuration: {result.error}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    settings = result.settings
    logger = build_logger(settings.log_levels)

    try:
        summary = asyncio.run(run_ingestion(settings, logger, create_tables=args.create_tables))
    except StorageError as e:
        logger.error("run_aborted", error=e.message)
        return EXIT_STORAGE_ERROR

    for stats in summary.targets:
        logger.info(
            "target_summary",
            crawler=stats.crawler,
            category=stats.category,
            processed=stats.processed,
            saved=stats.saved,
            error=stats.error,
        )
    logger.info("ingestion_finished", processed=summary.processed, saved=summary.saved)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
