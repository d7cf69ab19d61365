"""Ingestion orchestration service.

Connects the crawler layer with storage and image relocation. For every
configured crawl target it lists items, skips the ones already stored,
fetches details for the rest, re-hosts thumbnails and persists the merged
records.
"""

import asyncio
import dataclasses
import enum
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

import structlog

from hotdeal.config import CrawlTarget
from hotdeal.scrapers.base import BaseCrawler, ListingItem, ProductRecord
from hotdeal.scrapers.factory import CrawlerFactory
from hotdeal.services.image_relocator import ImageRelocator
from hotdeal.services.product_store import ProductStore


class ItemOutcome(str, enum.Enum):
    SAVED = "saved"
    ALREADY_EXISTS = "already_exists"
    DETAIL_UNAVAILABLE = "detail_unavailable"


@dataclass
class TargetStats:
    """Counters for one crawl target."""

    crawler: str
    category: str
    processed: int = 0  # Items listed and attempted
    saved: int = 0  # Items newly inserted
    skipped_existing: int = 0
    failed: int = 0  # Detail unavailable or storage error
    error: Optional[str] = None  # Set when the whole target was skipped

    def record(self, outcome: ItemOutcome) -> None:
        if outcome is ItemOutcome.SAVED:
            self.saved += 1
        elif outcome is ItemOutcome.ALREADY_EXISTS:
            self.skipped_existing += 1
        else:
            self.failed += 1


@dataclass
class RunSummary:
    """Per-target counters and run totals."""

    targets: List[TargetStats] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return sum(t.processed for t in self.targets)

    @property
    def saved(self) -> int:
        return sum(t.saved for t in self.targets)


class IngestionService:
    """Runs crawl targets through dedupe, detail fetch, relocation and storage.

    Targets are processed in declared order. Items of one target run
    concurrently, bounded by ``max_workers``; each item still goes through
    its stages in order. A failing item or target is logged and skipped.
    Only a storage connection failure aborts the run.
    """

    def __init__(
        self,
        crawler_factory: CrawlerFactory,
        store: ProductStore,
        relocator: Optional[ImageRelocator] = None,
        logger=None,
        max_workers: int = 5,
        image_folder: str = "hotdeal",
    ):
        """Initialize ingestion service.

        Args:
            crawler_factory: Registry resolving crawler names and channels
            store: Product storage
            relocator: Image relocator; thumbnails keep their source URL when None
            logger: Structlog logger for this run
            max_workers: Maximum items processed concurrently per target
            image_folder: Object storage folder for relocated thumbnails
        """
        self.crawler_factory = crawler_factory
        self.store = store
        self.relocator = relocator
        self.max_workers = max_workers
        self.image_folder = image_folder
        self.logger = (logger or structlog.get_logger(__name__)).bind(service="ingestion_service")

    async def run(self, targets: Iterable[CrawlTarget]) -> RunSummary:
        """Process every crawl target.

        Raises:
            StorageConnectionError: If storage is unreachable; nothing is processed
        """
        await self.store.connect()

        summary = RunSummary()
        for target in targets:
            self.logger.info("target_started", crawler=target.crawler, category=target.category)
            stats = await self.run_target(target)
            summary.targets.append(stats)
            self.logger.info(
                "target_complete",
                crawler=stats.crawler,
                category=stats.category,
                processed=stats.processed,
                saved=stats.saved,
                skipped_existing=stats.skipped_existing,
                failed=stats.failed,
            )

        self.logger.info("run_complete", processed=summary.processed, saved=summary.saved)
        return summary

    async def run_target(self, target: CrawlTarget) -> TargetStats:
        """List one target's items and ingest them.

        Unknown crawlers, unsupported categories and listing failures
        leave the stats at zero with ``error`` set.
        """
        stats = TargetStats(crawler=target.crawler, category=target.category)

        crawler = self.crawler_factory.create_crawler(target.crawler)
        channel_id = self.crawler_factory.channel_id(target.crawler)
        if crawler is None or channel_id is None:
            stats.error = f"unknown crawler: {target.crawler}"
            self.logger.error("target_skipped", crawler=target.crawler, category=target.category, error=stats.error)
            return stats

        if target.category not in crawler.supported_categories():
            stats.error = f"unsupported category: {target.category}"
            self.logger.error("target_skipped", crawler=target.crawler, category=target.category, error=stats.error)
            return stats

        try:
            items = await crawler.list_items(target.category)
        except Exception as e:
            stats.error = f"listing failed: {e}"
            self.logger.error(
                "listing_failed",
                crawler=target.crawler,
                category=target.category,
                error=str(e),
                exc_info=True,
            )
            return stats

        self.logger.info("items_listed", crawler=target.crawler, category=target.category, count=len(items))
        if not items:
            return stats

        semaphore = asyncio.Semaphore(self.max_workers)

        async def _worker(item: ListingItem) -> None:
            async with semaphore:
                await self._process_item(crawler, channel_id, target.category, item, stats)

        await asyncio.gather(*(_worker(item) for item in items))
        return stats

    async def _process_item(
        self,
        crawler: BaseCrawler,
        channel_id: int,
        category: str,
        item: ListingItem,
        stats: TargetStats,
    ) -> None:
        # Counters are only touched on the event loop thread, never across an await
        stats.processed += 1
        try:
            outcome = await self.ingest_item(crawler, channel_id, category, item)
        except Exception as e:
            stats.failed += 1
            self.logger.error(
                "item_failed",
                crawler=crawler.crawler_name(),
                external_id=item.external_id,
                error=str(e),
                exc_info=True,
            )
            return
        stats.record(outcome)

    async def ingest_item(
        self,
        crawler: BaseCrawler,
        channel_id: int,
        category: str,
        item: ListingItem,
    ) -> ItemOutcome:
        """Run one listing item through dedupe, detail, image and persist.

        Raises:
            StorageError: If the existence check or insert fails
        """
        if await self.store.exists(channel_id, item.external_id):
            self.logger.debug("item_exists", crawler=crawler.crawler_name(), external_id=item.external_id)
            return ItemOutcome.ALREADY_EXISTS

        detail = await crawler.fetch_detail(category, item.external_id)
        if detail is None:
            self.logger.warning("detail_unavailable", crawler=crawler.crawler_name(), external_id=item.external_id)
            return ItemOutcome.DETAIL_UNAVAILABLE

        record = ProductRecord.merge(channel_id, item, detail)

        if record.thumbnail_url and self.relocator is not None:
            stored_url = await self.relocator.relocate(record.thumbnail_url, self.image_folder)
            record = dataclasses.replace(record, thumbnail_storage_url=stored_url)

        if not await self.store.insert(record):
            return ItemOutcome.ALREADY_EXISTS

        self.logger.info(
            "item_saved",
            crawler=crawler.crawler_name(),
            external_id=record.external_id,
            title=record.title[:50],
            price=record.price,
        )
        return ItemOutcome.SAVED
