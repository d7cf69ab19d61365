"""Registry for creating configured crawler instances."""

from typing import Dict, List, Optional, Tuple, Type

import httpx
import structlog

from hotdeal.scrapers.base import BaseCrawler
from hotdeal.scrapers.utils import DomainRateLimiter


class CrawlerFactory:
    """Maps configured crawler identifiers to implementations and channels.

    Shared services (HTTP client, rate limiter, logger) are handed to each
    crawler instance at creation time.
    """

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        rate_limiter: Optional[DomainRateLimiter] = None,
        logger=None,
        timeout: float = 10.0,
    ):
        self.http_client = http_client
        self.rate_limiter = rate_limiter or DomainRateLimiter()
        self.logger = logger or structlog.get_logger(__name__)
        self.timeout = timeout
        self._registry: Dict[str, Tuple[Type[BaseCrawler], int]] = {}

    def register_crawler(self, name: str, crawler_class: Type[BaseCrawler], channel_id: int) -> None:
        """Register a crawler class under a configuration identifier.

        Args:
            name: Crawler identifier used in crawl targets (e.g. "ppomppu")
            crawler_class: Class implementing BaseCrawler
            channel_id: Storage channel id for records from this crawler
        """
        if not issubclass(crawler_class, BaseCrawler):
            raise ValueError(f"Crawler class must implement BaseCrawler: {crawler_class}")

        self._registry[name] = (crawler_class, channel_id)
        self.logger.debug("crawler_registered", crawler=name, channel_id=channel_id)

    def create_crawler(self, name: str) -> Optional[BaseCrawler]:
        """Create a crawler instance, or None if the name is not registered."""
        entry = self._registry.get(name)
        if entry is None:
            self.logger.warning("crawler_not_found", crawler=name)
            return None

        crawler_class, _ = entry
        return crawler_class(
            http_client=self.http_client,
            rate_limiter=self.rate_limiter,
            logger=self.logger,
            timeout=self.timeout,
        )

    def channel_id(self, name: str) -> Optional[int]:
        entry = self._registry.get(name)
        return entry[1] if entry else None

    def get_registered_crawlers(self) -> List[str]:
        return list(self._registry.keys())

    def has_crawler(self, name: str) -> bool:
        return name in self._registry
