"""Base crawler interface.

Every deal board is crawled by a class implementing BaseCrawler. Listing
failures yield an empty list and detail failures yield None.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import FrozenSet, List, Optional

import httpx
import structlog
from bs4 import BeautifulSoup

from hotdeal.core.exceptions import ScraperError
from hotdeal.scrapers.utils.rate_limiter import DomainRateLimiter
from hotdeal.scrapers.utils.retry import http_retry
from hotdeal.scrapers.utils.user_agents import browser_headers


@dataclass(frozen=True)
class ListingItem:
    """A product row seen on a board's listing page."""

    external_id: str  # Board-specific post number
    seller: str = ""
    category: str = ""  # Crawl target category id (e.g. "ppomppu")
    category_subtitle: str = ""  # Board's own category label (e.g. "디지털")

    def __post_init__(self):
        if not self.external_id:
            raise ValueError("external_id is required")


@dataclass(frozen=True)
class ProductDetail:
    """Data scraped from one deal's detail page."""

    title: str
    site_link: str
    price: int = 0  # Smallest normal unit: won for KRW, cents for USD
    currency: str = "KRW"
    free_shipping: bool = False
    thumbnail_url: Optional[str] = None
    product_link: Optional[str] = None
    seller: Optional[str] = None
    category_subtitle: Optional[str] = None

    def __post_init__(self):
        if self.price is None or self.price < 0:
            raise ValueError("price must be a non-negative integer")


class BaseCrawler(ABC):
    """Interface implemented by every deal board crawler."""

    @abstractmethod
    async def list_items(self, category: str) -> List[ListingItem]:
        """Fetch a category's listing page.

        Args:
            category: Board category id (e.g. "ppomppu")

        Returns:
            Listing items in page order; empty list on any failure
        """

    @abstractmethod
    async def fetch_detail(self, category: str, external_id: str) -> Optional[ProductDetail]:
        """Fetch one item's detail page.

        Args:
            category: Board category id
            external_id: Board-specific item id

        Returns:
            ProductDetail, or None on any failure
        """

    @abstractmethod
    def crawler_name(self) -> str:
        """Stable identifier used for logging and channel mapping."""

    @abstractmethod
    def supported_categories(self) -> FrozenSet[str]:
        """Categories this crawler knows how to list."""


class HTMLCrawler(BaseCrawler):
    """Base class for crawlers that parse server-rendered HTML boards.

    Provides page fetching with retry, rate limiting and charset decoding.
    Collaborators are injected per instance; nothing is shared through
    class attributes.
    """

    name: str = ""  # Must be overridden in subclass (e.g. "ppomppu")
    channel_id: int = 0  # Channel id used in storage
    encoding: str = "utf-8"  # Page charset
    categories: FrozenSet[str] = frozenset()

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        rate_limiter: Optional[DomainRateLimiter] = None,
        logger=None,
        timeout: float = 10.0,
    ):
        self.http_client = http_client
        self.rate_limiter = rate_limiter or DomainRateLimiter()
        self.logger = (logger or structlog.get_logger()).bind(crawler=self.name)
        self.timeout = timeout

    def crawler_name(self) -> str:
        return self.name

    def supported_categories(self) -> FrozenSet[str]:
        return self.categories

    def decode(self, content: bytes) -> str:
        """Decode a page body using this board's charset."""
        return content.decode(self.encoding, errors="replace")

    @http_retry
    async def _get(self, url: str) -> httpx.Response:
        await self.rate_limiter.acquire_for_url(url)
        self.logger.debug("fetching_url", url=url)

        if self.http_client is not None:
            response = await self.http_client.get(url, headers=browser_headers(), timeout=self.timeout)
        else:
            async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                response = await client.get(url, headers=browser_headers())

        response.raise_for_status()
        return response

    async def fetch_soup(self, url: str) -> BeautifulSoup:
        """Fetch a page and parse it.

        Raises:
            ScraperError: If the page cannot be fetched
        """
        try:
            response = await self._get(url)
        except httpx.HTTPError as e:
            raise ScraperError(self.name, f"failed to fetch {url}: {e}") from e
        return BeautifulSoup(self.decode(response.content), "html.parser")


@dataclass(frozen=True)
class ProductRecord:
    """A listing merged with its detail, ready to be persisted."""

    channel_id: int
    external_id: str
    title: str
    seller: str = ""
    category: str = ""
    category_subtitle: str = ""
    price: int = 0
    currency: str = "KRW"
    free_shipping: bool = False
    thumbnail_url: Optional[str] = None
    product_link: Optional[str] = None
    site_link: str = ""
    thumbnail_storage_url: Optional[str] = None

    @classmethod
    def merge(cls, channel_id: int, item: ListingItem, detail: ProductDetail) -> "ProductRecord":
        """Combine listing and detail data; detail values win where present."""
        return cls(
            channel_id=channel_id,
            external_id=item.external_id,
            title=detail.title,
            seller=detail.seller or item.seller,
            category=item.category,
            category_subtitle=detail.category_subtitle or item.category_subtitle,
            price=detail.price,
            currency=detail.currency,
            free_shipping=detail.free_shipping,
            thumbnail_url=detail.thumbnail_url,
            product_link=detail.product_link,
            site_link=detail.site_link,
        )

    @property
    def stored_thumbnail(self) -> str:
        """Relocated thumbnail URL, else the source URL, else empty."""
        return self.thumbnail_storage_url or self.thumbnail_url or ""
