"""Crawler system for collecting deals from hot deal boards.

This package provides:
- The crawler interface and the records crawlers produce
- Board-specific crawler implementations
- Utility modules for rate limiting, retries and text normalization
- The registry mapping configured crawler names to implementations
"""

from .base import (
    BaseCrawler,
    HTMLCrawler,
    ListingItem,
    ProductDetail,
    ProductRecord,
)
from .factory import CrawlerFactory

__all__ = [
    # Interface
    "BaseCrawler",
    "HTMLCrawler",
    # Data structures
    "ListingItem",
    "ProductDetail",
    "ProductRecord",
    # Registry
    "CrawlerFactory",
]
