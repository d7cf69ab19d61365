"""Board-specific crawler implementations."""

from .ppomppu import PpomppuCrawler
from .quasarzone import QuasarzoneCrawler

__all__ = ["PpomppuCrawler", "QuasarzoneCrawler"]
