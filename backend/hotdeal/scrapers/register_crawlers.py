"""Registration of all available board crawlers."""

from hotdeal.scrapers.adapters import PpomppuCrawler, QuasarzoneCrawler
from hotdeal.scrapers.factory import CrawlerFactory


CRAWLERS = (PpomppuCrawler, QuasarzoneCrawler)


def register_all_crawlers(factory: CrawlerFactory) -> CrawlerFactory:
    """Register every known crawler under its name and channel id."""
    for crawler_class in CRAWLERS:
        factory.register_crawler(crawler_class.name, crawler_class, crawler_class.channel_id)
    return factory
