"""Quasarzone (퀘이사존) sale info board crawler.

The detail page carries a structured market info table, so price and
shipping come from table cells instead of title heuristics.
"""

import re
from typing import List, Optional, Set

from hotdeal.core.exceptions import ScraperError
from hotdeal.scrapers.base import HTMLCrawler, ListingItem, ProductDetail
from hotdeal.scrapers.utils.normalizer import clean_title, collapse_whitespace, parse_listed_price


BASE_URL = "https://quasarzone.com/bbs"

_VIEW_ID = re.compile(r"/views/(\d+)")
_SELLER_PREFIX = re.compile(r"^\[([^\]]+)\]\s*")

# .market-info-view-table td positions
_CELL_LINK = 0
_CELL_PRICE = 2
_CELL_SHIPPING = 3


def split_seller(title: str):
    """Split a leading "[seller]" tag off a title.

    Returns:
        Tuple of (seller, remaining title); seller is "" when absent
    """
    match = _SELLER_PREFIX.match(title)
    if not match:
        return "", title
    return match.group(1).strip(), title[match.end():]


class QuasarzoneCrawler(HTMLCrawler):
    """Quasarzone sale info board crawler."""

    name = "quasarzone"
    channel_id = 2
    encoding = "utf-8"
    categories = frozenset({"qb_saleinfo"})

    def listing_url(self, category: str) -> str:
        return f"{BASE_URL}/{category}"

    def detail_url(self, category: str, external_id: str) -> str:
        return f"{BASE_URL}/{category}/views/{external_id}"

    async def list_items(self, category: str) -> List[ListingItem]:
        url = self.listing_url(category)
        try:
            soup = await self.fetch_soup(url)

            items: List[ListingItem] = []
            seen_ids: Set[str] = set()
            for link in soup.select(f"a[href*='/{category}/views/']"):
                match = _VIEW_ID.search(link.get("href", ""))
                if not match or match.group(1) in seen_ids:
                    continue
                external_id = match.group(1)
                seen_ids.add(external_id)

                seller, _ = split_seller(link.get_text(strip=True))
                row = link.find_parent("tr")
                label = row.select_one(".category") if row is not None else None

                items.append(ListingItem(
                    external_id=external_id,
                    seller=seller,
                    category=category,
                    category_subtitle=label.get_text(strip=True) if label is not None else "",
                ))

            self.logger.info("listing_parsed", category=category, count=len(items))
            return items

        except Exception as e:
            self.logger.error("listing_failed", category=category, url=url, error=str(e))
            return []

    async def fetch_detail(self, category: str, external_id: str) -> Optional[ProductDetail]:
        url = self.detail_url(category, external_id)
        try:
            soup = await self.fetch_soup(url)

            title_elem = soup.select_one(".common-view-area .title")
            if title_elem is None:
                raise ScraperError(self.name, f"no title markup at {url}")

            label = soup.select_one(".common-view-area .label")
            label_text = label.get_text(strip=True) if label is not None else ""
            title = collapse_whitespace(title_elem.get_text())
            if label_text:
                title = title.replace(label_text, "", 1).strip()
            seller, title = split_seller(title)

            cells = [collapse_whitespace(td.get_text()) for td in soup.select(".market-info-view-table td")]
            if len(cells) <= _CELL_SHIPPING:
                raise ScraperError(self.name, f"incomplete market info table at {url}")

            price, currency = parse_listed_price(cells[_CELL_PRICE])

            og_image = soup.select_one('meta[property="og:image"]')
            thumbnail_url = og_image.get("content") if og_image is not None else None

            category_label = soup.select_one(".ca_name")

            return ProductDetail(
                title=clean_title(title),
                site_link=url,
                price=price,
                currency=currency,
                free_shipping="무료" in cells[_CELL_SHIPPING],
                thumbnail_url=thumbnail_url or None,
                product_link=cells[_CELL_LINK] or None,
                seller=seller or None,
                category_subtitle=(category_label.get_text(strip=True) or None) if category_label is not None else None,
            )

        except Exception as e:
            self.logger.error("detail_failed", external_id=external_id, url=url, error=str(e))
            return None
