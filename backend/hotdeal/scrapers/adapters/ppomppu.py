"""Ppomppu (뽐뿌) board crawler.

Scrapes the hot deal boards on www.ppomppu.co.kr. Pages are server-rendered
and encoded in EUC-KR.
"""

from typing import List, Optional

from hotdeal.core.exceptions import ScraperError
from hotdeal.scrapers.base import HTMLCrawler, ListingItem, ProductDetail
from hotdeal.scrapers.utils.normalizer import clean_title, collapse_whitespace, extract_price, is_free_shipping


BASE_URL = "https://www.ppomppu.co.kr/zboard"


def _strip_brackets(text: str) -> str:
    return text.replace("[", "").replace("]", "").strip()


class PpomppuCrawler(HTMLCrawler):
    """Ppomppu hot deal board crawler."""

    name = "ppomppu"
    channel_id = 1
    encoding = "cp949"  # Superset of EUC-KR
    categories = frozenset({"ppomppu", "freeboard"})

    def listing_url(self, category: str) -> str:
        return f"{BASE_URL}/zboard.php?id={category}"

    def detail_url(self, category: str, external_id: str) -> str:
        return f"{BASE_URL}/view.php?id={category}&no={external_id}"

    async def list_items(self, category: str) -> List[ListingItem]:
        url = self.listing_url(category)
        try:
            soup = await self.fetch_soup(url)
            rows = soup.select("#revolution_main_table .baseList")

            items: List[ListingItem] = []
            for row in rows:
                numb = row.select_one(".baseList-numb")
                external_id = numb.get_text(strip=True) if numb else ""

                # Notices and ads carry no post number
                if not external_id:
                    continue

                preface = row.select_one(".subject_preface")
                small = row.select_one(".baseList-small")

                items.append(ListingItem(
                    external_id=external_id,
                    seller=_strip_brackets(preface.get_text(strip=True)) if preface else "",
                    category=category,
                    category_subtitle=_strip_brackets(small.get_text(strip=True)) if small else "",
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

            heading = soup.select_one("#topTitle h1")
            if heading is None:
                raise ScraperError(self.name, f"no title markup at {url}")

            preface = soup.select_one("#topTitle .subject_preface")
            preface_text = preface.get_text(strip=True) if preface else ""

            # Inline tags split the heading into text nodes; keep their separators
            raw_title = collapse_whitespace(heading.get_text())
            if preface_text:
                raw_title = raw_title.replace(preface_text, "", 1).strip()
            if not raw_title:
                raise ScraperError(self.name, f"empty title at {url}")

            link = soup.select_one(".topTitle-link a")
            product_link = None
            if link is not None:
                product_link = link.get("href") or link.get_text(strip=True) or None

            image = soup.select_one(".board-contents img")
            thumbnail_url = image.get("src") if image is not None else None

            # Price and shipping are read before the title is cleaned
            return ProductDetail(
                title=clean_title(raw_title),
                site_link=url,
                price=extract_price(raw_title),
                currency="KRW",
                free_shipping=is_free_shipping(raw_title),
                thumbnail_url=thumbnail_url or None,
                product_link=product_link,
            )

        except Exception as e:
            self.logger.error("detail_failed", external_id=external_id, url=url, error=str(e))
            return None
