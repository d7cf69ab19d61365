"""Text normalization utilities for deal titles, prices and shipping hints.

Hot deal boards rarely expose structured fields, so most of what we know
about a deal is inferred from its free-text title. All functions here are
pure and shared by every crawler.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple


# Trailing ")" glued to a 1-2 digit counter, e.g. "...배송) 12"
_TITLE_COUNTER_SUFFIX = re.compile(r"\)\s*\d{1,2}\s*$")

# Price patterns, tried in priority order
_PRICE_WON = re.compile(r"(?<![\d,])(\d{1,3}(?:,\d{3})+|\d+)\s*원")  # 35,750원 / 9,000 원
_PRICE_MAN_WON = re.compile(r"(\d+)만원")  # 24만원
_PRICE_PARENTHESIZED = re.compile(r"\((\d{1,3}(?:,\d{3})+|\d+)[/,)]")  # (35,750/) (35,750,) (35,750)

MAN_WON = 10_000

FREE_SHIPPING_KEYWORDS = ("무료", "무배", "와우")


def collapse_whitespace(text: str) -> str:
    """Join whitespace-separated words with single spaces and trim."""
    return " ".join((text or "").split())


def clean_title(title: str) -> str:
    """Strip a trailing view-count artifact glued after a closing parenthesis.

    The parenthesis itself and its content are kept:
    "[SellerX] Great Deal) 12" -> "[SellerX] Great Deal)".
    """
    if not title:
        return ""
    return _TITLE_COUNTER_SUFFIX.sub(")", title).strip()


def _repair_truncated_amount(digits: str) -> str:
    # "39,00"-style truncated grouping: a 3-digit amount ending in "00" is
    # read as one more zero. Lossy for genuinely small prices.
    if len(digits) == 3 and digits.endswith("00"):
        return digits[:-2] + "000"
    return digits


def extract_price(title: str) -> int:
    """Extract a KRW price from a deal title.

    Patterns, first match wins:
        1. "35,750원"  -> 35750
        2. "24만원"    -> 240000
        3. "(35,750/)" -> 35750

    Args:
        title: Raw deal title

    Returns:
        Price in won, 0 when no price is stated
    """
    if not title:
        return 0

    match = _PRICE_WON.search(title)
    if match:
        return int(_repair_truncated_amount(match.group(1).replace(",", "")))

    match = _PRICE_MAN_WON.search(title)
    if match:
        return int(match.group(1)) * MAN_WON

    match = _PRICE_PARENTHESIZED.search(title)
    if match:
        return int(_repair_truncated_amount(match.group(1).replace(",", "")))

    return 0


def is_free_shipping(title: str) -> bool:
    """Guess free shipping from title keywords (무료, 무배, 와우).

    Plain substring matching: a keyword in an unrelated context still counts.
    """
    if not title:
        return False
    return any(keyword in title for keyword in FREE_SHIPPING_KEYWORDS)


def clean_price_string(raw: str) -> Optional[Decimal]:
    """Parse a price string and extract its numeric value.

    Handles "1,234원", "₩ 35,000", "$12.99", "12.99 USD".

    Returns:
        Decimal price value, or None if parsing fails
    """
    if not raw:
        return None

    cleaned = raw.replace(",", "")
    cleaned = re.sub(r"[^\d.]", "", cleaned).strip(".")

    if not cleaned:
        return None

    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return None


def parse_listed_price(text: str) -> Tuple[int, str]:
    """Parse a structured price cell into (amount, currency).

    USD amounts are converted to cents; KRW amounts are whole won.

    Args:
        text: Price cell text, e.g. "₩ 35,000 (KRW)" or "$12.99 (USD)"

    Returns:
        Tuple of amount in the currency's smallest normal unit and ISO code
    """
    if not text:
        return 0, "KRW"

    currency = "USD" if ("USD" in text or "$" in text) else "KRW"
    amount = clean_price_string(text)
    if amount is None or amount < 0:
        return 0, currency

    if currency == "USD":
        return int((amount * 100).quantize(Decimal("1"))), currency
    return int(amount.quantize(Decimal("1"))), currency


def normalize_image_url(url: str) -> str:
    """Turn a protocol-relative or bare-host URL into an absolute HTTPS URL.

    Returns an empty string for empty input.
    """
    url = (url or "").strip()
    if not url:
        return ""
    if url.startswith("//"):
        return "https:" + url
    if not url.startswith("http"):
        return "https://" + url
    return url
