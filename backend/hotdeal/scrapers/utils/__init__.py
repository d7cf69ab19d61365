"""Scraper utilities for rate limiting, retries and text normalization."""

from .rate_limiter import DomainRateLimiter, TokenBucket
from .user_agents import get_random_user_agent, browser_headers, USER_AGENTS
from .normalizer import (
    clean_title,
    collapse_whitespace,
    extract_price,
    is_free_shipping,
    clean_price_string,
    parse_listed_price,
    normalize_image_url,
    FREE_SHIPPING_KEYWORDS,
)
from .retry import http_retry, is_transient_http_error


__all__ = [
    # Rate limiting
    "DomainRateLimiter",
    "TokenBucket",
    # User agents
    "get_random_user_agent",
    "browser_headers",
    "USER_AGENTS",
    # Normalization
    "clean_title",
    "collapse_whitespace",
    "extract_price",
    "is_free_shipping",
    "clean_price_string",
    "parse_listed_price",
    "normalize_image_url",
    "FREE_SHIPPING_KEYWORDS",
    # Retry
    "http_retry",
    "is_transient_http_error",
]
