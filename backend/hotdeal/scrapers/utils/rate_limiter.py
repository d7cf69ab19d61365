"""Token bucket rate limiter for per-domain rate limiting."""

import asyncio
import time
from typing import Dict
from urllib.parse import urlparse


class TokenBucket:
    """Token bucket algorithm implementation for rate limiting.

    The bucket starts full and refills at a constant rate.
    Each request consumes one token. If no tokens are available,
    the request waits until tokens are refilled.
    """

    def __init__(self, rate: float, capacity: float):
        """Initialize token bucket.

        Args:
            rate: Tokens per second (e.g., 1.0 = 60 RPM)
            capacity: Maximum tokens in bucket (burst capacity)
        """
        self.rate = rate
        self.capacity = capacity
        self.tokens = capacity
        self.last_refill = time.monotonic()
        self._lock = asyncio.Lock()

    def _refill(self) -> None:
        now = time.monotonic()
        elapsed = now - self.last_refill
        self.tokens = min(self.capacity, self.tokens + elapsed * self.rate)
        self.last_refill = now

    async def acquire(self, tokens: float = 1.0) -> None:
        """Acquire tokens from the bucket, waiting if necessary."""
        async with self._lock:
            while True:
                self._refill()
                if self.tokens >= tokens:
                    self.tokens -= tokens
                    return
                wait_time = (tokens - self.tokens) / self.rate
                await asyncio.sleep(wait_time)


class DomainRateLimiter:
    """Per-domain rate limiter using token bucket algorithm.

    Each domain gets its own bucket, so concurrent item workers do not
    flood a single board while image hosts are fetched in parallel.
    """

    # Requests per minute for known domains
    DOMAIN_LIMITS_RPM = {
        "www.ppomppu.co.kr": 60,
        "quasarzone.com": 30,
    }

    DEFAULT_RPM = 120

    def __init__(self):
        self._buckets: Dict[str, TokenBucket] = {}

    def _get_bucket(self, domain: str) -> TokenBucket:
        if domain not in self._buckets:
            rpm = self.DOMAIN_LIMITS_RPM.get(domain, self.DEFAULT_RPM)
            self._buckets[domain] = self._make_bucket(rpm)
        return self._buckets[domain]

    @staticmethod
    def _make_bucket(rpm: int) -> TokenBucket:
        # Capacity allows small bursts (10% of RPM, min 2)
        return TokenBucket(rate=rpm / 60.0, capacity=max(2.0, rpm / 10.0))

    async def acquire(self, domain: str, tokens: float = 1.0) -> None:
        """Block until the domain's rate limit allows another request."""
        await self._get_bucket(domain).acquire(tokens)

    async def acquire_for_url(self, url: str) -> None:
        await self.acquire(urlparse(url).netloc)
