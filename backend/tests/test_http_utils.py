"""Tests for rate limiting, retry classification and request headers."""

import io

import httpx
import pytest

from hotdeal.core.log_config import build_logger
from hotdeal.scrapers.adapters.ppomppu import PpomppuCrawler
from hotdeal.scrapers.base import HTMLCrawler
from hotdeal.scrapers.utils import DomainRateLimiter, browser_headers, is_transient_http_error


def status_error(code: int) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://www.ppomppu.co.kr/zboard/zboard.php?id=ppomppu")
    return httpx.HTTPStatusError("error", request=request, response=httpx.Response(code, request=request))


class TestRetryClassification:
    """Tests for is_transient_http_error."""

    @pytest.mark.parametrize("code", [429, 500, 502, 503, 504])
    def test_retryable_status(self, code):
        assert is_transient_http_error(status_error(code)) is True

    @pytest.mark.parametrize("code", [400, 403, 404])
    def test_permanent_status(self, code):
        assert is_transient_http_error(status_error(code)) is False

    def test_network_errors(self):
        assert is_transient_http_error(httpx.ConnectTimeout("timed out")) is True
        assert is_transient_http_error(httpx.ConnectError("refused")) is True
        assert is_transient_http_error(ValueError("parse")) is False


class TestDomainRateLimiter:
    """Tests for DomainRateLimiter."""

    async def test_buckets_are_per_domain(self):
        limiter = DomainRateLimiter()

        await limiter.acquire_for_url("https://www.ppomppu.co.kr/zboard/zboard.php?id=ppomppu")
        await limiter.acquire_for_url("https://quasarzone.com/bbs/qb_saleinfo")

        ppomppu = limiter._get_bucket("www.ppomppu.co.kr")
        quasarzone = limiter._get_bucket("quasarzone.com")
        assert ppomppu is not quasarzone
        assert ppomppu.rate == pytest.approx(1.0)
        assert quasarzone.rate == pytest.approx(0.5)

    async def test_unknown_domain_uses_default_limit(self):
        limiter = DomainRateLimiter()

        await limiter.acquire("cdn.example.com")

        bucket = limiter._get_bucket("cdn.example.com")
        assert bucket.rate == pytest.approx(2.0)
        assert bucket.capacity == pytest.approx(12.0)
        assert bucket.tokens < 12.0


class TestRetryLogging:
    """Retry warnings go through the crawler's own logger."""

    @pytest.fixture(autouse=True)
    def no_backoff(self, monkeypatch):
        async def no_sleep(seconds):
            return None

        monkeypatch.setattr(HTMLCrawler._get.retry, "sleep", no_sleep)

    def flaky_client(self) -> httpx.AsyncClient:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request.url)
            if len(calls) == 1:
                return httpx.Response(503)
            return httpx.Response(200, content="<html></html>".encode("cp949"))

        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    async def test_retry_logged_when_warnings_enabled(self):
        stream = io.StringIO()
        client = self.flaky_client()
        crawler = PpomppuCrawler(http_client=client, logger=build_logger(["warning"], stream=stream))

        await crawler.list_items("ppomppu")

        output = stream.getvalue()
        assert "http_retry" in output
        assert "ppomppu" in output
        await client.aclose()

    async def test_retry_silent_when_warnings_disabled(self):
        stream = io.StringIO()
        client = self.flaky_client()
        crawler = PpomppuCrawler(http_client=client, logger=build_logger(["error"], stream=stream))

        await crawler.list_items("ppomppu")

        assert stream.getvalue() == ""
        await client.aclose()


def test_browser_headers():
    headers = browser_headers()

    assert headers["User-Agent"].startswith("Mozilla/5.0")
    assert headers["Accept-Language"].startswith("ko-KR")
    assert headers["Accept"].startswith("text/html")
