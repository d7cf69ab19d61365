"""Pytest configuration and shared fixtures."""

from typing import Callable, Dict, Optional, Tuple

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine

from hotdeal.core.log_config import build_logger
from hotdeal.scrapers.base import BaseCrawler
from hotdeal.scrapers.factory import CrawlerFactory
from hotdeal.services.product_store import ProductStore


class FakeStorage:
    """In-memory object storage with the S3Storage interface."""

    def __init__(self, bucket: str = "test-bucket", region: str = "ap-northeast-2", fail: bool = False):
        self.bucket = bucket
        self.region = region
        self.fail = fail
        self.objects: Dict[str, Tuple[bytes, str]] = {}

    async def put_object(self, key: str, body: bytes, content_type: str) -> None:
        if self.fail:
            raise RuntimeError("upload rejected")
        self.objects[key] = (body, content_type)

    def public_url(self, key: str) -> str:
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"


class InstanceCrawlerFactory(CrawlerFactory):
    """Crawler factory that hands out prebuilt crawler instances."""

    def __init__(self, crawlers: Dict[str, Tuple[BaseCrawler, int]]):
        super().__init__()
        self._instances = crawlers
        for name, (crawler, channel_id) in crawlers.items():
            self.register_crawler(name, type(crawler), channel_id)

    def create_crawler(self, name: str) -> Optional[BaseCrawler]:
        entry = self._instances.get(name)
        return entry[0] if entry else None


def mock_client(routes: Dict[str, httpx.Response]) -> httpx.AsyncClient:
    """Build an AsyncClient answering from a URL -> response map (404 otherwise)."""

    def handler(request: httpx.Request) -> httpx.Response:
        response = routes.get(str(request.url))
        if response is None:
            return httpx.Response(404, content=b"not found")
        return response

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def logger():
    """Quiet logger for tests."""
    return build_logger(["error"])


@pytest.fixture
def http_client_factory() -> Callable[[Dict[str, httpx.Response]], httpx.AsyncClient]:
    return mock_client


@pytest_asyncio.fixture
async def store(tmp_path, logger):
    """ProductStore backed by a per-test SQLite file."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path}/hotdeal.db",
        echo=False,
    )
    product_store = ProductStore(engine, logger=logger)
    await product_store.create_schema()

    yield product_store

    await engine.dispose()


@pytest.fixture
def storage_factory() -> Callable[..., FakeStorage]:
    return FakeStorage


@pytest.fixture
def crawler_factory_for() -> Callable[[Dict[str, Tuple[BaseCrawler, int]]], CrawlerFactory]:
    return InstanceCrawlerFactory
