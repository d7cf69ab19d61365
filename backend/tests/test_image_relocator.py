"""Tests for image relocation and S3 object storage."""

import re
from datetime import datetime, timezone
from unittest.mock import MagicMock

import httpx

from hotdeal.services.image_relocator import ImageRelocator, content_type_for, generate_file_name
from hotdeal.services.object_storage import S3Storage


IMAGE_URL = "https://cdn.example.com/img/photo.png?x=1"


class TestFileNames:
    """Tests for object naming helpers."""

    def test_generate_file_name(self):
        name = generate_file_name(IMAGE_URL, timestamp_ms=1760832000000)
        assert re.fullmatch(r"1760832000000_\d{1,6}_photo\.png", name)

    def test_generate_file_name_without_extension(self):
        name = generate_file_name("https://cdn.example.com/thumb", timestamp_ms=1)
        assert re.fullmatch(r"1_\d{1,6}_thumb\.jpg", name)

    def test_generate_file_name_without_path(self):
        name = generate_file_name("https://cdn.example.com", timestamp_ms=1)
        assert re.fullmatch(r"1_\d{1,6}_image\.jpg", name)

    def test_content_type_for(self):
        assert content_type_for("a.PNG") == "image/png"
        assert content_type_for("a.webp") == "image/webp"
        assert content_type_for("a.bmp") == "image/jpeg"


class TestImageRelocator:
    """Tests for ImageRelocator."""

    async def test_relocate_protocol_relative_url(self, http_client_factory, storage_factory, logger):
        client = http_client_factory({IMAGE_URL: httpx.Response(200, content=b"\x89PNG")})
        storage = storage_factory()
        relocator = ImageRelocator(storage, http_client=client, logger=logger)

        stored_url = await relocator.relocate("//cdn.example.com/img/photo.png?x=1", "hotdeal")

        (key,) = storage.objects.keys()
        month = datetime.now(timezone.utc).strftime("%Y-%m")
        assert key.startswith(f"hotdeal/{month}/")
        assert key.endswith("_photo.png")
        assert storage.objects[key] == (b"\x89PNG", "image/png")
        assert stored_url == f"https://test-bucket.s3.ap-northeast-2.amazonaws.com/{key}"
        await client.aclose()

    async def test_download_failure_returns_none(self, http_client_factory, storage_factory, logger):
        client = http_client_factory({})
        storage = storage_factory()
        relocator = ImageRelocator(storage, http_client=client, logger=logger)

        assert await relocator.relocate(IMAGE_URL, "hotdeal") is None
        assert storage.objects == {}
        await client.aclose()

    async def test_empty_body_returns_none(self, http_client_factory, storage_factory, logger):
        client = http_client_factory({IMAGE_URL: httpx.Response(200, content=b"")})
        relocator = ImageRelocator(storage_factory(), http_client=client, logger=logger)

        assert await relocator.relocate(IMAGE_URL, "hotdeal") is None
        await client.aclose()

    async def test_upload_failure_returns_none(self, http_client_factory, storage_factory, logger):
        client = http_client_factory({IMAGE_URL: httpx.Response(200, content=b"\x89PNG")})
        relocator = ImageRelocator(storage_factory(fail=True), http_client=client, logger=logger)

        assert await relocator.relocate(IMAGE_URL, "hotdeal") is None
        await client.aclose()

    async def test_empty_url_returns_none(self, storage_factory, logger):
        relocator = ImageRelocator(storage_factory(), logger=logger)

        assert await relocator.relocate("", "hotdeal") is None
        assert await relocator.relocate(None, "hotdeal") is None


class TestS3Storage:
    """Tests for S3Storage with a stubbed boto3 client."""

    async def test_put_object_is_public(self):
        client = MagicMock()
        storage = S3Storage(bucket="deals", region="ap-northeast-2", client=client)

        await storage.put_object("hotdeal/2026-10/1_2_a.png", b"data", "image/png")

        client.put_object.assert_called_once_with(
            Bucket="deals",
            Key="hotdeal/2026-10/1_2_a.png",
            Body=b"data",
            ContentType="image/png",
            ACL="public-read",
        )

    def test_public_url(self):
        storage = S3Storage(bucket="deals", region="us-east-1", client=MagicMock())

        assert storage.public_url("a/b.jpg") == "https://deals.s3.us-east-1.amazonaws.com/a/b.jpg"
        assert storage.describe() == {"bucket": "deals", "region": "us-east-1"}
