"""S3 object storage used to re-host deal thumbnails."""

import asyncio
from typing import Optional

import boto3


class S3Storage:
    """Thin async wrapper around a boto3 S3 client.

    Objects are uploaded with public-read visibility; their URL is derived
    from bucket, region and key.
    """

    def __init__(
        self,
        bucket: str,
        region: str = "ap-northeast-2",
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        client=None,
    ):
        self.bucket = bucket
        self.region = region
        self.client = client or boto3.client(
            "s3",
            region_name=region,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
        )

    async def put_object(self, key: str, body: bytes, content_type: str) -> None:
        """Upload bytes under ``key``.

        Raises:
            botocore.exceptions.BotoCoreError, botocore.exceptions.ClientError
        """
        # boto3 is blocking
        await asyncio.to_thread(
            self.client.put_object,
            Bucket=self.bucket,
            Key=key,
            Body=body,
            ContentType=content_type,
            ACL="public-read",
        )

    def public_url(self, key: str) -> str:
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    def describe(self) -> dict:
        """Storage settings without credentials, for logging."""
        return {"bucket": self.bucket, "region": self.region}
