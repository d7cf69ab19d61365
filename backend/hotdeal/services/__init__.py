"""Storage and image services used by the ingestion pipeline."""

from .image_relocator import ImageRelocator
from .object_storage import S3Storage
from .product_store import ProductStore

__all__ = [
    "ImageRelocator",
    "S3Storage",
    "ProductStore",
]
