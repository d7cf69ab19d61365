"""SQLAlchemy models for hotdeal ingestion."""

from hotdeal.models.base import Base
from hotdeal.models.channel_product import ChannelProduct

__all__ = [
    "Base",
    "ChannelProduct",
]
