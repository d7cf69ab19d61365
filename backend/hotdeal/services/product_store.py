"""Persistence of channel products.

Issues two query shapes against the products table: an existence count for
one (channel, product) pair and a single-row insert.
"""

from typing import List, Optional

import structlog
from sqlalchemy import func, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from hotdeal.core.exceptions import StorageConnectionError, StorageError
from hotdeal.db.session import create_session_factory
from hotdeal.models import Base, ChannelProduct
from hotdeal.scrapers.base import ProductRecord


UNIQUE_CONSTRAINT = "uq_channel_product"


def is_duplicate_product(error: IntegrityError) -> bool:
    """Return True when an insert violated the (channel, product) unique key.

    MySQL names the violated key; SQLite lists the constrained columns.
    """
    message = str(error.orig)
    if UNIQUE_CONSTRAINT in message:
        return True
    return "UNIQUE constraint failed" in message and "channel_product_idx" in message


class ProductStore:
    """Reads and writes ChannelProduct rows.

    The unique constraint on (channel_idx, channel_product_idx) is the
    authoritative duplicate guard: an insert that violates it reports
    "already exists" instead of failing.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
        logger=None,
    ):
        self.engine = engine
        self.session_factory = session_factory or create_session_factory(engine)
        self.logger = (logger or structlog.get_logger(__name__)).bind(service="product_store")

    async def connect(self) -> None:
        """Verify the database is reachable.

        Raises:
            StorageConnectionError: If no connection can be established
        """
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            raise StorageConnectionError(str(e)) from e
        self.logger.info("storage_connected", url=self.engine.url.render_as_string(hide_password=True))

    async def create_schema(self) -> None:
        """Create the products table if it does not exist.

        Raises:
            StorageError: If the table cannot be created
        """
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except (SQLAlchemyError, OSError) as e:
            raise StorageError(f"schema creation failed: {e}") from e
        self.logger.info("storage_schema_ready")

    async def close(self) -> None:
        await self.engine.dispose()

    async def exists(self, channel_id: int, external_id: str) -> bool:
        """Check whether a product was already stored for this channel."""
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    select(func.count(ChannelProduct.idx)).where(
                        ChannelProduct.channel_id == channel_id,
                        ChannelProduct.channel_product_idx == external_id,
                    )
                )
                return (result.scalar() or 0) > 0
        except SQLAlchemyError as e:
            raise StorageError(f"existence check failed for {channel_id}/{external_id}: {e}") from e

    async def insert(self, record: ProductRecord) -> bool:
        """Insert one product row.

        Returns:
            True if the row was inserted, False if it already existed

        Raises:
            StorageError: On any other database error
        """
        row = ChannelProduct(
            channel_id=record.channel_id,
            channel_product_idx=record.external_id,
            category_title=record.category_subtitle or record.category,
            seller_title=record.seller,
            title=record.title,
            price=record.price,
            free_shipping="Y" if record.free_shipping else "N",
            thumbnail=record.stored_thumbnail,
            product_link=record.product_link or "",
        )

        async with self.session_factory() as session:
            try:
                session.add(row)
                await session.commit()
                return True
            except IntegrityError as e:
                await session.rollback()
                if not is_duplicate_product(e):
                    raise StorageError(f"insert rejected for {record.channel_id}/{record.external_id}: {e}") from e
                self.logger.info(
                    "product_already_exists",
                    channel_id=record.channel_id,
                    external_id=record.external_id,
                )
                return False
            except SQLAlchemyError as e:
                await session.rollback()
                raise StorageError(f"insert failed for {record.channel_id}/{record.external_id}: {e}") from e

    async def external_ids(self, channel_id: int) -> List[str]:
        """List stored product ids for a channel, oldest first."""
        async with self.session_factory() as session:
            result = await session.execute(
                select(ChannelProduct.channel_product_idx)
                .where(ChannelProduct.channel_id == channel_id)
                .order_by(ChannelProduct.idx)
            )
            return list(result.scalars().all())
