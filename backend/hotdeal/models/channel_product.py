"""Channel product model: one row per deal seen on a board."""

from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from hotdeal.models.base import Base


class ChannelProduct(Base):
    """Deal collected from a source channel.

    Each row is uniquely identified by (channel_id, channel_product_idx).
    Rows are inserted once and never updated by the pipeline.
    """

    __tablename__ = "expertnote_channelProducts"

    idx: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Source identifiers
    channel_id: Mapped[int] = mapped_column(
        "channel_idx",
        Integer,
        nullable=False,
        comment="Source channel (1 = ppomppu, 2 = quasarzone)"
    )
    channel_product_idx: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Product/post id on the source channel"
    )

    # Deal info
    category_title: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    seller_title: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    title: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    price: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    free_shipping: Mapped[str] = mapped_column(String(1), nullable=False, default="N", comment="'Y' or 'N'")

    # Media and links
    thumbnail: Mapped[str] = mapped_column(String(1000), nullable=False, default="")
    product_link: Mapped[str] = mapped_column(String(2000), nullable=False, default="")

    __table_args__ = (
        UniqueConstraint("channel_idx", "channel_product_idx", name="uq_channel_product"),
    )

    def __repr__(self) -> str:
        return (
            f"<ChannelProduct(channel_id={self.channel_id}, "
            f"channel_product_idx='{self.channel_product_idx}', title='{self.title[:50]}')>"
        )
