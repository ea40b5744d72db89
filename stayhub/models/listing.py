from sqlalchemy import Boolean, Column, ForeignKey, Integer, Numeric, String, Table, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stayhub.core.ids import gen_id
from stayhub.models.base import Base, JsonType, TimestampMixin


# referenced discount policy: listing <-> catalog discount
listing_discount_links = Table(
    "listing_discount_links",
    Base.metadata,
    Column("listing_id", String(36), ForeignKey("listings.id", ondelete="CASCADE"), primary_key=True),
    Column("discount_id", String(36), ForeignKey("discounts.id", ondelete="CASCADE"), primary_key=True),
)


class Listing(TimestampMixin, Base):
    __tablename__ = "listings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=gen_id)
    host_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # "draft" | "published"
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="draft", index=True)

    step1_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    step2_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    step3_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    step4_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Step 1: property details
    category: Mapped[str | None] = mapped_column(String(40), nullable=True)
    place_type: Mapped[str | None] = mapped_column(String(40), nullable=True)

    country: Mapped[str | None] = mapped_column(String(100), nullable=True)
    street_address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    floor: Mapped[str | None] = mapped_column(String(50), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    state: Mapped[str | None] = mapped_column(String(100), nullable=True)
    postal_code: Mapped[str | None] = mapped_column(String(20), nullable=True)

    guests: Mapped[int | None] = mapped_column(Integer, nullable=True)
    bedrooms: Mapped[int | None] = mapped_column(Integer, nullable=True)
    beds: Mapped[int | None] = mapped_column(Integer, nullable=True)

    home_precise: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    bedroom_lock: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # each one of 0, 0.5, 1
    private_bathroom: Mapped[float | None] = mapped_column(Numeric(2, 1, asdecimal=False), nullable=True)
    dedicated_bathroom: Mapped[float | None] = mapped_column(Numeric(2, 1, asdecimal=False), nullable=True)
    shared_bathroom: Mapped[float | None] = mapped_column(Numeric(2, 1, asdecimal=False), nullable=True)
    bathroom_usage: Mapped[str | None] = mapped_column(String(40), nullable=True)

    # Step 2: amenities, safety & media
    favorites: Mapped[list] = mapped_column(JsonType, nullable=False, default=list)
    amenities: Mapped[list] = mapped_column(JsonType, nullable=False, default=list)
    safety_items: Mapped[list] = mapped_column(JsonType, nullable=False, default=list)
    title: Mapped[str | None] = mapped_column(String(100), nullable=True)
    highlights: Mapped[list] = mapped_column(JsonType, nullable=False, default=list)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Step 3: booking & pricing
    booking_setting: Mapped[str | None] = mapped_column(String(40), nullable=True)
    weekday_price: Mapped[float | None] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=True)
    weekday_after_tax_price: Mapped[float | None] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=True)
    weekend_price: Mapped[float | None] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=True)
    weekend_after_tax_price: Mapped[float | None] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=True)

    # Step 4: safety details, host address, discounts
    safety_details: Mapped[list] = mapped_column(JsonType, nullable=False, default=list)
    host_country: Mapped[str | None] = mapped_column(String(100), nullable=True)
    host_street_address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    host_apt_floor: Mapped[str | None] = mapped_column(String(100), nullable=True)
    host_city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    host_state: Mapped[str | None] = mapped_column(String(100), nullable=True)
    host_postal_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    hosting_as_business: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    photos = relationship(
        "ListingPhoto", lazy="selectin", order_by="ListingPhoto.order", passive_deletes=True
    )
    owned_discounts = relationship(
        "ListingDiscount", lazy="selectin", order_by="ListingDiscount.position", passive_deletes=True
    )
    catalog_discounts = relationship(
        "Discount", secondary=listing_discount_links, lazy="selectin", order_by="Discount.created_at",
        passive_deletes=True,
    )

    @property
    def weekend_charge_percentage(self) -> float | None:
        # never stored, derived from the current prices on every read
        if self.weekday_price is None or self.weekend_price is None or self.weekday_price == 0:
            return None
        return (self.weekend_price - self.weekday_price) / self.weekday_price * 100
