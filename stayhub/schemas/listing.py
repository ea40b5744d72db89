from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from stayhub.core.config import settings
from stayhub.models.enums import (
    Amenity,
    BathroomUsage,
    BookingSetting,
    FavoriteAmenity,
    Highlight,
    ListingStatus,
    PlaceType,
    PropertyCategory,
    SafetyItem,
)
from stayhub.schemas.validators import (
    dedupe,
    ensure_in,
    ensure_max,
    ensure_max_chars,
    ensure_member,
    ensure_members,
    ensure_min,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


BATHROOM_VALUES = (0, 0.5, 1)


# --- Step 1: property details ---

class Step1In(CamelModel):
    category: PropertyCategory
    place_type: PlaceType

    country: str = Field(min_length=1, max_length=100)
    street_address: str = Field(min_length=1, max_length=255)
    floor: str | None = Field(default=None, max_length=50)
    city: str = Field(min_length=1, max_length=100)
    state: str = Field(min_length=1, max_length=100)
    postal_code: str = Field(min_length=1, max_length=20)

    guests: int
    bedrooms: int
    beds: int

    home_precise: bool
    bedroom_lock: bool

    private_bathroom: float
    dedicated_bathroom: float
    shared_bathroom: float
    bathroom_usage: BathroomUsage

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, v):
        return ensure_member("category", PropertyCategory, v)

    @field_validator("place_type", mode="before")
    @classmethod
    def _place_type(cls, v):
        return ensure_member("placeType", PlaceType, v)

    @field_validator("bathroom_usage", mode="before")
    @classmethod
    def _bathroom_usage(cls, v):
        return ensure_member("bathroomUsage", BathroomUsage, v)

    @field_validator("guests")
    @classmethod
    def _guests(cls, v: int) -> int:
        return ensure_min("guests", v, 1, message="{field} must be greater than 0")

    @field_validator("bedrooms", "beds")
    @classmethod
    def _rooms(cls, v: int, info) -> int:
        return ensure_min(to_camel(info.field_name), v, 0)

    @field_validator("private_bathroom", "dedicated_bathroom", "shared_bathroom")
    @classmethod
    def _bathrooms(cls, v: float, info) -> float:
        return ensure_in(to_camel(info.field_name), v, BATHROOM_VALUES)


# --- Step 2: amenities, safety & media ---

class PhotoIn(CamelModel):
    public_id: str = Field(min_length=1, max_length=255)
    secure_url: str = Field(min_length=1, max_length=500)


class Step2In(CamelModel):
    favorites: list[FavoriteAmenity] | None = None
    amenities: list[Amenity] | None = None
    safety_items: list[SafetyItem] | None = None

    photos: list[PhotoIn] | None = None

    title: str = Field(min_length=1)
    highlights: list[Highlight]
    description: str = Field(min_length=1)

    @field_validator("favorites", mode="before")
    @classmethod
    def _favorites(cls, v):
        return ensure_members("favorite", FavoriteAmenity, v)

    @field_validator("amenities", mode="before")
    @classmethod
    def _amenities(cls, v):
        return ensure_members("amenity", Amenity, v)

    @field_validator("safety_items", mode="before")
    @classmethod
    def _safety_items(cls, v):
        return ensure_members("safety item", SafetyItem, v)

    @field_validator("highlights", mode="before")
    @classmethod
    def _highlight_members(cls, v):
        return ensure_members("highlight", Highlight, v)

    @field_validator("photos")
    @classmethod
    def _photos(cls, v: list[PhotoIn] | None) -> list[PhotoIn] | None:
        if v is not None and len(v) > settings.max_listing_photos:
            raise PydanticCustomError(
                "max_items", "Maximum {limit} photos allowed", {"limit": settings.max_listing_photos}
            )
        return v

    @field_validator("title")
    @classmethod
    def _title(cls, v: str) -> str:
        return ensure_max_chars("title", v, 100)

    @field_validator("highlights")
    @classmethod
    def _highlights(cls, v: list[Highlight]) -> list[Highlight]:
        # repeated tags count once
        if len(dedupe(v)) < 2:
            raise PydanticCustomError("min_items", "At least 2 highlights are required")
        return v


# --- Step 3: booking & pricing ---

class Step3In(CamelModel):
    booking_setting: BookingSetting
    weekday_price: float
    weekend_price: float
    weekday_after_tax_price: float
    weekend_after_tax_price: float

    @field_validator("booking_setting", mode="before")
    @classmethod
    def _booking_setting(cls, v):
        return ensure_member("bookingSetting", BookingSetting, v)

    @field_validator("weekday_price", "weekend_price", "weekday_after_tax_price", "weekend_after_tax_price")
    @classmethod
    def _prices(cls, v: float, info) -> float:
        return ensure_min(to_camel(info.field_name), v, 0)


# --- Step 4: discounts ---

class DiscountItemIn(CamelModel):
    name: str = Field(min_length=1)
    description: str | None = None
    discount_percentage: float
    is_active: bool | None = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return ensure_max_chars("name", v, 100)

    @field_validator("discount_percentage")
    @classmethod
    def _percentage(cls, v: float) -> float:
        ensure_min("discountPercentage", v, 0, message="{field} must be at least {minimum}")
        return ensure_max("discountPercentage", v, 100)


class Step4HostDetails(CamelModel):
    safety_details: list[str]
    host_country: str = Field(min_length=1)
    host_street_address: str = Field(min_length=1)
    host_apt_floor: str | None = None
    host_city: str = Field(min_length=1)
    host_state: str = Field(min_length=1)
    host_postal_code: str | None = None
    hosting_as_business: bool


class Step4DiscountsIn(Step4HostDetails):
    """Owned policy: the host writes the listing's discounts inline."""
    discounts: list[DiscountItemIn] | None = None


class Step4DiscountRefsIn(CamelModel):
    """Referenced policy: the host picks active catalog discounts by id."""
    safety_details: list[str] | None = None
    host_country: str | None = None
    host_street_address: str | None = None
    host_apt_floor: str | None = None
    host_city: str | None = None
    host_state: str | None = None
    host_postal_code: str | None = None
    hosting_as_business: bool = False

    discount_ids: list[str] | None = None


# --- Output ---

class PhotoOut(CamelModel):
    id: str
    public_id: str
    secure_url: str
    order: int
    created_at: datetime | None = None


class DiscountOut(CamelModel):
    id: str
    name: str
    description: str | None = None
    discount_percentage: float
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UploadedPhotoOut(CamelModel):
    public_id: str
    secure_url: str


class ListingOut(CamelModel):
    id: str
    host_id: str
    status: ListingStatus

    step1_completed: bool
    step2_completed: bool
    step3_completed: bool
    step4_completed: bool

    category: str | None = None
    place_type: str | None = None
    country: str | None = None
    street_address: str | None = None
    floor: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    guests: int | None = None
    bedrooms: int | None = None
    beds: int | None = None
    home_precise: bool = False
    bedroom_lock: bool = False
    private_bathroom: float | None = None
    dedicated_bathroom: float | None = None
    shared_bathroom: float | None = None
    bathroom_usage: str | None = None

    favorites: list[str] = Field(default_factory=list)
    amenities: list[str] = Field(default_factory=list)
    safety_items: list[str] = Field(default_factory=list)
    photos: list[PhotoOut] = Field(default_factory=list)
    title: str | None = None
    highlights: list[str] = Field(default_factory=list)
    description: str | None = None

    booking_setting: str | None = None
    weekday_price: float | None = None
    weekday_after_tax_price: float | None = None
    weekend_price: float | None = None
    weekend_after_tax_price: float | None = None
    weekend_charge_percentage: float | None = None

    safety_details: list[str] = Field(default_factory=list)
    host_country: str | None = None
    host_street_address: str | None = None
    host_apt_floor: str | None = None
    host_city: str | None = None
    host_state: str | None = None
    host_postal_code: str | None = None
    hosting_as_business: bool = False
    discounts: list[DiscountOut] = Field(default_factory=list)

    created_at: datetime | None = None
    updated_at: datetime | None = None


class ListingDeletedOut(BaseModel):
    status: str
    listing_id: str
