from pydantic import Field, field_validator

from stayhub.schemas.listing import CamelModel
from stayhub.schemas.validators import ensure_max, ensure_max_chars, ensure_min


class DiscountCreate(CamelModel):
    name: str = Field(min_length=1)
    description: str | None = None
    discount_percentage: float
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return ensure_max_chars("name", v, 100)

    @field_validator("discount_percentage")
    @classmethod
    def _percentage(cls, v: float) -> float:
        ensure_min("discountPercentage", v, 0, message="{field} must be at least {minimum}")
        return ensure_max("discountPercentage", v, 100)


class DiscountUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    discount_percentage: float | None = None
    is_active: bool | None = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: str | None) -> str | None:
        return ensure_max_chars("name", v, 100)

    @field_validator("discount_percentage")
    @classmethod
    def _percentage(cls, v: float | None) -> float | None:
        ensure_min("discountPercentage", v, 0, message="{field} must be at least {minimum}")
        return ensure_max("discountPercentage", v, 100)
