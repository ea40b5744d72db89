from stayhub.models.base import Base  # noqa: F401

from stayhub.models.user import User  # noqa: F401
from stayhub.models.api_key import ApiKey  # noqa: F401
from stayhub.models.listing import Listing, listing_discount_links  # noqa: F401
from stayhub.models.listing_photo import ListingPhoto  # noqa: F401
from stayhub.models.discount import Discount, ListingDiscount  # noqa: F401
from stayhub.models.audit_log import AuditLog  # noqa: F401
