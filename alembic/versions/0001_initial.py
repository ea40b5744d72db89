from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def _jsonb_list(name: str) -> sa.Column:
    return sa.Column(
        name,
        postgresql.JSONB(astext_type=sa.Text()),
        nullable=False,
        server_default=sa.text("'[]'::jsonb"),
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="user"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "api_keys",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("key_prefix", sa.String(length=16), nullable=False),
        sa.Column("key_hash", sa.Text(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True, server_default=sa.func.now()),
        sa.Column("rotated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("key_hash", name="uq_api_keys_key_hash"),
    )
    op.create_index("ix_api_keys_user_id", "api_keys", ["user_id"])
    op.create_index("ix_api_keys_key_prefix", "api_keys", ["key_prefix"])

    op.create_table(
        "listings",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("host_id", sa.String(length=36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="draft"),

        sa.Column("step1_completed", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("step2_completed", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("step3_completed", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("step4_completed", sa.Boolean(), nullable=False, server_default=sa.text("false")),

        # step 1
        sa.Column("category", sa.String(length=40), nullable=True),
        sa.Column("place_type", sa.String(length=40), nullable=True),
        sa.Column("country", sa.String(length=100), nullable=True),
        sa.Column("street_address", sa.String(length=255), nullable=True),
        sa.Column("floor", sa.String(length=50), nullable=True),
        sa.Column("city", sa.String(length=100), nullable=True),
        sa.Column("state", sa.String(length=100), nullable=True),
        sa.Column("postal_code", sa.String(length=20), nullable=True),
        sa.Column("guests", sa.Integer(), nullable=True),
        sa.Column("bedrooms", sa.Integer(), nullable=True),
        sa.Column("beds", sa.Integer(), nullable=True),
        sa.Column("home_precise", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("bedroom_lock", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("private_bathroom", sa.Numeric(2, 1), nullable=True),
        sa.Column("dedicated_bathroom", sa.Numeric(2, 1), nullable=True),
        sa.Column("shared_bathroom", sa.Numeric(2, 1), nullable=True),
        sa.Column("bathroom_usage", sa.String(length=40), nullable=True),

        # step 2
        _jsonb_list("favorites"),
        _jsonb_list("amenities"),
        _jsonb_list("safety_items"),
        sa.Column("title", sa.String(length=100), nullable=True),
        _jsonb_list("highlights"),
        sa.Column("description", sa.Text(), nullable=True),

        # step 3
        sa.Column("booking_setting", sa.String(length=40), nullable=True),
        sa.Column("weekday_price", sa.Numeric(10, 2), nullable=True),
        sa.Column("weekday_after_tax_price", sa.Numeric(10, 2), nullable=True),
        sa.Column("weekend_price", sa.Numeric(10, 2), nullable=True),
        sa.Column("weekend_after_tax_price", sa.Numeric(10, 2), nullable=True),

        # step 4
        _jsonb_list("safety_details"),
        sa.Column("host_country", sa.String(length=100), nullable=True),
        sa.Column("host_street_address", sa.String(length=255), nullable=True),
        sa.Column("host_apt_floor", sa.String(length=100), nullable=True),
        sa.Column("host_city", sa.String(length=100), nullable=True),
        sa.Column("host_state", sa.String(length=100), nullable=True),
        sa.Column("host_postal_code", sa.String(length=20), nullable=True),
        sa.Column("hosting_as_business", sa.Boolean(), nullable=False, server_default=sa.text("false")),

        *_timestamps(),
    )
    op.create_index("ix_listings_host_id", "listings", ["host_id"])
    op.create_index("ix_listings_status", "listings", ["status"])

    op.create_table(
        "listing_photos",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column(
            "listing_id", sa.String(length=36), sa.ForeignKey("listings.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("public_id", sa.String(length=255), nullable=False),
        sa.Column("secure_url", sa.String(length=500), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_listing_photos_listing_id", "listing_photos", ["listing_id"])

    op.create_table(
        "listing_discounts",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column(
            "listing_id", sa.String(length=36), sa.ForeignKey("listings.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("discount_percentage", sa.Numeric(5, 2), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )
    op.create_index("ix_listing_discounts_listing_id", "listing_discounts", ["listing_id"])

    op.create_table(
        "discounts",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("discount_percentage", sa.Numeric(5, 2), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )

    op.create_table(
        "listing_discount_links",
        sa.Column(
            "listing_id", sa.String(length=36), sa.ForeignKey("listings.id", ondelete="CASCADE"), primary_key=True
        ),
        sa.Column(
            "discount_id", sa.String(length=36), sa.ForeignKey("discounts.id", ondelete="CASCADE"), primary_key=True
        ),
    )

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("actor_user_id", sa.String(length=36), nullable=True),
        sa.Column("action", sa.String(length=120), nullable=False),
        sa.Column("target_type", sa.String(length=120), nullable=True),
        sa.Column("target_id", sa.String(length=200), nullable=True),
        sa.Column(
            "detail",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_audit_logs_created_at", "audit_logs", ["created_at"])
    op.create_index("ix_audit_logs_action", "audit_logs", ["action"])
    op.create_index("ix_audit_logs_target", "audit_logs", ["target_type", "target_id"])


def downgrade() -> None:
    op.drop_index("ix_audit_logs_target", table_name="audit_logs")
    op.drop_index("ix_audit_logs_action", table_name="audit_logs")
    op.drop_index("ix_audit_logs_created_at", table_name="audit_logs")
    op.drop_table("audit_logs")
    op.drop_table("listing_discount_links")
    op.drop_table("discounts")
    op.drop_index("ix_listing_discounts_listing_id", table_name="listing_discounts")
    op.drop_table("listing_discounts")
    op.drop_index("ix_listing_photos_listing_id", table_name="listing_photos")
    op.drop_table("listing_photos")
    op.drop_index("ix_listings_status", table_name="listings")
    op.drop_index("ix_listings_host_id", table_name="listings")
    op.drop_table("listings")
    op.drop_index("ix_api_keys_key_prefix", table_name="api_keys")
    op.drop_index("ix_api_keys_user_id", table_name="api_keys")
    op.drop_table("api_keys")
    op.drop_table("users")
