"""create_profiles_connections_listings

Revision ID: 4c1f9a7e2b10
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "4c1f9a7e2b10"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "profiles",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("first_name", sa.String(length=50), nullable=False),
        sa.Column("last_name", sa.String(length=50), nullable=False),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("profile_picture", sa.String(), nullable=True),
        sa.Column("address", sa.String(length=255), nullable=True),
        sa.Column("city", sa.String(length=100), nullable=True),
        sa.Column("state", sa.String(length=2), nullable=True),
        sa.Column("zip_code", sa.String(length=10), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_profiles_email", "profiles", ["email"])

    op.create_table(
        "friend_connections",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("low_id", sa.String(length=64), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("high_id", sa.String(length=64), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("requested_by", sa.String(length=64), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("low_id", "high_id", name="uq_friend_connections_pair"),
        sa.CheckConstraint(
            "requested_by = low_id OR requested_by = high_id",
            name="ck_friend_connections_requester",
        ),
    )
    op.create_index("ix_friend_connections_low_id", "friend_connections", ["low_id"])
    op.create_index("ix_friend_connections_high_id", "friend_connections", ["high_id"])

    op.create_table(
        "listings",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("owner_id", sa.String(length=64), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.String(), nullable=False),
        sa.Column("listing_type", sa.String(), nullable=False),
        sa.Column("property_type", sa.String(), nullable=True),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("address", sa.String(length=255), nullable=False),
        sa.Column("city", sa.String(length=100), nullable=False),
        sa.Column("state", sa.String(length=2), nullable=False),
        sa.Column("zip_code", sa.String(length=10), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("amenities", sa.JSON(), nullable=True),
        sa.Column("images", sa.JSON(), nullable=True),
        sa.Column("room_details", sa.JSON(), nullable=True),
        sa.Column("available_date", sa.Date(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("permission", sa.String(), nullable=False, server_default="private"),
        sa.Column("share_token", sa.String(), nullable=True, unique=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_listings_owner_id", "listings", ["owner_id"])
    op.create_index("ix_listings_listing_type", "listings", ["listing_type"])
    op.create_index("ix_listings_price", "listings", ["price"])
    op.create_index("ix_listings_city", "listings", ["city"])
    op.create_index("ix_listings_state", "listings", ["state"])
    op.create_index("ix_listings_is_active", "listings", ["is_active"])
    op.create_index("ix_listings_created_at", "listings", ["created_at"])


def downgrade() -> None:
    op.drop_table("listings")
    op.drop_table("friend_connections")
    op.drop_index("ix_profiles_email", table_name="profiles")
    op.drop_table("profiles")
