"""Initial schema

Revision ID: 4b1e7c2d9a10
Revises:
Create Date: 2025-09-14 18:22:05.412907

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = "4b1e7c2d9a10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users, properties and their related tables."""
    # Tables that already exist (created by hand or by create_all) are left alone
    existing = set(inspect(op.get_bind()).get_table_names())

    if "users" not in existing:
        op.create_table(
            "users",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("email", sa.String(length=255), nullable=False),
            sa.Column("first_name", sa.String(length=100), nullable=True),
            sa.Column("last_name", sa.String(length=100), nullable=True),
            sa.Column("phone", sa.String(length=50), nullable=True),
            sa.Column("role", sa.String(length=20), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
            sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
        op.create_index(op.f("ix_users_id"), "users", ["id"], unique=False)

    if "properties" not in existing:
        op.create_table(
            "properties",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("title", sa.String(length=255), nullable=True),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("address", sa.String(length=255), nullable=True),
            sa.Column("city", sa.String(length=100), nullable=True),
            sa.Column("state", sa.String(length=50), nullable=True),
            sa.Column("zip_code", sa.String(length=20), nullable=False),
            sa.Column("property_type", sa.String(length=100), nullable=False),
            sa.Column("listing_type", sa.String(length=20), nullable=False, server_default="rent"),
            sa.Column("status", sa.String(length=50), nullable=True),
            sa.Column("bedrooms", sa.Integer(), nullable=False),
            sa.Column("bathrooms", sa.Float(), nullable=False),
            sa.Column("square_feet", sa.Integer(), nullable=False),
            sa.Column("year_built", sa.Integer(), nullable=True),
            sa.Column("lot_size", sa.Float(), nullable=True),
            sa.Column("price", sa.Float(), nullable=False),
            sa.Column("available_date", sa.Date(), nullable=True),
            sa.Column("owner_id", sa.Integer(), nullable=True),
            sa.Column("agent_id", sa.Integer(), nullable=True),
            sa.Column("owner_name", sa.String(length=255), nullable=True),
            sa.Column("owner_email", sa.String(length=255), nullable=True),
            sa.Column("owner_phone", sa.String(length=50), nullable=True),
            sa.Column("owner_preferred_contact", sa.String(length=20), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
            sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
            sa.ForeignKeyConstraint(["owner_id"], ["users.id"]),
            sa.ForeignKeyConstraint(["agent_id"], ["users.id"]),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(op.f("ix_properties_id"), "properties", ["id"], unique=False)
        op.create_index(op.f("ix_properties_listing_type"), "properties", ["listing_type"], unique=False)
        op.create_index(op.f("ix_properties_status"), "properties", ["status"], unique=False)
        op.create_index(op.f("ix_properties_owner_email"), "properties", ["owner_email"], unique=False)
        op.create_index(op.f("ix_properties_created_at"), "properties", ["created_at"], unique=False)

    if "property_photos" not in existing:
        op.create_table(
            "property_photos",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("property_id", sa.Integer(), nullable=False),
            sa.Column("photo_url", sa.Text(), nullable=False),
            sa.Column("photo_name", sa.String(length=255), nullable=True),
            sa.Column("photo_size", sa.Integer(), nullable=True),
            sa.Column("is_primary", sa.Boolean(), nullable=True),
            sa.Column("display_order", sa.Integer(), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
            sa.ForeignKeyConstraint(["property_id"], ["properties.id"]),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(op.f("ix_property_photos_id"), "property_photos", ["id"], unique=False)
        op.create_index(op.f("ix_property_photos_property_id"), "property_photos", ["property_id"], unique=False)

    for table, column in (
        ("property_features", "feature_name"),
        ("property_amenities", "amenity_name"),
    ):
        if table in existing:
            continue
        op.create_table(
            table,
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("property_id", sa.Integer(), nullable=False),
            sa.Column(column, sa.String(length=255), nullable=False),
            sa.ForeignKeyConstraint(["property_id"], ["properties.id"]),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(op.f(f"ix_{table}_id"), table, ["id"], unique=False)
        op.create_index(op.f(f"ix_{table}_property_id"), table, ["property_id"], unique=False)

    if "reviews" not in existing:
        op.create_table(
            "reviews",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("property_id", sa.Integer(), nullable=True),
            sa.Column("name", sa.String(length=255), nullable=False),
            sa.Column("email", sa.String(length=255), nullable=True),
            sa.Column("location", sa.String(length=255), nullable=True),
            sa.Column("rating", sa.Integer(), nullable=False),
            sa.Column("review_text", sa.Text(), nullable=False),
            sa.Column("property_type", sa.String(length=100), nullable=True),
            sa.Column("status", sa.String(length=20), nullable=True),
            sa.Column("is_verified", sa.Boolean(), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
            sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
            sa.CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),
            sa.ForeignKeyConstraint(["property_id"], ["properties.id"]),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(op.f("ix_reviews_id"), "reviews", ["id"], unique=False)
        op.create_index(op.f("ix_reviews_property_id"), "reviews", ["property_id"], unique=False)
        op.create_index(op.f("ix_reviews_status"), "reviews", ["status"], unique=False)
        op.create_index(op.f("ix_reviews_created_at"), "reviews", ["created_at"], unique=False)

    if "contact_inquiries" not in existing:
        op.create_table(
            "contact_inquiries",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("property_id", sa.Integer(), nullable=True),
            sa.Column("name", sa.String(length=255), nullable=False),
            sa.Column("email", sa.String(length=255), nullable=False),
            sa.Column("phone", sa.String(length=50), nullable=True),
            sa.Column("message", sa.Text(), nullable=True),
            sa.Column("inquiry_type", sa.String(length=50), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
            sa.ForeignKeyConstraint(["property_id"], ["properties.id"]),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(op.f("ix_contact_inquiries_id"), "contact_inquiries", ["id"], unique=False)
        op.create_index(op.f("ix_contact_inquiries_property_id"), "contact_inquiries", ["property_id"], unique=False)


def downgrade() -> None:
    """Drop all tables."""
    for table in (
        "contact_inquiries",
        "reviews",
        "property_amenities",
        "property_features",
        "property_photos",
        "properties",
        "users",
    ):
        op.drop_table(table)
