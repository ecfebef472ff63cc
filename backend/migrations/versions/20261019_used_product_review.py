"""Catalog products, used-product submissions and review events

Revision ID: 20261019_used_product_review
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261019_used_product_review"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "used_products",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.String(64), nullable=False),
        sa.Column("condition", sa.String(16), nullable=False),
        sa.Column("brand", sa.String(128), nullable=True),
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column("asking_price_cents", sa.Integer(), nullable=True),
        sa.Column("request_quote", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("seller_name", sa.String(128), nullable=False),
        sa.Column("seller_email", sa.String(255), nullable=False),
        sa.Column("seller_phone", sa.String(32), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("admin_notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.CheckConstraint(
            "(request_quote AND asking_price_cents IS NULL) "
            "OR (NOT request_quote AND asking_price_cents IS NOT NULL)",
            name="ck_used_products_pricing_mode",
        ),
        sa.CheckConstraint("asking_price_cents IS NULL OR asking_price_cents >= 0", name="ck_used_products_price_nonneg"),
        sa.CheckConstraint("status IN ('pending', 'approved', 'rejected')", name="ck_used_products_status"),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )

    with op.batch_alter_table("used_products", schema=None) as batch_op:
        batch_op.create_index("ix_used_products_status", ["status"], unique=False)
        batch_op.create_index("ix_used_products_seller_email", ["seller_email"], unique=False)
        batch_op.create_index("ix_used_products_status_created", ["status", "created_at"], unique=False)

    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.String(64), nullable=False),
        sa.Column("price_cents", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("image_urls", sa.JSON(), nullable=False),
        sa.Column("stock", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("featured", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("brand", sa.String(128), nullable=False, server_default="Unknown"),
        sa.Column("is_refurbished", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("condition", sa.String(16), nullable=True),
        sa.Column("seller_name", sa.String(128), nullable=True),
        sa.Column("seller_email", sa.String(255), nullable=True),
        sa.Column("seller_phone", sa.String(32), nullable=True),
        sa.Column("original_used_product_id", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        sa.Column("version_id", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.CheckConstraint("price_cents >= 0", name="ck_products_price_nonneg"),
        sa.CheckConstraint("stock >= 0", name="ck_products_stock_nonneg"),
        sa.CheckConstraint(
            "NOT is_refurbished OR (condition IS NOT NULL AND original_used_product_id IS NOT NULL)",
            name="ck_products_refurbished_source",
        ),
        sa.ForeignKeyConstraint(["original_used_product_id"], ["used_products.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("original_used_product_id"),
        sqlite_autoincrement=True,
    )

    with op.batch_alter_table("products", schema=None) as batch_op:
        batch_op.create_index("ix_products_category", ["category"], unique=False)
        batch_op.create_index("ix_products_active_featured", ["is_active", "featured"], unique=False)

    op.create_table(
        "review_events",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("used_product_id", sa.Integer(), nullable=False),
        sa.Column("action", sa.String(16), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("seller_email", sa.String(255), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("occurred_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=False),
        sa.CheckConstraint("action IN ('approved', 'denied')", name="ck_review_events_action"),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"]),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )

    with op.batch_alter_table("review_events", schema=None) as batch_op:
        batch_op.create_index("ix_review_events_used_product_id", ["used_product_id"], unique=False)
        batch_op.create_index("ix_review_events_occurred_at", ["occurred_at"], unique=False)


def downgrade():
    with op.batch_alter_table("review_events", schema=None) as batch_op:
        batch_op.drop_index("ix_review_events_occurred_at")
        batch_op.drop_index("ix_review_events_used_product_id")
    op.drop_table("review_events")

    with op.batch_alter_table("products", schema=None) as batch_op:
        batch_op.drop_index("ix_products_active_featured")
        batch_op.drop_index("ix_products_category")
    op.drop_table("products")

    with op.batch_alter_table("used_products", schema=None) as batch_op:
        batch_op.drop_index("ix_used_products_status_created")
        batch_op.drop_index("ix_used_products_seller_email")
        batch_op.drop_index("ix_used_products_status")
    op.drop_table("used_products")
