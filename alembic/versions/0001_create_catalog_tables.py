"""Create products and reviews tables

Revision ID: 0001_create_catalog_tables
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

from alembic import op
import sqlalchemy as sa

from src.settings import settings

# revision identifiers, used by Alembic.
revision = "0001_create_catalog_tables"
down_revision = None
branch_labels = None
depends_on = None

DB_SCHEMA = settings.DB_SCHEMA or None
PRODUCTS_ID = f"{DB_SCHEMA}.products.id" if DB_SCHEMA else "products.id"


def upgrade() -> None:
    op.create_table(
        "products",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("image", sa.String(), nullable=False),
        sa.Column("brand", sa.String(), nullable=False),
        sa.Column("category", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("count_in_stock", sa.Integer(), nullable=False),
        sa.Column("rating", sa.Float(), nullable=False),
        sa.Column("num_reviews", sa.Integer(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        schema=DB_SCHEMA,
    )
    for column in ("user_id", "name", "category", "rating"):
        op.create_index(
            op.f(f"ix_products_{column}"),
            "products",
            [column],
            unique=False,
            schema=DB_SCHEMA,
        )

    op.create_table(
        "reviews",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("product_id", sa.String(length=32), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["product_id"], [PRODUCTS_ID], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("product_id", "user_id", name="uq_reviews_product_user"),
        schema=DB_SCHEMA,
    )
    op.create_index(
        op.f("ix_reviews_product_id"),
        "reviews",
        ["product_id"],
        unique=False,
        schema=DB_SCHEMA,
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_reviews_product_id"), table_name="reviews", schema=DB_SCHEMA)
    op.drop_table("reviews", schema=DB_SCHEMA)
    for column in ("rating", "category", "name", "user_id"):
        op.drop_index(
            op.f(f"ix_products_{column}"), table_name="products", schema=DB_SCHEMA
        )
    op.drop_table("products", schema=DB_SCHEMA)
