from datetime import datetime, timezone
import uuid

from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy import (
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)

from src.settings import settings

DB_SCHEMA = settings.DB_SCHEMA or None
Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _new_id() -> str:
    return uuid.uuid4().hex


def _qualified(table: str) -> str:
    return f"{DB_SCHEMA}.{table}" if DB_SCHEMA else table


class Product(Base):
    __tablename__ = "products"
    __table_args__ = {"schema": DB_SCHEMA}

    id = Column(String(32), primary_key=True, default=_new_id)
    user_id = Column(String, nullable=False, index=True)  # creator (admin)
    name = Column(String, nullable=False, index=True)
    image = Column(String, nullable=False)
    brand = Column(String, nullable=False)
    category = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=False)
    price = Column(Float, nullable=False, default=0)
    count_in_stock = Column(Integer, nullable=False, default=0)
    # Denormalized from reviews; only the review service writes these
    rating = Column(Float, nullable=False, default=0, index=True)
    num_reviews = Column(Integer, nullable=False, default=0)
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    reviews = relationship(
        "Review",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="Review.id",
        lazy="selectin",
    )

    __mapper_args__ = {"version_id_col": version}


class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("product_id", "user_id", name="uq_reviews_product_user"),
        {"schema": DB_SCHEMA},
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    product_id = Column(
        String(32),
        ForeignKey(f"{_qualified('products')}.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(String, nullable=False)
    name = Column(String, nullable=False)  # author display name at review time
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    product = relationship("Product", back_populates="reviews")
