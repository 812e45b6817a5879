"""Load sample products into the catalog.

Usage: python -m src.seeders.product_seeder [--file data/products.json] [--owner admin]
"""

import argparse
import json
import logging
from pathlib import Path

from sqlalchemy import delete

from src.app.core.log_config import configure_logging
from src.app.features.products.models import Base, Product, Review
from src.db.session import get_db, get_engine

logger = logging.getLogger(__name__)

DEFAULT_FILE = Path(__file__).resolve().parents[2] / "data" / "products.json"

_FIELDS = {
    "name": "name",
    "image": "image",
    "brand": "brand",
    "category": "category",
    "description": "description",
    "price": "price",
    "countInStock": "count_in_stock",
}


def parse_product_data(file_path):
    """Parse the product data from the given JSON file (a list of objects)."""
    with open(file_path, "r", encoding="utf-8") as f:
        entries = json.load(f)

    products = []
    for entry in entries:
        product_data = {
            column: entry[key] for key, column in _FIELDS.items() if key in entry
        }
        if "name" in product_data and "price" in product_data:
            product_data["price"] = float(product_data["price"])
            products.append(product_data)
    return products


def seed_products(session, products_data, owner_id: str):
    """Replace the catalog with ``products_data``."""
    # Clear existing data
    session.execute(delete(Review))
    session.execute(delete(Product))

    for data in products_data:
        data.setdefault("image", "/images/sample.jpg")
        data.setdefault("description", "")
        data.setdefault("count_in_stock", 0)
        session.add(Product(user_id=owner_id, **data))
    session.commit()


def main():
    parser = argparse.ArgumentParser(description="Seed the product catalog")
    parser.add_argument("--file", default=str(DEFAULT_FILE), help="JSON product list")
    parser.add_argument("--owner", default="admin", help="User id recorded as creator")
    args = parser.parse_args()

    configure_logging()
    Base.metadata.create_all(bind=get_engine())
    products_data = parse_product_data(args.file)
    with get_db() as session:
        seed_products(session, products_data, args.owner)
    logger.info("Seeded %d products.", len(products_data))


if __name__ == "__main__":
    main()
