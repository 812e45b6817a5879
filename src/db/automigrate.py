from __future__ import annotations

import logging
from pathlib import Path

from alembic import command
from alembic.config import Config

from .url import get_sqlalchemy_url

logger = logging.getLogger(__name__)


def apply_migrations_safely() -> None:
    """Apply Alembic migrations to the latest head.

    This is safe to run on every startup; Alembic will be a no-op when up-to-date.
    Any errors are logged but do not prevent the app from starting.
    """
    try:
        project_root = Path(__file__).resolve().parents[2]
        alembic_dir = project_root / "alembic"

        cfg = Config()
        cfg.set_main_option("script_location", str(alembic_dir))
        # Ensure the DB URL used by the app is also used for migrations
        cfg.set_main_option("sqlalchemy.url", get_sqlalchemy_url())

        command.upgrade(cfg, "head")
        logger.info("Alembic migrations applied (or already up-to-date)")
    except Exception as exc:
        logger.warning("Skipping Alembic auto-migration: %s", exc)


def ensure_catalog_tables_exist() -> None:
    """Best-effort safety net to ensure `products` and `reviews` tables exist.

    If migrations were applied to a different schema/DB or a race occurred, create the
    tables using the SQLAlchemy model metadata. This is idempotent.
    """
    try:
        from sqlalchemy import inspect
        from src.db.session import get_engine
        from src.app.features.products.models import Base, Product, Review

        engine = get_engine()
        inspector = inspect(engine)
        schema = Product.__table__.schema
        existing = set(inspector.get_table_names(schema=schema))
        missing = [t for t in (Product.__table__, Review.__table__) if t.name not in existing]
        if missing:
            names = ", ".join(t.name for t in missing)
            logger.warning("Tables missing (%s). Creating them now...", names)
            Base.metadata.create_all(bind=engine, tables=missing)
        else:
            logger.info("Catalog tables exist")
    except Exception as exc:
        logger.warning("Could not verify/create catalog tables: %s", exc)
