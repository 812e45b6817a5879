# src/db/url.py
from __future__ import annotations

from decouple import config
from sqlalchemy.engine.url import make_url

from src.settings import settings

_ASYNC_DRIVERS = {
    "postgresql": "asyncpg",
    "sqlite": "aiosqlite",
}


def _raw_url() -> str:
    return config("DATABASE_URL", default=settings.DATABASE_URL)


def _strip_driver(url: str) -> str:
    parsed = make_url(url)
    backend = parsed.drivername.split("+", 1)[0]
    return parsed.set(drivername=backend).render_as_string(hide_password=False)


def get_sqlalchemy_url() -> str:
    """Return a sync SQLAlchemy URL (used by Alembic and the seeder). Driverless is fine."""
    return _strip_driver(_raw_url())


def get_sqlalchemy_async_url() -> str:
    url = make_url(_raw_url())
    backend = url.drivername.split("+", 1)[0]
    driver = _ASYNC_DRIVERS.get(backend)
    if driver is None:
        raise RuntimeError(f"Unsupported database backend for async access: {backend}")
    url = url.set(drivername=f"{backend}+{driver}")
    # asyncpg rejects libpq's sslmode query argument
    if "sslmode" in url.query:
        query = dict(url.query)
        del query["sslmode"]
        url = url.set(query=query)
    return url.render_as_string(hide_password=False)
