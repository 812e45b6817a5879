# src/db/__init__.py
from .session import get_engine, get_session, get_db, get_db_session  # noqa: F401
from .url import get_sqlalchemy_url, get_sqlalchemy_async_url  # noqa: F401
