import os
import sys
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Ensure repository root is on sys.path so `import src.*` works
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Provide safe default env vars for tests (overridden by real .env if present)
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_LEVEL", "WARNING")

APP_MODULES = [
    "src.app.main",
    "src.app.features.products.api",
    "src.app.features.reviews.api",
]


def _fresh_app():
    """Import the FastAPI app again so it binds whatever service modules are in sys.modules."""
    for mod in APP_MODULES:
        sys.modules.pop(mod, None)
    from src.app.main import app as fastapi_app

    return fastapi_app


@pytest_asyncio.fixture
async def session_factory():
    from src.app.features.products.models import Base

    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(
        bind=engine, class_=AsyncSession, autoflush=False, expire_on_commit=False
    )
    await engine.dispose()


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def fresh_app():
    return _fresh_app
