# src/app/main.py
from dotenv import load_dotenv

load_dotenv(override=True)
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from src.settings import settings
from src.app.core.auth import static_token_resolver
from src.app.core.errors import register_error_handlers
from src.app.core.log_config import configure_logging
from src.app.features.products.api import router as products_router
from src.app.features.reviews.api import router as reviews_router
from src.db.automigrate import apply_migrations_safely, ensure_catalog_tables_exist
from src.db.session import dispose_engines

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Apply DB migrations automatically before serving requests
    apply_migrations_safely()
    ensure_catalog_tables_exist()
    logger.info("Catalog service ready")
    yield
    await dispose_engines()


app = FastAPI(title="Product Catalog", lifespan=lifespan)
app.state.identity_resolver = static_token_resolver(settings.API_TOKENS)
register_error_handlers(app)
app.include_router(products_router)
app.include_router(reviews_router)


@app.get("/")
async def root():
    return {"message": "Product catalog API is running"}
