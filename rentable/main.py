# rentable/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI

from rentable.core.config import get_settings
from rentable.core.errors import AppError, app_error_handler
from rentable.database import create_db_and_tables

# Import models so SQLModel metadata is populated before create_all()
from rentable.models import user as _user_models  # noqa: F401
from rentable.models import listing as _listing_models  # noqa: F401
from rentable.models import rental as _rental_models  # noqa: F401
from rentable.models import barter as _barter_models  # noqa: F401
from rentable.models import token as _token_models  # noqa: F401
from rentable.models import support as _support_models  # noqa: F401
from rentable.models import admin as _admin_models  # noqa: F401
from rentable.models import payment as _payment_models  # noqa: F401


# Routers
from rentable.routers.users import router as users_router
from rentable.routers.listings import router as listings_router
from rentable.routers.rentals import router as rentals_router
from rentable.routers.reviews import router as reviews_router
from rentable.routers.barter import router as barter_router
from rentable.routers.tokens import router as tokens_router
from rentable.routers.support import router as support_router
from rentable.routers.payments import router as payments_router
from rentable.routers.ai import router as ai_router
from rentable.routers.admin import router as admin_router

settings = get_settings()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Verify DB connectivity and create tables.

    Shutdown:
      - No special cleanup needed for sync engine.
    """
    logger.info("Startup: connecting to database...")
    try:
        create_db_and_tables()
        logger.info("Startup: DB connection OK, tables verified.")
    except Exception as e:
        logger.error(f"Startup: DB connection FAILED: {e}")
        raise
    yield


app = FastAPI(
    title=settings.PROJECT_NAME or "Rentable API",
    version="0.1.0",
    lifespan=lifespan,
)

# Services raise AppError subclasses; render them as {"kind", "detail"}
app.add_exception_handler(AppError, app_error_handler)


# --- CORS configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Versioned API prefix, e.g. /api/v1
app.include_router(users_router, prefix=settings.API_V1_STR)
app.include_router(listings_router, prefix=settings.API_V1_STR)
app.include_router(rentals_router, prefix=settings.API_V1_STR)
app.include_router(reviews_router, prefix=settings.API_V1_STR)
app.include_router(barter_router, prefix=settings.API_V1_STR)
app.include_router(tokens_router, prefix=settings.API_V1_STR)
app.include_router(support_router, prefix=settings.API_V1_STR)
app.include_router(payments_router, prefix=settings.API_V1_STR)
app.include_router(ai_router, prefix=settings.API_V1_STR)
app.include_router(admin_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "rentable-backend"}
