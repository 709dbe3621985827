# plantshop/main.py
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlmodel import Session

from plantshop.core.config import get_settings
from plantshop.core.resource_client import ResourceStoreError
from plantshop.database import create_db_and_tables, engine
from plantshop.repositories.handoff_repo import HandoffRepository

# Import models so SQLModel metadata is populated before create_all()
from plantshop.models import handoff as _handoff_models  # noqa: F401


# Routers
from plantshop.routers.products import router as products_router
from plantshop.routers.cart import router as cart_router
from plantshop.routers.checkout import router as checkout_router
from plantshop.routers.confirmation import router as confirmation_router

settings = get_settings()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Create the handoff table.
      - Purge handoff entries nobody came back to read.
      - Log which resource store we talk to (no request is made to it).
    """
    logger.info("🔄 Startup: resource store at %s", settings.RESOURCE_STORE_URL)
    try:
        create_db_and_tables()
        logger.info("✅ Startup: handoff storage ready.")
        with Session(engine) as session:
            cutoff = datetime.now(timezone.utc) - timedelta(hours=settings.HANDOFF_TTL_HOURS)
            purged = HandoffRepository().purge_older_than(session, cutoff)
        logger.info("🧹 Startup: purged %d stale handoff entries.", purged)
    except Exception as e:
        logger.error(f"❌ Startup: handoff storage FAILED: {e}")
        raise
    yield


app = FastAPI(
    title=settings.PROJECT_NAME or "Plant Shop Storefront API",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(ResourceStoreError)
def resource_store_error_handler(request: Request, exc: ResourceStoreError):
    """
    Any store failure a service did not translate itself.
    """
    logger.error("Unhandled resource store failure: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": "Something went wrong. Please try again."},
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Versioned API prefix, e.g. /api/v1
app.include_router(products_router, prefix=settings.API_V1_STR)
app.include_router(cart_router, prefix=settings.API_V1_STR)
app.include_router(checkout_router, prefix=settings.API_V1_STR)
app.include_router(confirmation_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "plantshop-storefront"}
