import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from makhzan.config import get_settings
from makhzan.database import init_db
from makhzan.dependencies import build_services
from makhzan.routers.products import router as products_router
from makhzan.routers.notifications import router as notifications_router
from makhzan.routers.alerts import router as alerts_router
from makhzan.routers.settings import router as settings_router
from makhzan.routers.reports import router as reports_router
from makhzan.routers.admin import router as admin_router

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Set on responses while the latest state write has failed
PERSISTENCE_WARNING_HEADER = "X-Persistence-Warning"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database, load the inventory store and start the scheduler."""
    logger.info("Starting up... Initializing database")
    init_db()
    services = build_services(settings)
    services.store.load()
    app.state.services = services
    logger.info("Starting alert and backup scheduler...")
    services.scheduler.start()
    yield
    logger.info("Shutting down...")
    services.scheduler.stop()
    services.store.close()


app = FastAPI(
    title="Makhzan Inventory API",
    description="Products, stock levels, alerts and reports for a small store",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[PERSISTENCE_WARNING_HEADER],
)


@app.middleware("http")
async def persistence_warning(request: Request, call_next):
    """Flag responses produced while the store could not save its state."""
    response = await call_next(request)
    services = getattr(request.app.state, "services", None)
    if services and services.store.last_persistence_error is not None:
        response.headers[PERSISTENCE_WARNING_HEADER] = "state-not-saved"
    return response


# Include routers
app.include_router(products_router, prefix=settings.api_prefix)
app.include_router(notifications_router, prefix=settings.api_prefix)
app.include_router(alerts_router, prefix=settings.api_prefix)
app.include_router(settings_router, prefix=settings.api_prefix)
app.include_router(reports_router, prefix=settings.api_prefix)
app.include_router(admin_router, prefix=settings.api_prefix)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": "Makhzan Inventory API",
        "version": "1.0.0"
    }
