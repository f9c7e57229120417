from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from storefront.config import get_settings
from storefront.database import engine, Base
from storefront.api import health, orders, products, users
from storefront.api.errors import register_error_handlers

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    # Startup
    logger.info("Starting up application...")

    # Create database tables
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully")

    yield

    # Shutdown
    logger.info("Shutting down application...")


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="""
    REST backend for an e-commerce catalog:

    - **Users**: CRUD, notification preferences, saved products
    - **Products**: CRUD with category filter and price/date ordering
    - **Orders**: Multi-item order placement with atomic stock reservation

    ## Features

    ### Stock Reservation
    Placing an order checks and decrements the stock of every referenced
    product in the same transaction that stores the order. Product rows are
    locked with `SELECT FOR UPDATE`, and each decrement is conditional on
    enough stock remaining, so stock never goes negative under concurrent
    orders.

    ### Errors
    Every error response has the shape `{"kind": ..., "detail": ...}`:
    `validation_error` (400), `not_found` (404), `insufficient_stock` (409),
    `conflict` (409), `transaction_error` (500).

    ### Background Processing
    Order confirmation e-mails are sent by Celery workers for users who opted in.
    """,
    version=settings.APP_VERSION,
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Include API routers
app.include_router(health.router)
app.include_router(users.router)
app.include_router(products.router)
app.include_router(orders.router)


@app.get("/", tags=["Root"])
def root():
    """Root endpoint with API information."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "redoc": "/redoc",
        "health": "/health/"
    }
