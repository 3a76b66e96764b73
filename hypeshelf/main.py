"""
HypeShelf - Main FastAPI Application

Backend for a community recommendation shelf:
- Public feed of media recommendations with genre filtering
- Per-user and admin views of submitted recommendations
- Owner/admin deletion and admin staff picks
- Identity sync from the authentication provider's signed webhooks
- Structured logging, Prometheus metrics and rate limiting
"""

from fastapi import FastAPI, status, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text

from .config import settings
from .api import api_router
from .exceptions import HypeShelfError, hypeshelf_exception_handler
from .utils.database import init_db, SessionLocal
from .utils.logging import setup_logging, get_logger, configure_uvicorn_logging
from .utils.metrics import setup_metrics
from .utils.rate_limit import limiter

# Setup structured logging
setup_logging(log_level=settings.LOG_LEVEL, environment=settings.ENVIRONMENT)
configure_uvicorn_logging(environment=settings.ENVIRONMENT)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""

    # Startup
    logger.info("Starting HypeShelf", version=settings.VERSION, environment=settings.ENVIRONMENT)

    logger.info("Initializing database")
    init_db()

    if not settings.IDENTITY_WEBHOOK_SECRET:
        logger.warning("IDENTITY_WEBHOOK_SECRET is not set - identity webhooks will be rejected")

    logger.info("HypeShelf started successfully")

    yield

    # Shutdown
    logger.info("Shutting down HypeShelf")


# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="""
    # HypeShelf API

    Share short recommendations for things worth watching.

    ## Access rules

    - Anyone can read the feed (`GET /recommendations/`)
    - Signed-in users can add recommendations and delete their own
    - Admins can delete any recommendation and mark staff picks

    ## Identity

    Callers authenticate with a bearer token from the identity provider.
    User records are created and updated only by the provider's signed
    webhooks (`POST /webhooks/identity`).
    """,
    lifespan=lifespan,
    openapi_tags=[
        {"name": "users", "description": "Current user lookup"},
        {"name": "recommendations", "description": "Feed, submissions and curation"},
        {"name": "webhooks", "description": "Identity provider lifecycle events"},
    ]
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Domain errors
app.add_exception_handler(HypeShelfError, hypeshelf_exception_handler)

# Add rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Setup Prometheus metrics
setup_metrics(app)

# Include routers
app.include_router(api_router, prefix=settings.API_V1_STR)


# Middleware for logging requests
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all HTTP requests"""
    logger.info(
        "Request received",
        method=request.method,
        url=str(request.url),
        client=request.client.host if request.client else None
    )

    response = await call_next(request)

    logger.info(
        "Request completed",
        method=request.method,
        url=str(request.url),
        status_code=response.status_code
    )

    return response


@app.get("/", tags=["root"])
def root():
    """Root endpoint"""
    return {
        "message": "HypeShelf API",
        "version": settings.VERSION,
        "docs": "/docs",
        "status": "operational"
    }


@app.get("/health", tags=["root"], status_code=status.HTTP_200_OK)
def health_check():
    """Health check endpoint"""

    db_healthy = True
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error("Database health check failed", error=str(e))
        db_healthy = False
    finally:
        db.close()

    return {
        "status": "healthy" if db_healthy else "degraded",
        "database": "connected" if db_healthy else "disconnected",
        "version": settings.VERSION
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "hypeshelf.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
