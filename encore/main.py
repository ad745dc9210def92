"""Encore social graph and attendance API."""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from encore.core.config import settings
from encore.core.database import create_db_and_tables
from encore.core.scheduler import shutdown_scheduler, start_scheduler
from encore.errors import DomainError
from encore.routes import attendance, catalog, friends, notifications, users
from encore.routes.deps import domain_error_handler

# Configure logging
log_dir = Path.home() / ".logs" / "encore"
log_dir.mkdir(parents=True, exist_ok=True)
log_file = log_dir / "latest.log"

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    filename=str(log_file),
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown lifecycle."""
    # Startup
    logger.info("Starting Encore application")
    create_db_and_tables()
    start_scheduler()
    yield
    # Shutdown
    shutdown_scheduler()
    logger.info("Encore application shut down")


app = FastAPI(
    title=settings.app_name,
    description="Friends, friend requests and show attendance for a live music catalog",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS for external access
origins = (
    ["*"]
    if settings.allowed_origins == "*"
    else [o.strip() for o in settings.allowed_origins.split(",")]
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(DomainError, domain_error_handler)

# Include routers
app.include_router(users.router)
app.include_router(friends.router)
app.include_router(attendance.router)
app.include_router(catalog.router)
app.include_router(notifications.router)


@app.get("/")
async def root():
    """Service info."""
    return {"app": settings.app_name, "version": app.version}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "app": settings.app_name}
