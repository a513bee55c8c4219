"""
Wedding Seating Planner - FastAPI Backend
Main application entry point
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from app.core.config import settings
from app.core.db import engine, Base
from app.api import routes_admin, routes_hostess, routes_public, routes_seating
from app.services.errors import SeatingError
from app.utils.responses import seating_error_response

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    # Create database tables
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")
    yield
    logger.info("Application shutdown")

# Create FastAPI application
app = FastAPI(
    title="Wedding Seating Planner",
    description="Guest seating, table layout and automatic table arrangement",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(routes_public.router, tags=["public"])
app.include_router(routes_admin.router, prefix="/admin", tags=["admin"])
app.include_router(routes_seating.router, prefix="/admin", tags=["seating"])
app.include_router(routes_hostess.router, prefix="/hostess", tags=["hostess"])

@app.exception_handler(SeatingError)
async def handle_seating_error(request: Request, exc: SeatingError):
    """Seating errors that escape a route still use the error envelope"""
    logger.info("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    return seating_error_response(exc)

@app.get("/")
async def root():
    """Basic service info"""
    return {"name": app.title, "version": app.version, "docs": "/docs"}

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8000,
        reload=True
    )
