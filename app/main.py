"""
Job Platform - Company Email Verification API

FastAPI backend with:
- PostgreSQL for accounts and verification requests
- SMTP for verification emails
- JWT authentication

Run: uvicorn app.main:app --reload
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.routes import api_router
from app.core.config import get_settings
from app.core.logger import setup_logger
from app.db.postgres import test_postgres_connection
from app.db.schema import init_db
from loguru import logger

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and create tables on startup."""
    setup_logger(settings.log_level)
    try:
        init_db()
        logger.info("Database tables ready")
    except Exception as e:
        logger.warning(f"Database initialization failed: {e}")
    yield


# Create FastAPI app
app = FastAPI(
    title="Job Platform - Company Verification",
    description="""
    Company email verification for recruiter access.

    ## Features
    - **Authentication**: JWT-based auth; every account starts as a job seeker
    - **Company verification**: company email check, emailed token, recruiter promotion
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS middleware (allow all for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "database": "connected" if test_postgres_connection() else "disconnected",
    }
