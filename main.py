"""
Attendance API - FastAPI Backend
Main application entry point
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from attendance.core.config import settings
from attendance.core.db import engine, Base
from attendance.core.errors import DomainError
from attendance.api import routes_auth, routes_event, routes_public, routes_user
from attendance.utils.responses import domain_error_handler

# Configure logging
logging.basicConfig(level=logging.INFO)
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
    title="Attendance API",
    description="Attendance API for members, mentors and events",
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

app.add_exception_handler(DomainError, domain_error_handler)

# Include routers
app.include_router(routes_public.router, tags=["App"])
app.include_router(routes_auth.router, prefix="/auth", tags=["Auth"])
app.include_router(routes_event.router, prefix="/event", tags=["Event"])
app.include_router(routes_user.router, prefix="/user", tags=["User"])

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8000,
        reload=True
    )
