"""
Wedding RSVP Guest Roster - FastAPI Backend
Main application entry point
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from rsvp.core.config import settings
from rsvp.core.db import engine, Base
from rsvp.core.errors import RosterError
from rsvp.api import routes_admin, routes_guest, routes_public
from rsvp.utils.responses import error_response, roster_error_response

# Configure logging
logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
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
    title="Wedding RSVP Guest Roster",
    description="Invitation-scoped guest roster for wedding RSVPs",
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

@app.exception_handler(RosterError)
async def roster_error_handler(request: Request, exc: RosterError):
    logger.warning(f"{request.method} {request.url.path} rejected: {exc.kind} ({exc.message})")
    return roster_error_response(exc)

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return error_response(
        message="Invalid request",
        error_code="validation",
        details=[
            {"loc": [str(part) for part in error["loc"]], "message": error["msg"]}
            for error in exc.errors()
        ],
        status_code=422
    )

# Include routers
app.include_router(routes_public.router, tags=["public"])
app.include_router(routes_guest.router, prefix="/guest", tags=["guest"])
app.include_router(routes_admin.router, prefix="/admin", tags=["admin"])

# Note: Run this ASGI app directly with Uvicorn or Hypercorn. For Gunicorn,
# use `uvicorn.workers.UvicornWorker` instead of wrapping the app.

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8000,
        reload=True
    )
