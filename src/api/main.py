"""
FastAPI application entrypoint for the RideShare backend.

Provides:
- Health check
- Authentication (/api/auth/*)
- Ride lifecycle (/api/v1/rides, /api/v1/user/rides, /api/v1/driver/rides/*)

Configuration: see src/api/config.py.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.config import get_settings
from src.api.db import init_db
from src.api.exception_handlers import register_exception_handlers
from src.api.logging_config import configure_logging
from src.api.routers import auth as auth_router
from src.api.routers import rides as rides_router

settings = get_settings()
configure_logging(settings.log_level)

openapi_tags = [
    {"name": "health", "description": "Health and readiness endpoints."},
    {"name": "auth", "description": "Registration and login endpoints."},
    {"name": "rides", "description": "Ride request, acceptance, and completion endpoints."},
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(
    title="RideShare Backend",
    description="Backend API matching riders with drivers.",
    version="0.1.0",
    openapi_tags=openapi_tags,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth_router.router)
app.include_router(rides_router.router)


@app.get(
    "/",
    tags=["health"],
    summary="Health check",
    description="Simple health check endpoint.",
    operation_id="health_check",
)
def health_check():
    """Return a simple health response."""
    return {"message": "Healthy"}
