# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the MediChecker API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
#   medichecker-api          (binds API_HOST:API_PORT)
# =============================================================================

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import (
    MediCheckerException,
    medichecker_exception_handler,
    validation_exception_handler,
)
from app.routers import (
    health, medicines, admin, profile, prescriptions, reminders, history, notifications,
    pharmacies, assistant,
)
from app.auth import routes as auth_routes
from lib.utils import ApplicationError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Firebase and Supabase clients are created lazily on first use, so
    startup only logs the configuration.
    """
    logger.info(f"Starting MediChecker API in {settings.ENVIRONMENT} mode")
    logger.info(f"Firebase project: {settings.FIREBASE_PROJECT_ID}")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    if not settings.FIREBASE_SERVER_KEY:
        logger.warning("FIREBASE_SERVER_KEY is not set; push notifications will be rejected by FCM")

    yield

    logger.info("Shutting down MediChecker API")


# Create FastAPI application
app = FastAPI(
    title="MediChecker API",
    description="""
## Medicine Information and Medication Management API

MediChecker lets users look up medicines and manage their own medication.

### Features

- **Medicine Search**: Built-in catalog plus openFDA drug labels and RxNav concepts
- **Prescriptions**: Track prescriptions and refill cycles
- **Reminders**: Dose schedules with push notifications
- **Search History**: Review and clean up past searches
- **Admin Panel**: Manage the medicine catalog, user roles and announcements

### Authentication

Sign in with Firebase Authentication and send the ID token:

```bash
curl http://localhost:8000/api/v1/prescriptions \\
  -H "Authorization: Bearer <firebase-id-token>"
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Auth", "description": "Token verification, signup and user sync"},
        {"name": "Medicines", "description": "Medicine search and the built-in catalog"},
        {"name": "Admin", "description": "Administrator-only management endpoints"},
        {"name": "Profile", "description": "The signed-in user's profile and settings"},
        {"name": "Prescriptions", "description": "Prescription tracking and dose logging"},
        {"name": "Reminders", "description": "Medication reminders"},
        {"name": "History", "description": "Search history"},
        {"name": "Notifications", "description": "In-app notifications and push relay"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(MediCheckerException)
async def handle_medichecker_exception(request: Request, exc: MediCheckerException):
    """Handle custom MediChecker exceptions."""
    return await medichecker_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    return await validation_exception_handler(request, exc)


@app.exception_handler(ApplicationError)
async def handle_backend_error(request: Request, exc: ApplicationError):
    """Firestore / Supabase failures: the backing service is unavailable."""
    logger.error(f"Backend error on {request.url.path}: {exc}")
    content = {"detail": exc.message, "code": exc.code}
    if exc.suggestion:
        content["suggestion"] = exc.suggestion
    return JSONResponse(status_code=503, content=content)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Authentication endpoints
app.include_router(auth_routes.router, prefix="/api/v1/auth", tags=["Auth"])

# Health check endpoints
app.include_router(health.router, prefix="/api/v1", tags=["Health"])

# Medicine search
app.include_router(medicines.router, prefix="/api/v1/medicines", tags=["Medicines"])

# Admin panel
app.include_router(admin.router, prefix="/api/v1/admin", tags=["Admin"])

# User features
app.include_router(profile.router, prefix="/api/v1/profile", tags=["Profile"])
app.include_router(prescriptions.router, prefix="/api/v1/prescriptions", tags=["Prescriptions"])
app.include_router(reminders.router, prefix="/api/v1/reminders", tags=["Reminders"])
app.include_router(history.router, prefix="/api/v1/history", tags=["History"])
app.include_router(notifications.router, prefix="/api/v1/notifications", tags=["Notifications"])

# Pharmacy locator and health assistant
app.include_router(pharmacies.router, prefix="/api/v1/pharmacies", tags=["Pharmacies"])
app.include_router(assistant.router, prefix="/api/v1/assistant", tags=["Assistant"])

# FCM push relay (unversioned path used by existing clients)
app.include_router(notifications.relay_router, prefix="/api", tags=["Notifications"])


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "MediChecker API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }


# =============================================================================
# Server Entry Point
# =============================================================================

def run() -> None:
    """Serve the API on API_HOST:API_PORT (auto-reload in debug mode)."""
    uvicorn.run(
        "app.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    run()
