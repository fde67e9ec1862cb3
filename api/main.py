"""
Smart-Office Digital Twin - FastAPI Application

This is the main entry point for the FastAPI backend.
It owns the simulation engine lifecycle and exposes it over HTTP.

Features:
- Historical telemetry replay on a fixed schedule
- Manual HVAC overrides per room
- Live status and dashboard data
- Constraint validation reports
- Interactive API documentation (Swagger/OpenAPI)

Access Points:
- API Root: http://localhost:8080
- Swagger Docs: http://localhost:8080/docs
- ReDoc: http://localhost:8080/redoc
"""

import os
import logging
from datetime import datetime
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routes import twin_router
from api.models import SystemHealth
from core.exceptions import TwinError
from core.settings import TwinSettings
from core.twin import DigitalTwin

API_VERSION = "0.1.0"

# =========================================
# Logging Configuration
# =========================================

logging.basicConfig(
    level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# =========================================
# Application Lifespan
# =========================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Loads the model and dataset and starts the scheduler. A model or
    dataset that cannot be loaded aborts startup.
    """
    # Startup
    logger.info("🚀 Starting Smart-Office Digital Twin API...")

    try:
        settings = TwinSettings.from_env()
        twin = DigitalTwin.from_settings(settings)
    except TwinError as e:
        logger.error(f"❌ Fatal Error: Could not start engine: {e}")
        raise

    app.state.twin = twin
    if settings.autostart:
        twin.start()
    else:
        logger.info("Autostart disabled; simulation steps will not run on a schedule")

    logger.info("✅ Digital Twin API started successfully")
    logger.info("📚 API Documentation: http://localhost:8080/docs")

    yield  # Application runs here

    # Shutdown
    logger.info("👋 Shutting down Digital Twin API...")
    twin.stop()
    app.state.twin = None


# =========================================
# FastAPI Application
# =========================================

app = FastAPI(
    title="Smart-Office Digital Twin API",
    description="""
## Smart-Office HVAC Digital Twin

Replays historical building telemetry against a model of rooms, lets
operators override HVAC per room, and validates the live model against
safety constraints.

### Quick Start

1. **Check the server**: `GET /api/hello`
2. **Live status**: `GET /api/status`
3. **Dashboard data**: `GET /api/dashboard`
4. **Force a room off**: `POST /api/control?roomId=R1&action=OFF`
5. **Validation report**: `GET /api/validation`
    """,
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)


# =========================================
# CORS Middleware
# =========================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:8501",  # Streamlit
        "http://localhost:5173",  # Vite dev server
        "http://127.0.0.1:8501",
        "http://127.0.0.1:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =========================================
# Exception Handlers
# =========================================

@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc):
    """Handle HTTP exceptions with consistent format."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": True,
            "message": exc.detail,
            "status_code": exc.status_code,
            "timestamp": datetime.utcnow().isoformat()
        }
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc):
    """Handle unexpected exceptions."""
    logger.exception(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": True,
            "message": "An unexpected error occurred",
            "detail": str(exc) if os.getenv("DEBUG", "false").lower() == "true" else None,
            "timestamp": datetime.utcnow().isoformat()
        }
    )


# =========================================
# Include Routers
# =========================================

app.include_router(twin_router, prefix="/api")


# =========================================
# Root Endpoints
# =========================================

def _engine_status(request: Request) -> str:
    twin = getattr(request.app.state, "twin", None)
    if twin is None or not twin.is_initialized:
        return "not_initialized"
    if twin.scheduler.is_running:
        return "running"
    return "stopped"


@app.get(
    "/",
    tags=["System"],
    summary="API Root",
    description="Welcome endpoint with API information"
)
async def root():
    """API root endpoint."""
    return {
        "name": "Smart-Office Digital Twin API",
        "version": API_VERSION,
        "description": "HVAC simulation, manual control and model validation",
        "documentation": "/docs",
        "health_check": "/health",
        "api_base": "/api"
    }


@app.get(
    "/health",
    response_model=SystemHealth,
    tags=["System"],
    summary="System Health Check"
)
async def health_check(request: Request):
    """System health check endpoint."""
    engine_status = _engine_status(request)

    return SystemHealth(
        status="ok" if engine_status == "running" else "degraded",
        version=API_VERSION,
        timestamp=datetime.utcnow(),
        engine=engine_status,
        components={
            "api": "ok",
            "engine": engine_status,
            "scheduler": "ok" if engine_status == "running" else "idle",
        }
    )


@app.get(
    "/ready",
    tags=["System"],
    summary="Readiness Check"
)
async def readiness_check(request: Request):
    """Kubernetes-style readiness probe."""
    if _engine_status(request) == "not_initialized":
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Engine not ready"
        )

    return {"ready": True}


@app.get(
    "/live",
    tags=["System"],
    summary="Liveness Check"
)
async def liveness_check():
    """Kubernetes-style liveness probe."""
    return {"alive": True}


# =========================================
# Run with Uvicorn (for development)
# =========================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host=os.getenv("API_HOST", "0.0.0.0"),
        port=int(os.getenv("API_PORT", 8080)),
        reload=os.getenv("API_RELOAD", "false").lower() == "true",
        log_level=os.getenv("LOG_LEVEL", "info").lower()
    )
