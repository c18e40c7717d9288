"""
Placement Portal - Main Application

FastAPI backend with:
- Pluggable storage (in-process by default, SQLAlchemy for SQLite/PostgreSQL)
- JWT authentication with three roles (TPO, STUDENT, ALUMNI)
- Eligibility engine, mentorship booking, referral board, PlacementBot, analytics

Run: uvicorn placement_portal.main:app --reload
"""

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from placement_portal.api.routes import api_router
from placement_portal.core.config import get_settings
from placement_portal.core.errors import PlacementError
from placement_portal.core.logger import setup_logging
from placement_portal.db import close_store, get_store
from placement_portal.db.repositories import Store
from placement_portal.db.seed import seed_demo_students
from placement_portal.schemas.schemas import HealthResponse

settings = get_settings()

# Create FastAPI app
app = FastAPI(
    title="Placement Portal",
    description="""
    Campus placement management for placement officers, students and alumni.

    ## Features
    - **Authentication**: JWT-based auth with role-gated routes
    - **Students**: Profile, eligible drives, applications, mentorship booking
    - **TPO**: Drives, eligible-student lists, notification intents, application status
    - **Alumni**: Job referrals and mentorship slots
    - **PlacementBot**: Keyword-scored FAQ answers
    - **Analytics**: Placement rate, branch stats, skill-gap recommendations
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    debug=settings.debug,
)

# CORS middleware (local frontend dev servers)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============ ERROR HANDLERS ============

@app.exception_handler(PlacementError)
async def placement_error_handler(request: Request, exc: PlacementError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    return JSONResponse(status_code=400, content={"detail": f"{field}: {message}" if field else message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/api/health", response_model=HealthResponse, tags=["Health"])
async def health_check(store: Store = Depends(get_store)):
    """Health check with storage reachability."""
    return HealthResponse(
        status="ok" if store.ping() else "degraded",
        storage=store.backend,
    )


# Startup event
@app.on_event("startup")
async def startup_event():
    """Configure logging and seed demo data when asked to."""
    setup_logging(settings)
    store = get_store()

    if settings.seed_demo_students > 0 and store.profiles.count() == 0:
        seed_demo_students(store, settings.seed_demo_students)

    logger.info(f"Placement Portal started (storage={store.backend})")


@app.on_event("shutdown")
async def shutdown_event():
    close_store()
