from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from habit_tracker.config import settings
from habit_tracker.exceptions import APIError
from habit_tracker.logging_config import configure_logging
from habit_tracker.middleware import (
    RequestIDMiddleware, SecurityHeadersMiddleware, limiter, rate_limit_exceeded_handler
)
from habit_tracker.routers import auth, habits, progress, users, share
from habit_tracker.utils.dates import now_utc
from habit_tracker.utils.logger import get_logger

# Configure logging first
configure_logging()
logger = get_logger(__name__)

# Conditional docs configuration
if settings.DEBUG:
    docs_config = {"docs_url": "/docs", "redoc_url": "/redoc", "openapi_url": "/openapi.json"}
    logger.info("DEBUG mode: Swagger docs enabled at /docs")
else:
    docs_config = {"docs_url": None, "redoc_url": None, "openapi_url": None}

app = FastAPI(
    title="Habit Tracker API",
    description="Habits, daily completions, streaks and shareable progress",
    version=settings.APP_VERSION,
    **docs_config
)

# Set up rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)


def _cors_origins():
    if settings.ENVIRONMENT == "production" and settings.CLIENT_URL:
        return [settings.CLIENT_URL]
    return [origin for origin in settings.CORS_ORIGINS + [settings.CLIENT_URL] if origin]


logger.info(f"CORS_ORIGINS: {_cors_origins()}")

app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestIDMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(habits.router)
app.include_router(progress.router)
app.include_router(users.router)
app.include_router(share.router)


@app.exception_handler(APIError)
async def api_error_handler(request: Request, exc: APIError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        errors.append({
            "location": loc[0] if loc else None,
            "field": ".".join(loc[1:]) if len(loc) > 1 else None,
            "message": error.get("msg", "Invalid value").removeprefix("Value error, "),
        })
    return JSONResponse(
        status_code=400,
        content={"message": "Validation failed", "code": "VALIDATION_ERROR", "errors": errors},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return JSONResponse(status_code=404, content={"message": "Route not found", "code": "NOT_FOUND"})
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail), "code": "HTTP_ERROR"},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "message": "Something went wrong!",
            "error": str(exc) if settings.ENVIRONMENT == "development" else {},
        },
    )


@app.on_event("startup")
async def startup_event():
    """Create missing tables for the SQL store and log the configuration."""
    if settings.STORAGE_BACKEND == "sql":
        from habit_tracker.database import init_db
        init_db()

    logger.info(
        f"Habit Tracker API started: environment={settings.ENVIRONMENT}, "
        f"storage={settings.STORAGE_BACKEND}, identity={settings.IDENTITY_BACKEND}"
    )


@app.get("/")
async def root():
    return {
        "message": "Habit Tracker API Server",
        "status": "Running",
        "version": settings.APP_VERSION,
        "endpoints": {
            "health": "/api/health",
            "auth": "/api/auth",
            "habits": "/api/habits",
            "progress": "/api/progress",
            "users": "/api/users",
            "share": "/api/share",
        },
    }


@app.get("/api/health")
async def health_check():
    """Health check endpoint for load balancers and monitoring."""
    return {
        "status": "OK",
        "timestamp": now_utc().isoformat(),
        "environment": settings.ENVIRONMENT,
        "cors": settings.CLIENT_URL or "localhost",
    }
