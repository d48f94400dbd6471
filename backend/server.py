from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from database import database
from routes import (
    admin_auth, news, gallery, faculty, admissions, examinations,
    activities, videos, roll_numbers, contacts, pages, dashboard, options,
)
from utils.errors import AppError, RateLimitError, field_errors_from_pydantic
from utils.rate_limiter import GENERAL_MAX_REQUESTS, GENERAL_WINDOW_MINUTES, client_key, rate_limiter

import os
import logging
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
ROOT_DIR = Path(__file__).parent
load_dotenv(ROOT_DIR / '.env')

ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://localhost:3000"

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def show_error_detail() -> bool:
    return ENVIRONMENT == "development"


# Lifespan context manager for startup/shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting College CMS API")
    await database.connect()
    yield
    await database.close()
    logger.info("College CMS API stopped")


app = FastAPI(
    title="College CMS API",
    description="Content management API for the college website and admin panel",
    version="1.0.0",
    lifespan=lifespan
)


# General request budget per client for every API call
@app.middleware("http")
async def api_rate_limit(request: Request, call_next):
    if request.url.path.startswith("/api") and request.method != "OPTIONS":
        allowed, retry_after = rate_limiter.check_rate_limit(
            f"api:{client_key(request)}", GENERAL_MAX_REQUESTS, GENERAL_WINDOW_MINUTES
        )
        if not allowed:
            logger.warning(f"General rate limit exceeded for {client_key(request)}")
            error = RateLimitError("Too many requests from this IP, please try again later.", retry_after=retry_after)
            return JSONResponse(
                status_code=error.status_code,
                content=error.to_dict(),
                headers={"Retry-After": str(error.retry_after)},
            )
    return await call_next(request)


# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_credentials=True,
    allow_origins=os.environ.get('CORS_ORIGINS', DEFAULT_CORS_ORIGINS).split(','),
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(admin_auth.router)
app.include_router(options.router)
app.include_router(dashboard.admin_router)
for module in (news, gallery, faculty, admissions, examinations, activities, videos, roll_numbers, contacts, pages):
    app.include_router(module.public_router)
    app.include_router(module.admin_router)


# Root endpoint
@app.get("/api")
async def root():
    return {
        "success": True,
        "service": "College CMS API",
        "version": "1.0.0",
        "status": "operational"
    }

# Health check
@app.get("/api/health")
async def health_check():
    return {
        "success": True,
        "message": "Server is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": ENVIRONMENT,
    }


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message} ({exc.detail})")
    headers = {"Retry-After": str(exc.retry_after)} if isinstance(exc, RateLimitError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(include_detail=show_error_detail()),
        headers=headers,
    )


# Body, query and path validation failures use the same 400 envelope as ValidationError
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = field_errors_from_pydantic(exc.errors())
    logger.info(f"Validation failed on {request.url.path}: {errors}")
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": "Validation error", "errors": errors},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = "API endpoint not found" if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": message},
        headers=getattr(exc, "headers", None),
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    content = {"success": False, "message": "Internal server error"}
    if show_error_detail():
        content["error"] = str(exc)
    return JSONResponse(status_code=500, content=content)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "server:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "5000")),
        reload=ENVIRONMENT == "development"
    )
