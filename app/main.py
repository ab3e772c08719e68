import asyncio
import os
from dotenv import load_dotenv
from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded
from contextlib import asynccontextmanager
from slowapi import _rate_limit_exceeded_handler
# Rate Limiter
from app.core.route_limiters import limiter, ai_rate_limiter
from app.core.rate_limiter import run_periodic_cleanup
from app.constants.limits import RATE_LIMIT_CLEANUP_INTERVAL
# Routers
from app.routes.health import router as health_router
from app.routes.prompts import router as prompts_router
from app.routes.interview_questions import router as interview_questions_router
from app.routes.cover_letter import router as cover_letter_router
from app.routes.mock_interview import router as mock_interview_router
# CORS Middleware
from app.core.cors_middleware import add_cors_middleware
# Logger
from loguru import logger
# Database
from app.database import create_tables
# Error Handling
from fastapi.exceptions import RequestValidationError
from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.status import HTTP_422_UNPROCESSABLE_ENTITY
from sqlalchemy.exc import IntegrityError

from app.errors.exceptions import RateLimitExceededError
from app.errors.handlers import (
    http_exception_handler,
    generic_exception_handler,
    database_integrity_handler,
    rate_limit_exceeded_handler,
)

# Load environment variables
load_dotenv()

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan events."""
    # Startup
    try:
        create_tables()
        logger.info("Application startup completed successfully")
    except Exception as e:
        logger.error(f"Error during application startup: {e}")
        raise

    cleanup_interval = float(os.getenv("RATE_LIMIT_CLEANUP_INTERVAL_SECONDS", RATE_LIMIT_CLEANUP_INTERVAL))
    cleanup_task = asyncio.create_task(
        run_periodic_cleanup(ai_rate_limiter, cleanup_interval), name="rate_limit_cleanup"
    )

    yield

    # Shutdown
    cleanup_task.cancel()
    try:
        await cleanup_task
    except asyncio.CancelledError:
        pass
    logger.info("Application shutdown completed")

# Initialize FastAPI app
app = FastAPI(
    title="Career Assistant Interview Service",
    description="Interview question generation, mock interviews and cover letters",
    version="0.1.0",
    lifespan=lifespan
)
# Add CORS middleware
add_cors_middleware(app)

# Centralized error handlers
app.add_exception_handler(RateLimitExceededError, rate_limit_exceeded_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)
app.add_exception_handler(IntegrityError, database_integrity_handler)

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": exc.errors()},
    )

# Add rate limiters to the app
app.state.limiter = limiter
app.state.ai_rate_limiter = ai_rate_limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Include routers
app.include_router(health_router)
app.include_router(prompts_router)
app.include_router(interview_questions_router)
app.include_router(cover_letter_router)
app.include_router(mock_interview_router)
