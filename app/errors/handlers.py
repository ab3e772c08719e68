from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_429_TOO_MANY_REQUESTS, HTTP_500_INTERNAL_SERVER_ERROR
from sqlalchemy.exc import IntegrityError
from loguru import logger
from app.errors.exceptions import DuplicateQuestionSetError, RateLimitExceededError

def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )

def generic_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url.path}")
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An unexpected error occurred."},
    )

def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceededError):
    """
    Render a rate limit rejection as 429 with the window reset time (epoch ms).
    """
    return JSONResponse(
        status_code=HTTP_429_TOO_MANY_REQUESTS,
        content={
            "success": False,
            "error": exc.detail,
            "resetTime": exc.reset_time,
        },
    )

def database_integrity_handler(request: Request, exc: IntegrityError):
    """
    Map constraint violations to a client error.

    A second question set for the same job and resume is reported as 409; any
    other violation is a generic 400.
    """
    error_msg = str(exc.orig).lower()
    logger.warning(f"Integrity error on {request.url.path}: {error_msg}")

    if "uq_interview_questions_job_resume" in error_msg or (
        "unique" in error_msg and "interview_questions" in error_msg
    ):
        duplicate = DuplicateQuestionSetError()
        return JSONResponse(status_code=duplicate.status_code, content={"detail": duplicate.detail})

    return JSONResponse(
        status_code=HTTP_400_BAD_REQUEST,
        content={"detail": "Data constraint violation. Please check your data and try again."},
    )
