from typing import Optional
from fastapi import HTTPException
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_429_TOO_MANY_REQUESTS,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

class BadRequest(HTTPException):
    def __init__(self, detail: str = "Bad request"):
        super().__init__(status_code=HTTP_400_BAD_REQUEST, detail=detail)

class NotFound(HTTPException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=HTTP_404_NOT_FOUND, detail=detail)

class InternalServerError(HTTPException):
    def __init__(self, detail: str = "Internal server error"):
        super().__init__(status_code=HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)

class DuplicateRecordError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(
            status_code=HTTP_409_CONFLICT,
            detail=detail
        )
class DuplicateQuestionSetError(DuplicateRecordError):
    def __init__(self, identifier: str = None):
        detail = f"Question set for job '{identifier}' already exists." if identifier else "Question set already exists."
        super().__init__(detail=detail)
class JobNotFound(NotFound):
    def __init__(self, identifier: str = None):
        detail = f"Job '{identifier}' not found." if identifier else "Job not found."
        super().__init__(detail=detail)
class PromptNotFound(NotFound):
    def __init__(self, identifier: str = None):
        detail = f"Prompt '{identifier}' not found." if identifier else "Prompt not found."
        super().__init__(detail=detail)
class ValidationError(BadRequest):
    def __init__(self, detail: str = "Validation error"):
        super().__init__(detail=detail)
class ServiceNotConfigured(InternalServerError):
    def __init__(self, detail: str = "AI service is not configured. Please try again later."):
        super().__init__(detail=detail)

class RateLimitExceededError(HTTPException):
    """Raised by the rate limit dependency; rendered as 429 with the window reset time."""
    def __init__(self, reset_time: Optional[int] = None, detail: str = "Too many requests. Please try again later."):
        super().__init__(status_code=HTTP_429_TOO_MANY_REQUESTS, detail=detail)
        self.reset_time = reset_time

# Non-HTTP errors raised inside the interview session layer
class ChannelClosedError(RuntimeError):
    """The duplex channel is closed or was never opened."""

class InterviewStateError(RuntimeError):
    """An operation was called in a phase (or connection state) that does not allow it."""
