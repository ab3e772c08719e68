"""
Health check endpoint for the interview service.

Description:
Reports that the API process is up. It does not touch the database or the AI
endpoint, so it stays cheap enough for load balancer health checks.

Arguments:
- request: An instance of Request, required for rate limiting.

Returns:
- A JSON response {"status": "ok"}.

Dependencies:
- fastapi: For defining routes.
- app.core.route_limiters: For rate limiting functionality.
- app.schemas.health_response: For defining the response model.
- loguru: For logging information about the health check endpoint.

Author: @kcaparas1630

"""
from fastapi import APIRouter, Request
from app.core.route_limiters import limiter
from app.schemas.health_response import HealthResponse
from loguru import logger

router = APIRouter(
    prefix="/api",
    tags=["health"],
    responses={404: {"description": "Not found"}}
)

@router.get("/health", response_model=HealthResponse)
@limiter.limit("10/minute")
async def health(request: Request):
    """
    Request parameter is required for rate limiting.
    """
    logger.debug("Health check endpoint called")
    return {"status": "ok"}
