"""
Cover Letter API Route

Description:
Generates a cover letter from a pasted job description. Limited to 2 requests
per 15 minutes per client.

Arguments:
- request: CoverLetterRequest with jobDescription (50-10000 characters), optional candidateName and role.

Returns:
- CoverLetterResponse; when the model is unavailable a template letter is returned with a note.

Dependencies:
- fastapi: For defining routes.
- app.services.cover_letter.cover_letter_service: For generation.
- app.core.ai_client_manager: For the dedicated cover letter client.
- loguru: For logging.

Author: @kcaparas1630

"""
from fastapi import APIRouter, Depends
from openai import AsyncOpenAI
from loguru import logger
from app.constants.limits import STRICT_RATE_LIMIT
from app.core.ai_client_manager import get_cover_letter_client
from app.core.route_limiters import rate_limit
from app.errors.exceptions import ServiceNotConfigured
from app.schemas.cover_letter.cover_letter import CoverLetterRequest, CoverLetterResponse
from app.services.cover_letter.cover_letter_service import CoverLetterService

router = APIRouter(
    prefix="/api",
    tags=["cover-letter"],
    responses={404: {"description": "Not found"}}
)


def get_cover_letter_ai_client() -> AsyncOpenAI:
    try:
        return get_cover_letter_client()
    except RuntimeError as e:
        logger.error(f"Cover letter client unavailable: {e}")
        raise ServiceNotConfigured() from e


@router.post(
    "/cover-letter",
    response_model=CoverLetterResponse,
    dependencies=[Depends(rate_limit("cover-letter-generation", *STRICT_RATE_LIMIT))],
)
async def generate_cover_letter(request: CoverLetterRequest, client: AsyncOpenAI = Depends(get_cover_letter_ai_client)):
    """
    Generate a cover letter for the given job description
    """
    service = CoverLetterService(client)
    return await service.generate(request)
