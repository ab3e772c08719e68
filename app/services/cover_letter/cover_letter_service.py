"""
Description:
Cover letter generation for a pasted job description.

If the model call fails, times out or returns nothing usable, the caller still
gets a generic letter built from a template, with a note saying so.

Dependencies:
- openai: AsyncOpenAI client pointed at the Gemini OpenAI-compatible endpoint.
- loguru: For logging.

Author: @kcaparas1630
"""
import os
from typing import Optional
from loguru import logger
from openai import AsyncOpenAI
from app.constants.limits import JOB_DESCRIPTION_MAX_LENGTH, JOB_DESCRIPTION_MIN_LENGTH
from app.errors.exceptions import ValidationError
from app.helper.text_utils import sanitize_text
from app.schemas.cover_letter.cover_letter import CoverLetterRequest, CoverLetterResponse

COVER_LETTER_MODEL = os.getenv("COVER_LETTER_MODEL", "gemini-1.5-flash")
AI_REQUEST_TIMEOUT = float(os.getenv("AI_REQUEST_TIMEOUT", "60"))

UNAVAILABLE_NOTE = "AI service temporarily unavailable. Here's a basic cover letter template."
UNEXPECTED_FORMAT_NOTE = "AI service returned unexpected format. Here's a professional cover letter template."


def build_fallback_cover_letter(role: Optional[str] = None, candidate_name: Optional[str] = None) -> str:
    return f"""Dear Hiring Manager,

I am writing to express my strong interest in the {role or "position"} role at your company. After reviewing the job description, I am excited about the opportunity to contribute to your team.

Based on the requirements outlined, I believe my skills and experience align well with what you're looking for. I am particularly drawn to this role because it offers the chance to make a meaningful impact while growing professionally.

I would welcome the opportunity to discuss how my background and enthusiasm can contribute to your team's success. Thank you for considering my application.

Best regards,
{candidate_name or "[Your Name]"}"""


def build_cover_letter_prompt(job_description: str, candidate_name: Optional[str], role: Optional[str]) -> str:
    return f"""You are a professional career coach and cover letter writer. Create a compelling, proactive cover letter for the following job opportunity.

INSTRUCTIONS:
- Write a professional, engaging cover letter that demonstrates enthusiasm and proactivity
- Focus on how the candidate can contribute value to the company
- Use active language and specific examples where possible
- Keep it concise but impactful (3-4 paragraphs)
- Make it sound genuine and personalized
- Include a strong opening that grabs attention
- End with a proactive call to action

CANDIDATE NAME: {candidate_name or "[Your Name]"}
POSITION: {role or "[Position from job description]"}

JOB DESCRIPTION:
{job_description}

Please write a professional cover letter that would make this candidate stand out to hiring managers."""


def validate_job_description(job_description: Optional[str]) -> str:
    """Return the trimmed description or raise ValidationError (400)."""
    if not job_description or not job_description.strip():
        raise ValidationError("Job description is required")
    trimmed = job_description.strip()
    if len(trimmed) < JOB_DESCRIPTION_MIN_LENGTH:
        raise ValidationError(f"Job description must be at least {JOB_DESCRIPTION_MIN_LENGTH} characters")
    if len(trimmed) > JOB_DESCRIPTION_MAX_LENGTH:
        raise ValidationError("Job description must be less than 10,000 characters")
    return trimmed


class CoverLetterService:
    """
    Service class for generating cover letters.
    """

    def __init__(self, client: AsyncOpenAI, model: str = COVER_LETTER_MODEL, timeout: float = AI_REQUEST_TIMEOUT):
        self.client = client
        self.model = model
        self.timeout = timeout

    async def generate(self, request: CoverLetterRequest) -> CoverLetterResponse:
        """
        Generate a cover letter, falling back to the template on upstream trouble.

        Raises:
            ValidationError: If the job description is missing or out of bounds.
        """
        job_description = validate_job_description(request.jobDescription)
        candidate_name = sanitize_text(request.candidateName, max_length=100) if request.candidateName else None
        role = sanitize_text(request.role, max_length=200) if request.role else None

        prompt = build_cover_letter_prompt(
            sanitize_text(job_description, max_length=JOB_DESCRIPTION_MAX_LENGTH), candidate_name, role
        )

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=0.7,
                top_p=0.9,
                max_tokens=2048,
                timeout=self.timeout,
            )
        except Exception as e:
            logger.error(f"Cover letter generation failed: {e}")
            return CoverLetterResponse(
                success=True,
                coverLetter=build_fallback_cover_letter(role, candidate_name),
                note=UNAVAILABLE_NOTE,
            )

        content = None
        if response.choices:
            content = response.choices[0].message.content
        if not content or not content.strip():
            logger.warning("Unexpected cover letter response format, returning template")
            return CoverLetterResponse(
                success=True,
                coverLetter=build_fallback_cover_letter(role, candidate_name),
                note=UNEXPECTED_FORMAT_NOTE,
            )

        logger.info("Successfully generated cover letter")
        return CoverLetterResponse(success=True, coverLetter=content.strip())
