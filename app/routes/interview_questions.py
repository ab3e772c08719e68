"""
Interview Questions API Route

Description:
Generates interview questions for a tracked job, saves question sets and reads
them back.

Endpoints:
- POST /api/interview-questions/generate: generate (and by default save) a question set
- POST /api/interview-questions/save: store a question set as given
- GET /api/interview-questions/{job_id}?resumeId=: the saved set, empty when none

Generation is limited to 3 requests per 10 minutes per client.

Dependencies:
- fastapi: For defining routes and dependencies.
- sqlalchemy: For the request-scoped database session.
- app.services.interview_questions.question_generator: For generation and persistence.
- app.core.ai_client_manager: For the dedicated question generation client.
- loguru: For logging information about the request and any errors that occur.

Author: @kcaparas1630

"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from openai import AsyncOpenAI
from sqlalchemy.orm import Session
from loguru import logger
from app.constants.limits import DEFAULT_RATE_LIMIT
from app.core.ai_client_manager import get_question_generation_client
from app.core.route_limiters import rate_limit
from app.database import get_db_session
from app.errors.exceptions import InternalServerError, JobNotFound, ServiceNotConfigured
from app.models.career_models import Job
from app.schemas.interview_questions.question_set import (
    GenerateQuestionsRequest,
    GenerateQuestionsResponse,
    SavedQuestionsResponse,
    SaveQuestionsRequest,
)
from app.services.interview_questions.question_generator import QuestionGeneratorService

router = APIRouter(
    prefix="/api",
    tags=["interview-questions"],
    responses={404: {"description": "Not found"}}
)


def get_question_ai_client() -> AsyncOpenAI:
    try:
        return get_question_generation_client()
    except RuntimeError as e:
        logger.error(f"Question generation client unavailable: {e}")
        raise ServiceNotConfigured() from e


def _require_job(db: Session, job_id: str) -> Job:
    job = db.get(Job, job_id)
    if job is None:
        raise JobNotFound(job_id)
    return job


@router.post(
    "/interview-questions/generate",
    response_model=GenerateQuestionsResponse,
    dependencies=[Depends(rate_limit("generate-questions", *DEFAULT_RATE_LIMIT))],
)
async def generate_interview_questions(
    request: GenerateQuestionsRequest,
    client: AsyncOpenAI = Depends(get_question_ai_client),
    db: Session = Depends(get_db_session),
):
    """
    Generate interview questions for a job. When existingQuestions is given the
    new set avoids repeating them.
    """
    service = QuestionGeneratorService(client, db)
    result = await service.generate_questions(request.jobId, request.resumeId, request.existingQuestions)

    if not result.success:
        if result.error == "Job not found":
            raise JobNotFound(request.jobId)
        return GenerateQuestionsResponse(success=False, error=result.error)

    response = GenerateQuestionsResponse(success=True, questions=result.questions)
    if request.save:
        saved = service.save_questions(request.jobId, result.questions, request.resumeId)
        response.saved = saved.success
        response.saveError = saved.error
    return response


@router.post("/interview-questions/save", response_model=SavedQuestionsResponse)
async def save_interview_questions(request: SaveQuestionsRequest, db: Session = Depends(get_db_session)):
    """
    Store a question set for a job, replacing any existing one.
    """
    _require_job(db, request.jobId)
    service = QuestionGeneratorService(None, db)
    result = service.save_questions(request.jobId, request.questions, request.resumeId)
    if not result.success:
        raise InternalServerError(result.error or "Failed to save interview questions")
    return SavedQuestionsResponse(success=True, questions=request.questions)


@router.get("/interview-questions/{job_id}", response_model=SavedQuestionsResponse)
async def get_interview_questions(
    job_id: str,
    resumeId: Optional[str] = Query(default=None),
    db: Session = Depends(get_db_session),
):
    """
    Saved questions for a job (and resume); an empty set when nothing is saved.
    """
    _require_job(db, job_id)
    service = QuestionGeneratorService(None, db)
    result = service.get_saved_questions(job_id, resumeId)
    if not result.success:
        raise InternalServerError(result.error)
    return SavedQuestionsResponse(success=True, questions=result.questions)
