"""
Description:
Generates, stores and reads back the interview question sets for a job.

Generation asks the model for 20 technical and 5 behavioral questions tailored
to the job (and the candidate's resume when one is given). When the caller
passes the questions it already has, the prompt lists them as off-limits and
asks for harder ones. Nothing here raises: every outcome is a result object.

Dependencies:
- openai: AsyncOpenAI client pointed at the Gemini OpenAI-compatible endpoint.
- sqlalchemy: For loading jobs/resumes and upserting question sets.
- loguru: For logging.

Author: @kcaparas1630
"""
import json
import os
from typing import List, Optional
from loguru import logger
from openai import AsyncOpenAI
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.constants.limits import BEHAVIORAL_QUESTION_COUNT, TECHNICAL_QUESTION_COUNT
from app.helper.text_utils import extract_json_object
from app.models.career_models import InterviewQuestionSet, Job, Resume
from app.schemas.interview_questions.question_set import (
    QuestionGenerationResult,
    QuestionSet,
    SaveQuestionsResult,
)

QUESTION_MODEL = os.getenv("QUESTION_MODEL", "gemini-2.0-flash-001")
AI_REQUEST_TIMEOUT = float(os.getenv("AI_REQUEST_TIMEOUT", "60"))


def _numbered(questions: List[str]) -> str:
    return "".join(f"{i}. {question}\n" for i, question in enumerate(questions, start=1))


def build_question_prompt(job: Job, resume: Optional[Resume] = None, existing: Optional[QuestionSet] = None) -> str:
    """
    Build the generation prompt for a job.

    Args:
        job (Job): The job being interviewed for.
        resume (Resume, optional): Included only when it has content.
        existing (QuestionSet, optional): Questions already shown; a non-empty
            set switches the prompt to refresh mode.

    Returns:
        str: The prompt text.
    """
    is_refresh = existing is not None and not existing.is_empty()

    if is_refresh:
        count_line = f"Generate {TECHNICAL_QUESTION_COUNT} NEW technical questions and {BEHAVIORAL_QUESTION_COUNT} NEW behavioral questions."
        refresh_lines = (
            "Make these questions more probing, challenging, and in-depth than the previous ones.\n"
            "DO NOT repeat any of the existing questions listed below.\n"
        )
    else:
        count_line = f"Generate {TECHNICAL_QUESTION_COUNT} technical questions and {BEHAVIORAL_QUESTION_COUNT} behavioral questions."
        refresh_lines = ""

    prompt = f"""You are a headhunter preparing your client for an interview at the job in the job description.
Please generate {"new " if is_refresh else ""}interview questions based on the job description and resume.

Job Title: {job.title}
Company: {job.company}
Job Description: {job.description or "Not provided"}

Format your response as a JSON object with two arrays: "technical" for job-specific questions and "behavioral" for general behavioral questions.
Example format:
{{
  "technical": ["Question 1", "Question 2", ...],
  "behavioral": ["Question 1", "Question 2", ...]
}}

{count_line}
{refresh_lines}
IMPORTANT: Make the questions specific to the job description and resume. Reference specific skills, experiences, or technologies mentioned in the resume or job description.

Only return the JSON object, no other text."""

    if resume is not None and resume.content:
        prompt += f"\n\nResume Content: {resume.content}"

    if is_refresh:
        prompt += "\n\nExisting Technical Questions (DO NOT REPEAT THESE):\n" + _numbered(existing.technical)
        prompt += "\n\nExisting Behavioral Questions (DO NOT REPEAT THESE):\n" + _numbered(existing.behavioral)
        prompt += "\n\nPlease generate entirely new questions that are more challenging and probe deeper into the candidate's experience and knowledge."

    return prompt


def parse_question_response(content: str) -> Optional[QuestionSet]:
    """Parse model output into a QuestionSet; None when no JSON object can be read."""
    json_text = extract_json_object(content)
    if json_text is None:
        return None
    try:
        data = json.loads(json_text)
    except json.JSONDecodeError as e:
        logger.error(f"JSON parsing error: {e}")
        logger.error(f"Content that failed to parse: {content[:500]}")
        return None
    if not isinstance(data, dict):
        return None

    def strings(value) -> List[str]:
        if not isinstance(value, list):
            return []
        return [item.strip() for item in value if isinstance(item, str) and item.strip()]

    return QuestionSet(technical=strings(data.get("technical")), behavioral=strings(data.get("behavioral")))


class QuestionGeneratorService:
    """
    Service class for generating and persisting interview question sets.
    """

    def __init__(self, client: Optional[AsyncOpenAI], db: Session, model: str = QUESTION_MODEL, timeout: float = AI_REQUEST_TIMEOUT):
        """
        Args:
            client (AsyncOpenAI): AI client; may be None for read/save-only use.
            db (Session): Request-scoped database session.
            model (str): Model name on the OpenAI-compatible endpoint.
            timeout (float): Per-request timeout in seconds.
        """
        self.client = client
        self.db = db
        self.model = model
        self.timeout = timeout

    async def generate_questions(
        self,
        job_id: str,
        resume_id: Optional[str] = None,
        existing_questions: Optional[QuestionSet] = None,
    ) -> QuestionGenerationResult:
        logger.info(f"Generating interview questions for job {job_id}, resume {resume_id or 'none'}")
        try:
            job = self.db.get(Job, job_id)
            if job is None:
                return QuestionGenerationResult(success=False, error="Job not found")
            resume = self.db.get(Resume, resume_id) if resume_id else None
        except SQLAlchemyError as e:
            logger.error(f"Failed to load job details for {job_id}: {e}")
            return QuestionGenerationResult(success=False, error="Failed to fetch job details")

        if self.client is None:
            return QuestionGenerationResult(success=False, error="AI service is not configured")

        is_refresh = existing_questions is not None and not existing_questions.is_empty()
        prompt = build_question_prompt(job, resume, existing_questions)

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=0.8 if is_refresh else 0.7,
                top_p=0.95,
                max_tokens=8192,
                timeout=self.timeout,
            )
            content = response.choices[0].message.content
        except Exception as e:
            logger.error(f"Error generating interview questions: {e}")
            return QuestionGenerationResult(success=False, error=f"Failed to generate interview questions: {e}")

        if not content:
            logger.error("Empty response from question generation model")
            return QuestionGenerationResult(success=False, error="Failed to parse interview questions")

        questions = parse_question_response(content)
        if questions is None:
            return QuestionGenerationResult(success=False, error="Failed to parse interview questions")

        logger.info(f"Generated {len(questions.technical)} technical and {len(questions.behavioral)} behavioral questions")
        return QuestionGenerationResult(success=True, questions=questions)

    def _find_set(self, job_id: str, resume_id: Optional[str]) -> Optional[InterviewQuestionSet]:
        query = select(InterviewQuestionSet).where(InterviewQuestionSet.job_id == job_id)
        if resume_id:
            query = query.where(InterviewQuestionSet.resume_id == resume_id)
        else:
            query = query.where(InterviewQuestionSet.resume_id.is_(None))
        return self.db.execute(query).scalars().first()

    def save_questions(self, job_id: str, questions: QuestionSet, resume_id: Optional[str] = None) -> SaveQuestionsResult:
        """Insert or replace the stored set for (job, resume)."""
        try:
            question_set = self._find_set(job_id, resume_id)
            if question_set is None:
                question_set = InterviewQuestionSet(job_id=job_id, resume_id=resume_id)
                self.db.add(question_set)
            question_set.technical_questions = list(questions.technical)
            question_set.behavioral_questions = list(questions.behavioral)
            self.db.commit()
            logger.info(f"Saved interview questions for job {job_id}")
            return SaveQuestionsResult(success=True)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to save interview questions for job {job_id}: {e}")
            return SaveQuestionsResult(success=False, error="Failed to save interview questions")

    def get_saved_questions(self, job_id: str, resume_id: Optional[str] = None) -> QuestionGenerationResult:
        """The stored set (empty when nothing has been saved), or an error when the lookup fails."""
        try:
            question_set = self._find_set(job_id, resume_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load interview questions for job {job_id}: {e}")
            return QuestionGenerationResult(success=False, error="Failed to load interview questions")

        if question_set is None:
            return QuestionGenerationResult(success=True, questions=QuestionSet())
        return QuestionGenerationResult(success=True, questions=QuestionSet(
            technical=list(question_set.technical_questions or []),
            behavioral=list(question_set.behavioral_questions or []),
        ))
