"""Career Models Module

This module defines SQLAlchemy models for the job tracking data the interview
tooling reads and writes: tracked job postings, resumes, generated interview
question sets, and the editable prompt store.

Jobs and resumes are owned by the wider application; this service only reads
them. Question sets and prompts are written here.

Dependencies:
- sqlalchemy: For ORM functionality and database modeling.
- uuid: For UUID generation for primary keys.
- datetime: For timestamp handling.
- typing: For type annotations and optional fields.

Author: @kcaparas1630
"""

import uuid
from typing import List, Optional
from sqlalchemy import ForeignKey, String, Text, DateTime, Integer, Boolean, func, JSON, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from datetime import datetime


def _new_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models.

    Provides the foundation for all database models in the application.
    """
    pass

class Job(Base):
    """A job posting tracked by a user.

    Attributes:
        id (str): Primary key, UUID string
        user_id (str, optional): Owner of the job record
        title (str): Job title, e.g. "Software Engineer"
        company (str): Hiring company
        description (str, optional): Full job description text
        question_sets (List[InterviewQuestionSet]): Generated question sets for this job
    """
    __tablename__ = "jobs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    title: Mapped[str] = mapped_column(String(200))
    company: Mapped[str] = mapped_column(String(200))
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    question_sets: Mapped[List["InterviewQuestionSet"]] = relationship(
        "InterviewQuestionSet", back_populates="job", cascade="all, delete-orphan"
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())

    def __repr__(self):
        return f"Job(title={self.title}, company={self.company})"

class Resume(Base):
    """A resume uploaded by a user.

    Attributes:
        id (str): Primary key, UUID string
        user_id (str, optional): Owner of the resume
        name (str): Display name
        content (str, optional): Extracted plain-text content
    """
    __tablename__ = "resumes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    name: Mapped[str] = mapped_column(String(200))
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())

    def __repr__(self):
        return f"Resume(name={self.name})"

class InterviewQuestionSet(Base):
    """Technical and behavioral questions generated for a job (and optionally a resume).

    One row per (job, resume) pair; saving again replaces the lists.

    Attributes:
        id (str): Primary key, UUID string
        job_id (str): Foreign key to Job table
        resume_id (str, optional): Resume the questions were tailored to
        technical_questions (List[str]): Ordered technical questions
        behavioral_questions (List[str]): Ordered behavioral questions
    """
    __tablename__ = "interview_questions"
    __table_args__ = (UniqueConstraint("job_id", "resume_id", name="uq_interview_questions_job_resume"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    job_id: Mapped[str] = mapped_column(ForeignKey("jobs.id"), index=True)
    resume_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    technical_questions: Mapped[List[str]] = mapped_column(JSON, default=list)
    behavioral_questions: Mapped[List[str]] = mapped_column(JSON, default=list)
    job: Mapped["Job"] = relationship("Job", back_populates="question_sets")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"InterviewQuestionSet(job_id={self.job_id}, resume_id={self.resume_id})"

class PromptRecord(Base):
    """Editable prompt template stored in the database.

    Attributes:
        id (str): Primary key, UUID string
        name (str): Stable identifier, e.g. "interview-question"
        category (str): Grouping, e.g. "interview"
        description (str, optional): What the prompt is for
        content (str): Template body with {placeholder} tokens
        variables (List[str]): Placeholder names the template expects
        version (int): Revision number
        is_active (bool): Only active prompts are served
    """
    __tablename__ = "prompts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(100), index=True)
    category: Mapped[str] = mapped_column(String(50), index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    content: Mapped[str] = mapped_column(Text)
    variables: Mapped[List[str]] = mapped_column(JSON, default=list)
    version: Mapped[int] = mapped_column(Integer, default=1)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"PromptRecord(name={self.name}, version={self.version})"
