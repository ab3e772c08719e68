"""
Shared fixtures for the interview service tests.

Provides an in-memory SQLite database, sample job/resume/question rows and a
TestClient wired to them through dependency overrides. Test doubles live in
fakes.py.

Author: @kcaparas1630
"""

import os

os.environ.setdefault("ENV", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.prompt_resolver import DatabasePromptSource, PromptResolver, StaticPromptSource, get_prompt_resolver
from app.core.rate_limiter import RateLimiter
from app.core.route_limiters import ai_rate_limiter
from app.database import get_db_session
from app.main import app
from app.models.career_models import Base, InterviewQuestionSet, Job, Resume


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def job(db_session):
    job = Job(
        title="Software Engineer",
        company="Tech Corp",
        description="Build and maintain Python services on a FastAPI and PostgreSQL stack.",
    )
    db_session.add(job)
    db_session.commit()
    return job


@pytest.fixture
def resume(db_session):
    resume = Resume(name="Backend resume", content="Five years of Python, FastAPI and SQLAlchemy.")
    db_session.add(resume)
    db_session.commit()
    return resume


@pytest.fixture
def saved_questions(db_session, job):
    question_set = InterviewQuestionSet(job_id=job.id, technical_questions=["Q1", "Q2"], behavioral_questions=["Q3"])
    db_session.add(question_set)
    db_session.commit()
    return question_set


@pytest.fixture
def client(session_factory):
    def override_db_session():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    resolver = PromptResolver([DatabasePromptSource(session_factory), StaticPromptSource()])
    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_prompt_resolver] = lambda: resolver
    app.state.ai_rate_limiter = RateLimiter()

    yield TestClient(app)

    app.dependency_overrides.clear()
    app.state.ai_rate_limiter = ai_rate_limiter
