"""
Description:
Schemas for generated interview questions: the persisted QuestionSet, the
service-level result objects, and the request/response bodies of the
interview questions API.

Dependencies:
- pydantic: For data validation and settings management.
- typing: For type annotations.

Author: @kcaparas1630
"""
from pydantic import BaseModel, Field
from typing import List, Optional

class QuestionSet(BaseModel):
    """Technical and behavioral questions for one job (and optionally one resume)."""
    technical: List[str] = Field(default_factory=list, description="Job-specific questions, source order")
    behavioral: List[str] = Field(default_factory=list, description="General behavioral questions, source order")

    def all_questions(self) -> List[str]:
        """Technical questions first, then behavioral, each group in source order."""
        return [*self.technical, *self.behavioral]

    def is_empty(self) -> bool:
        return not self.technical and not self.behavioral

class QuestionGenerationResult(BaseModel):
    success: bool
    questions: Optional[QuestionSet] = None
    error: Optional[str] = None

class SaveQuestionsResult(BaseModel):
    success: bool
    error: Optional[str] = None

class GenerateQuestionsRequest(BaseModel):
    jobId: str = Field(..., min_length=1)
    resumeId: Optional[str] = None
    existingQuestions: Optional[QuestionSet] = Field(default=None, description="Questions to avoid repeating on refresh")
    save: bool = Field(default=True, description="Persist the generated set when generation succeeds")

class GenerateQuestionsResponse(BaseModel):
    """Generation and save outcomes are reported independently."""
    success: bool
    questions: Optional[QuestionSet] = None
    error: Optional[str] = None
    saved: Optional[bool] = None
    saveError: Optional[str] = None

class SaveQuestionsRequest(BaseModel):
    jobId: str = Field(..., min_length=1)
    resumeId: Optional[str] = None
    questions: QuestionSet

class SavedQuestionsResponse(BaseModel):
    success: bool
    questions: QuestionSet
