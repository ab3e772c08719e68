"""
Description:
Request and response schemas for cover letter generation.

Dependencies:
- pydantic: For data validation and settings management.
- typing: For type annotations.

Author: @kcaparas1630
"""
from pydantic import BaseModel, Field
from typing import Optional

class CoverLetterRequest(BaseModel):
    jobDescription: str = Field(..., description="Full job posting text")
    candidateName: Optional[str] = Field(default=None, max_length=100)
    role: Optional[str] = Field(default=None, max_length=200)

class CoverLetterResponse(BaseModel):
    success: bool
    coverLetter: Optional[str] = None
    note: Optional[str] = Field(default=None, description="Set when a generic template was returned instead of model output")
    error: Optional[str] = None
