"""
Description:
Prompt template schemas served by the prompt resolver and the prompts API.

Dependencies:
- pydantic: For data validation and settings management.
- typing: For type annotations.

Author: @kcaparas1630
"""
from pydantic import BaseModel, Field
from typing import List, Optional

class PromptTemplate(BaseModel):
    """A named prompt with {placeholder} tokens."""
    id: str = Field(..., description="Store identifier, or 'fallback-<name>' for built-in templates")
    name: str = Field(..., description="Stable lookup key, e.g. 'interview-question'")
    category: str = Field(..., description="Grouping used for category listings")
    description: Optional[str] = Field(default=None, description="What the prompt is for")
    content: str = Field(..., description="Template body")
    variables: List[str] = Field(default_factory=list, description="Placeholder names the template expects")
    version: int = Field(default=1, description="Revision number")
    is_active: bool = Field(default=True, description="Inactive prompts are never served")

class PromptResponse(BaseModel):
    success: bool
    prompt: Optional[PromptTemplate] = None

class PromptListResponse(BaseModel):
    success: bool
    prompts: List[PromptTemplate] = Field(default_factory=list)
