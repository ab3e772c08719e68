"""
Prompts API Route

Description:
Read access to prompt templates, resolved through the database with the
built-in templates as fallback.

Arguments:
- name: return the single prompt with this name (404 when no source has it)
- category: otherwise list prompts, optionally filtered by category

Dependencies:
- fastapi: For defining routes.
- app.core.prompt_resolver: For resolving prompts.

Author: @kcaparas1630

"""
from typing import Optional, Union
from fastapi import APIRouter, Depends, Query
from app.core.prompt_resolver import PromptResolver, get_prompt_resolver
from app.errors.exceptions import PromptNotFound
from app.schemas.prompts.prompt_template import PromptListResponse, PromptResponse

router = APIRouter(
    prefix="/api",
    tags=["prompts"],
    responses={404: {"description": "Not found"}}
)


@router.get("/prompts", response_model=Union[PromptResponse, PromptListResponse])
async def get_prompts(
    name: Optional[str] = Query(default=None, max_length=100),
    category: Optional[str] = Query(default=None, max_length=50),
    resolver: PromptResolver = Depends(get_prompt_resolver),
):
    if name:
        prompt = resolver.get_prompt(name)
        if prompt is None:
            raise PromptNotFound(name)
        return PromptResponse(success=True, prompt=prompt)

    return PromptListResponse(success=True, prompts=resolver.get_prompts(category))
