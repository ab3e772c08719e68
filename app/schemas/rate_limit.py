"""
Description:
Schemas for the fixed-window rate limiter.

Dependencies:
- pydantic: For data validation and settings management.

Author: @kcaparas1630
"""
from pydantic import BaseModel, Field
from typing import Optional

class RateLimitRecord(BaseModel):
    """Counter for one (identifier, action) pair inside the current window."""
    count: int = Field(..., ge=0, description="Requests accepted in the current window")
    reset_time: int = Field(..., description="Epoch milliseconds at which the window expires")

class RateLimitResult(BaseModel):
    success: bool
    remaining: int = Field(default=0, ge=0)
    reset_time: Optional[int] = Field(default=None, description="Epoch milliseconds at which the window expires")
