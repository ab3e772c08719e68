"""
Description:
This module defines the schema for health check responses using Pydantic.

Dependencies:
- pydantic: For data validation and settings management.

Author: @kcaparas1630
"""
from pydantic import BaseModel, Field

class HealthResponse(BaseModel):
    """
    Schema for the health check endpoint. Only liveness is reported; the
    database and AI endpoints are not contacted.
    """
    status: str = Field(..., description="Always 'ok' when the process is serving requests")
