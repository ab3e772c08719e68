"""
Description:
This module defines the schemas for messages on the mock interview WebSocket.

# MockInterviewStart is the first message the client sends.
# WebSocketClientMessage covers every later client message.
# WebSocketMessage is the envelope for everything the server sends back.

Dependencies:
- pydantic: For data validation and settings management.
- typing: For type annotations.

Author: @kcaparas1630
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, Literal, Optional

InterviewType = Literal["phone-screener", "first-interview"]

# First message: which job to interview for and who is being interviewed
class MockInterviewStart(BaseModel):
    jobId: str = Field(..., min_length=1)
    resumeId: Optional[str] = None
    userFirstName: str = Field(default="there", max_length=100)
    interviewerName: str = Field(default="Alex", max_length=100)
    interviewType: InterviewType = "first-interview"
    voice: str = Field(default="Kore", max_length=30)

# Model for client messages after the start message
class WebSocketClientMessage(BaseModel):
    type: Literal["next", "response", "end", "ping"]
    content: Optional[str] = None

# Base model for all messages sent by the server
class WebSocketMessage(BaseModel):
    type: Literal[
        "session_started",
        "interviewer_turn",
        "question",
        "interview_complete",
        "time_up",
        "error",
        "pong",
    ]
    content: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    timestamp: Optional[str] = None
