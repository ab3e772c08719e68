"""
Mock Interview WebSocket Handler Module

Runs the complete lifecycle of a spoken mock interview for one browser
websocket: loads the job and its saved questions, opens the live channel,
relays the interviewer's completed turns back to the browser and maps client
commands onto the InterviewController.

Client -> server messages:
- first message: MockInterviewStart {jobId, resumeId?, userFirstName, interviewerName?, interviewType?, voice?}
- {"type": "next"}: ask the next question (sends the closing after the last one)
- {"type": "response", "content": ...}: record the candidate's answer
- {"type": "end"}: finish early with the closing
- {"type": "ping"}: heartbeat

Server -> client messages: session_started, interviewer_turn, question,
interview_complete, time_up, error, pong.

Sessions are capped at 15 minutes for phone screeners and 30 minutes for first
interviews; on expiry the closing is delivered and time_up is sent.

Dependencies:
- starlette.websockets: For WebSocket connection handling.
- sqlalchemy: For loading the job.
- loguru: For logging operations.
- app.services.mock_interview: For the controller and live channel.
- app.services.interview_questions.question_generator: For the saved question set.

Author: @kcaparas1630
"""

import asyncio
import json
import os
import time
from typing import Any, Callable, Dict, Optional
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session
from starlette.websockets import WebSocket, WebSocketDisconnect
from loguru import logger
from app.constants.limits import INTERVIEW_MAX_DURATIONS
from app.core.prompt_resolver import PromptResolver
from app.errors.exceptions import ChannelClosedError, InternalServerError, InterviewStateError, ServiceNotConfigured
from app.helper.text_utils import clean_question_text
from app.models.career_models import Job
from app.schemas.interview_questions.question_set import QuestionGenerationResult
from app.schemas.live.live_messages import CompletedTurn
from app.schemas.websocket.websocket_message import MockInterviewStart, WebSocketClientMessage, WebSocketMessage
from app.services.interview_questions.question_generator import QuestionGeneratorService
from app.services.mock_interview.interview_controller import InterviewCallbacks, InterviewContext, InterviewController
from app.services.mock_interview.interview_state import InterviewPhase
from app.services.mock_interview.live_channel import GeminiLiveChannel, InterviewChannel

ChannelFactory = Callable[[MockInterviewStart], InterviewChannel]


def default_channel_factory(start: MockInterviewStart) -> InterviewChannel:
    api_key = os.getenv("GOOGLE_AI_API_KEY")
    if not api_key:
        raise ServiceNotConfigured()
    return GeminiLiveChannel(api_key=api_key, voice=start.voice)


async def send_websocket_message(websocket: WebSocket, message_type: str, content: Optional[str] = None,
  data: Optional[Dict[str, Any]] = None):
    """Send a WebSocket message with consistent formatting."""
    await websocket.send_json(WebSocketMessage(
        type=message_type,
        content=content,
        data=data,
        timestamp=str(int(time.time() * 1000))
    ).model_dump())


async def send_error_message(websocket: WebSocket, error_message: str):
    """Send an error message to the WebSocket client."""
    await send_websocket_message(websocket, "error", error_message)


def load_saved_questions(db: Session, job_id: str, resume_id: Optional[str]) -> QuestionGenerationResult:
    """Questions saved for the job and resume, falling back to the job-level set."""
    service = QuestionGeneratorService(client=None, db=db)
    result = service.get_saved_questions(job_id, resume_id)
    if result.success and result.questions.is_empty() and resume_id:
        result = service.get_saved_questions(job_id)
    return result


async def run_client_loop(websocket: WebSocket, controller: InterviewController):
    """Process client commands until the browser disconnects or the channel is lost."""
    while True:
        try:
            raw_message = await websocket.receive_json()
        except json.JSONDecodeError:
            await send_error_message(websocket, "Invalid message format")
            continue

        try:
            message = WebSocketClientMessage.model_validate(raw_message)
        except PydanticValidationError:
            message_type = raw_message.get("type") if isinstance(raw_message, dict) else None
            logger.warning(f"Unknown message type: {message_type}")
            await send_error_message(websocket, f"Unknown message type: {message_type}")
            continue

        try:
            if message.type == "ping":
                await send_websocket_message(websocket, "pong", "pong")

            elif message.type == "next":
                question = await controller.ask_next_question()
                if question is not None:
                    await send_websocket_message(websocket, "question", clean_question_text(question), {
                        "questionIndex": controller.current_question_index - 1,
                        "totalQuestions": len(controller.questions),
                    })

            elif message.type == "response":
                if not message.content:
                    await send_error_message(websocket, "Missing 'content' for response")
                    continue
                controller.record_response(message.content)

            elif message.type == "end":
                await controller.close()

        except (InterviewStateError, ChannelClosedError) as e:
            logger.error(f"Interview session error: {e}")
            await send_error_message(websocket, str(e))
            if not controller.is_connected:
                break


async def handle_mock_interview_connection(
    websocket: WebSocket,
    db: Session,
    resolver: PromptResolver,
    channel_factory: ChannelFactory = default_channel_factory,
):
    """
    Drive one mock interview session over an accepted websocket.

    Args:
        websocket (WebSocket): Accepted browser connection.
        db (Session): Database session for job and question lookup.
        resolver (PromptResolver): Prompt source for interviewer utterances.
        channel_factory (ChannelFactory): Builds the live channel for the session.
    """
    controller: Optional[InterviewController] = None
    listener: Optional[asyncio.Task] = None

    try:
        initial_message = await websocket.receive_json()
        logger.info(f"Received mock interview start message: {initial_message}")
        try:
            start = MockInterviewStart.model_validate(initial_message)
        except PydanticValidationError as e:
            await send_error_message(websocket, f"Invalid start message: {e.errors()[0].get('msg', 'invalid')}")
            return

        job = db.get(Job, start.jobId)
        if job is None:
            await send_error_message(websocket, "Job not found")
            return

        loaded = load_saved_questions(db, start.jobId, start.resumeId)
        if not loaded.success:
            await send_error_message(websocket, loaded.error)
            return
        questions = loaded.questions
        if questions.is_empty():
            await send_error_message(websocket, "No interview questions found for this job. Generate questions first.")
            return

        channel = channel_factory(start)

        async def relay_turn(turn: CompletedTurn):
            await send_websocket_message(websocket, "interviewer_turn", turn.text or None, {
                "audio": turn.audio,
                "text": turn.text,
                "phase": controller.phase.value,
                "questionIndex": controller.current_question_index,
                "totalQuestions": len(controller.questions),
            })

        async def relay_error(error: str):
            await send_error_message(websocket, error)

        async def relay_phase(phase: InterviewPhase):
            if phase == InterviewPhase.CLOSING:
                await send_websocket_message(websocket, "interview_complete", "Interview complete", {
                    "questionsAsked": controller.current_question_index,
                    "totalQuestions": len(controller.questions),
                    "responses": len(controller.responses),
                })

        controller = InterviewController(
            channel=channel,
            resolver=resolver,
            questions=questions.all_questions(),
            context=InterviewContext(
                job_title=job.title,
                company_name=job.company,
                interviewer_name=start.interviewerName,
                interview_type=start.interviewType,
                user_first_name=start.userFirstName,
                has_resume=bool(start.resumeId),
            ),
            callbacks=InterviewCallbacks(on_turn_complete=relay_turn, on_error=relay_error, on_phase_change=relay_phase),
        )

        await channel.connect()
        listener = asyncio.create_task(controller.listen(), name=f"mock_interview_listener_{start.jobId}")

        max_duration = INTERVIEW_MAX_DURATIONS.get(start.interviewType, INTERVIEW_MAX_DURATIONS["first-interview"])
        await send_websocket_message(websocket, "session_started", f"Mock interview for {job.title} at {job.company}", {
            "totalQuestions": len(controller.questions),
            "interviewType": start.interviewType,
            "maxDurationSeconds": max_duration,
        })
        await controller.start()

        try:
            await asyncio.wait_for(run_client_loop(websocket, controller), timeout=max_duration)
        except asyncio.TimeoutError:
            logger.info(f"Mock interview for job {start.jobId} reached its {max_duration}s limit")
            if not controller.is_interview_complete() and controller.is_connected:
                await controller.close()
            await send_websocket_message(websocket, "time_up", "The interview time limit has been reached")

    except WebSocketDisconnect:
        logger.info("Mock interview websocket closed by client")

    except (InterviewStateError, ChannelClosedError) as e:
        logger.error(f"Mock interview session failed: {e}")
        await send_error_message(websocket, str(e))

    except InternalServerError as e:
        logger.error(f"Internal server error in mock interview: {e.detail}")
        await send_error_message(websocket, e.detail)

    finally:
        if controller is not None:
            await controller.disconnect()
        if listener is not None:
            listener.cancel()
            try:
                await listener
            except asyncio.CancelledError:
                pass
            except (WebSocketDisconnect, RuntimeError) as e:
                logger.debug(f"Listener stopped after websocket closed: {e}")
