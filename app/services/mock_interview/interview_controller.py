"""
Interview Controller Module

Runs one spoken mock interview over an InterviewChannel: an introduction, one
question per ask_next_question() call in technical-then-behavioral order, and
a closing. Each utterance is rendered from the prompt resolver (with a literal
fallback) and sent as a single turn; the interviewer's audio comes back as
fragments that are joined per turn by TurnAudioBuffer.

The controller is driven by one websocket handler on one event loop, so calls
are never concurrent and no locking is done here.

The module contains:
- InterviewContext: who is interviewing whom, for what
- InterviewCallbacks: async hooks for completed turns, errors and phase changes
- build_introduction_text / build_closing_text: literal utterances
- InterviewController: the session itself

Dependencies:
- app.core.prompt_resolver: For rendering the interview-* prompts.
- app.services.mock_interview: For the channel, audio buffer and phase model.
- loguru: For logging.

Author: @kcaparas1630
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple
from loguru import logger
from pydantic import ValidationError
from app.constants.fallback_prompts import PHONE_SCREENER_INSTRUCTIONS
from app.core.prompt_resolver import PromptResolver
from app.errors.exceptions import InterviewStateError
from app.schemas.live.live_messages import CompletedTurn, build_turn_message
from app.services.mock_interview.audio_buffer import TurnAudioBuffer
from app.services.mock_interview.interview_state import (
    InterviewPhase,
    InterviewState,
    advance_question,
    begin_questions,
    close_interview,
    is_complete,
)
from app.services.mock_interview.live_channel import InterviewChannel

INTERVIEW_TYPE_LABELS = {
    "phone-screener": "phone screening interview",
    "first-interview": "first-round interview",
}


@dataclass
class InterviewContext:
    job_title: str
    company_name: str
    interviewer_name: str = "Alex"
    interview_type: str = "first-interview"
    user_first_name: str = "there"
    has_resume: bool = False


@dataclass
class InterviewCallbacks:
    on_turn_complete: Optional[Callable[[CompletedTurn], Awaitable[None]]] = None
    on_error: Optional[Callable[[str], Awaitable[None]]] = None
    on_phase_change: Optional[Callable[[InterviewPhase], Awaitable[None]]] = None


def build_introduction_text(context: InterviewContext) -> str:
    text = (
        f"Hello! I'm calling from {context.company_name} regarding your application "
        f"for the {context.job_title} position. "
    )
    if context.has_resume:
        text += "I've reviewed your resume and I'm impressed with your background. "
    text += (
        "I'd like to ask you a few questions to learn more about your experience and skills. "
        "Are you ready to begin?"
    )
    return text


def build_closing_text(context: InterviewContext) -> str:
    return (
        "Thank you for your time today. We're looking for someone who can really contribute "
        f"to our team at {context.company_name}. I've made notes about your responses, and our "
        "hiring team will review them. Do you have any questions for me about the "
        f"{context.job_title} position or next steps in our process?"
    )


class InterviewController:
    """
    One mock interview session.

    Attributes:
        channel (InterviewChannel): Connected duplex channel to the speech endpoint.
        resolver (PromptResolver): Source of the interview-* prompt templates.
        context (InterviewContext): Job and participant details.
        callbacks (InterviewCallbacks): Async hooks.

    Example:
        >>> controller = InterviewController(channel, resolver, ["Q1", "Q2"], context)
        >>> await controller.start()
        >>> await controller.ask_next_question()
        'Q1'
    """

    def __init__(
        self,
        channel: InterviewChannel,
        resolver: PromptResolver,
        questions: Sequence[str],
        context: InterviewContext,
        callbacks: Optional[InterviewCallbacks] = None,
    ):
        self.channel = channel
        self.resolver = resolver
        self.context = context
        self.callbacks = callbacks or InterviewCallbacks()
        self._state = InterviewState(questions=tuple(questions))
        self._responses: List[Any] = []
        self._audio_buffer = TurnAudioBuffer()
        self._disconnected = False

    @property
    def phase(self) -> InterviewPhase:
        return self._state.phase

    @property
    def current_question_index(self) -> int:
        return self._state.current_question_index

    @property
    def questions(self) -> Tuple[str, ...]:
        return self._state.questions

    @property
    def responses(self) -> Tuple[Any, ...]:
        return tuple(self._responses)

    @property
    def is_connected(self) -> bool:
        return not self._disconnected and self.channel.is_connected

    def is_interview_complete(self) -> bool:
        return self._state.phase == InterviewPhase.CLOSING

    def _base_variables(self) -> Dict[str, str]:
        return {
            "interviewerName": self.context.interviewer_name,
            "companyName": self.context.company_name,
            "jobTitle": self.context.job_title,
            "interviewType": INTERVIEW_TYPE_LABELS.get(self.context.interview_type, self.context.interview_type),
            "userFirstName": self.context.user_first_name,
            "phoneScreenerInstructions": (
                PHONE_SCREENER_INSTRUCTIONS if self.context.interview_type == "phone-screener" else ""
            ),
        }

    def _render(self, name: str, variables: Dict[str, str], fallback: str) -> str:
        rendered = self.resolver.render_prompt(name, {**self._base_variables(), **variables})
        if not rendered:
            logger.warning(f"Prompt '{name}' unavailable, sending literal text")
            return fallback
        return rendered

    async def _set_state(self, state: InterviewState):
        previous = self._state.phase
        self._state = state
        if state.phase != previous:
            logger.info(f"Interview phase {previous.value} -> {state.phase.value}")
            if self.callbacks.on_phase_change:
                await self.callbacks.on_phase_change(state.phase)

    async def _report_error(self, message: str):
        logger.error(f"Interview session error: {message}")
        if self.callbacks.on_error:
            await self.callbacks.on_error(message)

    def _require_connected(self):
        if not self.is_connected:
            raise InterviewStateError("Interview channel is not connected")

    async def _send_utterance(self, text: str):
        await self.channel.send(build_turn_message(text))

    async def start(self):
        """Deliver the introduction and move to the questions phase."""
        if self._state.phase != InterviewPhase.INTRODUCTION:
            raise InterviewStateError(f"Cannot start an interview in '{self._state.phase.value}'")
        self._require_connected()

        introduction = build_introduction_text(self.context)
        await self._send_utterance(self._render("interview-introduction", {"introText": introduction}, introduction))
        await self._set_state(begin_questions(self._state))

    async def ask_next_question(self) -> Optional[str]:
        """
        Deliver the next question, or the closing once every question is asked.

        Returns:
            Optional[str]: The question text that was sent, or None when the
            closing was sent or the interview is already closing.

        Raises:
            InterviewStateError: If the channel is disconnected or the
                interview has not been started.
            ChannelClosedError: If the send fails; the question index is unchanged.
        """
        self._require_connected()
        if self._state.phase == InterviewPhase.CLOSING:
            return None
        if self._state.phase == InterviewPhase.INTRODUCTION:
            raise InterviewStateError("Interview has not been started")

        if is_complete(self._state):
            await self.close()
            return None

        question = self._state.questions[self._state.current_question_index]
        await self._send_utterance(self._render("interview-question", {"questionText": question}, question))
        await self._set_state(advance_question(self._state))
        logger.info(f"Asked question {self._state.current_question_index} of {len(self._state.questions)}")
        return question

    async def close(self):
        """Deliver the closing and enter the terminal closing phase."""
        if self._state.phase == InterviewPhase.CLOSING:
            return
        self._require_connected()

        closing = build_closing_text(self.context)
        await self._send_utterance(self._render("interview-closing", {"closingText": closing}, closing))
        await self._set_state(close_interview(self._state))

    def record_response(self, artifact: Any):
        """Append a candidate response (text or audio reference)."""
        self._responses.append(artifact)

    async def handle_message(self, message: dict) -> Optional[CompletedTurn]:
        """Process one inbound channel message; returns the turn it completed, if any."""
        if "error" in message:
            error = message["error"]
            detail = error.get("message", "Server error") if isinstance(error, dict) else str(error)
            await self._report_error(detail)
            return None
        if "setupComplete" in message:
            logger.debug("Live session setup complete")
            return None

        try:
            turn = self._audio_buffer.handle_server_message(message)
        except ValidationError as e:
            # Malformed frame: report it and keep listening
            await self._report_error(f"Dropped malformed message from the interviewer: {e.error_count()} invalid field(s)")
            return None
        if turn is not None and self.callbacks.on_turn_complete:
            await self.callbacks.on_turn_complete(turn)
        return turn

    async def listen(self):
        """Consume inbound messages until the channel closes."""
        async for message in self.channel.receive():
            await self.handle_message(message)

        if not self._disconnected:
            self._disconnected = True
            if not self.is_interview_complete():
                await self._report_error("Connection to the interviewer was lost")

    async def disconnect(self):
        """Close the channel; the session cannot be resumed afterwards."""
        self._disconnected = True
        await self.channel.close()
