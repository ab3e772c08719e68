"""
Test Interview Controller

Drives the controller against an in-memory channel: phase progression,
question order, fallbacks, failure handling and inbound message relay.

Author: @kcaparas1630
"""

import base64
import pytest
from types import MappingProxyType
from app.core.prompt_resolver import PromptResolver, StaticPromptSource
from app.errors.exceptions import ChannelClosedError, InterviewStateError
from app.schemas.interview_questions.question_set import QuestionSet
from app.services.mock_interview.interview_controller import (
    InterviewCallbacks,
    InterviewContext,
    InterviewController,
    build_closing_text,
    build_introduction_text,
)
from app.services.mock_interview.interview_state import (
    PHASE_TRANSITIONS,
    InterviewPhase,
    InterviewState,
    advance_question,
    begin_questions,
    close_interview,
    is_complete,
    next_phase,
)
from app.test.fakes import FakeInterviewChannel, audio_message

QUESTIONS = QuestionSet(technical=["Q1", "Q2"], behavioral=["Q3"])
CONTEXT = InterviewContext(job_title="Software Engineer", company_name="Tech Corp", user_first_name="Sam")


def make_controller(channel=None, resolver=None, questions=None, context=CONTEXT, callbacks=None):
    return InterviewController(
        channel=channel or FakeInterviewChannel(),
        resolver=resolver or PromptResolver([StaticPromptSource()]),
        questions=QUESTIONS.all_questions() if questions is None else questions,
        context=context,
        callbacks=callbacks,
    )


class TestInterviewState:
    """Pure phase model."""

    def test_transition_table_is_read_only(self):
        assert isinstance(PHASE_TRANSITIONS, MappingProxyType)
        with pytest.raises(TypeError):
            PHASE_TRANSITIONS[InterviewPhase.CLOSING] = InterviewPhase.INTRODUCTION

    def test_no_phase_after_closing(self):
        assert next_phase(InterviewPhase.INTRODUCTION) == InterviewPhase.QUESTIONS
        with pytest.raises(InterviewStateError):
            next_phase(InterviewPhase.CLOSING)

    def test_functions_return_new_state(self):
        state = InterviewState(questions=("Q1",))
        started = begin_questions(state)
        advanced = advance_question(started)
        assert state.phase == InterviewPhase.INTRODUCTION
        assert started.current_question_index == 0
        assert advanced.current_question_index == 1
        assert is_complete(advanced)

    def test_invalid_moves_raise(self):
        state = InterviewState(questions=("Q1",))
        with pytest.raises(InterviewStateError):
            advance_question(state)
        closed = close_interview(state)
        with pytest.raises(InterviewStateError):
            close_interview(closed)
        with pytest.raises(InterviewStateError):
            begin_questions(closed)


class TestUtterances:
    """Literal introduction and closing text."""

    def test_introduction_mentions_resume_only_when_present(self):
        without = build_introduction_text(CONTEXT)
        with_resume = build_introduction_text(InterviewContext("Software Engineer", "Tech Corp", has_resume=True))
        assert without.startswith("Hello! I'm calling from Tech Corp regarding your application for the Software Engineer position. ")
        assert "reviewed your resume" not in without
        assert "I've reviewed your resume and I'm impressed with your background. " in with_resume
        assert without.endswith("Are you ready to begin?")

    def test_closing_mentions_company_and_title(self):
        closing = build_closing_text(CONTEXT)
        assert "our team at Tech Corp" in closing
        assert "about the Software Engineer position or next steps" in closing


class TestInterviewFlow:
    """Introduction, questions and closing over the channel."""

    @pytest.mark.asyncio
    async def test_end_to_end_question_order(self):
        channel = FakeInterviewChannel()
        controller = make_controller(channel)

        await controller.start()
        assert controller.phase == InterviewPhase.QUESTIONS

        asked = [await controller.ask_next_question() for _ in range(3)]
        assert asked == ["Q1", "Q2", "Q3"]
        assert controller.current_question_index == 3
        assert not controller.is_interview_complete()

        assert await controller.ask_next_question() is None
        assert controller.is_interview_complete()
        assert controller.phase == InterviewPhase.CLOSING

        texts = channel.sent_texts()
        assert len(texts) == 5
        assert "Tech Corp" in texts[0]
        assert '"Q1"' in texts[1] and '"Q2"' in texts[2] and '"Q3"' in texts[3]
        assert "Do you have any questions for me about the Software Engineer position" in texts[4]

    @pytest.mark.asyncio
    async def test_no_op_after_closing(self):
        channel = FakeInterviewChannel()
        controller = make_controller(channel, questions=["Q1"])
        await controller.start()
        await controller.close()
        sent = len(channel.sent)

        assert await controller.ask_next_question() is None
        await controller.close()
        assert len(channel.sent) == sent
        assert controller.current_question_index == 0

    @pytest.mark.asyncio
    async def test_literal_fallbacks_when_no_prompt_available(self):
        channel = FakeInterviewChannel()
        controller = make_controller(channel, resolver=PromptResolver([]))

        await controller.start()
        await controller.ask_next_question()

        texts = channel.sent_texts()
        assert texts[0] == build_introduction_text(CONTEXT)
        assert texts[1] == "Q1"

    @pytest.mark.asyncio
    async def test_phone_screener_instructions_only_for_phone_screens(self):
        phone = FakeInterviewChannel()
        first = FakeInterviewChannel()
        phone_context = InterviewContext("Software Engineer", "Tech Corp", interview_type="phone-screener")

        await make_controller(phone, context=phone_context).start()
        await make_controller(first).start()

        assert "brief phone screening" in phone.sent_texts()[0]
        assert "brief phone screening" not in first.sent_texts()[0]

    @pytest.mark.asyncio
    async def test_prompt_variables_substituted(self):
        channel = FakeInterviewChannel()
        controller = make_controller(channel)
        await controller.start()
        await controller.ask_next_question()

        question_prompt = channel.sent_texts()[1]
        assert "You are Alex" in question_prompt
        assert "first-round interview for Software Engineer at Tech Corp" in question_prompt
        assert "{" not in question_prompt

    @pytest.mark.asyncio
    async def test_empty_question_list_goes_straight_to_closing(self):
        controller = make_controller(questions=[])
        await controller.start()
        assert await controller.ask_next_question() is None
        assert controller.is_interview_complete()

    @pytest.mark.asyncio
    async def test_ask_before_start_raises(self):
        controller = make_controller()
        with pytest.raises(InterviewStateError):
            await controller.ask_next_question()

    @pytest.mark.asyncio
    async def test_start_twice_raises(self):
        controller = make_controller()
        await controller.start()
        with pytest.raises(InterviewStateError):
            await controller.start()

    def test_responses_are_append_only(self):
        controller = make_controller()
        controller.record_response("first answer")
        controller.record_response("second answer")
        assert controller.responses == ("first answer", "second answer")


class TestDisconnection:
    """Channel loss and send failures."""

    @pytest.mark.asyncio
    async def test_ask_when_disconnected_raises(self):
        controller = make_controller()
        await controller.start()
        await controller.disconnect()

        assert controller.is_connected is False
        with pytest.raises(InterviewStateError):
            await controller.ask_next_question()

    @pytest.mark.asyncio
    async def test_failed_send_keeps_question_index(self):
        channel = FakeInterviewChannel()
        controller = make_controller(channel)
        await controller.start()

        channel.fail_next_send = True
        with pytest.raises(ChannelClosedError):
            await controller.ask_next_question()
        assert controller.current_question_index == 0

        assert await controller.ask_next_question() == "Q1"
        assert controller.current_question_index == 1

    @pytest.mark.asyncio
    async def test_remote_drop_reported_through_error_callback(self):
        errors = []

        async def on_error(message):
            errors.append(message)

        channel = FakeInterviewChannel()
        controller = make_controller(channel, callbacks=InterviewCallbacks(on_error=on_error))
        await controller.start()

        channel.drop()
        await controller.listen()

        assert controller.is_connected is False
        assert errors == ["Connection to the interviewer was lost"]

    @pytest.mark.asyncio
    async def test_client_disconnect_not_reported_as_error(self):
        errors = []

        async def on_error(message):
            errors.append(message)

        channel = FakeInterviewChannel()
        controller = make_controller(channel, callbacks=InterviewCallbacks(on_error=on_error))
        await controller.disconnect()
        await controller.listen()

        assert errors == []


class TestInboundMessages:
    """Audio relay and server errors."""

    @pytest.mark.asyncio
    async def test_completed_turn_delivered_to_callback(self):
        turns = []

        async def on_turn_complete(turn):
            turns.append(turn)

        channel = FakeInterviewChannel()
        controller = make_controller(channel, callbacks=InterviewCallbacks(on_turn_complete=on_turn_complete))

        channel.push({"setupComplete": {}})
        channel.push(audio_message(b"ab"))
        channel.push(audio_message(b"cd", turn_complete=True))
        channel.drop()
        await controller.listen()

        assert len(turns) == 1
        assert turns[0].audio == base64.b64encode(b"abcd").decode()

    @pytest.mark.asyncio
    async def test_malformed_frame_reported_and_listening_continues(self):
        turns = []
        errors = []

        async def on_turn_complete(turn):
            turns.append(turn)

        async def on_error(message):
            errors.append(message)

        channel = FakeInterviewChannel()
        controller = make_controller(
            channel, callbacks=InterviewCallbacks(on_turn_complete=on_turn_complete, on_error=on_error)
        )

        channel.push({"serverContent": {"modelTurn": {"parts": [{"inlineData": {"mimeType": None, "data": "AA=="}}]}}})
        channel.push({"serverContent": {"turnComplete": "sometimes"}})
        channel.push(audio_message(b"ok", turn_complete=True))
        channel.drop()
        await controller.listen()

        assert len(turns) == 1
        assert turns[0].audio == base64.b64encode(b"ok").decode()
        assert len(errors) == 3
        assert all(error.startswith("Dropped malformed message") for error in errors[:2])
        assert errors[2] == "Connection to the interviewer was lost"

    @pytest.mark.asyncio
    async def test_server_error_sent_to_error_callback(self):
        errors = []

        async def on_error(message):
            errors.append(message)

        controller = make_controller(callbacks=InterviewCallbacks(on_error=on_error))
        result = await controller.handle_message({"error": {"message": "quota exceeded"}})

        assert result is None
        assert errors == ["quota exceeded"]

    @pytest.mark.asyncio
    async def test_phase_changes_reported(self):
        phases = []

        async def on_phase_change(phase):
            phases.append(phase)

        controller = make_controller(questions=["Q1"], callbacks=InterviewCallbacks(on_phase_change=on_phase_change))
        await controller.start()
        await controller.ask_next_question()
        await controller.ask_next_question()

        assert phases == [InterviewPhase.QUESTIONS, InterviewPhase.CLOSING]
