"""
Test Mock Interview WebSocket

Runs whole sessions through TestClient.websocket_connect with the live
speech channel replaced by FakeInterviewChannel.

Author: @kcaparas1630
"""

import base64
import pytest
from app.constants.limits import INTERVIEW_MAX_DURATIONS
from app.main import app
from app.routes.mock_interview import get_channel_factory
from app.schemas.interview_questions.question_set import QuestionGenerationResult
from app.services.interview_questions.question_generator import QuestionGeneratorService
from app.test.fakes import FakeInterviewChannel

WS_PATH = "/api/mock-interview/ws"


@pytest.fixture
def channel():
    channel = FakeInterviewChannel(connected=False)
    app.dependency_overrides[get_channel_factory] = lambda: (lambda start: channel)
    return channel


class TestSessionSetup:
    """Start message handling."""

    def test_unknown_job(self, client, channel):
        with client.websocket_connect(WS_PATH) as websocket:
            websocket.send_json({"jobId": "missing"})
            message = websocket.receive_json()
        assert message["type"] == "error"
        assert message["content"] == "Job not found"
        assert channel.connect_calls == 0

    def test_no_saved_questions(self, client, channel, job):
        with client.websocket_connect(WS_PATH) as websocket:
            websocket.send_json({"jobId": job.id})
            message = websocket.receive_json()
        assert message["type"] == "error"
        assert message["content"] == "No interview questions found for this job. Generate questions first."

    def test_question_load_failure(self, client, channel, job, saved_questions, monkeypatch):
        def broken_load(self, job_id, resume_id=None):
            return QuestionGenerationResult(success=False, error="Failed to load interview questions")

        monkeypatch.setattr(QuestionGeneratorService, "get_saved_questions", broken_load)
        with client.websocket_connect(WS_PATH) as websocket:
            websocket.send_json({"jobId": job.id})
            message = websocket.receive_json()
        assert message["type"] == "error"
        assert message["content"] == "Failed to load interview questions"
        assert channel.connect_calls == 0

    def test_invalid_start_message(self, client, channel):
        with client.websocket_connect(WS_PATH) as websocket:
            websocket.send_json({"jobId": "job-1", "interviewType": "final-round"})
            message = websocket.receive_json()
        assert message["type"] == "error"
        assert message["content"].startswith("Invalid start message")

    def test_live_service_not_configured(self, client, job, saved_questions, monkeypatch):
        monkeypatch.delenv("GOOGLE_AI_API_KEY", raising=False)
        with client.websocket_connect(WS_PATH) as websocket:
            websocket.send_json({"jobId": job.id})
            message = websocket.receive_json()
        assert message["type"] == "error"
        assert "not configured" in message["content"]


class TestInterviewSession:
    """A running session."""

    def test_full_interview(self, client, channel, job, saved_questions):
        with client.websocket_connect(WS_PATH) as websocket:
            websocket.send_json({"jobId": job.id, "userFirstName": "Sam"})
            started = websocket.receive_json()
            assert started["type"] == "session_started"
            assert started["data"]["totalQuestions"] == 3
            assert started["data"]["maxDurationSeconds"] == 30 * 60

            asked = []
            for index in range(3):
                websocket.send_json({"type": "next"})
                message = websocket.receive_json()
                assert message["type"] == "question"
                assert message["data"] == {"questionIndex": index, "totalQuestions": 3}
                asked.append(message["content"])
                websocket.send_json({"type": "response", "content": f"answer {index}"})

            websocket.send_json({"type": "next"})
            complete = websocket.receive_json()

        assert asked == ["Q1", "Q2", "Q3"]
        assert complete["type"] == "interview_complete"
        assert complete["data"] == {"questionsAsked": 3, "totalQuestions": 3, "responses": 3}
        assert channel.connect_calls == 1
        # introduction, three questions, closing
        assert len(channel.sent) == 5
        assert "Tech Corp" in channel.sent_texts()[0]

    def test_end_early(self, client, channel, job, saved_questions):
        with client.websocket_connect(WS_PATH) as websocket:
            websocket.send_json({"jobId": job.id})
            websocket.receive_json()
            websocket.send_json({"type": "next"})
            websocket.receive_json()
            websocket.send_json({"type": "end"})
            complete = websocket.receive_json()

        assert complete["type"] == "interview_complete"
        assert complete["data"]["questionsAsked"] == 1

    def test_interviewer_audio_relayed(self, client, job, saved_questions):
        channel = FakeInterviewChannel(connected=False, auto_reply=True)
        app.dependency_overrides[get_channel_factory] = lambda: (lambda start: channel)

        with client.websocket_connect(WS_PATH) as websocket:
            websocket.send_json({"jobId": job.id})
            assert websocket.receive_json()["type"] == "session_started"
            turn = websocket.receive_json()

        assert turn["type"] == "interviewer_turn"
        assert turn["data"]["audio"] == base64.b64encode(b"\x01\x02\x03\x04").decode()
        assert turn["data"]["phase"] == "questions"

    def test_ping(self, client, channel, job, saved_questions):
        with client.websocket_connect(WS_PATH) as websocket:
            websocket.send_json({"jobId": job.id})
            websocket.receive_json()
            websocket.send_json({"type": "ping"})
            assert websocket.receive_json()["type"] == "pong"

    def test_unknown_message_type(self, client, channel, job, saved_questions):
        with client.websocket_connect(WS_PATH) as websocket:
            websocket.send_json({"jobId": job.id})
            websocket.receive_json()
            websocket.send_json({"type": "dance"})
            message = websocket.receive_json()
        assert message["type"] == "error"
        assert message["content"] == "Unknown message type: dance"

    def test_empty_response_rejected(self, client, channel, job, saved_questions):
        with client.websocket_connect(WS_PATH) as websocket:
            websocket.send_json({"jobId": job.id})
            websocket.receive_json()
            websocket.send_json({"type": "response"})
            message = websocket.receive_json()
        assert message["type"] == "error"

    def test_send_failure_keeps_position(self, client, channel, job, saved_questions):
        with client.websocket_connect(WS_PATH) as websocket:
            websocket.send_json({"jobId": job.id})
            websocket.receive_json()

            channel.fail_next_send = True
            websocket.send_json({"type": "next"})
            error = websocket.receive_json()

            websocket.send_json({"type": "next"})
            question = websocket.receive_json()

        assert error["type"] == "error"
        assert error["content"] == "Simulated send failure"
        assert question["content"] == "Q1"

    def test_time_limit(self, client, channel, job, saved_questions, monkeypatch):
        monkeypatch.setitem(INTERVIEW_MAX_DURATIONS, "first-interview", 0.2)

        with client.websocket_connect(WS_PATH) as websocket:
            websocket.send_json({"jobId": job.id})
            websocket.receive_json()
            first = websocket.receive_json()
            second = websocket.receive_json()

        assert [first["type"], second["type"]] == ["interview_complete", "time_up"]
        assert "Do you have any questions for me" in channel.sent_texts()[-1]

    def test_resume_falls_back_to_job_questions(self, client, channel, job, resume, saved_questions):
        with client.websocket_connect(WS_PATH) as websocket:
            websocket.send_json({"jobId": job.id, "resumeId": resume.id})
            started = websocket.receive_json()
        assert started["data"]["totalQuestions"] == 3
        assert "reviewed your resume" in channel.sent_texts()[0]
