"""
Test Turn Audio Buffer

Author: @kcaparas1630
"""

import base64
from app.services.mock_interview.audio_buffer import TurnAudioBuffer
from app.test.fakes import audio_message


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode()


class TestTurnAudioBuffer:
    """Per-turn accumulation of interviewer audio."""

    def setup_method(self):
        self.buffer = TurnAudioBuffer()

    def test_fragments_joined_in_receipt_order(self):
        assert self.buffer.handle_server_message(audio_message(b"\x01\x02")) is None
        assert self.buffer.handle_server_message(audio_message(b"\x03")) is None
        turn = self.buffer.handle_server_message(audio_message(b"\x04\x05", turn_complete=True))

        assert turn is not None
        assert turn.audio == b64(b"\x01\x02\x03\x04\x05")
        assert turn.chunk_count == 3

    def test_buffer_resets_after_turn(self):
        self.buffer.handle_server_message(audio_message(b"\x01", turn_complete=True))
        assert not self.buffer.chunks

        turn = self.buffer.handle_server_message(audio_message(b"\x02", turn_complete=True))
        assert turn.audio == b64(b"\x02")

    def test_turn_without_audio(self):
        turn = self.buffer.handle_server_message({"serverContent": {"turnComplete": True}})
        assert turn.audio is None
        assert turn.chunk_count == 0

    def test_text_parts_collected(self):
        self.buffer.handle_server_message({"serverContent": {"modelTurn": {"parts": [{"text": "Hello "}]}}})
        turn = self.buffer.handle_server_message({"serverContent": {"modelTurn": {"parts": [{"text": "there"}]}, "turnComplete": True}})
        assert turn.text == "Hello there"

    def test_non_audio_inline_data_ignored(self):
        message = {"serverContent": {"modelTurn": {"parts": [{"inlineData": {"mimeType": "image/png", "data": b64(b"x")}}]}}}
        self.buffer.handle_server_message(message)
        assert not self.buffer.chunks

    def test_audio_mime_with_rate_accepted(self):
        message = {"serverContent": {"modelTurn": {"parts": [{"inlineData": {"mimeType": "audio/pcm;rate=24000", "data": b64(b"x")}}]}}}
        self.buffer.handle_server_message(message)
        assert self.buffer.chunks

    def test_messages_without_server_content_ignored(self):
        assert self.buffer.handle_server_message({"setupComplete": {}}) is None
        assert not self.buffer.chunks

    def test_corrupt_fragment_yields_no_audio(self):
        self.buffer.add_chunk("not-base64!")
        assert self.buffer.get_turn_audio_data() is None
