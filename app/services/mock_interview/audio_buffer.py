from collections import deque
import base64
import binascii
from typing import List, Optional
from loguru import logger
from app.schemas.live.live_messages import CompletedTurn, ServerContent


class TurnAudioBuffer:
    """
    Accumulates the audio fragments of one interviewer turn in receipt order and
    joins them into a single base64 PCM payload when the turn completes.
    """

    def __init__(self):
        self.chunks = deque()
        self.text_parts: List[str] = []

    def add_chunk(self, chunk_data: str):
        """Add a base64 audio fragment."""
        self.chunks.append(chunk_data)

    def add_text(self, text: str):
        self.text_parts.append(text)

    def get_turn_audio_data(self) -> Optional[str]:
        """Decode every fragment, concatenate the bytes and re-encode as one base64 string."""
        if not self.chunks:
            return None

        try:
            combined_data = b""
            for chunk in self.chunks:
                combined_data += base64.b64decode(chunk)
            return base64.b64encode(combined_data).decode('utf-8')
        except (binascii.Error, ValueError) as e:
            logger.error(f"Error combining audio chunks for turn: {e}")
            return None

    def complete_turn(self) -> CompletedTurn:
        """Emit the finished turn and reset for the next one."""
        turn = CompletedTurn(
            audio=self.get_turn_audio_data(),
            text="".join(self.text_parts),
            chunk_count=len(self.chunks),
        )
        logger.debug(f"Turn complete with {turn.chunk_count} audio chunks")
        self.clear()
        return turn

    def handle_server_message(self, message: dict) -> Optional[CompletedTurn]:
        """
        Feed one decoded serverContent message.

        Audio parts (any audio/* mime type) and text parts are buffered; a
        message with turnComplete true returns the joined turn. Messages
        without serverContent are ignored.
        """
        raw_content = message.get("serverContent")
        if not raw_content:
            return None

        content = ServerContent.model_validate(raw_content)
        if content.modelTurn is not None:
            for part in content.modelTurn.parts:
                if part.inlineData is not None and part.inlineData.mimeType.startswith("audio/") and part.inlineData.data:
                    self.add_chunk(part.inlineData.data)
                elif part.text:
                    self.add_text(part.text)

        if content.turnComplete:
            return self.complete_turn()
        return None

    def clear(self):
        """Clear all chunks and reset state."""
        self.chunks.clear()
        self.text_parts = []
