"""
Live Channel Module

Duplex message channel between the interview session and the live speech
endpoint. The session only depends on InterviewChannel; GeminiLiveChannel is
the production implementation over a websocket.

Once a channel is closed (by either side) every send fails immediately with
ChannelClosedError. Sends are bounded by a timeout so a stalled socket cannot
hang the session.

Dependencies:
- websockets: For the client websocket connection.
- dotenv: For loading the endpoint configuration.
- loguru: For logging.

Author: @kcaparas1630
"""

import asyncio
import json
import os
from abc import ABC, abstractmethod
from typing import AsyncIterator, Optional
import websockets
from websockets.exceptions import ConnectionClosed
from dotenv import load_dotenv
from loguru import logger
from app.errors.exceptions import ChannelClosedError
from app.schemas.live.live_messages import build_setup_message

load_dotenv()

GEMINI_LIVE_URL = os.getenv(
    "GEMINI_LIVE_URL",
    "wss://generativelanguage.googleapis.com/ws/google.ai.generativelanguage.v1beta.GenerativeService.BidiGenerateContent",
)
GEMINI_LIVE_MODEL = os.getenv("GEMINI_LIVE_MODEL", "gemini-2.0-flash-live-001")
LIVE_SEND_TIMEOUT = float(os.getenv("LIVE_SEND_TIMEOUT", "10"))


class InterviewChannel(ABC):
    """Bidirectional message channel used by the interview controller."""

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        ...

    @abstractmethod
    async def connect(self) -> None:
        ...

    @abstractmethod
    async def send(self, message: dict) -> None:
        """Send one message. Raises ChannelClosedError when not connected."""
        ...

    @abstractmethod
    def receive(self) -> AsyncIterator[dict]:
        """Decoded inbound messages until the channel closes."""
        ...

    @abstractmethod
    async def close(self) -> None:
        ...


class GeminiLiveChannel(InterviewChannel):
    """
    InterviewChannel over the Gemini Live bidirectional websocket.

    Args:
        api_key (str): GOOGLE_AI_API_KEY.
        voice (str): Prebuilt voice name for the setup message.
        url (str): Websocket endpoint; the key is appended as a query parameter.
        model (str): Live model name.
        send_timeout (float): Seconds before a send is abandoned.
    """

    def __init__(
        self,
        api_key: str,
        voice: str = "Kore",
        url: str = GEMINI_LIVE_URL,
        model: str = GEMINI_LIVE_MODEL,
        send_timeout: float = LIVE_SEND_TIMEOUT,
    ):
        self.api_key = api_key
        self.voice = voice
        self.url = url
        self.model = model
        self.send_timeout = send_timeout
        self._ws = None
        self._connected = False

    @property
    def is_connected(self) -> bool:
        return self._connected and self._ws is not None

    async def connect(self) -> None:
        if self.is_connected:
            return
        try:
            self._ws = await websockets.connect(f"{self.url}?key={self.api_key}", max_size=None)
        except (OSError, websockets.exceptions.InvalidHandshake) as e:
            logger.error(f"Failed to connect to live endpoint: {e}")
            raise ChannelClosedError(f"Could not connect to live endpoint: {e}") from e

        self._connected = True
        logger.info("Connected to live endpoint")
        await self.send(build_setup_message(self.model, self.voice))

    async def send(self, message: dict) -> None:
        if not self.is_connected:
            raise ChannelClosedError("Live channel is not connected")
        try:
            await asyncio.wait_for(self._ws.send(json.dumps(message)), timeout=self.send_timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"Send to live endpoint timed out after {self.send_timeout}s")
            await self.close()
            raise ChannelClosedError("Send to live endpoint timed out") from e
        except ConnectionClosed as e:
            self._connected = False
            raise ChannelClosedError(f"Live channel closed: {e}") from e

    async def receive(self) -> AsyncIterator[dict]:
        if self._ws is None:
            return
        try:
            async for raw in self._ws:
                if isinstance(raw, bytes):
                    raw = raw.decode("utf-8")
                try:
                    yield json.loads(raw)
                except json.JSONDecodeError as e:
                    logger.warning(f"Dropping undecodable live message: {e}")
        except ConnectionClosed as e:
            logger.info(f"Live channel closed by remote: {e}")
        finally:
            self._connected = False

    async def close(self) -> None:
        self._connected = False
        if self._ws is not None:
            ws, self._ws = self._ws, None
            await ws.close()
            logger.info("Live channel closed")
