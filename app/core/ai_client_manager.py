"""
AI Client Manager

Holds one AsyncOpenAI client per AI-backed service (question generation, cover
letters) pointed at the Gemini OpenAI-compatible endpoint. Clients are created
lazily on first use so the app can import and start without credentials.
"""

import os
from openai import AsyncOpenAI
import logging
import threading
from typing import Dict, Optional
from dotenv import load_dotenv

# Ensure .env is loaded
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"
SERVICE_TYPES = ("question_generation", "cover_letter")


class AIClientManager:
    """
    Manages dedicated AI client instances per service type.

    Without GOOGLE_AI_API_KEY the manager raises on first access, except under
    ENV=test where it stays uninitialized and every get_client call raises
    RuntimeError instead (routes turn that into a 500).
    """

    _instance: Optional['AIClientManager'] = None
    _lock = threading.Lock()

    def __init__(self):
        self._clients: Dict[str, AsyncOpenAI] = {}
        self._initialized = False

    @classmethod
    def get_instance(cls) -> 'AIClientManager':
        """Thread-safe singleton instance getter."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    def _initialize_clients(self):
        """Lazy initialization of client instances."""
        if self._initialized:
            return

        with self._lock:
            if self._initialized:
                return

            api_key = os.getenv("GOOGLE_AI_API_KEY")
            if not api_key:
                if os.getenv("ENV") == "test":
                    logger.warning("GOOGLE_AI_API_KEY not set - AI clients unavailable in test environment")
                    return
                raise RuntimeError(
                    "GOOGLE_AI_API_KEY environment variable is not set. "
                    "Please set it in your .env file or environment variables."
                )

            base_url = os.getenv("GOOGLE_AI_BASE_URL", DEFAULT_BASE_URL)
            timeout = float(os.getenv("AI_REQUEST_TIMEOUT", "60"))

            try:
                self._clients = {
                    service_type: AsyncOpenAI(base_url=base_url, api_key=api_key, timeout=timeout)
                    for service_type in SERVICE_TYPES
                }
                self._initialized = True
                logger.info(f"Initialized {len(self._clients)} dedicated AI client instances")

            except Exception as e:
                logger.error(f"Failed to initialize AI clients: {e}")
                raise RuntimeError(f"Failed to initialize AI clients: {e}") from e

    def get_client(self, service_type: str) -> AsyncOpenAI:
        """
        Get a dedicated client for the specified service type.

        Args:
            service_type (str): "question_generation" or "cover_letter"

        Returns:
            AsyncOpenAI: Dedicated client instance for the service

        Raises:
            ValueError: If service_type is not supported
            RuntimeError: If the API key is missing or clients failed to initialize
        """
        self._initialize_clients()

        if not self._initialized:
            raise RuntimeError("AI clients failed to initialize properly")

        if service_type not in self._clients:
            raise ValueError(f"Unsupported service type: {service_type}. Available: {list(self._clients.keys())}")

        return self._clients[service_type]

    def get_question_generation_client(self) -> AsyncOpenAI:
        return self.get_client("question_generation")

    def get_cover_letter_client(self) -> AsyncOpenAI:
        return self.get_client("cover_letter")


_ai_manager: Optional[AIClientManager] = None
_manager_lock = threading.Lock()


def get_ai_client_manager() -> AIClientManager:
    """Get the singleton AIClientManager, creating it on first call."""
    global _ai_manager

    if _ai_manager is None:
        with _manager_lock:
            if _ai_manager is None:
                _ai_manager = AIClientManager()

    return _ai_manager


def get_question_generation_client() -> AsyncOpenAI:
    """Get dedicated client for interview question generation."""
    return get_ai_client_manager().get_question_generation_client()


def get_cover_letter_client() -> AsyncOpenAI:
    """Get dedicated client for cover letter generation."""
    return get_ai_client_manager().get_cover_letter_client()
