"""
Chat-completion client for the assistant's replies (OpenAI-compatible API, Mistral by default).
"""
import logging
from typing import Dict, List, Optional

from openai import OpenAI

from .. import config

logger = logging.getLogger(__name__)


class LLMError(Exception):
    pass


class LLMClient:
    """Thin wrapper around the OpenAI SDK with the assistant's sampling settings"""

    TEMPERATURE = 0.3
    MAX_TOKENS = 1200
    TOP_P = 0.92
    PRESENCE_PENALTY = 0.1
    FREQUENCY_PENALTY = 0.2

    def __init__(self,
                 api_key: str = config.LLM_API_KEY,
                 base_url: str = config.LLM_BASE_URL,
                 model: str = config.LLM_MODEL,
                 timeout: float = config.LLM_TIMEOUT,
                 client: Optional[OpenAI] = None) -> None:
        self.api_key = api_key
        self.model = model
        self._client = client
        self._base_url = base_url
        self._timeout = timeout

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            if not self.api_key:
                raise LLMError("LLM_API_KEY (or MISTRAL_API_KEY) environment variable not set")
            self._client = OpenAI(api_key=self.api_key, base_url=self._base_url, timeout=self._timeout)
        return self._client

    def complete(self, messages: List[Dict[str, str]]) -> str:
        """
        Send a chat transcript and return the assistant's text.

        Args:
            messages: [{"role": "system"|"user"|"assistant", "content": str}, ...]

        Raises:
            LLMError: missing key, API failure or empty completion
        """
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.TEMPERATURE,
                max_tokens=self.MAX_TOKENS,
                top_p=self.TOP_P,
                presence_penalty=self.PRESENCE_PENALTY,
                frequency_penalty=self.FREQUENCY_PENALTY,
            )
        except LLMError:
            raise
        except Exception as e:
            logger.error(f"[LLM] API error: {e}")
            raise LLMError(str(e)) from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise LLMError("Empty completion")

        logger.info(f"[LLM] Received response, length: {len(content)}")
        return content
