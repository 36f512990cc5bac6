"""
Text generation clients.

LLMClient talks to a llama.cpp style /completion endpoint, GeminiClient to the
hosted generateContent REST API. Both handle retries and reduce the backend
response to plain text, raising LLMClientError when that is not possible.
"""
import time
import logging
from abc import abstractmethod
from typing import Dict, Any, Optional, List
from dataclasses import dataclass

import requests

from llm.base import LLMClientError, TextGenerator
from utils.config import Config, GeminiConfig, LLMConfig

logger = logging.getLogger(__name__)


@dataclass
class LLMResponse:
    """Structured response from LLM."""
    content: str
    is_valid: bool
    tokens_used: int = 0


class _RetryingHTTPClient(TextGenerator):
    """Shared POST-with-retries logic for the HTTP backends."""

    def __init__(self, timeout: int, max_retries: int, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.max_retries = max_retries
        self.session = session or requests.Session()

    def _post(self, url: str, payload: Dict[str, Any], params: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        """Make HTTP request with retries on transport errors."""
        last_error = None

        for attempt in range(self.max_retries + 1):
            try:
                response = self.session.post(url, json=payload, params=params, timeout=self.timeout)
                response.raise_for_status()
                return response.json()
            except requests.exceptions.HTTPError as e:
                status = e.response.status_code if e.response is not None else None
                # 4xx other than rate limiting will not get better by retrying
                if status is not None and status < 500 and status != 429:
                    raise LLMClientError(f"LLM request rejected with HTTP {status}") from e
                last_error = e
            except ValueError as e:
                raise LLMClientError(f"LLM server returned invalid JSON: {e}") from e
            except requests.exceptions.Timeout as e:
                last_error = e
            except requests.exceptions.RequestException as e:
                last_error = e

            if attempt < self.max_retries:
                delay = 0.5 * (attempt + 1)
                logger.warning(f"LLM request failed ({last_error}), retrying in {delay}s")
                time.sleep(delay)

        raise LLMClientError(
            f"Failed to reach LLM server after {self.max_retries + 1} attempts: {last_error}"
        )

    @abstractmethod
    def complete(self, prompt: str) -> LLMResponse:
        """Send one prompt to the backend and reduce the reply to text."""
        ...

    def generate(self, prompt: str) -> str:
        response = self.complete(prompt)
        if not response.is_valid:
            raise LLMClientError("LLM returned an empty completion")
        logger.info(f"LLM generated {len(response.content)} chars ({response.tokens_used} tokens)")
        return response.content

    def close(self) -> None:
        self.session.close()


class LLMClient(_RetryingHTTPClient):
    """
    Client for interacting with llama.cpp /completion endpoint.
    """

    def __init__(self, llm_config: Optional[LLMConfig] = None, session: Optional[requests.Session] = None):
        self.config = llm_config or LLMConfig()
        super().__init__(self.config.timeout, self.config.max_retries, session)
        self.completion_url = self.config.completion_url
        logger.info(f"LLM Client initialized: {self.completion_url} (timeout={self.timeout}s)")

    def complete(
        self,
        prompt: str,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        stop_sequences: Optional[List[str]] = None,
    ) -> LLMResponse:
        """
        Generate completion from LLM.

        Args:
            prompt: The input prompt
            max_tokens: Maximum tokens to generate (n_predict)
            temperature: Sampling temperature (None uses default)
            stop_sequences: List of strings that stop generation

        Returns:
            LLMResponse with the raw content
        """
        payload = {
            "prompt": prompt,
            "n_predict": max_tokens or self.config.default_max_tokens,
            "temperature": self.config.default_temperature if temperature is None else temperature,
            "top_p": self.config.default_top_p,
            "repeat_penalty": self.config.default_repeat_penalty,
        }

        if stop_sequences:
            payload["stop"] = stop_sequences

        response = self._post(self.completion_url, payload)
        content = response.get("content", "")
        if not isinstance(content, str):
            raise LLMClientError(f"Unexpected completion payload: {type(content).__name__}")

        return LLMResponse(
            content=content,
            is_valid=bool(content.strip()),
            tokens_used=response.get("tokens_predicted", 0),
        )

    def health_check(self) -> bool:
        """Check if LLM server is responding."""
        try:
            return self.complete("Hello", max_tokens=5).is_valid
        except LLMClientError:
            return False


class GeminiClient(_RetryingHTTPClient):
    """
    Client for the Gemini generateContent REST endpoint.
    """

    def __init__(
        self,
        gemini_config: Optional[GeminiConfig] = None,
        timeout: int = 60,
        max_retries: int = 3,
        session: Optional[requests.Session] = None,
    ):
        self.config = gemini_config or GeminiConfig()
        if not self.config.api_key:
            raise ValueError("GEMINI_API_KEY is not set")
        super().__init__(timeout, max_retries, session)
        logger.info(f"Gemini client initialized: model={self.config.model}")

    def complete(self, prompt: str) -> LLMResponse:
        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.config.temperature,
                "topK": self.config.top_k,
                "topP": self.config.top_p,
                "maxOutputTokens": self.config.max_output_tokens,
            },
        }

        response = self._post(self.config.generate_url, payload, params={"key": self.config.api_key})
        content = self._extract_text(response)

        return LLMResponse(
            content=content,
            is_valid=bool(content.strip()),
            tokens_used=response.get("usageMetadata", {}).get("candidatesTokenCount", 0),
        )

    @staticmethod
    def _extract_text(response: Dict[str, Any]) -> str:
        candidates = response.get("candidates") or []
        if not candidates:
            reason = response.get("promptFeedback", {}).get("blockReason")
            if reason:
                raise LLMClientError(f"Gemini blocked the prompt: {reason}")
            return ""

        parts = candidates[0].get("content", {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts if isinstance(part, dict))


def create_text_generator(config: Config) -> TextGenerator:
    """Build the text generation backend named by LLM_PROVIDER."""
    provider = config.llm.provider.lower()
    if provider == "gemini":
        return GeminiClient(config.gemini, timeout=config.llm.timeout, max_retries=config.llm.max_retries)
    if provider in ("llamacpp", "llama.cpp", "local"):
        return LLMClient(config.llm)
    raise ValueError(f"Unknown LLM_PROVIDER: {config.llm.provider}")
