"""
Text generation capability consumed by the interview core.
"""
from abc import ABC, abstractmethod


class LLMClientError(Exception):
    """The text generation backend failed or returned nothing usable."""


class TextGenerator(ABC):
    """Anything that turns a prompt into text."""

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """
        Generate a completion for `prompt`.

        Raises:
            LLMClientError: when the backend cannot produce text
        """
        ...

    def health_check(self) -> bool:
        """Check the backend answers a trivial prompt."""
        try:
            return bool(self.generate("Hello").strip())
        except LLMClientError:
            return False

    def close(self) -> None:
        """Release any held connections."""
