"""
Configuration settings for the interview coach service.
All settings can be overridden via environment variables.
"""
import os
from typing import List, Optional
from dataclasses import dataclass, field


def _env_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class LLMConfig:
    """Text generation backend configuration."""
    provider: str = field(default_factory=lambda: os.getenv("LLM_PROVIDER", "llamacpp"))
    base_url: str = field(default_factory=lambda: os.getenv("LLM_URL", "http://localhost:9000"))
    completion_endpoint: str = "/completion"
    timeout: int = field(default_factory=lambda: int(os.getenv("LLM_TIMEOUT", "60")))
    max_retries: int = field(default_factory=lambda: int(os.getenv("LLM_MAX_RETRIES", "3")))

    # Default generation parameters
    default_temperature: float = 0.7
    default_top_p: float = 0.9
    default_repeat_penalty: float = 1.1
    default_max_tokens: int = 1024

    @property
    def completion_url(self) -> str:
        return f"{self.base_url}{self.completion_endpoint}"


@dataclass
class GeminiConfig:
    """Hosted Gemini model configuration."""
    api_key: Optional[str] = field(default_factory=lambda: os.getenv("GEMINI_API_KEY"))
    model: str = field(default_factory=lambda: os.getenv("GEMINI_MODEL", "gemini-1.5-flash"))
    api_base: str = field(default_factory=lambda: os.getenv(
        "GEMINI_API_BASE", "https://generativelanguage.googleapis.com/v1beta"
    ))

    temperature: float = 0.7
    top_k: int = 40
    top_p: float = 0.8
    max_output_tokens: int = 512

    @property
    def generate_url(self) -> str:
        return f"{self.api_base}/models/{self.model}:generateContent"


@dataclass
class InterviewConfig:
    """Question set shape and summary behaviour."""
    question_count: int = 10
    coding_questions: int = 4
    theory_questions: int = 6
    summary_fallback_text: str = "Unable to generate final summary."


@dataclass
class StoreConfig:
    """Document store configuration. No path means an in-memory store."""
    db_path: Optional[str] = field(default_factory=lambda: os.getenv("INTERVIEW_DB_PATH") or None)


@dataclass
class ServerConfig:
    """HTTP server configuration."""
    cors_origins: List[str] = field(default_factory=lambda: _env_list("CORS_ORIGINS", "http://localhost:5173"))
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8080")))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))


class Config:
    """Main configuration class combining all config sections."""

    def __init__(self):
        self.llm = LLMConfig()
        self.gemini = GeminiConfig()
        self.interview = InterviewConfig()
        self.store = StoreConfig()
        self.server = ServerConfig()

    @classmethod
    def from_env(cls) -> "Config":
        """Create config from environment variables."""
        return cls()
