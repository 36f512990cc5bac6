# Text generation
from .base import LLMClientError, TextGenerator
from .client import LLMClient, GeminiClient, create_text_generator
from .prompts import Prompts
