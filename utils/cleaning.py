"""
Response cleaning utilities for generated text.

Local reasoning models (DeepSeek R1 and friends) wrap their answer in
<think> blocks, and hosted models like to decorate section markers with
markdown. Both are removed here before the text reaches the parsers, so the
parsers only ever deal with the plain SCORE/STRENGTHS/... or "1. " layout.
"""
import re
from typing import Optional


class ResponseCleaner:
    """Normalises raw model output before it is parsed or stored."""

    THINK_BLOCK = re.compile(r"<think>.*?</think>", re.DOTALL | re.IGNORECASE)
    # An opening tag that was never closed swallows the rest of the output
    UNCLOSED_THINK = re.compile(r"<think>.*$", re.DOTALL | re.IGNORECASE)
    STRAY_THINK_TAG = re.compile(r"</?\s*think\s*>", re.IGNORECASE)
    WRAPPING_FENCE = re.compile(r"^```[\w+-]*[ \t]*\n(.*)\n```$", re.DOTALL)
    # **SCORE:** 7, **1.** ... but not `x ** 2`
    BOLD = re.compile(r"\*\*(?=\S)(.+?)(?<=\S)\*\*")

    @classmethod
    def strip_reasoning(cls, text: str) -> str:
        """Remove chain-of-thought blocks."""
        cleaned = cls.THINK_BLOCK.sub("", text)
        cleaned = cls.UNCLOSED_THINK.sub("", cleaned)
        return cls.STRAY_THINK_TAG.sub("", cleaned)

    @classmethod
    def strip_markdown(cls, text: str) -> str:
        """Unwrap a fenced response and drop bold markers, keep the words."""
        match = cls.WRAPPING_FENCE.match(text)
        if match:
            text = match.group(1)
        return cls.BOLD.sub(r"\1", text)

    @classmethod
    def clean_generated_text(cls, text: Optional[str]) -> str:
        """
        Full cleaning pipeline for model output.

        Returns:
            The cleaned text with normalised newlines, or "" for empty input
        """
        if not text:
            return ""

        cleaned = text.replace("\r\n", "\n").replace("\r", "\n")
        cleaned = cls.strip_reasoning(cleaned).strip()
        cleaned = cls.strip_markdown(cleaned)
        return cleaned.strip()

    @classmethod
    def preview(cls, text: str, limit: int = 200) -> str:
        """Shorten text for log lines."""
        if len(text) <= limit:
            return text
        return text[:limit] + "..."
