"""
Agents that pair a prompt with the text generator and a parser:
question generation, answer evaluation and the final summary.
"""
import logging
from typing import List, Optional, Tuple

from interview.errors import GenerationError
from interview.parsing import FeedbackParser, QuestionListParser
from llm.base import LLMClientError, TextGenerator
from llm.prompts import Prompts
from models.schemas import FeedbackRecord, SummaryRecord
from utils.cleaning import ResponseCleaner
from utils.config import InterviewConfig

logger = logging.getLogger(__name__)


def _generate_text(llm: TextGenerator, prompt: str, purpose: str) -> str:
    """Call the generator and return cleaned text, or raise GenerationError."""
    try:
        raw = llm.generate(prompt)
    except LLMClientError as e:
        logger.error(f"Text generation failed during {purpose}: {e}")
        raise GenerationError(str(e)) from e

    text = ResponseCleaner.clean_generated_text(raw)
    if not text:
        raise GenerationError(f"Empty response from text generator during {purpose}")

    logger.debug(f"Raw {purpose} response: {ResponseCleaner.preview(text)}")
    return text


class QuestionAgent:
    """
    Generates the ordered question set for an interview profile.
    """

    def __init__(self, llm: TextGenerator, interview_config: Optional[InterviewConfig] = None):
        self.llm = llm
        self.config = interview_config or InterviewConfig()
        self.parser = QuestionListParser(required=self.config.question_count)

    def generate_questions(self, role: str, skills: List[str], experience: int) -> List[str]:
        """
        Generate and parse the question list.

        Args:
            role: The job role being interviewed for
            skills: Skills the questions must cover
            experience: Years of experience to pitch difficulty at

        Returns:
            Exactly `question_count` question strings, in order

        Raises:
            GenerationError: the generator failed or returned nothing
            InsufficientQuestions: too few numbered items in the output
        """
        prompt = Prompts.generate_questions(
            role=role,
            skills=skills,
            experience=experience,
            count=self.config.question_count,
            coding=self.config.coding_questions,
            theory=self.config.theory_questions,
        )
        text = _generate_text(self.llm, prompt, "question generation")
        return self.parser.parse(text)


class EvaluationAgent:
    """
    Evaluates a single answer into raw text plus a FeedbackRecord.
    """

    def __init__(self, llm: TextGenerator):
        self.llm = llm

    def evaluate(self, question: str, answer: str) -> Tuple[str, FeedbackRecord]:
        prompt = Prompts.evaluate_answer(question=question, answer=answer)
        raw_feedback = _generate_text(self.llm, prompt, "answer evaluation")
        return raw_feedback, FeedbackParser.parse(raw_feedback)


class SummaryAgent:
    """
    Final-summary trigger, run once when the last question is answered.

    Never raises: a failed summary must not block completing the interview,
    so any error degrades to a placeholder record with `parsed=None`.
    The parsed score is on a 0-100 scale, unlike per-question feedback.
    """

    def __init__(self, llm: TextGenerator, interview_config: Optional[InterviewConfig] = None):
        self.llm = llm
        self.config = interview_config or InterviewConfig()

    def fallback(self) -> SummaryRecord:
        return SummaryRecord(raw=self.config.summary_fallback_text, parsed=None)

    def summarize(self, role: str, skills: List[str]) -> SummaryRecord:
        prompt = Prompts.final_summary(role=role, skills=skills)
        try:
            raw_summary = _generate_text(self.llm, prompt, "final summary")
        except Exception:
            logger.exception("Final summary generation error, storing placeholder")
            return self.fallback()

        return SummaryRecord(raw=raw_summary, parsed=FeedbackParser.parse(raw_summary))
