import threading
from typing import Callable, List, Optional, Union

import pytest

from interview.state import InterviewStateMachine
from llm.base import LLMClientError, TextGenerator
from models.schemas import CreateInterviewRequest
from storage.memory import InMemoryDocumentStore


QUESTIONS_TEXT = "Here are your questions:\n\n" + "\n".join(
    f"{n}. [TYPE: {'Coding' if n % 3 == 0 else 'Theory'}] [{'Easy' if n < 5 else 'Hard'}] Python: Question {n}?"
    for n in range(1, 11)
) + "\n\n"

EVALUATION_TEXT = (
    "SCORE: 7\n"
    "STRENGTHS:\n"
    "- Good naming\n"
    "- Clear logic\n"
    "IMPROVEMENTS:\n"
    "- Add tests\n"
    "FEEDBACK:\n"
    "Solid answer overall."
)

SUMMARY_TEXT = (
    "SCORE: 82\n\n"
    "KEY STRENGTHS:\n"
    "- Strong fundamentals\n\n"
    "IMPROVEMENTS:\n"
    "- Practice system design\n\n"
    "RECOMMENDATION:\n"
    "Hire, solid mid-level candidate."
)

Response = Union[str, Exception]


def default_responder(prompt: str) -> Response:
    if prompt.startswith("Generate"):
        return QUESTIONS_TEXT
    if prompt.startswith("Evaluate"):
        return EVALUATION_TEXT
    if prompt.startswith("Summarize"):
        return SUMMARY_TEXT
    raise AssertionError(f"Unexpected prompt: {prompt[:40]}")


class FakeTextGenerator(TextGenerator):
    """Scripted generator; records every prompt it receives."""

    def __init__(self, responder: Optional[Callable[[str], Response]] = None):
        self.responder = responder or default_responder
        self.prompts: List[str] = []
        self.closed = False
        self._lock = threading.Lock()

    def generate(self, prompt: str) -> str:
        with self._lock:
            self.prompts.append(prompt)
        result = self.responder(prompt)
        if isinstance(result, Exception):
            raise result
        return result

    def close(self) -> None:
        self.closed = True

    def prompts_starting_with(self, prefix: str) -> List[str]:
        return [p for p in self.prompts if p.startswith(prefix)]


def failing_summary_responder(prompt: str) -> Response:
    if prompt.startswith("Summarize"):
        return LLMClientError("model overloaded")
    return default_responder(prompt)


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def llm():
    return FakeTextGenerator()


@pytest.fixture
def machine(store, llm):
    return InterviewStateMachine(store=store, llm=llm)


@pytest.fixture
def profile():
    return CreateInterviewRequest(
        role="Backend Engineer",
        skills=["Python", "SQL"],
        experience=3,
        user_id="user-1",
    )


@pytest.fixture
def interview_id(machine, profile):
    return machine.create_interview(profile).id


@pytest.fixture
def started_id(machine, interview_id):
    machine.generate_questions(interview_id)
    return interview_id
