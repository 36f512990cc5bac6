"""
Interview state machine.

Owns the legality of generate / answer / reset and turns each of them into
field writes against the document store. No interview state is kept in
process: every operation fetches the document, decides, and writes back.
Every write is guarded by the interview's `epoch`, which generation and reset
advance, so an operation that raced a reset or a regeneration fails with
ConcurrentUpdate instead of writing into the wrong question set. Answer
writes touch only `answers.<i>`, `feedbacks.<i>` and `parsed_feedbacks.<i>`,
so submissions for different questions never overwrite each other.
"""
import logging
from typing import Any, Dict, List, Optional

from interview.agents import EvaluationAgent, QuestionAgent, SummaryAgent
from interview.errors import (
    ConcurrentUpdate,
    IncompleteProfile,
    InterviewNotFound,
    InvalidQuestionIndex,
)
from interview.lifecycle import InterviewLifecycle
from llm.base import TextGenerator
from models.schemas import (
    AnswerResult,
    CreateInterviewRequest,
    Interview,
    InterviewProgress,
    InterviewStatus,
)
from storage.base import DocumentNotFound, DocumentStore, PreconditionFailed
from utils.config import InterviewConfig

logger = logging.getLogger(__name__)


class InterviewStateMachine:
    """
    The four core operations (generate, submit answer, reset, status) plus
    create/get/list for interview profiles.
    """

    def __init__(
        self,
        store: DocumentStore,
        llm: TextGenerator,
        interview_config: Optional[InterviewConfig] = None,
    ):
        """
        Args:
            store: Where interview documents live
            llm: Text generator shared by all agents
            interview_config: Question count and summary settings
        """
        self.store = store
        self.llm = llm
        self.config = interview_config or InterviewConfig()

        self.question_agent = QuestionAgent(llm, self.config)
        self.evaluation_agent = EvaluationAgent(llm)
        self.summary_agent = SummaryAgent(llm, self.config)

    # ========================================
    # Store access
    # ========================================

    def _write(self, interview: Interview, fields: Dict[str, Any], **expected: Any) -> Interview:
        """Apply `fields` if the interview is still in the epoch it was read in."""
        if_match = {"epoch": interview.epoch, **expected}
        try:
            doc = self.store.update(interview.id, fields, if_match=if_match)
        except DocumentNotFound:
            raise InterviewNotFound(interview.id)
        except PreconditionFailed as e:
            logger.warning(f"Conflicting update on interview {interview.id}: {e}")
            raise ConcurrentUpdate(str(e))
        return Interview.from_document(interview.id, doc)

    def get_interview(self, interview_id: str) -> Interview:
        doc = self.store.get(interview_id)
        if doc is None:
            raise InterviewNotFound(interview_id)
        return Interview.from_document(interview_id, doc)

    def list_interviews(self, user_id: str) -> List[Interview]:
        docs = self.store.list_by("user_id", user_id)
        return [Interview.from_document(doc.pop("id"), doc) for doc in docs]

    def create_interview(self, request: CreateInterviewRequest) -> Interview:
        """Store a new profile with empty collections in the `created` state."""
        data = {
            "user_id": request.user_id,
            "role": request.role,
            "skills": list(request.skills),
            "experience": request.experience,
            "status": InterviewStatus.CREATED.value,
            "questions": [],
            "answers": [],
            "feedbacks": [],
            "parsed_feedbacks": [],
            "final_summary": None,
            "epoch": 0,
        }
        interview_id = self.store.create(data)
        logger.info(f"Interview {interview_id} created for role {request.role!r}")
        return self.get_interview(interview_id)

    # ========================================
    # Core operations
    # ========================================

    @staticmethod
    def _missing_profile_fields(interview: Interview) -> List[str]:
        missing = []
        if not interview.role or not interview.role.strip():
            missing.append("role")
        if not interview.skills or not any(skill.strip() for skill in interview.skills):
            missing.append("skills")
        if interview.experience is None or interview.experience < 0:
            missing.append("experience")
        return missing

    def generate_questions(self, interview_id: str) -> List[str]:
        """
        Generate a fresh question set and start a new epoch.

        Raises:
            IncompleteProfile: role, skills or experience missing
            GenerationError: the text generator failed
            InsufficientQuestions: fewer than the required questions parsed
            ConcurrentUpdate: the interview changed while generating
        """
        interview = self.get_interview(interview_id)

        missing = self._missing_profile_fields(interview)
        if missing:
            raise IncompleteProfile(missing)

        if InterviewLifecycle.is_regeneration(interview.status):
            logger.warning(
                f"Regenerating questions for interview {interview_id} in status "
                f"{interview.status.value}; previous answers are discarded"
            )

        skills = [skill for skill in interview.skills if skill.strip()]
        logger.info(
            f"Generating questions for {interview_id}: role={interview.role!r}, "
            f"skills={skills}, experience={interview.experience}"
        )
        questions = self.question_agent.generate_questions(interview.role, skills, interview.experience)

        count = len(questions)
        self._write(interview, {
            "questions": questions,
            "answers": [""] * count,
            "feedbacks": [""] * count,
            "parsed_feedbacks": [None] * count,
            "final_summary": None,
            "status": InterviewLifecycle.next_status(interview.status, "generate").value,
            "epoch": interview.epoch + 1,
        })
        logger.info(f"Stored {count} questions for interview {interview_id}")
        return questions

    def submit_answer(self, interview_id: str, index: int, answer_text: str) -> AnswerResult:
        """
        Evaluate an answer and record it under `index`.

        Answering the last index completes the interview, whether or not the
        earlier questions were answered, and produces the final summary.

        Raises:
            InvalidQuestionIndex: index outside the current question set
            GenerationError: evaluation could not be generated
            ConcurrentUpdate: the interview was reset, regenerated or
                completed by another request in the meantime
        """
        interview = self.get_interview(interview_id)
        total = len(interview.questions)

        if not 0 <= index < total:
            raise InvalidQuestionIndex(index, total)

        if InterviewLifecycle.next_status(interview.status, "answer") is None:
            # Questions exist but the interview never started: treat as no question set
            raise InvalidQuestionIndex(index, 0)

        question = interview.questions[index]
        raw_feedback, parsed_feedback = self.evaluation_agent.evaluate(question, answer_text)

        fields: Dict[str, Any] = {
            f"answers.{index}": answer_text,
            f"feedbacks.{index}": raw_feedback,
            f"parsed_feedbacks.{index}": parsed_feedback.model_dump(),
        }
        expected: Dict[str, Any] = {}

        completes = (
            InterviewLifecycle.is_completing_index(index, total)
            and not InterviewLifecycle.is_terminal(interview.status)
        )
        final_summary = None
        if completes:
            logger.info(f"Last question answered for {interview_id}, generating final summary")
            final_summary = self.summary_agent.summarize(interview.role, interview.skills)
            fields["final_summary"] = final_summary.model_dump()
            fields["status"] = InterviewLifecycle.next_status(interview.status, "complete").value
            # Only one completing write per epoch may land
            expected["status"] = interview.status.value

        # Other answers leave status alone so a late one cannot undo completion
        updated = self._write(interview, fields, **expected)
        status = updated.status

        logger.info(
            f"Answer {index + 1}/{total} recorded for {interview_id} "
            f"(score={parsed_feedback.score}, status={status.value})"
        )
        return AnswerResult(
            feedback=raw_feedback,
            parsed_feedback=parsed_feedback,
            is_complete=InterviewLifecycle.is_terminal(status),
            question_number=index + 1,
            total_questions=total,
            final_summary=final_summary,
        )

    def reset_interview(self, interview_id: str) -> Interview:
        """Clear generated content and return to `created`. Always legal."""
        interview = self.get_interview(interview_id)
        reset = self._write(interview, {
            "questions": [],
            "answers": [],
            "feedbacks": [],
            "parsed_feedbacks": [],
            "final_summary": None,
            "status": InterviewLifecycle.next_status(interview.status, "reset").value,
            "epoch": interview.epoch + 1,
        })
        logger.info(f"Interview {interview_id} reset")
        return reset

    def get_status(self, interview_id: str) -> InterviewProgress:
        interview = self.get_interview(interview_id)
        return InterviewProgress(
            status=interview.status,
            total=len(interview.questions),
            answered=interview.answered_count,
            is_complete=InterviewLifecycle.is_terminal(interview.status),
            epoch=interview.epoch,
        )
