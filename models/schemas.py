"""
Pydantic models for interviews, feedback records and API payloads.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class InterviewStatus(str, Enum):
    CREATED = "created"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    @classmethod
    def get_order(cls) -> List["InterviewStatus"]:
        return [cls.CREATED, cls.IN_PROGRESS, cls.COMPLETED]


class FeedbackRecord(BaseModel):
    """Structured result of parsing one evaluation text block."""
    score: Optional[int] = None  # 1-10 per question, 0-100 in a summary
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    feedback: str = ""

    @property
    def is_empty(self) -> bool:
        return (
            self.score is None
            and not self.strengths
            and not self.improvements
            and not self.feedback
        )


class SummaryRecord(BaseModel):
    """End-of-interview evaluation. `parsed` is None when generation failed."""
    raw: str
    parsed: Optional[FeedbackRecord] = None


class Interview(BaseModel):
    """An interview document as held by the document store."""
    id: str
    user_id: Optional[str] = None
    role: str = ""
    skills: List[str] = Field(default_factory=list)
    experience: Optional[int] = None
    status: InterviewStatus = InterviewStatus.CREATED
    questions: List[str] = Field(default_factory=list)
    answers: List[str] = Field(default_factory=list)
    feedbacks: List[str] = Field(default_factory=list)
    parsed_feedbacks: List[Optional[FeedbackRecord]] = Field(default_factory=list)
    final_summary: Optional[SummaryRecord] = None
    epoch: int = 0
    created_at: Optional[datetime] = None
    last_updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any]) -> "Interview":
        return cls(**{**data, "id": doc_id})

    @property
    def answered_count(self) -> int:
        return sum(1 for answer in self.answers if answer)


# ============================================================
# API payloads
# ============================================================

class CreateInterviewRequest(BaseModel):
    role: str = Field(..., min_length=1)
    skills: List[str] = Field(..., min_length=1)
    experience: int = Field(..., ge=0)
    user_id: Optional[str] = None


class SubmitAnswerRequest(BaseModel):
    question_index: int = Field(..., ge=0)
    answer: str = ""


class InterviewProgress(BaseModel):
    status: InterviewStatus
    total: int
    answered: int
    is_complete: bool
    epoch: int


class GenerateQuestionsResponse(BaseModel):
    success: bool = True
    questions: List[str]
    message: str = "Questions generated successfully"


class AnswerResult(BaseModel):
    """Outcome of one answer submission."""
    success: bool = True
    feedback: str
    parsed_feedback: FeedbackRecord
    is_complete: bool
    question_number: int
    total_questions: int
    final_summary: Optional[SummaryRecord] = None


class StatusResponse(BaseModel):
    success: bool = True
    progress: InterviewProgress
