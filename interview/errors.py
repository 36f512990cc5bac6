"""
Error taxonomy for the interview session protocol.

Each error carries the HTTP status the API layer answers with and whether a
caller may simply retry. Caller mistakes are 4xx and not retryable; problems
with the upstream text generator are 502 and retryable.
"""
from typing import Any, Dict, List, Optional


class InterviewError(Exception):
    status_code = 500
    retryable = False
    error = "Interview error"

    def __init__(self, details: str = ""):
        super().__init__(details or self.error)
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": False,
            "error": self.error,
            "details": self.details,
            "retryable": self.retryable,
        }


class IncompleteProfile(InterviewError):
    status_code = 400
    error = "Incomplete interview data"

    def __init__(self, missing_fields: List[str]):
        super().__init__(f"Missing or empty fields: {', '.join(missing_fields)}")
        self.missing_fields = missing_fields

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["missing_fields"] = self.missing_fields
        return data


class InvalidQuestionIndex(InterviewError):
    status_code = 400
    error = "Invalid question index"

    def __init__(self, index: int, total: int):
        super().__init__(f"Question index {index} is outside 0..{total - 1}" if total else
                         f"Question index {index} given but no questions have been generated")
        self.index = index
        self.total = total


class InterviewNotFound(InterviewError):
    status_code = 404
    error = "Interview not found"

    def __init__(self, interview_id: str):
        super().__init__(f"No interview found with ID: {interview_id}")
        self.interview_id = interview_id


class ConcurrentUpdate(InterviewError):
    status_code = 409
    retryable = True
    error = "Interview was modified concurrently"


class InsufficientQuestions(InterviewError):
    status_code = 502
    retryable = True
    error = "Failed to generate required number of questions"

    def __init__(self, found: int, required: int, details: Optional[str] = None):
        super().__init__(details or f"Parsed {found} questions, need at least {required}")
        self.found = found
        self.required = required


class GenerationError(InterviewError):
    status_code = 502
    retryable = True
    error = "Text generation failed"
