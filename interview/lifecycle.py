"""
Interview status definitions and transition logic.
"""
from typing import Dict, Optional

from models.schemas import InterviewStatus


# Status reached by each event, keyed by the status it starts from.
# Reset is legal from everywhere and always lands on CREATED.
TRANSITIONS: Dict[str, Dict[InterviewStatus, InterviewStatus]] = {
    "generate": {
        InterviewStatus.CREATED: InterviewStatus.IN_PROGRESS,
        InterviewStatus.IN_PROGRESS: InterviewStatus.IN_PROGRESS,
        InterviewStatus.COMPLETED: InterviewStatus.IN_PROGRESS,
    },
    "answer": {
        InterviewStatus.IN_PROGRESS: InterviewStatus.IN_PROGRESS,
        InterviewStatus.COMPLETED: InterviewStatus.COMPLETED,
    },
    "complete": {
        InterviewStatus.IN_PROGRESS: InterviewStatus.COMPLETED,
        InterviewStatus.COMPLETED: InterviewStatus.COMPLETED,
    },
    "reset": {
        InterviewStatus.CREATED: InterviewStatus.CREATED,
        InterviewStatus.IN_PROGRESS: InterviewStatus.CREATED,
        InterviewStatus.COMPLETED: InterviewStatus.CREATED,
    },
}


class InterviewLifecycle:
    """
    Status progression: created -> in-progress -> completed, reset back to
    created from anywhere.
    """

    @classmethod
    def next_status(cls, current: InterviewStatus, event: str) -> Optional[InterviewStatus]:
        """
        Get the status an event leads to.

        Args:
            current: The current status
            event: One of "generate", "answer", "complete", "reset"

        Returns:
            The next status, or None if the event is not legal from `current`
        """
        return TRANSITIONS.get(event, {}).get(current)

    @classmethod
    def is_regeneration(cls, current: InterviewStatus) -> bool:
        """Generating again over an existing question set discards that epoch."""
        return current != InterviewStatus.CREATED

    @staticmethod
    def is_completing_index(index: int, question_count: int) -> bool:
        """Completion is positional: answering the last index ends the interview."""
        return question_count > 0 and index == question_count - 1

    @staticmethod
    def is_terminal(status: InterviewStatus) -> bool:
        return status == InterviewStatus.COMPLETED
