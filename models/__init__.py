# Data models
from .schemas import (
    InterviewStatus,
    FeedbackRecord,
    SummaryRecord,
    Interview,
    InterviewProgress,
)
