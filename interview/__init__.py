# Interview module
from .lifecycle import InterviewLifecycle, TRANSITIONS
from .parsing import QuestionListParser, FeedbackParser
from .agents import QuestionAgent, EvaluationAgent, SummaryAgent
from .state import InterviewStateMachine
