"""
Interview Coach - FastAPI Backend

Mock technical interviews driven by a text generation model:
- Generates ten role/skill specific questions per interview
- Evaluates each answer into score, strengths, improvements and feedback
- Produces a final summary when the last question is answered

Text generation runs against a llama.cpp /completion server or the Gemini
REST API (LLM_PROVIDER); interviews live in the document store.
"""
import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from interview.errors import InterviewError
from interview.state import InterviewStateMachine
from llm.client import create_text_generator
from models.schemas import (
    AnswerResult,
    CreateInterviewRequest,
    GenerateQuestionsResponse,
    Interview,
    StatusResponse,
    SubmitAnswerRequest,
)
from storage import create_document_store
from utils.config import Config

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


# ================================================================
# Application factory
# ================================================================

def create_app(
    config: Optional[Config] = None,
    state_machine: Optional[InterviewStateMachine] = None,
) -> FastAPI:
    """
    Build the API with its collaborators.

    Args:
        config: Settings; read from the environment when omitted
        state_machine: Pre-built core, used by tests to inject fakes

    Returns:
        The FastAPI application
    """
    config = config or Config.from_env()
    logging.basicConfig(level=config.server.log_level.upper())

    if state_machine is None:
        state_machine = InterviewStateMachine(
            store=create_document_store(config),
            llm=create_text_generator(config),
            interview_config=config.interview,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        app.state.interviews.llm.close()

    app = FastAPI(
        title="Interview Coach API",
        description="AI mock interviews with structured per-question feedback",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.interviews = state_machine

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(InterviewError)
    async def interview_error_handler(request: Request, exc: InterviewError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.error}: {exc.details}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    app.include_router(_build_router())
    return app


def get_interviews(request: Request) -> InterviewStateMachine:
    return request.app.state.interviews


# ================================================================
# API Endpoints
# ================================================================

def _build_router() -> APIRouter:
    router = APIRouter()

    @router.get("/")
    def root(
        check_llm: bool = Query(False),
        interviews: InterviewStateMachine = Depends(get_interviews),
    ):
        """Health check endpoint. `check_llm` also probes the text generator."""
        health = {"status": "running", "version": VERSION, "service": "Interview Coach"}
        if check_llm:
            health["llm_available"] = interviews.llm.health_check()
        return health

    @router.post("/interviews", status_code=201, response_model=Interview)
    def create_interview(
        body: CreateInterviewRequest,
        interviews: InterviewStateMachine = Depends(get_interviews),
    ):
        """Create an interview profile in the `created` state."""
        return interviews.create_interview(body)

    @router.get("/interviews", response_model=List[Interview])
    def list_interviews(
        user_id: str = Query(..., min_length=1),
        interviews: InterviewStateMachine = Depends(get_interviews),
    ):
        return interviews.list_interviews(user_id)

    @router.get("/interviews/{interview_id}", response_model=Interview)
    def get_interview(interview_id: str, interviews: InterviewStateMachine = Depends(get_interviews)):
        return interviews.get_interview(interview_id)

    @router.post("/interviews/{interview_id}/generate-questions", response_model=GenerateQuestionsResponse)
    def generate_questions(interview_id: str, interviews: InterviewStateMachine = Depends(get_interviews)):
        """
        Generate the question set and move the interview to `in-progress`.
        """
        questions = interviews.generate_questions(interview_id)
        return GenerateQuestionsResponse(questions=questions)

    @router.post("/interviews/{interview_id}/answers", response_model=AnswerResult)
    def submit_answer(
        interview_id: str,
        body: SubmitAnswerRequest,
        interviews: InterviewStateMachine = Depends(get_interviews),
    ):
        """
        Evaluate an answer. Answering the last question completes the
        interview and returns the final summary.
        """
        return interviews.submit_answer(interview_id, body.question_index, body.answer)

    @router.get("/interviews/{interview_id}/status", response_model=StatusResponse)
    def get_status(interview_id: str, interviews: InterviewStateMachine = Depends(get_interviews)):
        return StatusResponse(progress=interviews.get_status(interview_id))

    @router.post("/interviews/{interview_id}/reset")
    def reset_interview(interview_id: str, interviews: InterviewStateMachine = Depends(get_interviews)):
        interviews.reset_interview(interview_id)
        return {"success": True, "message": "Interview reset successfully"}

    return router


# ================================================================
# Main Entry Point
# ================================================================

# Run with: uvicorn --factory main:create_app
if __name__ == "__main__":
    import uvicorn

    settings = Config.from_env()
    uvicorn.run(create_app(settings), host=settings.server.host, port=settings.server.port)
