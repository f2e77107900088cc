# routes/daily_quiz.py
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from typing import Optional

from database import get_db
from errors import AccessDenied, ValidationError
from models.quiz_results import CompletionRequest, QuizResults
from models.quiz_session import (
    AnswerFeedback,
    AnswerSubmission,
    QuizGenerationRequest,
    QuizGenerationResponse,
    SaveProgressRequest,
    SessionSnapshot,
)
from models.quiz_type import get_quiz_config, parse_quiz_type
from .access_gate import check_access
from .auth import ensure_same_user, get_current_user
from .question_pool import fetch_questions
from .scorer import complete_session, get_results
from .session_store import (
    create_session,
    get_progress,
    list_submissions,
    reset_progress,
    save_progress,
    submit_answer,
)
from .usage_ledger import log_progress_save, log_quiz_generated, record_usage

router = APIRouter(prefix="/api/daily-quiz", tags=["daily-quiz"])


def _require_session_id(session_id: Optional[str]) -> str:
    if not session_id:
        raise HTTPException(status_code=400, detail="Session ID required")
    return session_id


@router.post("/generate", response_model=QuizGenerationResponse)
async def generate_quiz(
    request: QuizGenerationRequest,
    background_tasks: BackgroundTasks,
    db=Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    ensure_same_user(current_user, request.userId)

    if not await check_access(db, request.userId, request.quizType):
        raise AccessDenied("Access denied for this quiz type")

    quiz_type = parse_quiz_type(request.quizType)
    config = get_quiz_config(quiz_type)
    questions = await fetch_questions(db, quiz_type, request.difficulty, request.subject, request.maxQuestions)
    if not questions:
        raise ValidationError("No questions available for the specified criteria")

    session_id = await create_session(db, request.userId, quiz_type.value, questions, config.time_limit)
    background_tasks.add_task(
        log_quiz_generated, db, request.userId, quiz_type.value,
        request.difficulty, request.subject, len(questions), session_id,
    )

    return QuizGenerationResponse(sessionId=session_id, questions=questions, timeLimit=config.time_limit)


@router.post("/submit-progress")
async def submit_progress(request: SaveProgressRequest, background_tasks: BackgroundTasks, db=Depends(get_db)):
    saved_at = await save_progress(
        db,
        request.sessionId,
        request.currentQuestionIndex,
        request.answers,
        request.bookmarked,
        request.timeRemaining,
    )
    background_tasks.add_task(log_progress_save, db, request.sessionId)
    return {"success": True, "message": "Progress saved successfully", "timestamp": saved_at}


@router.get("/progress", response_model=SessionSnapshot)
async def read_progress(sessionId: Optional[str] = None, db=Depends(get_db)):
    return await get_progress(db, _require_session_id(sessionId))


@router.delete("/progress")
async def delete_progress(sessionId: Optional[str] = None, db=Depends(get_db)):
    await reset_progress(db, _require_session_id(sessionId))
    return {"success": True, "message": "Progress reset successfully"}


@router.post("/submit", response_model=AnswerFeedback)
async def submit(request: AnswerSubmission, db=Depends(get_db)):
    return await submit_answer(db, request.sessionId, request.questionIndex, request.selectedAnswer, request.timeSpent)


@router.get("/submit")
async def submission_history(sessionId: Optional[str] = None, db=Depends(get_db)):
    submissions = await list_submissions(db, _require_session_id(sessionId))
    return {"submissions": submissions}


@router.post("/complete", response_model=QuizResults)
async def complete(request: CompletionRequest, background_tasks: BackgroundTasks, db=Depends(get_db)):
    results, created = await complete_session(db, request.sessionId, request.finalAnswers)
    if created:
        # Runs after the response is sent, failures stay in the log
        background_tasks.add_task(record_usage, db, results.userId, results.quizType, results)
    return results


@router.get("/complete", response_model=QuizResults)
async def read_results(sessionId: Optional[str] = None, db=Depends(get_db)):
    return await get_results(db, _require_session_id(sessionId))

