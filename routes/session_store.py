# routes/session_store.py
from datetime import datetime
from typing import List, Optional
import logging
import uuid

from errors import NotFound, ValidationError
from models.question import Question
from models.quiz_session import AnswerFeedback, SessionSnapshot

logger = logging.getLogger(__name__)

VALID_ANSWERS = ("A", "B", "C", "D")


async def create_session(db, user_id: str, quiz_type: str, questions: List[Question], time_limit: int) -> str:
    now = datetime.utcnow().isoformat()
    count = len(questions)
    session = {
        "id": str(uuid.uuid4()),
        "userId": user_id,
        "quizType": quiz_type,
        "questions": [q.model_dump() for q in questions],
        "timeLimit": time_limit,
        "timeRemaining": time_limit,
        "startTime": now,
        "currentQuestionIndex": 0,
        "answers": [None] * count,
        "bookmarked": [False] * count,
        "timeSpent": [0] * count,
        "completed": False,
        "lastProgressSave": None,
        "createdAt": now,
        "updatedAt": now,
    }
    await db.quizSessions.insert_one(session)
    logger.info(f"Created {quiz_type} session {session['id']} for {user_id} with {count} questions")
    return session["id"]


async def get_session(db, session_id: str) -> Optional[dict]:
    return await db.quizSessions.find_one({"id": session_id}, {"_id": 0})


def check_answer_choices(answers: List[Optional[str]]):
    for answer in answers:
        if answer is not None and answer not in VALID_ANSWERS:
            raise ValidationError("Invalid answer format")


async def _get_active_session(db, session_id: str) -> dict:
    session = await get_session(db, session_id)
    if not session or session.get("completed"):
        raise ValidationError("Invalid or completed session")
    return session


async def save_progress(
    db,
    session_id: str,
    current_question_index: int,
    answers: List[Optional[str]],
    bookmarked: List[bool],
    time_remaining: int,
):
    session = await _get_active_session(db, session_id)

    if len(answers) != len(bookmarked):
        raise ValidationError("Answers and bookmarks arrays must have the same length")
    if len(answers) != len(session["questions"]):
        raise ValidationError("Answers array must match the number of questions")
    check_answer_choices(answers)
    if current_question_index < 0 or current_question_index >= len(answers):
        raise ValidationError("Invalid current question index")
    if time_remaining < 0:
        raise ValidationError("Invalid time remaining")

    now = datetime.utcnow().isoformat()
    result = await db.quizSessions.update_one(
        {"id": session_id, "completed": False},
        {"$set": {
            "currentQuestionIndex": current_question_index,
            "answers": answers,
            "bookmarked": bookmarked,
            "timeRemaining": time_remaining,
            "updatedAt": now,
            "lastProgressSave": now,
        }},
    )
    if result.matched_count == 0:
        # completed between the read and the write
        raise ValidationError("Invalid or completed session")
    return now


async def get_progress(db, session_id: str) -> SessionSnapshot:
    session = await get_session(db, session_id)
    if not session:
        raise NotFound("Session not found")
    return SessionSnapshot(
        sessionId=session_id,
        currentQuestionIndex=session.get("currentQuestionIndex", 0),
        answers=session.get("answers", []),
        bookmarked=session.get("bookmarked", []),
        timeRemaining=session.get("timeRemaining", 0),
        completed=session.get("completed", False),
        totalQuestions=len(session.get("questions", [])),
        lastProgressSave=session.get("lastProgressSave"),
    )


async def reset_progress(db, session_id: str):
    session = await _get_active_session(db, session_id)
    count = len(session.get("questions", []))
    result = await db.quizSessions.update_one(
        {"id": session_id, "completed": False},
        {"$set": {
            "currentQuestionIndex": 0,
            "answers": [None] * count,
            "bookmarked": [False] * count,
            "timeSpent": [0] * count,
            "timeRemaining": session.get("timeLimit", 0),
            "updatedAt": datetime.utcnow().isoformat(),
        }},
    )
    if result.matched_count == 0:
        raise ValidationError("Invalid or completed session")
    logger.info(f"Reset progress of session {session_id}")


async def submit_answer(db, session_id: str, question_index: int, selected_answer: str, time_spent: int) -> AnswerFeedback:
    """Record a single answer and return immediate feedback for it."""
    session = await get_session(db, session_id)
    if not session:
        raise NotFound("Quiz session not found")
    if session.get("completed"):
        raise ValidationError("Quiz session already completed")

    questions = session["questions"]
    if question_index < 0 or question_index >= len(questions):
        raise ValidationError("Invalid question index")
    if selected_answer not in VALID_ANSWERS:
        raise ValidationError("Invalid answer format")

    answers = list(session.get("answers") or [None] * len(questions))
    time_spent_list = list(session.get("timeSpent") or [0] * len(questions))
    answers[question_index] = selected_answer
    time_spent_list[question_index] = time_spent

    result = await db.quizSessions.update_one(
        {"id": session_id, "completed": False},
        {"$set": {
            "answers": answers,
            "timeSpent": time_spent_list,
            "updatedAt": datetime.utcnow().isoformat(),
        }},
    )
    if result.matched_count == 0:
        raise ValidationError("Quiz session already completed")

    question = questions[question_index]
    correct_answer = question["correctAnswer"]
    is_correct = selected_answer == correct_answer
    explanation = question.get("explanation") or "No explanation available."
    if not is_correct:
        explanation = f"The correct answer is {correct_answer}. {explanation}"

    await _log_submission(db, session_id, question_index, selected_answer, is_correct, time_spent)
    return AnswerFeedback(isCorrect=is_correct, explanation=explanation, correctAnswer=correct_answer)


async def _log_submission(db, session_id, question_index, selected_answer, is_correct, time_spent):
    try:
        await db.quizSubmissions.insert_one({
            "id": str(uuid.uuid4()),
            "sessionId": session_id,
            "questionIndex": question_index,
            "selectedAnswer": selected_answer,
            "isCorrect": is_correct,
            "timeSpent": time_spent,
            "timestamp": datetime.utcnow().isoformat(),
        })
    except Exception as e:
        logger.error(f"Submission logging failed for {session_id}: {str(e)}")


async def list_submissions(db, session_id: str) -> List[dict]:
    return await db.quizSubmissions.find({"sessionId": session_id}, {"_id": 0}).sort("questionIndex", 1).to_list(None)
