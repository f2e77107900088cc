# routes/scorer.py
from datetime import datetime
from pymongo.errors import DuplicateKeyError, PyMongoError
from typing import Dict, List, Optional, Tuple
import logging
import math

from errors import InternalError, NotFound, ValidationError
from models.question import DEFAULT_SUBJECT
from models.quiz_results import DetailedResult, QuizResults, SubjectResult
from models.quiz_type import QuizType, parse_quiz_type
from .session_store import check_answer_choices, get_session

logger = logging.getLogger(__name__)

MAX_RECOMMENDATIONS = 5
WEAK_SUBJECT_RATIO = 0.6
SLOW_SECONDS_PER_QUESTION = 120
RUSHED_SECONDS_PER_QUESTION = 30

_CURRENT_AFFAIRS_TIP = (
    "Stay updated with recent developments and practice connecting current events to static knowledge."
)

QUIZ_TYPE_TIPS = {
    QuizType.FREE_DAILY: "Keep up the daily practice routine for consistent improvement.",
    QuizType.MOCK_PRELIMS: "Focus on speed and accuracy for the actual Prelims exam.",
    QuizType.CURRENT_AFFAIRS_BASIC: _CURRENT_AFFAIRS_TIP,
    QuizType.CURRENT_AFFAIRS_ADVANCED: _CURRENT_AFFAIRS_TIP,
}


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def percentage(part: int, whole: int) -> int:
    if whole == 0:
        return 0
    return round_half_up(100 * part / whole)


def generate_recommendations(
    score: int,
    subject_results: Dict[str, SubjectResult],
    quiz_type: str,
    time_taken: int,
    total_questions: int,
) -> List[str]:
    recommendations = []

    if score >= 80:
        recommendations.append("Excellent performance! You're well-prepared for this topic.")
        recommendations.append("Consider attempting harder difficulty levels to further challenge yourself.")
    elif score >= 60:
        recommendations.append("Good work! Focus on areas where you scored lower to improve further.")
        recommendations.append("Review explanations for incorrect answers to strengthen your understanding.")
    else:
        recommendations.append("Focus on understanding fundamental concepts in your weak areas.")
        recommendations.append("Consider taking more practice quizzes to build confidence.")

    weak_subjects = [
        subject for subject, result in subject_results.items()
        if result.total and result.correct / result.total < WEAK_SUBJECT_RATIO
    ]
    if weak_subjects:
        recommendations.append(f"Pay special attention to: {', '.join(weak_subjects)}")

    if total_questions:
        average_time = time_taken / total_questions
        if average_time > SLOW_SECONDS_PER_QUESTION:
            recommendations.append("Practice time management. Try to spend less time per question.")
        elif average_time < RUSHED_SECONDS_PER_QUESTION:
            recommendations.append("Take more time to carefully read and analyze each question.")

    tip = QUIZ_TYPE_TIPS.get(parse_quiz_type(quiz_type))
    if tip:
        recommendations.append(tip)

    return recommendations[:MAX_RECOMMENDATIONS]


def calculate_results(session: dict, completed_at: Optional[datetime] = None) -> QuizResults:
    """Score a session. Pure: reads the session dict, writes nothing."""
    completed_at = completed_at or datetime.utcnow()
    start_time = datetime.fromisoformat(session["startTime"])
    time_taken = max(0, int((completed_at - start_time).total_seconds()))

    questions = session["questions"]
    answers = session.get("answers") or []
    time_spent = session.get("timeSpent") or []

    correct_answers = 0
    subject_results: Dict[str, SubjectResult] = {}
    detailed_results = []

    for index, question in enumerate(questions):
        answer = answers[index] if index < len(answers) else None
        is_correct = answer is not None and answer == question["correctAnswer"]
        if is_correct:
            correct_answers += 1

        subject = question.get("subject") or DEFAULT_SUBJECT
        subject_result = subject_results.setdefault(subject, SubjectResult())
        subject_result.total += 1
        if is_correct:
            subject_result.correct += 1

        detailed_results.append(DetailedResult(
            questionId=question["id"],
            isCorrect=is_correct,
            selectedAnswer=answer or "Not answered",
            correctAnswer=question["correctAnswer"],
            timeSpent=time_spent[index] if index < len(time_spent) else 0,
        ))

    total_questions = len(questions)
    answered = sum(1 for answer in answers if answer is not None)
    score = percentage(correct_answers, total_questions)
    accuracy = percentage(correct_answers, answered)

    return QuizResults(
        sessionId=session["id"],
        userId=session["userId"],
        quizType=session["quizType"],
        score=score,
        accuracy=accuracy,
        totalQuestions=total_questions,
        correctAnswers=correct_answers,
        timeTaken=time_taken,
        subjectWiseResults=subject_results,
        recommendations=generate_recommendations(
            score, subject_results, session["quizType"], time_taken, total_questions
        ),
        detailedResults=detailed_results,
        completedAt=completed_at.isoformat(),
    )


async def get_results(db, session_id: str) -> QuizResults:
    doc = await db.quizResults.find_one({"sessionId": session_id}, {"_id": 0})
    if not doc:
        raise NotFound("Results not found")
    return QuizResults(**doc)


async def _find_results(db, session_id: str) -> Optional[QuizResults]:
    try:
        return await get_results(db, session_id)
    except NotFound:
        return None


async def _mark_completed(db, session: dict, results: QuizResults, answers=None):
    update = {
        "completed": True,
        "completedAt": results.completedAt,
        "finalScore": results.score,
        "updatedAt": datetime.utcnow().isoformat(),
    }
    if answers is not None:
        update["answers"] = answers
    try:
        await db.quizSessions.update_one({"id": session["id"]}, {"$set": update})
    except PyMongoError as e:
        logger.error(f"Failed to mark session {session['id']} completed: {str(e)}")
        raise InternalError("Failed to save quiz results")


async def update_user_stats(db, user_id: str, results: QuizResults):
    stats = await db.userStats.find_one({"userId": user_id}) or {}
    quizzes = stats.get("totalQuizzes", 0)
    average = stats.get("averageScore", 0)
    now = datetime.utcnow().isoformat()
    await db.userStats.update_one(
        {"userId": user_id},
        {
            "$set": {
                "totalQuizzes": quizzes + 1,
                "totalQuestions": stats.get("totalQuestions", 0) + results.totalQuestions,
                "totalCorrect": stats.get("totalCorrect", 0) + results.correctAnswers,
                "averageScore": round_half_up((average * quizzes + results.score) / (quizzes + 1)),
                "lastQuizDate": now,
                "updatedAt": now,
            },
            "$setOnInsert": {"createdAt": now},
        },
        upsert=True,
    )


async def complete_session(
    db, session_id: str, final_answers: Optional[List[Optional[str]]] = None
) -> Tuple[QuizResults, bool]:
    """Score and persist a session once.

    Returns the results and whether this call stored them. Repeated or
    concurrent calls get the stored copy and False.
    """
    session = await get_session(db, session_id)
    if not session:
        raise NotFound("Quiz session not found")

    existing = await _find_results(db, session_id)
    if existing:
        if not session.get("completed"):
            await _mark_completed(db, session, existing)
        return existing, False
    if session.get("completed"):
        logger.error(f"Session {session_id} is completed but has no results")
        raise InternalError("Quiz results missing for completed session")

    if final_answers is not None:
        if len(final_answers) != len(session["questions"]):
            raise ValidationError("Final answers must match the number of questions")
        check_answer_choices(final_answers)
        session["answers"] = final_answers

    results = calculate_results(session)

    # Results first, then the completed flag: a crash in between is healed
    # by the next call, which finds the stored results.
    try:
        await db.quizResults.insert_one(results.model_dump())
    except DuplicateKeyError:
        logger.info(f"Session {session_id} was completed concurrently, returning stored results")
        stored = await get_results(db, session_id)
        await _mark_completed(db, session, stored)
        return stored, False
    except PyMongoError as e:
        logger.error(f"Results saving error for {session_id}: {str(e)}")
        raise InternalError("Failed to save quiz results")

    await _mark_completed(db, session, results, final_answers)
    logger.info(f"Session {session_id} completed with score {results.score}")

    try:
        await update_user_stats(db, session["userId"], results)
    except Exception as e:
        logger.error(f"User stats update failed for {session['userId']}: {str(e)}")

    return results, True
