# routes/usage_ledger.py
from datetime import datetime
from tenacity import retry, stop_after_attempt, wait_exponential
from typing import Optional
import logging
import uuid

from config import USAGE_RETRY_ATTEMPTS
from models.quiz_results import QuizResults

logger = logging.getLogger(__name__)


def usage_day(moment: Optional[datetime] = None) -> str:
    return (moment or datetime.utcnow()).date().isoformat()


@retry(
    stop=stop_after_attempt(USAGE_RETRY_ATTEMPTS),
    wait=wait_exponential(multiplier=0.1, max=2),
    reraise=True,
)
async def _write_usage(db, user_id: str, quiz_type: str, results: QuizResults):
    now = datetime.utcnow()
    day = usage_day(now)

    await db.dailyUsage.update_one(
        {"id": f"{user_id}_{day}"},
        {
            "$set": {"userId": user_id, "date": day, "lastActivity": now.isoformat()},
            "$inc": {"quizzesCompleted": 1, "questionsAnswered": results.totalQuestions},
        },
        upsert=True,
    )
    await db.quizTypeUsage.update_one(
        {"id": f"{user_id}_{quiz_type}"},
        {
            "$set": {
                "userId": user_id,
                "quizType": quiz_type,
                "lastAttempt": now.isoformat(),
                "updatedAt": now.isoformat(),
            },
            "$inc": {
                "totalAttempts": 1,
                "totalQuestions": results.totalQuestions,
                "totalCorrect": results.correctAnswers,
            },
            "$max": {"bestScore": results.score},
        },
        upsert=True,
    )


async def record_usage(db, user_id: str, quiz_type: str, results: QuizResults):
    """Bump the daily and per-quiz-type counters. Never raises."""
    try:
        await _write_usage(db, user_id, quiz_type, results)
        logger.info(f"Recorded usage for {user_id} ({quiz_type})")
    except Exception as e:
        logger.error(f"User progress update failed for {user_id}: {str(e)}")


async def get_usage(db, user_id: str, day: Optional[str] = None) -> dict:
    day = day or usage_day()
    daily = await db.dailyUsage.find_one({"id": f"{user_id}_{day}"}, {"_id": 0})
    quiz_types = await db.quizTypeUsage.find({"userId": user_id}, {"_id": 0}).to_list(None)
    return {
        "userId": user_id,
        "date": day,
        "daily": {
            "quizzesCompleted": (daily or {}).get("quizzesCompleted", 0),
            "questionsAnswered": (daily or {}).get("questionsAnswered", 0),
            "lastActivity": (daily or {}).get("lastActivity"),
        },
        "quizTypes": {
            usage["quizType"]: {
                "totalAttempts": usage.get("totalAttempts", 0),
                "totalQuestions": usage.get("totalQuestions", 0),
                "totalCorrect": usage.get("totalCorrect", 0),
                "bestScore": usage.get("bestScore", 0),
                "lastAttempt": usage.get("lastAttempt"),
            }
            for usage in quiz_types
        },
    }


async def log_quiz_generated(db, user_id: str, quiz_type: str, difficulty: str, subject: str,
                             question_count: int, session_id: str):
    try:
        await db.quizAnalytics.insert_one({
            "id": str(uuid.uuid4()),
            "userId": user_id,
            "quizType": quiz_type,
            "difficulty": difficulty,
            "subject": subject,
            "questionCount": question_count,
            "sessionId": session_id,
            "timestamp": datetime.utcnow().isoformat(),
        })
    except Exception as e:
        logger.error(f"Quiz analytics logging failed for {session_id}: {str(e)}")


async def log_progress_save(db, session_id: str):
    try:
        await db.progressLogs.insert_one({
            "sessionId": session_id,
            "action": "auto_save",
            "timestamp": datetime.utcnow().isoformat(),
        })
    except Exception as e:
        logger.error(f"Progress logging failed for {session_id}: {str(e)}")
