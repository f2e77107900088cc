# tests/test_usage_ledger.py
from unittest.mock import AsyncMock, MagicMock

from pymongo.errors import AutoReconnect

from config import USAGE_RETRY_ATTEMPTS
from models.quiz_results import QuizResults
from routes.usage_ledger import (
    get_usage,
    log_progress_save,
    log_quiz_generated,
    record_usage,
    usage_day,
)


def _results(score=60, total=5, correct=3):
    return QuizResults(
        sessionId="session-1",
        userId="user-1",
        quizType="free-daily",
        score=score,
        accuracy=75,
        totalQuestions=total,
        correctAnswers=correct,
        timeTaken=120,
        subjectWiseResults={},
        recommendations=[],
        detailedResults=[],
        completedAt="2026-01-01T09:00:00",
    )


async def test_record_usage_creates_counters(db):
    await record_usage(db, "user-1", "free-daily", _results())

    usage = await get_usage(db, "user-1")
    assert usage["date"] == usage_day()
    assert usage["daily"]["quizzesCompleted"] == 1
    assert usage["daily"]["questionsAnswered"] == 5
    assert usage["quizTypes"]["free-daily"]["totalAttempts"] == 1
    assert usage["quizTypes"]["free-daily"]["totalCorrect"] == 3
    assert usage["quizTypes"]["free-daily"]["bestScore"] == 60


async def test_record_usage_accumulates(db):
    await record_usage(db, "user-1", "free-daily", _results(score=80, total=5, correct=4))
    await record_usage(db, "user-1", "free-daily", _results(score=40, total=10, correct=4))
    await record_usage(db, "user-1", "past-year", _results(score=20, total=5, correct=1))

    usage = await get_usage(db, "user-1")
    assert usage["daily"]["quizzesCompleted"] == 3
    assert usage["daily"]["questionsAnswered"] == 20
    daily_quiz = usage["quizTypes"]["free-daily"]
    assert daily_quiz["totalAttempts"] == 2
    assert daily_quiz["totalQuestions"] == 15
    assert daily_quiz["bestScore"] == 80
    assert usage["quizTypes"]["past-year"]["totalAttempts"] == 1


async def test_usage_for_user_without_activity(db):
    usage = await get_usage(db, "nobody")
    assert usage["daily"]["quizzesCompleted"] == 0
    assert usage["quizTypes"] == {}


async def test_record_usage_retries_then_swallows_failure():
    db = MagicMock()
    db.dailyUsage.update_one = AsyncMock(side_effect=AutoReconnect("primary stepped down"))

    await record_usage(db, "user-1", "free-daily", _results())

    assert db.dailyUsage.update_one.await_count == USAGE_RETRY_ATTEMPTS
    db.quizTypeUsage.update_one.assert_not_called()


async def test_record_usage_recovers_after_transient_failure():
    db = MagicMock()
    db.dailyUsage.update_one = AsyncMock(side_effect=[AutoReconnect("blip"), None])
    db.quizTypeUsage.update_one = AsyncMock()

    await record_usage(db, "user-1", "free-daily", _results())

    assert db.dailyUsage.update_one.await_count == 2
    db.quizTypeUsage.update_one.assert_awaited_once()


async def test_analytics_logs(db):
    await log_quiz_generated(db, "user-1", "free-daily", "easy", "General Studies", 5, "session-1")
    await log_progress_save(db, "session-1")
    assert await db.quizAnalytics.count_documents({"sessionId": "session-1", "questionCount": 5}) == 1
    assert await db.progressLogs.count_documents({"sessionId": "session-1", "action": "auto_save"}) == 1


async def test_analytics_log_failure_is_swallowed():
    db = MagicMock()
    db.progressLogs.insert_one = AsyncMock(side_effect=AutoReconnect("down"))
    await log_progress_save(db, "session-1")
