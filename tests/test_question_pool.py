# tests/test_question_pool.py
from unittest.mock import MagicMock

import pytest
from bson import ObjectId
from pymongo.errors import ServerSelectionTimeoutError

from errors import PoolUnavailable
from models.quiz_type import QuizType
from routes.question_pool import fetch_questions, generate_mock_questions


def _pool_doc(i, subject="Geography", difficulty="easy"):
    return {
        "id": f"pool-{i}",
        "question": f"Pool question {i}",
        "options": ["A", "B", "C", "D"],
        "correctAnswer": "B",
        "explanation": "From the pool.",
        "subject": subject,
        "difficulty": difficulty,
    }


async def test_empty_pool_returns_synthetic_questions(db):
    questions = await fetch_questions(db, QuizType.FREE_DAILY, "easy", "General Studies", 5)
    assert len(questions) == 5
    assert all(q.is_synthetic for q in questions)
    assert all("synthetic" in q.tags for q in questions)
    assert all(q.difficulty == "easy" for q in questions)
    assert all(q.subject == "General Studies" for q in questions)
    assert all(q.correctAnswer == "A" for q in questions)
    assert len({q.id for q in questions}) == 5


async def test_pool_questions_come_first_then_placeholders(db):
    await db["daily-questions"].insert_many([_pool_doc(i) for i in range(3)])
    questions = await fetch_questions(db, QuizType.FREE_DAILY, "easy", "General Studies", 5)
    assert len(questions) == 5
    assert {q.id for q in questions[:3]} == {"pool-0", "pool-1", "pool-2"}
    assert all(q.is_synthetic for q in questions[3:])


async def test_pool_truncates_to_count(db):
    await db["daily-questions"].insert_many([_pool_doc(i) for i in range(12)])
    questions = await fetch_questions(db, QuizType.FREE_DAILY, "easy", "General Studies", 4)
    assert len(questions) == 4
    assert not any(q.is_synthetic for q in questions)


async def test_filters_by_difficulty(db):
    await db["daily-questions"].insert_many([
        _pool_doc(1, difficulty="hard"),
        _pool_doc(2, difficulty="easy"),
    ])
    questions = await fetch_questions(db, QuizType.FREE_DAILY, "hard", "General Studies", 1)
    assert [q.id for q in questions] == ["pool-1"]


async def test_filters_by_subject_unless_general_studies(db):
    await db["subject-questions"].insert_many([
        _pool_doc(1, subject="Polity"),
        _pool_doc(2, subject="Economy"),
    ])
    polity = await fetch_questions(db, QuizType.SUBJECT_WISE, "easy", "Polity", 2)
    assert polity[0].id == "pool-1"
    assert polity[1].is_synthetic
    assert polity[1].subject == "Polity"

    general = await fetch_questions(db, QuizType.SUBJECT_WISE, "easy", "General Studies", 2)
    assert {q.id for q in general} == {"pool-1", "pool-2"}


async def test_uses_quiz_type_pool(db):
    await db["prelims-questions"].insert_one(_pool_doc(1))
    daily = await fetch_questions(db, QuizType.FREE_DAILY, "easy", "General Studies", 1)
    prelims = await fetch_questions(db, QuizType.MOCK_PRELIMS, "easy", "General Studies", 1)
    assert daily[0].is_synthetic
    assert prelims[0].id == "pool-1"


async def test_pool_document_without_id_uses_object_id(db):
    doc = _pool_doc(1)
    del doc["id"]
    doc["_id"] = ObjectId()
    await db["daily-questions"].insert_one(doc)
    questions = await fetch_questions(db, QuizType.FREE_DAILY, "easy", "General Studies", 1)
    assert questions[0].id == str(doc["_id"])


async def test_unreachable_store_raises_pool_unavailable():
    db = MagicMock()
    db.__getitem__.return_value.find.side_effect = ServerSelectionTimeoutError("no servers")
    with pytest.raises(PoolUnavailable):
        await fetch_questions(db, QuizType.FREE_DAILY, "easy", "General Studies", 5)


def test_mock_questions_are_tagged():
    questions = generate_mock_questions(2, "medium", "Modern History", QuizType.PAST_YEAR)
    assert questions[0].tags == ["past-year", "medium", "modern-history", "synthetic"]
    assert questions[1].question.startswith("Sample medium level question 2 for Modern History")
    assert len(questions[0].options) == 4


async def test_malformed_pool_document_is_replaced_by_placeholder(db):
    broken = _pool_doc(2)
    del broken["question"]
    broken["options"] = "not a list"
    await db["daily-questions"].insert_many([_pool_doc(1), broken])

    questions = await fetch_questions(db, QuizType.FREE_DAILY, "easy", "General Studies", 2)

    assert len(questions) == 2
    assert questions[0].id == "pool-1"
    assert questions[1].is_synthetic
