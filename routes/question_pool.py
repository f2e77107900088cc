# routes/question_pool.py
from datetime import datetime
from pymongo.errors import PyMongoError
from pydantic import ValidationError as SchemaError
from typing import List, Optional
import logging
import random

from errors import PoolUnavailable
from models.question import DEFAULT_SUBJECT, SYNTHETIC_SOURCE, Question
from models.quiz_type import QuizType, get_quiz_config

logger = logging.getLogger(__name__)


def generate_mock_questions(count: int, difficulty: str, subject: str, quiz_type: QuizType) -> List[Question]:
    """Placeholder questions used to top up a pool that is too small."""
    stamp = int(datetime.utcnow().timestamp() * 1000)
    subject_tag = subject.lower().replace(" ", "-")
    return [
        Question(
            id=f"mock-{stamp}-{i}",
            question=(
                f"Sample {difficulty} level question {i + 1} for {subject}. "
                "Which of the following is correct regarding this topic?"
            ),
            options=[
                "Option A: This is the first possible answer",
                "Option B: This is the second possible answer",
                "Option C: This is the third possible answer",
                "Option D: This is the fourth possible answer",
            ],
            correctAnswer="A",
            explanation=(
                f"This is a sample explanation for question {i + 1}. "
                "It stands in until the question pool has enough real content."
            ),
            subject=subject,
            difficulty=difficulty,
            source=SYNTHETIC_SOURCE,
            tags=[quiz_type.value, difficulty, subject_tag, SYNTHETIC_SOURCE],
        )
        for i in range(count)
    ]


def _to_question(doc: dict) -> Optional[Question]:
    object_id = doc.pop("_id", None)
    if not doc.get("id"):
        doc["id"] = str(object_id)
    try:
        return Question(**doc)
    except SchemaError as e:
        logger.warning(f"Skipping malformed pool question {doc['id']}: {e.error_count()} invalid fields")
        return None


async def fetch_questions(db, quiz_type: QuizType, difficulty: str, subject: str, count: int) -> List[Question]:
    config = get_quiz_config(quiz_type)
    query = {"difficulty": difficulty}
    if subject != DEFAULT_SUBJECT:
        query["subject"] = subject

    try:
        # Over-fetch so the shuffle has something to choose from
        docs = await db[config.question_pool].find(query).limit(count * 2).to_list(None)
    except PyMongoError as e:
        logger.error(f"Question pool {config.question_pool} unavailable: {str(e)}")
        raise PoolUnavailable("Question pool unavailable")

    questions = [q for q in map(_to_question, docs) if q is not None]
    random.shuffle(questions)
    selected = questions[:count]

    if len(selected) < count:
        missing = count - len(selected)
        logger.info(f"Pool {config.question_pool} returned {len(selected)}/{count} questions, adding {missing} placeholders")
        selected.extend(generate_mock_questions(missing, difficulty, subject, quiz_type))

    return selected
