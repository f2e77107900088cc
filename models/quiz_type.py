# models/quiz_type.py
from enum import Enum
from typing import NamedTuple, Optional, Tuple


class Tier(str, Enum):
    FREE = "free"
    FOUNDATION = "foundation"
    PRACTICE = "practice"
    MAINS = "mains"
    INTERVIEW = "interview"
    ELITE = "elite"


class QuizType(str, Enum):
    FREE_DAILY = "free-daily"
    NCERT_FOUNDATION = "ncert-foundation"
    PAST_YEAR = "past-year"
    SUBJECT_WISE = "subject-wise"
    CURRENT_AFFAIRS_BASIC = "current-affairs-basic"
    CURRENT_AFFAIRS_ADVANCED = "current-affairs-advanced"
    MOCK_PRELIMS = "mock-prelims"
    ADAPTIVE = "adaptive"
    TOPPER_BANK = "topper-bank"
    FINAL_REVISION = "final-revision"


class QuizConfig(NamedTuple):
    question_pool: str
    time_limit: int  # seconds
    allowed_tiers: Tuple[Tier, ...]


_ALL_TIERS = tuple(Tier)
_FOUNDATION_UP = (Tier.FOUNDATION, Tier.PRACTICE, Tier.MAINS, Tier.INTERVIEW, Tier.ELITE)
_PRACTICE_UP = (Tier.PRACTICE, Tier.MAINS, Tier.INTERVIEW, Tier.ELITE)

QUIZ_CONFIGS = {
    QuizType.FREE_DAILY: QuizConfig("daily-questions", 15 * 60, _ALL_TIERS),
    QuizType.NCERT_FOUNDATION: QuizConfig("ncert-questions", 20 * 60, _FOUNDATION_UP),
    QuizType.PAST_YEAR: QuizConfig("past-year-questions", 25 * 60, _PRACTICE_UP),
    QuizType.SUBJECT_WISE: QuizConfig("subject-questions", 30 * 60, _PRACTICE_UP),
    QuizType.CURRENT_AFFAIRS_BASIC: QuizConfig("current-affairs", 20 * 60, _FOUNDATION_UP),
    QuizType.CURRENT_AFFAIRS_ADVANCED: QuizConfig("current-affairs", 30 * 60, _PRACTICE_UP),
    QuizType.MOCK_PRELIMS: QuizConfig("prelims-questions", 120 * 60, (Tier.MAINS, Tier.INTERVIEW, Tier.ELITE)),
    QuizType.ADAPTIVE: QuizConfig("adaptive-questions", 45 * 60, (Tier.INTERVIEW, Tier.ELITE)),
    QuizType.TOPPER_BANK: QuizConfig("topper-questions", 60 * 60, (Tier.ELITE,)),
    QuizType.FINAL_REVISION: QuizConfig("revision-questions", 30 * 60, (Tier.ELITE,)),
}

# Every quiz type must have a configuration
_missing = set(QuizType) - set(QUIZ_CONFIGS)
if _missing:
    raise RuntimeError(f"Quiz types without configuration: {sorted(t.value for t in _missing)}")


def parse_quiz_type(value: str) -> Optional[QuizType]:
    """Return the QuizType for ``value``, or None when it is not a known type."""
    try:
        return QuizType(value)
    except ValueError:
        return None


def get_quiz_config(quiz_type: QuizType) -> QuizConfig:
    return QUIZ_CONFIGS[quiz_type]
