# models/question.py
from pydantic import BaseModel, Field
from typing import List, Literal, Optional

Difficulty = Literal["easy", "medium", "hard"]

DEFAULT_SUBJECT = "General Studies"
SYNTHETIC_SOURCE = "synthetic"


class Question(BaseModel):
    id: str
    question: str
    options: List[str]
    correctAnswer: str
    explanation: str = ""
    subject: str = DEFAULT_SUBJECT
    difficulty: Difficulty
    image: Optional[str] = None
    year: Optional[int] = None
    source: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

    @property
    def is_synthetic(self) -> bool:
        return self.source == SYNTHETIC_SOURCE
