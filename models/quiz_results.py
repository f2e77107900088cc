# models/quiz_results.py
from pydantic import BaseModel, Field
from typing import Dict, List, Optional


class CompletionRequest(BaseModel):
    sessionId: str = Field(..., min_length=1)
    finalAnswers: Optional[List[Optional[str]]] = None
    timeTaken: Optional[int] = None  # accepted for compatibility, server clock wins


class SubjectResult(BaseModel):
    correct: int = 0
    total: int = 0


class DetailedResult(BaseModel):
    questionId: str
    isCorrect: bool
    selectedAnswer: str
    correctAnswer: str
    timeSpent: int = 0


class QuizResults(BaseModel):
    sessionId: str
    userId: str
    quizType: str
    score: int
    accuracy: int
    totalQuestions: int
    correctAnswers: int
    timeTaken: int
    subjectWiseResults: Dict[str, SubjectResult]
    recommendations: List[str]
    detailedResults: List[DetailedResult]
    completedAt: str
