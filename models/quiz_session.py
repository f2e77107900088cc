# models/quiz_session.py
from pydantic import BaseModel, Field
from typing import List, Optional

from models.question import Difficulty, Question


class QuizGenerationRequest(BaseModel):
    userId: str = Field(..., min_length=1)
    quizType: str = Field(..., min_length=1)
    difficulty: Difficulty
    subject: str = Field(..., min_length=1)
    maxQuestions: int = Field(..., gt=0, le=200)


class QuizGenerationResponse(BaseModel):
    sessionId: str
    questions: List[Question]
    timeLimit: int
    success: bool = True


class SaveProgressRequest(BaseModel):
    sessionId: str = Field(..., min_length=1)
    currentQuestionIndex: int
    answers: List[Optional[str]]
    bookmarked: List[bool]
    timeRemaining: int


class SessionSnapshot(BaseModel):
    sessionId: str
    currentQuestionIndex: int = 0
    answers: List[Optional[str]] = []
    bookmarked: List[bool] = []
    timeRemaining: int = 0
    completed: bool = False
    totalQuestions: int = 0
    lastProgressSave: Optional[str] = None


class AnswerSubmission(BaseModel):
    sessionId: str = Field(..., min_length=1)
    questionIndex: int
    selectedAnswer: str = Field(..., min_length=1)
    timeSpent: int = Field(..., ge=0)


class AnswerFeedback(BaseModel):
    isCorrect: bool
    explanation: str
    correctAnswer: str
    success: bool = True
