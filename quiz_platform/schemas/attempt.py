"""
Pydantic schemas for quiz attempts and submissions
"""
from pydantic import BaseModel, Field
from typing import List, Optional, Union
from datetime import datetime

from quiz_platform.models.quiz_attempt import AttemptStatus
from quiz_platform.schemas.quiz import (
    QuizResponse,
    CandidateQuizResponse,
    QuestionResponse,
    OptionResponse,
)


class AnswerRequest(BaseModel):
    """One answer: a selected option for choice questions, free text otherwise"""
    question_id: int
    selected_option_id: Optional[int] = None
    text_answer: Optional[str] = None


class SubmitQuizRequest(BaseModel):
    """Schema for quiz submission"""
    attempt_id: int
    answers: List[AnswerRequest] = Field(default_factory=list)


class AttemptResponse(BaseModel):
    """Attempt summary"""
    id: int
    quiz_id: int
    quiz_title: str
    started_at: datetime
    submitted_at: Optional[datetime] = None
    score: Optional[int] = None
    total_points: int
    status: AttemptStatus
    time_taken_seconds: Optional[int] = None
    exceeded_time_limit: Optional[bool] = None

    class Config:
        extra = "forbid"


class CandidateAnswerResponse(BaseModel):
    """Per-answer breakdown"""
    id: int
    question: QuestionResponse
    selected_option: Optional[OptionResponse] = None
    text_answer: Optional[str] = None
    is_correct: Optional[bool] = None
    points_earned: int


class DetailedAttemptResponse(AttemptResponse):
    """Attempt with the quiz and the answer breakdown"""
    quiz: Union[QuizResponse, CandidateQuizResponse]
    answers: List[CandidateAnswerResponse]


class AdminAttemptResponse(BaseModel):
    """Attempt as listed to administrators"""
    id: int
    quiz_id: int
    quiz_title: str
    candidate_name: str
    candidate_email: str
    started_at: datetime
    submitted_at: Optional[datetime] = None
    score: Optional[int] = None
    total_points: int
    status: AttemptStatus
    exceeded_time_limit: Optional[bool] = None
