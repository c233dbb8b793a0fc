"""
Pydantic schemas for quiz authoring requests and quiz views
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from quiz_platform.models.quiz import QuestionType


class OptionRequest(BaseModel):
    """Option inside a quiz request; id matches an existing option on update"""
    id: Optional[int] = None
    option_text: str = Field(..., min_length=1, description="Option text")
    is_correct: bool = Field(..., description="Whether selecting this option earns points")


class QuestionRequest(BaseModel):
    """Question inside a quiz request; id matches an existing question on update"""
    id: Optional[int] = None
    question_text: str = Field(..., min_length=1, description="Question text")
    type: QuestionType
    points: Optional[int] = Field(None, ge=0, description="Point value (defaults to 1)")
    options: Optional[List[OptionRequest]] = None


class QuizRequest(BaseModel):
    """Schema for creating or updating a quiz"""
    title: str = Field(..., min_length=1, max_length=255, description="Quiz title")
    description: Optional[str] = None
    duration: int = Field(..., ge=1, description="Time limit in minutes")
    is_active: Optional[bool] = None
    questions: Optional[List[QuestionRequest]] = None


class OptionResponse(BaseModel):
    id: int
    option_text: str
    is_correct: bool

    class Config:
        from_attributes = True


class CandidateOptionResponse(BaseModel):
    """Option as shown while taking a quiz - no correctness flag"""
    id: int
    option_text: str

    class Config:
        from_attributes = True
        extra = "forbid"


class QuestionResponse(BaseModel):
    id: int
    question_text: str
    type: QuestionType
    points: int
    options: List[OptionResponse]


class CandidateQuestionResponse(BaseModel):
    id: int
    question_text: str
    type: QuestionType
    points: int
    options: List[CandidateOptionResponse]


class QuizResponse(BaseModel):
    """Full quiz detail for administrators"""
    id: int
    title: str
    description: Optional[str] = None
    duration: int
    is_active: bool
    created_by: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    questions: List[QuestionResponse]


class CandidateQuizResponse(BaseModel):
    """Quiz as served to a candidate taking it"""
    id: int
    title: str
    description: Optional[str] = None
    duration: int
    is_active: bool
    created_by: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    questions: List[CandidateQuestionResponse]


class QuizSummaryResponse(BaseModel):
    """Quiz list entry"""
    id: int
    title: str
    description: Optional[str] = None
    duration: int
    is_active: bool
    created_by: str
    created_at: Optional[datetime] = None
    total_questions: int


class DeleteResponse(BaseModel):
    message: str
    quiz_id: int
