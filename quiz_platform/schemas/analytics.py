"""
Pydantic schemas for analytics endpoints
"""
from pydantic import BaseModel


class QuizAnalytics(BaseModel):
    """Score statistics over evaluated attempts of one quiz"""
    quiz_id: int
    quiz_title: str
    total_attempts: int
    average_score: float
    highest_score: int
    lowest_score: int
