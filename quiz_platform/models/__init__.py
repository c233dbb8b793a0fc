"""
Database models package
"""
from quiz_platform.models.user import User, UserRole
from quiz_platform.models.quiz import Quiz, Question, Option, QuestionType
from quiz_platform.models.quiz_attempt import QuizAttempt, Answer, AttemptStatus

__all__ = [
    "User", "UserRole",
    "Quiz", "Question", "Option", "QuestionType",
    "QuizAttempt", "Answer", "AttemptStatus",
]
