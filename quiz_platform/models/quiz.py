"""
Quiz, Question and Option models - the authored quiz structure
"""
import enum

from sqlalchemy import (
    Column, Integer, String, Text, Boolean, TIMESTAMP, Enum, ForeignKey,
    CheckConstraint, func,
)
from sqlalchemy.orm import relationship, validates

from quiz_platform.database import Base
from quiz_platform.exceptions import DomainValidationError


class QuestionType(str, enum.Enum):
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    TRUE_FALSE = "TRUE_FALSE"
    SHORT_ANSWER = "SHORT_ANSWER"


class Quiz(Base):
    """
    Quizzes table - owns its questions (cascade delete)
    """
    __tablename__ = "quizzes"
    __table_args__ = (
        CheckConstraint("duration >= 1", name="ck_quizzes_duration_positive"),
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    duration = Column(Integer, nullable=False)  # minutes
    is_active = Column(Boolean, nullable=False, default=True)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    creator = relationship("User")
    questions = relationship(
        "Question",
        back_populates="quiz",
        cascade="all, delete-orphan",
        order_by="Question.id",
    )
    attempts = relationship("QuizAttempt", back_populates="quiz")

    @validates("duration")
    def validate_duration(self, key, value):
        if value is None or int(value) < 1:
            raise DomainValidationError("duration", "must be at least 1 minute")
        return value

    @property
    def total_points(self) -> int:
        return sum(q.points for q in self.questions)

    def __repr__(self):
        return f"<Quiz(id={self.id}, title={self.title}, duration={self.duration})>"


class Question(Base):
    """
    Questions table - belongs to one quiz, owns its options
    """
    __tablename__ = "questions"
    # Replaced questions must never hand their ids to new ones
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    quiz_id = Column(Integer, ForeignKey("quizzes.id"), nullable=False, index=True)
    question_text = Column(Text, nullable=False)
    type = Column(Enum(QuestionType, name="question_type"), nullable=False)
    points = Column(Integer, nullable=False, default=1)

    quiz = relationship("Quiz", back_populates="questions")
    options = relationship(
        "Option",
        back_populates="question",
        cascade="all, delete-orphan",
        order_by="Option.id",
    )

    @validates("points")
    def validate_points(self, key, value):
        if value is not None and value < 0:
            raise DomainValidationError("points", "must not be negative")
        return value

    def __repr__(self):
        return f"<Question(id={self.id}, quiz_id={self.quiz_id}, type={self.type})>"


class Option(Base):
    """
    Options table - is_correct is visible to admins only
    """
    __tablename__ = "options"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    question_id = Column(Integer, ForeignKey("questions.id"), nullable=False, index=True)
    option_text = Column(Text, nullable=False)
    is_correct = Column(Boolean, nullable=False, default=False)

    question = relationship("Question", back_populates="options")

    def __repr__(self):
        return f"<Option(id={self.id}, question_id={self.question_id}, correct={self.is_correct})>"
