"""
QuizAttempt and Answer models - submissions and scoring results
"""
import enum

from sqlalchemy import Column, Integer, Boolean, Text, TIMESTAMP, Enum, ForeignKey
from sqlalchemy.orm import relationship

from quiz_platform.database import Base
from quiz_platform.utils.clock import utcnow


class AttemptStatus(str, enum.Enum):
    IN_PROGRESS = "IN_PROGRESS"
    # Only reached if scoring is ever deferred; submission goes straight to EVALUATED
    SUBMITTED = "SUBMITTED"
    EVALUATED = "EVALUATED"


class QuizAttempt(Base):
    """
    Quiz attempts table - one candidate taking one quiz
    """
    __tablename__ = "quiz_attempts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    quiz_id = Column(Integer, ForeignKey("quizzes.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    started_at = Column(TIMESTAMP, nullable=False, default=utcnow)
    submitted_at = Column(TIMESTAMP)
    score = Column(Integer)  # null until evaluated
    total_points = Column(Integer, nullable=False, default=0)  # snapshot at start
    status = Column(
        Enum(AttemptStatus, name="attempt_status"),
        nullable=False,
        default=AttemptStatus.IN_PROGRESS,
    )
    time_taken_seconds = Column(Integer)
    exceeded_time_limit = Column(Boolean)

    quiz = relationship("Quiz", back_populates="attempts")
    user = relationship("User")
    answers = relationship(
        "Answer",
        back_populates="attempt",
        cascade="all, delete-orphan",
        order_by="Answer.id",
    )

    @property
    def is_in_progress(self) -> bool:
        return self.status == AttemptStatus.IN_PROGRESS

    def __repr__(self):
        return f"<QuizAttempt(id={self.id}, quiz_id={self.quiz_id}, status={self.status}, score={self.score})>"


class Answer(Base):
    """
    Answers table - written once at submission, never mutated
    """
    __tablename__ = "answers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    attempt_id = Column(Integer, ForeignKey("quiz_attempts.id"), nullable=False, index=True)
    question_id = Column(Integer, ForeignKey("questions.id"), nullable=False)
    selected_option_id = Column(Integer, ForeignKey("options.id"))
    text_answer = Column(Text)
    is_correct = Column(Boolean)  # null for free text
    points_earned = Column(Integer, nullable=False, default=0)

    attempt = relationship("QuizAttempt", back_populates="answers")
    question = relationship("Question")
    selected_option = relationship("Option")

    def __repr__(self):
        return f"<Answer(id={self.id}, question_id={self.question_id}, correct={self.is_correct})>"
