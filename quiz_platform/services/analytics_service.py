"""
Analytics service for quiz score statistics
"""
import logging

from sqlalchemy.orm import Session

from quiz_platform.exceptions import NotFoundError
from quiz_platform.models import Quiz, QuizAttempt, AttemptStatus
from quiz_platform.schemas.analytics import QuizAnalytics

logger = logging.getLogger(__name__)


class AnalyticsService:
    """Service for generating quiz performance analytics"""

    def get_quiz_analytics(self, db: Session, quiz_id: int) -> QuizAnalytics:
        """
        Score statistics over the evaluated attempts of a quiz

        In-progress attempts are ignored. A quiz without evaluated attempts
        gets zeroed statistics.

        Raises:
            NotFoundError: quiz does not exist
        """
        quiz = db.query(Quiz).filter(Quiz.id == quiz_id).first()
        if not quiz:
            raise NotFoundError("Quiz", quiz_id)

        scores = [
            attempt.score or 0
            for attempt in db.query(QuizAttempt).filter(
                QuizAttempt.quiz_id == quiz_id,
                QuizAttempt.status == AttemptStatus.EVALUATED
            ).all()
        ]

        if not scores:
            return QuizAnalytics(
                quiz_id=quiz_id,
                quiz_title=quiz.title,
                total_attempts=0,
                average_score=0.0,
                highest_score=0,
                lowest_score=0,
            )

        avg_score = sum(scores) / len(scores)
        logger.debug(f"Quiz {quiz_id}: {len(scores)} evaluated attempt(s), avg {avg_score:.2f}")

        return QuizAnalytics(
            quiz_id=quiz_id,
            quiz_title=quiz.title,
            total_attempts=len(scores),
            average_score=round(avg_score, 2),
            highest_score=max(scores),
            lowest_score=min(scores),
        )


# Global instance
analytics_service = AnalyticsService()
