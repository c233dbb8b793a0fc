"""
Attempt lifecycle service

IN_PROGRESS -> EVALUATED. Start snapshots the quiz's total points;
submit measures elapsed time, scores the answers and closes the attempt in
one transaction.
"""
import logging
from datetime import datetime, timedelta
from typing import List

from sqlalchemy.orm import Session

from quiz_platform.exceptions import NotFoundError, UnauthorizedError, StateConflictError
from quiz_platform.models import User, Quiz, QuizAttempt, AttemptStatus
from quiz_platform.schemas.attempt import (
    SubmitQuizRequest,
    AttemptResponse,
    DetailedAttemptResponse,
    AdminAttemptResponse,
)
from quiz_platform.schemas.quiz import CandidateQuizResponse
from quiz_platform.services.projections import (
    to_attempt_response,
    to_detailed_attempt_response,
    to_admin_attempt_response,
    to_candidate_view,
)
from quiz_platform.services.scoring_service import scoring_service
from quiz_platform.utils.cache import cache_service

logger = logging.getLogger(__name__)


class AttemptService:
    """Start, submit and read quiz attempts"""

    def _get_user(self, db: Session, email: str) -> User:
        user = db.query(User).filter(User.email == email).first()
        if not user:
            raise NotFoundError("User", email, field="email")
        return user

    def _get_quiz(self, db: Session, quiz_id: int) -> Quiz:
        quiz = db.query(Quiz).filter(Quiz.id == quiz_id).first()
        if not quiz:
            raise NotFoundError("Quiz", quiz_id)
        return quiz

    def _get_owned_attempt(
        self,
        db: Session,
        attempt_id: int,
        candidate_email: str,
        for_update: bool = False
    ) -> QuizAttempt:
        query = db.query(QuizAttempt).filter(QuizAttempt.id == attempt_id)
        if for_update:
            query = query.with_for_update()
        attempt = query.first()
        if not attempt:
            raise NotFoundError("QuizAttempt", attempt_id)
        if attempt.user.email != candidate_email:
            logger.warning(f"User {candidate_email} tried to access attempt {attempt_id}")
            raise UnauthorizedError("You are not the owner of this attempt")
        return attempt

    def start_quiz(
        self,
        db: Session,
        quiz_id: int,
        candidate_email: str,
        now: datetime
    ) -> AttemptResponse:
        """
        Open a new IN_PROGRESS attempt

        Concurrent in-progress attempts by the same candidate are allowed.

        Raises:
            NotFoundError: quiz or candidate unknown
        """
        quiz = self._get_quiz(db, quiz_id)
        candidate = self._get_user(db, candidate_email)

        try:
            attempt = QuizAttempt(
                quiz=quiz,
                user=candidate,
                started_at=now,
                status=AttemptStatus.IN_PROGRESS,
                total_points=quiz.total_points,
            )
            db.add(attempt)
            db.commit()
            db.refresh(attempt)
        except Exception:
            db.rollback()
            raise

        logger.info(f"Attempt {attempt.id} started on quiz {quiz_id} by {candidate_email}")
        return to_attempt_response(attempt)

    def get_quiz_for_attempt(self, db: Session, quiz_id: int) -> CandidateQuizResponse:
        """Candidate-safe quiz view, served from cache when possible"""
        cache_key = cache_service.candidate_quiz_key(quiz_id)
        cached = cache_service.get(cache_key)
        if cached:
            return CandidateQuizResponse(**cached)

        view = to_candidate_view(self._get_quiz(db, quiz_id))
        cache_service.set(cache_key, view.model_dump(mode="json"))
        return view

    def record_elapsed_time(self, attempt: QuizAttempt, now: datetime) -> None:
        """
        Store elapsed seconds and flag overage of the quiz time limit

        The flag is advisory; it never blocks or reduces scoring.
        """
        quiz = attempt.quiz
        if attempt.started_at is None:
            attempt.started_at = now - timedelta(minutes=quiz.duration)

        elapsed_seconds = int((now - attempt.started_at).total_seconds())
        attempt.time_taken_seconds = elapsed_seconds

        elapsed_minutes = elapsed_seconds // 60
        attempt.exceeded_time_limit = elapsed_minutes > quiz.duration
        if attempt.exceeded_time_limit:
            logger.warning(
                f"Attempt {attempt.id} submitted after time limit. "
                f"Elapsed: {elapsed_minutes} minutes, Allowed: {quiz.duration} minutes"
            )

    def submit_quiz(
        self,
        db: Session,
        request: SubmitQuizRequest,
        candidate_email: str,
        now: datetime
    ) -> AttemptResponse:
        """
        Score and close an attempt

        Raises:
            NotFoundError: attempt, question or option unknown
            UnauthorizedError: caller does not own the attempt
            StateConflictError: attempt is no longer IN_PROGRESS
            DomainValidationError: a question is answered more than once
        """
        try:
            attempt = self._get_owned_attempt(db, request.attempt_id, candidate_email, for_update=True)

            if attempt.status != AttemptStatus.IN_PROGRESS:
                raise StateConflictError(
                    f"Attempt {attempt.id} has already been submitted (status: {attempt.status.value})"
                )

            self.record_elapsed_time(attempt, now)

            total_score = scoring_service.score_answers(db, attempt, request.answers)

            # total_points keeps the snapshot taken at start
            attempt.submitted_at = now
            attempt.score = total_score
            attempt.status = AttemptStatus.EVALUATED

            db.commit()
            db.refresh(attempt)
        except Exception:
            db.rollback()
            raise

        logger.info(
            f"Attempt {attempt.id} evaluated: {attempt.score}/{attempt.total_points}"
        )
        return to_attempt_response(attempt)

    def get_my_attempts(self, db: Session, candidate_email: str) -> List[AttemptResponse]:
        candidate = self._get_user(db, candidate_email)
        attempts = db.query(QuizAttempt).filter(
            QuizAttempt.user_id == candidate.id
        ).order_by(QuizAttempt.id).all()
        return [to_attempt_response(a) for a in attempts]

    def get_attempt_result(
        self,
        db: Session,
        attempt_id: int,
        candidate_email: str
    ) -> DetailedAttemptResponse:
        """
        Raises:
            NotFoundError: attempt unknown
            UnauthorizedError: caller does not own the attempt
        """
        attempt = self._get_owned_attempt(db, attempt_id, candidate_email)
        return to_detailed_attempt_response(attempt)

    def get_all_attempts(self, db: Session) -> List[AdminAttemptResponse]:
        """Evaluated attempts across all candidates"""
        attempts = db.query(QuizAttempt).filter(
            QuizAttempt.status == AttemptStatus.EVALUATED
        ).order_by(QuizAttempt.id).all()
        return [to_admin_attempt_response(a) for a in attempts]


# Global instance
attempt_service = AttemptService()
