"""
Quiz authoring service

Structure (questions and options) may only change while a quiz has no
attempts. Metadata (title, description, duration, active flag) can always
change.
"""
import logging
from typing import List, Optional, Union

from sqlalchemy import func
from sqlalchemy.orm import Session

from quiz_platform.exceptions import NotFoundError, StateConflictError
from quiz_platform.models import User, Quiz, Question, Option, QuizAttempt
from quiz_platform.schemas.quiz import (
    QuizRequest,
    QuestionRequest,
    QuizResponse,
    CandidateQuizResponse,
    QuizSummaryResponse,
    DeleteResponse,
)
from quiz_platform.services.projections import to_admin_view, to_candidate_view, to_summary
from quiz_platform.utils.cache import cache_service

logger = logging.getLogger(__name__)

DEFAULT_QUESTION_POINTS = 1


def build_questions(specs: Optional[List[QuestionRequest]]) -> List[Question]:
    """Fresh Question/Option entities from a quiz request"""
    questions = []
    for q_spec in specs or []:
        question = Question(
            question_text=q_spec.question_text,
            type=q_spec.type,
            points=q_spec.points if q_spec.points is not None else DEFAULT_QUESTION_POINTS,
        )
        for o_spec in q_spec.options or []:
            question.options.append(
                Option(option_text=o_spec.option_text, is_correct=o_spec.is_correct)
            )
        questions.append(question)
    return questions


def _has_repeated_ids(specs) -> bool:
    ids = [s.id for s in specs if s.id is not None]
    return len(ids) != len(set(ids))


def has_structural_changes(quiz: Quiz, request: QuizRequest) -> bool:
    """
    Whether the requested question/option set differs from the stored one

    Questions and options are matched by id. A requested entry without an id, or
    with an id the quiz does not have, counts as a change.
    So does an id repeated within the request.
    """
    specs = request.questions or []
    if len(specs) != len(quiz.questions):
        return True

    if _has_repeated_ids(specs):
        return True

    existing = {q.id: q for q in quiz.questions}
    for q_spec in specs:
        question = existing.get(q_spec.id) if q_spec.id is not None else None
        if question is None:
            return True

        points = q_spec.points if q_spec.points is not None else DEFAULT_QUESTION_POINTS
        if (
            question.question_text != q_spec.question_text
            or question.type != q_spec.type
            or question.points != points
        ):
            return True

        option_specs = q_spec.options or []
        if len(option_specs) != len(question.options) or _has_repeated_ids(option_specs):
            return True

        options = {o.id: o for o in question.options}
        for o_spec in option_specs:
            option = options.get(o_spec.id) if o_spec.id is not None else None
            if option is None:
                return True
            if option.option_text != o_spec.option_text or option.is_correct != o_spec.is_correct:
                return True

    return False


class QuizService:
    """Create, read, update and delete quizzes"""

    def _get_quiz(self, db: Session, quiz_id: int) -> Quiz:
        quiz = db.query(Quiz).filter(Quiz.id == quiz_id).first()
        if not quiz:
            raise NotFoundError("Quiz", quiz_id)
        return quiz

    def count_attempts(self, db: Session, quiz_id: int) -> int:
        return db.query(func.count(QuizAttempt.id)).filter(
            QuizAttempt.quiz_id == quiz_id
        ).scalar() or 0

    def list_quizzes(self, db: Session, as_admin: bool) -> List[QuizSummaryResponse]:
        """All quizzes for admins, active ones for candidates"""
        query = db.query(Quiz)
        if not as_admin:
            query = query.filter(Quiz.is_active.is_(True))
        return [to_summary(quiz) for quiz in query.order_by(Quiz.id).all()]

    def get_quiz(
        self,
        db: Session,
        quiz_id: int,
        as_admin: bool
    ) -> Union[QuizResponse, CandidateQuizResponse]:
        quiz = self._get_quiz(db, quiz_id)
        return to_admin_view(quiz) if as_admin else to_candidate_view(quiz)

    def create_quiz(self, db: Session, request: QuizRequest, creator_email: str) -> QuizResponse:
        """
        Create a quiz with its questions and options in one transaction

        Raises:
            NotFoundError: creator is unknown
        """
        creator = db.query(User).filter(User.email == creator_email).first()
        if not creator:
            raise NotFoundError("User", creator_email, field="email")

        try:
            quiz = Quiz(
                title=request.title,
                description=request.description,
                duration=request.duration,
                is_active=request.is_active if request.is_active is not None else True,
                creator=creator,
            )
            quiz.questions.extend(build_questions(request.questions))

            db.add(quiz)
            db.commit()
            db.refresh(quiz)
        except Exception:
            db.rollback()
            raise

        logger.info(f"Quiz created: {quiz.id} ({len(quiz.questions)} questions) by {creator_email}")
        return to_admin_view(quiz)

    def update_quiz(self, db: Session, quiz_id: int, request: QuizRequest) -> QuizResponse:
        """
        Update quiz metadata and, when allowed, its structure

        Raises:
            NotFoundError: quiz does not exist
            StateConflictError: structure changed while attempts exist
        """
        quiz = self._get_quiz(db, quiz_id)

        try:
            quiz.title = request.title
            quiz.description = request.description
            quiz.duration = request.duration
            if request.is_active is not None:
                quiz.is_active = request.is_active

            if has_structural_changes(quiz, request):
                attempt_count = self.count_attempts(db, quiz_id)
                if attempt_count > 0:
                    logger.warning(
                        f"Blocked structural edit of quiz {quiz_id}: {attempt_count} attempt(s)"
                    )
                    raise StateConflictError(
                        f"Quiz has already been attempted {attempt_count} time(s); "
                        "questions and options can no longer be changed",
                        attempt_count=attempt_count,
                    )

                quiz.questions.clear()
                db.flush()
                quiz.questions.extend(build_questions(request.questions))
                logger.info(f"Replaced questions of quiz {quiz_id}")

            db.commit()
            db.refresh(quiz)
        except Exception:
            db.rollback()
            raise

        cache_service.invalidate_quiz(quiz_id)
        logger.info(f"Quiz updated: {quiz_id}")
        return to_admin_view(quiz)

    def delete_quiz(self, db: Session, quiz_id: int) -> DeleteResponse:
        """
        Delete a quiz and its questions/options

        Raises:
            NotFoundError: quiz does not exist
            StateConflictError: quiz has attempts
        """
        quiz = self._get_quiz(db, quiz_id)

        attempt_count = self.count_attempts(db, quiz_id)
        if attempt_count > 0:
            logger.warning(f"Blocked deletion of quiz {quiz_id}: {attempt_count} attempt(s)")
            raise StateConflictError(
                f"Quiz has {attempt_count} attempt(s) and cannot be deleted; deactivate it instead",
                attempt_count=attempt_count,
            )

        try:
            db.delete(quiz)
            db.commit()
        except Exception:
            db.rollback()
            raise

        cache_service.invalidate_quiz(quiz_id)
        logger.info(f"Quiz deleted: {quiz_id}")
        return DeleteResponse(message=f"Quiz with id {quiz_id} deleted successfully", quiz_id=quiz_id)

    def is_quiz_editable(self, db: Session, quiz_id: int) -> bool:
        self._get_quiz(db, quiz_id)
        return self.count_attempts(db, quiz_id) == 0

    def is_quiz_deletable(self, db: Session, quiz_id: int) -> bool:
        self._get_quiz(db, quiz_id)
        return self.count_attempts(db, quiz_id) == 0


# Global instance
quiz_service = QuizService()
