"""
Quiz scoring service
Choice questions (MULTIPLE_CHOICE, TRUE_FALSE): exact option match
Short answer: stored verbatim, not scored automatically
"""
import logging
from typing import List

from sqlalchemy.orm import Session

from quiz_platform.exceptions import NotFoundError, DomainValidationError
from quiz_platform.models import Question, QuizAttempt, Answer
from quiz_platform.schemas.attempt import AnswerRequest

logger = logging.getLogger(__name__)


class ScoringService:
    """
    Turns submitted answers into Answer records on an attempt

    A selected option earns the question's full point value when its
    correctness flag is set, nothing otherwise. Free text earns nothing and
    keeps its correctness unset for later review.
    """

    def score_answers(
        self,
        db: Session,
        attempt: QuizAttempt,
        answers: List[AnswerRequest]
    ) -> int:
        """
        Attach one Answer per submitted answer to the attempt

        Args:
            db: Database session (caller owns the transaction)
            attempt: In-progress attempt being submitted
            answers: Submitted answers

        Returns:
            Total points earned

        Raises:
            NotFoundError: unknown question, question outside the attempt's
                quiz, or option not belonging to the question
            DomainValidationError: a question is answered more than once
        """
        total_score = 0
        answered = set()

        for submitted in answers:
            if submitted.question_id in answered:
                raise DomainValidationError(
                    "answers", f"question {submitted.question_id} is answered more than once"
                )
            answered.add(submitted.question_id)

            question = self._get_question(db, attempt, submitted.question_id)
            answer = Answer(question=question, points_earned=0)

            if submitted.selected_option_id is not None:
                total_score += self._grade_choice(question, submitted.selected_option_id, answer)

            if submitted.text_answer is not None:
                # Short answers wait for manual review
                answer.text_answer = submitted.text_answer

            attempt.answers.append(answer)

        logger.debug(f"Attempt {attempt.id}: {len(answers)} answer(s) scored, {total_score} point(s)")
        return total_score

    def _get_question(self, db: Session, attempt: QuizAttempt, question_id: int) -> Question:
        question = db.query(Question).filter(Question.id == question_id).first()
        if not question or question.quiz_id != attempt.quiz_id:
            raise NotFoundError("Question", question_id)
        return question

    def _grade_choice(self, question: Question, option_id: int, answer: Answer) -> int:
        """Record the selection on the answer and return the points it earns"""
        option = next((o for o in question.options if o.id == option_id), None)
        if option is None:
            raise NotFoundError("Option", option_id)

        answer.selected_option = option
        answer.is_correct = bool(option.is_correct)
        if answer.is_correct:
            answer.points_earned = question.points
            return question.points
        return 0


# Global instance
scoring_service = ScoringService()
