"""
Role-shaped views of the quiz and attempt entities

Admins see option correctness; candidates taking a quiz never do.
"""
from typing import List

from quiz_platform.models import Quiz, Question, Option, QuizAttempt, Answer
from quiz_platform.schemas.quiz import (
    QuizResponse,
    CandidateQuizResponse,
    QuestionResponse,
    CandidateQuestionResponse,
    OptionResponse,
    CandidateOptionResponse,
    QuizSummaryResponse,
)
from quiz_platform.schemas.attempt import (
    AttemptResponse,
    DetailedAttemptResponse,
    CandidateAnswerResponse,
    AdminAttemptResponse,
)


def _option_view(option: Option) -> OptionResponse:
    return OptionResponse(id=option.id, option_text=option.option_text, is_correct=option.is_correct)


def _question_view(question: Question) -> QuestionResponse:
    return QuestionResponse(
        id=question.id,
        question_text=question.question_text,
        type=question.type,
        points=question.points,
        options=[_option_view(o) for o in question.options],
    )


def _candidate_question_view(question: Question) -> CandidateQuestionResponse:
    return CandidateQuestionResponse(
        id=question.id,
        question_text=question.question_text,
        type=question.type,
        points=question.points,
        options=[
            CandidateOptionResponse(id=o.id, option_text=o.option_text)
            for o in question.options
        ],
    )


def _creator_name(quiz: Quiz) -> str:
    return quiz.creator.name if quiz.creator else ""


def to_admin_view(quiz: Quiz) -> QuizResponse:
    """Full quiz detail including option correctness"""
    return QuizResponse(
        id=quiz.id,
        title=quiz.title,
        description=quiz.description,
        duration=quiz.duration,
        is_active=quiz.is_active,
        created_by=_creator_name(quiz),
        created_at=quiz.created_at,
        updated_at=quiz.updated_at,
        questions=[_question_view(q) for q in quiz.questions],
    )


def to_candidate_view(quiz: Quiz) -> CandidateQuizResponse:
    """Quiz detail with every correctness flag withheld"""
    return CandidateQuizResponse(
        id=quiz.id,
        title=quiz.title,
        description=quiz.description,
        duration=quiz.duration,
        is_active=quiz.is_active,
        created_by=_creator_name(quiz),
        created_at=quiz.created_at,
        updated_at=quiz.updated_at,
        questions=[_candidate_question_view(q) for q in quiz.questions],
    )


def to_summary(quiz: Quiz) -> QuizSummaryResponse:
    return QuizSummaryResponse(
        id=quiz.id,
        title=quiz.title,
        description=quiz.description,
        duration=quiz.duration,
        is_active=quiz.is_active,
        created_by=_creator_name(quiz),
        created_at=quiz.created_at,
        total_questions=len(quiz.questions),
    )


def to_attempt_response(attempt: QuizAttempt) -> AttemptResponse:
    return AttemptResponse(**_attempt_fields(attempt))


def _attempt_fields(attempt: QuizAttempt) -> dict:
    return {
        "id": attempt.id,
        "quiz_id": attempt.quiz_id,
        "quiz_title": attempt.quiz.title,
        "started_at": attempt.started_at,
        "submitted_at": attempt.submitted_at,
        "score": attempt.score,
        "total_points": attempt.total_points,
        "status": attempt.status,
        "time_taken_seconds": attempt.time_taken_seconds,
        "exceeded_time_limit": attempt.exceeded_time_limit,
    }


def _answer_view(answer: Answer) -> CandidateAnswerResponse:
    selected = _option_view(answer.selected_option) if answer.selected_option else None
    return CandidateAnswerResponse(
        id=answer.id,
        question=_question_view(answer.question),
        selected_option=selected,
        text_answer=answer.text_answer,
        is_correct=answer.is_correct,
        points_earned=answer.points_earned or 0,
    )


def to_detailed_attempt_response(attempt: QuizAttempt) -> DetailedAttemptResponse:
    """
    Attempt with quiz and answer breakdown

    Correctness is only revealed once the attempt has left IN_PROGRESS.
    """
    if attempt.is_in_progress:
        quiz_view = to_candidate_view(attempt.quiz)
        answers: List[CandidateAnswerResponse] = []
    else:
        quiz_view = to_admin_view(attempt.quiz)
        answers = [_answer_view(a) for a in attempt.answers]

    return DetailedAttemptResponse(**_attempt_fields(attempt), quiz=quiz_view, answers=answers)


def to_admin_attempt_response(attempt: QuizAttempt) -> AdminAttemptResponse:
    return AdminAttemptResponse(
        id=attempt.id,
        quiz_id=attempt.quiz_id,
        quiz_title=attempt.quiz.title,
        candidate_name=attempt.user.name,
        candidate_email=attempt.user.email,
        started_at=attempt.started_at,
        submitted_at=attempt.submitted_at,
        score=attempt.score,
        total_points=attempt.total_points,
        status=attempt.status,
        exceeded_time_limit=attempt.exceeded_time_limit,
    )
