"""Tests for quiz authoring: create, update, delete and editability guards."""

import copy

import pytest

from quiz_platform.exceptions import NotFoundError, StateConflictError
from quiz_platform.models import Quiz, Question, Option
from quiz_platform.schemas.quiz import QuizRequest
from quiz_platform.services.attempt_service import attempt_service
from quiz_platform.services.quiz_service import quiz_service

from tests.conftest import START_TIME, quiz_payload


def _request_from_view(view, **overrides):
    """Echo a stored quiz back as an update request, ids included"""
    payload = {
        "title": view.title,
        "description": view.description,
        "duration": view.duration,
        "is_active": view.is_active,
        "questions": [
            {
                "id": q.id,
                "question_text": q.question_text,
                "type": q.type,
                "points": q.points,
                "options": [
                    {"id": o.id, "option_text": o.option_text, "is_correct": o.is_correct}
                    for o in q.options
                ],
            }
            for q in view.questions
        ],
    }
    payload.update(overrides)
    return QuizRequest(**payload)


def test_create_quiz_builds_full_graph(make_quiz, admin):
    quiz = make_quiz()

    assert quiz.title == "Python Basics"
    assert quiz.is_active is True
    assert quiz.created_by == admin.name
    assert [q.points for q in quiz.questions] == [3, 2, 1]
    assert [len(q.options) for q in quiz.questions] == [3, 2, 0]
    assert quiz.questions[0].options[1].is_correct is True


def test_create_quiz_respects_explicit_inactive(make_quiz):
    assert make_quiz(is_active=False).is_active is False


def test_create_quiz_unknown_creator(db):
    with pytest.raises(NotFoundError):
        quiz_service.create_quiz(db, QuizRequest(**quiz_payload()), "ghost@example.com")
    assert db.query(Quiz).count() == 0


def test_update_replaces_structure_without_attempts(db, make_quiz):
    quiz = make_quiz()
    old_question_ids = [q.id for q in quiz.questions]

    request = QuizRequest(**quiz_payload(
        title="Python Basics v2",
        questions=[{
            "question_text": "2 + 2 = 4",
            "type": "TRUE_FALSE",
            "points": 5,
            "options": [
                {"option_text": "True", "is_correct": True},
                {"option_text": "False", "is_correct": False},
            ],
        }],
    ))
    updated = quiz_service.update_quiz(db, quiz.id, request)

    assert updated.title == "Python Basics v2"
    assert len(updated.questions) == 1
    assert updated.questions[0].points == 5
    assert updated.questions[0].id not in old_question_ids
    assert [q.question_text for q in db.query(Question).all()] == ["2 + 2 = 4"]
    assert db.query(Question).filter(Question.id.in_(old_question_ids)).count() == 0
    assert db.query(Option).count() == 2


def test_update_without_structural_change_keeps_child_ids(db, make_quiz):
    quiz = make_quiz()
    question_ids = [q.id for q in quiz.questions]

    updated = quiz_service.update_quiz(db, quiz.id, _request_from_view(quiz, title="Renamed", duration=20))

    assert updated.title == "Renamed"
    assert updated.duration == 20
    assert [q.id for q in updated.questions] == question_ids


def test_metadata_update_allowed_with_attempts(db, make_quiz, candidate):
    quiz = make_quiz()
    attempt_service.start_quiz(db, quiz.id, candidate.email, now=START_TIME)

    updated = quiz_service.update_quiz(
        db, quiz.id, _request_from_view(quiz, title="Retitled", is_active=False)
    )

    assert updated.title == "Retitled"
    assert updated.is_active is False
    assert [q.id for q in updated.questions] == [q.id for q in quiz.questions]


@pytest.mark.parametrize("mutate", [
    lambda qs: qs.pop(),
    lambda qs: qs[0].update(question_text="Changed text"),
    lambda qs: qs[0].update(points=9),
    lambda qs: qs[1].update(type="MULTIPLE_CHOICE"),
    lambda qs: qs[0].update(id=None),
    lambda qs: qs[0]["options"].pop(),
    lambda qs: qs[0]["options"][0].update(is_correct=True),
    lambda qs: qs[0]["options"][0].update(option_text="function"),
    lambda qs: qs[0]["options"][0].update(id=999999),
    lambda qs: qs.__setitem__(1, copy.deepcopy(qs[0])),
    lambda qs: qs[0]["options"].__setitem__(1, dict(qs[0]["options"][0])),
])
def test_structural_change_blocked_with_attempts(db, make_quiz, candidate, mutate):
    quiz = make_quiz()
    attempt_service.start_quiz(db, quiz.id, candidate.email, now=START_TIME)

    request = _request_from_view(quiz, title="Should not stick")
    questions = [q.model_dump() for q in request.questions]
    mutate(questions)
    request = QuizRequest(**{**request.model_dump(), "questions": questions})

    with pytest.raises(StateConflictError) as exc_info:
        quiz_service.update_quiz(db, quiz.id, request)

    assert exc_info.value.attempt_count == 1
    assert "1 time(s)" in exc_info.value.message

    db.expire_all()
    stored = db.get(Quiz, quiz.id)
    assert stored.title == "Python Basics"
    assert [q.id for q in stored.questions] == [q.id for q in quiz.questions]


def test_update_missing_quiz(db):
    with pytest.raises(NotFoundError):
        quiz_service.update_quiz(db, 404, QuizRequest(**quiz_payload()))


def test_delete_quiz_cascades(db, make_quiz):
    quiz = make_quiz()

    result = quiz_service.delete_quiz(db, quiz.id)

    assert result.quiz_id == quiz.id
    assert db.query(Quiz).count() == 0
    assert db.query(Question).count() == 0
    assert db.query(Option).count() == 0


def test_delete_blocked_with_attempts(db, make_quiz, candidate):
    quiz = make_quiz()
    attempt_service.start_quiz(db, quiz.id, candidate.email, now=START_TIME)
    attempt_service.start_quiz(db, quiz.id, candidate.email, now=START_TIME)

    with pytest.raises(StateConflictError) as exc_info:
        quiz_service.delete_quiz(db, quiz.id)

    assert exc_info.value.attempt_count == 2
    assert "deactivate" in exc_info.value.message
    assert db.query(Quiz).count() == 1


def test_delete_missing_quiz(db):
    with pytest.raises(NotFoundError):
        quiz_service.delete_quiz(db, 12)


def test_editable_and_deletable_follow_attempt_count(db, make_quiz, candidate):
    quiz = make_quiz()
    assert quiz_service.is_quiz_editable(db, quiz.id) is True
    assert quiz_service.is_quiz_deletable(db, quiz.id) is True

    attempt_service.start_quiz(db, quiz.id, candidate.email, now=START_TIME)

    assert quiz_service.is_quiz_editable(db, quiz.id) is False
    assert quiz_service.is_quiz_deletable(db, quiz.id) is False


def test_editable_missing_quiz(db):
    with pytest.raises(NotFoundError):
        quiz_service.is_quiz_editable(db, 1)
    with pytest.raises(NotFoundError):
        quiz_service.is_quiz_deletable(db, 1)


def test_list_quizzes_by_role(db, make_quiz):
    make_quiz(title="Active")
    make_quiz(title="Hidden", is_active=False)

    assert [q.title for q in quiz_service.list_quizzes(db, as_admin=True)] == ["Active", "Hidden"]
    summaries = quiz_service.list_quizzes(db, as_admin=False)
    assert [q.title for q in summaries] == ["Active"]
    assert summaries[0].total_questions == 3


def test_repeated_question_id_rebuilds_structure_without_attempts(db, make_quiz):
    quiz = make_quiz()
    request = _request_from_view(quiz)
    questions = [q.model_dump() for q in request.questions]
    questions[1] = copy.deepcopy(questions[0])
    request = QuizRequest(**{**request.model_dump(), "questions": questions})

    updated = quiz_service.update_quiz(db, quiz.id, request)

    texts = [q.question_text for q in updated.questions]
    assert texts == [quiz.questions[0].question_text, quiz.questions[0].question_text, quiz.questions[2].question_text]
    assert not {q.id for q in updated.questions} & {q.id for q in quiz.questions}
