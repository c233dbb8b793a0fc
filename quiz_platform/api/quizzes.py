"""
Quiz authoring and browsing API endpoints
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Union
import logging

from quiz_platform.api.deps import get_current_user, require_admin
from quiz_platform.database import get_db
from quiz_platform.models import User
from quiz_platform.schemas.quiz import (
    QuizRequest,
    QuizResponse,
    CandidateQuizResponse,
    QuizSummaryResponse,
    DeleteResponse,
)
from quiz_platform.services.quiz_service import quiz_service


router = APIRouter(prefix="/api/quizzes", tags=["quizzes"])
logger = logging.getLogger(__name__)


@router.get("", response_model=List[QuizSummaryResponse])
async def list_quizzes(
    current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    """
    List quizzes

    - ADMIN: every quiz
    - CANDIDATE: active quizzes only
    """
    return quiz_service.list_quizzes(db, as_admin=current_user.is_admin)


@router.get("/{quiz_id}", response_model=Union[QuizResponse, CandidateQuizResponse])
async def get_quiz(
    quiz_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Get a quiz

    - ADMIN: with correct answers
    - CANDIDATE: correct answers hidden
    """
    if current_user.is_admin:
        return quiz_service.get_quiz(db, quiz_id, as_admin=True)
    return quiz_service.get_quiz(db, quiz_id, as_admin=False)


@router.post("", response_model=QuizResponse, status_code=201)
async def create_quiz(
    request: QuizRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Create a quiz with its questions and options (ADMIN only)"""
    logger.info(f"Creating quiz '{request.title}' for {admin.email}")
    return quiz_service.create_quiz(db, request, admin.email)


@router.put("/{quiz_id}", response_model=QuizResponse)
async def update_quiz(
    quiz_id: int,
    request: QuizRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Update a quiz (ADMIN only)

    - Metadata always updates
    - Questions/options only change while the quiz has no attempts (409 otherwise)
    """
    return quiz_service.update_quiz(db, quiz_id, request)


@router.delete("/{quiz_id}", response_model=DeleteResponse)
async def delete_quiz(
    quiz_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Delete a quiz without attempts (ADMIN only; 409 if attempted)"""
    return quiz_service.delete_quiz(db, quiz_id)


@router.get("/{quiz_id}/editable", response_model=bool)
async def is_quiz_editable(
    quiz_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Whether the quiz structure can still change"""
    return quiz_service.is_quiz_editable(db, quiz_id)


@router.get("/{quiz_id}/deletable", response_model=bool)
async def is_quiz_deletable(
    quiz_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Whether the quiz can be permanently deleted"""
    return quiz_service.is_quiz_deletable(db, quiz_id)
