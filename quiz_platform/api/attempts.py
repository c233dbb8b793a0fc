"""
Quiz attempt API endpoints
"""
from datetime import datetime
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Callable, List, Union
import logging

from quiz_platform.api.deps import get_current_user, get_clock
from quiz_platform.database import get_db
from quiz_platform.models import User
from quiz_platform.schemas.attempt import (
    SubmitQuizRequest,
    AttemptResponse,
    DetailedAttemptResponse,
    AdminAttemptResponse,
)
from quiz_platform.schemas.quiz import CandidateQuizResponse
from quiz_platform.services.attempt_service import attempt_service

router = APIRouter(prefix="/api", tags=["attempts"])
logger = logging.getLogger(__name__)


@router.post("/quizzes/{quiz_id}/start", response_model=AttemptResponse, status_code=201)
async def start_quiz(
    quiz_id: int,
    current_user: User = Depends(get_current_user),
    clock: Callable[[], datetime] = Depends(get_clock),
    db: Session = Depends(get_db),
):
    """Begin a new attempt; total points are fixed at this moment"""
    return attempt_service.start_quiz(db, quiz_id, current_user.email, now=clock())


@router.get("/quizzes/{quiz_id}/attempt-view", response_model=CandidateQuizResponse)
async def get_quiz_for_attempt(
    quiz_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Quiz questions for answering (correct answers hidden)"""
    return attempt_service.get_quiz_for_attempt(db, quiz_id)


@router.post("/attempts/submit", response_model=AttemptResponse)
async def submit_quiz(
    submission: SubmitQuizRequest,
    current_user: User = Depends(get_current_user),
    clock: Callable[[], datetime] = Depends(get_clock),
    db: Session = Depends(get_db),
):
    """
    Submit answers and get the evaluated attempt

    Scoring:
    - MULTIPLE_CHOICE / TRUE_FALSE: full points for a correct option
    - SHORT_ANSWER: stored for review, 0 points

    Late submissions are scored normally and flagged with exceeded_time_limit.
    """
    logger.info(f"Submitting attempt {submission.attempt_id} for {current_user.email}")
    return attempt_service.submit_quiz(db, submission, current_user.email, now=clock())


@router.get("/attempts", response_model=Union[List[AdminAttemptResponse], List[AttemptResponse]])
async def list_attempts(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    List attempts

    - ADMIN: evaluated attempts of every candidate
    - CANDIDATE: own attempts
    """
    if current_user.is_admin:
        return attempt_service.get_all_attempts(db)
    return attempt_service.get_my_attempts(db, current_user.email)


@router.get("/attempts/{attempt_id}", response_model=DetailedAttemptResponse)
async def get_attempt_result(
    attempt_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Attempt detail with per-answer breakdown (owner only)"""
    return attempt_service.get_attempt_result(db, attempt_id, current_user.email)
