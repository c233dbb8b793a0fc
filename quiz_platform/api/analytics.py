"""
Quiz analytics API endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging

from quiz_platform.api.deps import require_admin
from quiz_platform.database import get_db
from quiz_platform.models import User
from quiz_platform.schemas.analytics import QuizAnalytics
from quiz_platform.services.analytics_service import analytics_service

router = APIRouter(prefix="/api", tags=["analytics"])
logger = logging.getLogger(__name__)


@router.get("/quizzes/{quiz_id}/analytics", response_model=QuizAnalytics)
async def get_quiz_analytics(
    quiz_id: int,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Get score statistics for a quiz

    Returns:
    - Number of evaluated attempts
    - Average, highest and lowest score
    """
    logger.info(f"Fetching analytics for quiz {quiz_id}")
    return analytics_service.get_quiz_analytics(db, quiz_id)
