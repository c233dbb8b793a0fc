"""
Default user seeding for fresh databases
"""
import logging

from sqlalchemy.orm import Session

from quiz_platform.models import User, UserRole

logger = logging.getLogger(__name__)

DEFAULT_USERS = [
    {"email": "admin@quizplatform.local", "name": "Admin User", "role": UserRole.ADMIN},
    {"email": "candidate@quizplatform.local", "name": "Sample Candidate", "role": UserRole.CANDIDATE},
]


def seed_default_users(db: Session) -> int:
    """Create the default admin and candidate when no users exist; returns how many were created"""
    if db.query(User).first() is not None:
        logger.info("Users present, skipping seed")
        return 0

    try:
        for data in DEFAULT_USERS:
            db.add(User(**data))
            logger.info(f"Seeding {data['role'].value} user {data['email']}")
        db.commit()
    except Exception:
        db.rollback()
        raise

    return len(DEFAULT_USERS)
