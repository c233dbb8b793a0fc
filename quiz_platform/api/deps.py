"""
Request dependencies: caller identity, role gating and clock
"""
from datetime import datetime
from typing import Callable

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from quiz_platform.config import settings
from quiz_platform.database import get_db
from quiz_platform.models import User
from quiz_platform.utils.clock import utcnow
from quiz_platform.utils.rate_limiter import rate_limiter


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """
    Resolve the caller from the identity header set by the gateway

    The resolved user is then counted against its own request limit.

    Raises:
        HTTPException: 401 when the header is missing or names no known user,
            429 when the user is over its limit
    """
    email = request.headers.get(settings.IDENTITY_HEADER)
    if not email:
        raise HTTPException(status_code=401, detail="Missing caller identity")

    user = db.query(User).filter(User.email == email).first()
    if not user:
        raise HTTPException(status_code=401, detail="Unknown caller identity")

    rate_limiter.check_caller(user.id)
    request.state.user_id = user.id
    return user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_admin:
        raise HTTPException(status_code=403, detail="Administrator role required")
    return current_user


def get_clock() -> Callable[[], datetime]:
    """Source of 'now' for start/submit; overridden in tests"""
    return utcnow
