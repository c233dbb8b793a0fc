"""
User model - identities resolved from the gateway header
"""
import enum

from sqlalchemy import Column, Integer, String, TIMESTAMP, Enum, func

from quiz_platform.database import Base


class UserRole(str, enum.Enum):
    ADMIN = "ADMIN"
    CANDIDATE = "CANDIDATE"


class User(Base):
    """
    Users table - quiz authors (ADMIN) and quiz takers (CANDIDATE)
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    role = Column(Enum(UserRole, name="user_role"), nullable=False, default=UserRole.CANDIDATE)
    created_at = Column(TIMESTAMP, server_default=func.now())

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
