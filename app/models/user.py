from sqlalchemy import Column, Integer, String, DateTime, Enum, Boolean
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum

from .base import Base


class UserRole(str, enum.Enum):
    """User role enumeration"""
    ADMIN = "admin"
    MEMBER = "member"


class User(Base):
    """Subscriber account with a time-boxed access window"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(32), nullable=True)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.MEMBER)
    # Null until the setup link is consumed
    password_hash = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Access window
    expires_at = Column(DateTime(timezone=True), nullable=True)
    previous_expires_at = Column(DateTime(timezone=True), nullable=True)
    paused = Column(Boolean, nullable=False, default=False)

    # Outstanding password setup invitation (at most one)
    password_setup_token = Column(String(64), unique=True, nullable=True, index=True)
    password_setup_expires = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    logins = relationship("UserLogin", back_populates="user", cascade="all, delete-orphan")
    content_accesses = relationship("ContentAccess", back_populates="user", cascade="all, delete-orphan")
