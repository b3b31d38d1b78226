"""
Login and content-access tracking plus the dashboard aggregates built on them.

Tracking is best-effort: it must never block a sign-in or a page view.
"""
import logging
from typing import List, Optional, Tuple
from datetime import datetime

from sqlalchemy import func, desc
from sqlalchemy.orm import Session

from app.auth.session import AuthEvent
from app.models.activity import UserLogin, ContentAccess
from app.models.offer import Offer
from app.models.user import User

logger = logging.getLogger(__name__)


def record_login(db: Session, user: User) -> Optional[UserLogin]:
    """Store a login event in a savepoint. Returns None when the insert failed."""
    login = UserLogin(user_id=user.id)
    try:
        with db.begin_nested():
            db.add(login)
    except Exception as e:
        logger.error("Failed to record login of user %s: %s", user.id, e)
        return None
    return login


def record_content_access(db: Session, user: User, offer: Offer) -> None:
    try:
        with db.begin_nested():
            db.add(ContentAccess(user_id=user.id, content_id=offer.id))
    except Exception as e:
        logger.error("Failed to track access of content %s by user %s: %s", offer.id, user.id, e)


def track_logins(event: AuthEvent, user: User, db: Session) -> None:
    """Session listener that stores a login event on every sign-in."""
    if event == AuthEvent.SIGNED_IN:
        record_login(db, user)


def last_logins(db: Session) -> List[Tuple[User, datetime]]:
    """Each user that ever logged in, with their most recent login, newest first."""
    last_login = func.max(UserLogin.logged_in_at).label("last_login")
    return (
        db.query(User, last_login)
        .join(UserLogin, UserLogin.user_id == User.id)
        .group_by(User.id)
        .order_by(desc(last_login))
        .all()
    )


def content_ranking(db: Session) -> List[Tuple[Offer, int, datetime]]:
    """Accessed offers with access count and last access, most accessed first."""
    access_count = func.count(ContentAccess.id).label("access_count")
    last_accessed = func.max(ContentAccess.accessed_at).label("last_accessed")
    return (
        db.query(Offer, access_count, last_accessed)
        .join(ContentAccess, ContentAccess.content_id == Offer.id)
        .group_by(Offer.id)
        .order_by(desc(access_count), desc(last_accessed))
        .all()
    )
