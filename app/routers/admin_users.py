"""
Subscriber account management - admin only.

Create issues a setup link and emails it; pause/extend move the access window.
"""
import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.models.user import User, UserRole
from app.schemas.admin_users import (
    UserCreate,
    UserUpdate,
    ExtendRequest,
    AdminUserOut,
    UserCreatedOut,
    SetupEmailOut,
)
from app.schemas.subscription import SubscriptionOut
from app.auth.dependencies import require_role
from app.services import subscription
from app.services.credentials import issue_setup_token, send_setup_email, has_valid_setup_token
from app.services.filters import filter_items

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/users", tags=["Admin Users"])

admin_only = require_role(UserRole.ADMIN)


def to_admin_out(user: User, now: Optional[datetime] = None) -> AdminUserOut:
    now = now or subscription.utcnow()
    state = subscription.evaluate_user(user, now)
    return AdminUserOut(
        id=user.id,
        name=user.name,
        email=user.email,
        phone=user.phone,
        role=user.role.value,
        created_at=user.created_at,
        expires_at=user.expires_at,
        previous_expires_at=user.previous_expires_at,
        paused=bool(user.paused),
        has_valid_setup_token=has_valid_setup_token(user, now),
        has_password=bool(user.password_hash),
        subscription=SubscriptionOut.from_state(state, user),
    )


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def _ensure_email_free(db: Session, email: str, exclude_id: Optional[int] = None) -> None:
    query = db.query(User).filter(User.email == email)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    if query.first():
        raise HTTPException(status_code=400, detail="Email already registered")


@router.get("", response_model=List[AdminUserOut])
def list_users(
    search: Optional[str] = Query(None, description="Search by name, email or phone"),
    status_filter: Optional[subscription.SubscriptionStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    _: None = Depends(admin_only),
):
    users = db.query(User).order_by(User.created_at.desc()).all()
    users = filter_items(users, search=search, search_fields=("name", "email", "phone"))

    now = subscription.utcnow()
    result = [to_admin_out(u, now) for u in users]
    if status_filter is not None:
        result = [u for u in result if u.subscription.status == status_filter]
    return result


@router.post("", response_model=UserCreatedOut, status_code=status.HTTP_201_CREATED)
def create_user(
    data: UserCreate,
    db: Session = Depends(get_db),
    _: None = Depends(admin_only),
):
    """Create a member with a default access window and email the setup link."""
    email = data.email.lower()
    _ensure_email_free(db, email)

    now = subscription.utcnow()
    user = User(
        name=data.name.strip(),
        email=email,
        phone=data.phone.strip(),
        role=UserRole.MEMBER,
        expires_at=subscription.add_months(now, settings.default_subscription_months),
        paused=False,
    )
    issue = issue_setup_token(user, now)
    db.add(user)
    db.commit()
    db.refresh(user)

    email_sent = send_setup_email(user, issue.token)
    logger.info("Created user %s (%s), setup email sent=%s", user.id, user.email, email_sent)

    return UserCreatedOut(user=to_admin_out(user, now), email_sent=email_sent)


@router.patch("/{user_id}", response_model=AdminUserOut)
def update_user(
    user_id: int,
    data: UserUpdate,
    db: Session = Depends(get_db),
    _: None = Depends(admin_only),
):
    user = _get_user_or_404(db, user_id)

    if data.email is not None:
        email = data.email.lower()
        _ensure_email_free(db, email, exclude_id=user.id)
        user.email = email
    if data.name is not None:
        user.name = data.name.strip()
    if data.phone is not None:
        user.phone = data.phone.strip()

    db.commit()
    db.refresh(user)
    return to_admin_out(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    _: None = Depends(admin_only),
):
    user = _get_user_or_404(db, user_id)
    db.delete(user)
    db.commit()
    logger.info("Deleted user %s", user_id)


@router.post("/{user_id}/setup-email", response_model=SetupEmailOut)
def resend_setup_email(
    user_id: int,
    db: Session = Depends(get_db),
    _: None = Depends(admin_only),
):
    """Issue a fresh setup link, invalidating any previously sent one."""
    user = _get_user_or_404(db, user_id)
    issue = issue_setup_token(user)
    db.commit()

    email_sent = send_setup_email(user, issue.token)
    return SetupEmailOut(
        email_sent=email_sent,
        setup_expires_at=issue.expires_at,
        replaced_previous=issue.replaced_previous,
    )


@router.post("/{user_id}/pause", response_model=AdminUserOut)
def toggle_pause(
    user_id: int,
    db: Session = Depends(get_db),
    _: None = Depends(admin_only),
):
    user = _get_user_or_404(db, user_id)
    subscription.toggle_pause(user)
    db.commit()
    db.refresh(user)
    return to_admin_out(user)


@router.post("/{user_id}/extend", response_model=AdminUserOut)
def extend_subscription(
    user_id: int,
    data: ExtendRequest,
    db: Session = Depends(get_db),
    _: None = Depends(admin_only),
):
    user = _get_user_or_404(db, user_id)
    subscription.extend_subscription(user, data.months)
    db.commit()
    db.refresh(user)
    return to_admin_out(user)
