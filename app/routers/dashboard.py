"""
Admin dashboard: subscription counts, last login per user and the offers
members open most.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User, UserRole
from app.schemas.dashboard import DashboardOut, SubscriptionCounts, UserLoginOut, ContentAccessOut
from app.auth.dependencies import require_role
from app.services.activity import last_logins, content_ranking
from app.services.subscription import evaluate_user, summarize, utcnow

router = APIRouter(prefix="/admin/dashboard", tags=["Admin Dashboard"])


@router.get("", response_model=DashboardOut)
def get_dashboard(
    db: Session = Depends(get_db),
    _: User = Depends(require_role(UserRole.ADMIN)),
):
    now = utcnow()

    users = db.query(User).all()
    counts = summarize(users, now)

    logins = []
    for user, last_login in last_logins(db):
        state = evaluate_user(user, now)
        logins.append(UserLoginOut(
            user_id=user.id,
            name=user.name or "",
            email=user.email,
            last_login=last_login,
            status=state.status.value,
            status_label=state.label,
        ))

    accesses = [
        ContentAccessOut(
            content_id=offer.id,
            title=offer.title,
            thumbnail=offer.thumbnail,
            access_count=count,
            last_accessed=last_accessed,
        )
        for offer, count, last_accessed in content_ranking(db)
    ]

    return DashboardOut(
        stats=SubscriptionCounts(
            total_users=len(users),
            **{status.value: count for status, count in counts.items()},
        ),
        user_logins=logins,
        content_access=accesses,
    )
