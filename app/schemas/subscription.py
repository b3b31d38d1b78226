from pydantic import BaseModel
from datetime import datetime
from typing import Optional

from app.services.subscription import SubscriptionState, SubscriptionStatus


class SubscriptionOut(BaseModel):
    status: SubscriptionStatus
    is_active: bool
    label: str
    days_remaining: Optional[int] = None
    expired_while_paused: bool = False
    message: Optional[str] = None
    expires_at: Optional[datetime] = None
    previous_expires_at: Optional[datetime] = None
    paused: bool = False

    @classmethod
    def from_state(cls, state: SubscriptionState, user) -> "SubscriptionOut":
        return cls(
            status=state.status,
            is_active=state.is_active,
            label=state.label,
            days_remaining=state.days_remaining,
            expired_while_paused=state.expired_while_paused,
            message=state.message,
            expires_at=user.expires_at,
            previous_expires_at=user.previous_expires_at,
            paused=bool(user.paused),
        )
