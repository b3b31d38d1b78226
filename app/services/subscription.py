"""
Subscription state evaluation and the admin actions that move the access window.

Decision order (first match wins):
    paused                      → PAUSED
    expires_at is null          → NO_SUBSCRIPTION
    expires_at in the future    → ACTIVE
    otherwise                   → EXPIRED

Only ACTIVE grants access. State is recomputed on every gated request,
so a pause or an expiry takes effect on the next page load.
"""
import calendar
import enum
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Iterable, Optional

from app.models.user import User

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60

# Restricted-access notices shown by the member area
MSG_PAUSED = "Sua subscrição está pausada. Entre em contato com o suporte para reativar."
MSG_EXPIRED = "Sua subscrição expirou. Renove para continuar acessando o conteúdo."
MSG_NO_SUBSCRIPTION = "Você não possui uma subscrição ativa. Entre em contato com o suporte."


class SubscriptionStatus(str, enum.Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    EXPIRED = "expired"
    NO_SUBSCRIPTION = "no_subscription"


@dataclass(frozen=True)
class SubscriptionState:
    status: SubscriptionStatus
    days_remaining: Optional[int] = None
    expired_while_paused: bool = False

    @property
    def is_active(self) -> bool:
        return self.status == SubscriptionStatus.ACTIVE

    @property
    def label(self) -> str:
        if self.status == SubscriptionStatus.PAUSED:
            if self.expired_while_paused:
                return "Pausado (Expirado)"
            if self.days_remaining is not None:
                return f"Pausado ({self.days_remaining} dias restantes)"
            return "Pausado"
        if self.status == SubscriptionStatus.ACTIVE:
            return f"Ativo ({self.days_remaining} dias restantes)"
        if self.status == SubscriptionStatus.EXPIRED:
            return "Expirado"
        return "Sem Assinatura"

    @property
    def message(self) -> Optional[str]:
        """Notice shown instead of gated content, None when access is granted."""
        if self.status == SubscriptionStatus.PAUSED:
            return MSG_PAUSED
        if self.status == SubscriptionStatus.EXPIRED:
            return MSG_EXPIRED
        if self.status == SubscriptionStatus.NO_SUBSCRIPTION:
            return MSG_NO_SUBSCRIPTION
        return None


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def days_until(moment: datetime, now: datetime) -> int:
    """Whole days from now until moment, rounded up."""
    remaining = (ensure_utc(moment) - ensure_utc(now)).total_seconds()
    return math.ceil(remaining / SECONDS_PER_DAY)


def evaluate(
    expires_at: Optional[datetime],
    previous_expires_at: Optional[datetime],
    paused: bool,
    now: Optional[datetime] = None,
) -> SubscriptionState:
    """Compute the subscription status from the raw account fields."""
    now = ensure_utc(now) if now else utcnow()
    expires_at = ensure_utc(expires_at)
    previous_expires_at = ensure_utc(previous_expires_at)

    if paused:
        if previous_expires_at is None:
            return SubscriptionState(SubscriptionStatus.PAUSED)
        days = days_until(previous_expires_at, now)
        if days <= 0:
            return SubscriptionState(SubscriptionStatus.PAUSED, expired_while_paused=True)
        return SubscriptionState(SubscriptionStatus.PAUSED, days_remaining=days)

    if expires_at is None:
        return SubscriptionState(SubscriptionStatus.NO_SUBSCRIPTION)

    if expires_at > now:
        return SubscriptionState(SubscriptionStatus.ACTIVE, days_remaining=days_until(expires_at, now))

    return SubscriptionState(SubscriptionStatus.EXPIRED)


def evaluate_user(user: User, now: Optional[datetime] = None) -> SubscriptionState:
    return evaluate(user.expires_at, user.previous_expires_at, bool(user.paused), now)


def add_months(moment: datetime, months: int) -> datetime:
    """Add calendar months, clamping the day to the end of the target month."""
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def extend_subscription(user: User, months: int, now: Optional[datetime] = None) -> datetime:
    """
    Extend the access window by N months and reactivate the account.

    An expired (or missing) window restarts from now; a live one is extended
    from its current end so no paid time is lost.
    """
    if months < 1:
        raise ValueError("Extension must be at least one month")

    now = ensure_utc(now) if now else utcnow()
    current = ensure_utc(user.expires_at)
    base = current if current is not None and current > now else now

    if user.paused:
        # The dormant window is superseded by the new one
        user.previous_expires_at = None
    user.expires_at = add_months(base, months)
    user.paused = False

    logger.info("Extended subscription of user %s by %d month(s) until %s", user.id, months, user.expires_at)
    return user.expires_at


def toggle_pause(user: User) -> bool:
    """
    Pause or resume an account. Returns the new paused flag.

    Pausing parks expires_at in previous_expires_at; resuming restores it verbatim.
    """
    if not user.paused:
        if user.expires_at is not None:
            user.previous_expires_at = user.expires_at
            user.expires_at = None
        user.paused = True
    else:
        if user.previous_expires_at is not None:
            user.expires_at = user.previous_expires_at
            user.previous_expires_at = None
        user.paused = False

    logger.info("User %s %s", user.id, "paused" if user.paused else "resumed")
    return user.paused


def summarize(users: Iterable[User], now: Optional[datetime] = None) -> Dict[SubscriptionStatus, int]:
    """Count accounts per subscription status."""
    now = ensure_utc(now) if now else utcnow()
    counts = {status: 0 for status in SubscriptionStatus}
    for user in users:
        counts[evaluate_user(user, now).status] += 1
    return counts
