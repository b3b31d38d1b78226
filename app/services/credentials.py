"""
Password setup links for accounts created by an administrator.

Per-account states: no token → token issued → consumed | expired.

Issuing replaces the outstanding (token, expiry) pair in a single assignment
and reports the discarded token, so only the most recently sent link is
ever valid. Validation needs both the exact token and the account email.
"""
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
from urllib.parse import quote

from sqlalchemy.orm import Session

from app.auth.security import hash_password
from app.auth.session import AuthEvent, SessionContext
from app.config import settings
from app.errors import InvalidOrExpiredLink
from app.integrations import emailjs
from app.models.user import User
from app.services.subscription import ensure_utc, utcnow

logger = logging.getLogger(__name__)

SETUP_EMAIL_SUBJECT = "Configure sua senha - Conta criada com sucesso"
SETUP_EMAIL_MESSAGE = (
    "Olá {name}, sua conta foi criada! "
    "Clique no link abaixo para definir sua senha e acessar sua conta."
)

# Sub-delimiters browsers leave unescaped in a URI component
URI_COMPONENT_SAFE = "!'()*"


@dataclass(frozen=True)
class TokenIssue:
    token: str
    expires_at: datetime
    discarded_token: Optional[str] = None

    @property
    def replaced_previous(self) -> bool:
        return self.discarded_token is not None


def generate_setup_token() -> str:
    """256 random bits, hex encoded."""
    return secrets.token_hex(32)


def issue_setup_token(user: User, now: Optional[datetime] = None) -> TokenIssue:
    """Replace the user's setup token with a fresh one valid for SETUP_TOKEN_TTL_DAYS."""
    now = ensure_utc(now) if now else utcnow()
    discarded = user.password_setup_token
    token = generate_setup_token()
    expires_at = now + timedelta(days=settings.setup_token_ttl_days)

    user.password_setup_token, user.password_setup_expires = token, expires_at

    if discarded:
        logger.info("Replaced outstanding setup token for user %s", user.id)
    return TokenIssue(token=token, expires_at=expires_at, discarded_token=discarded)


def has_valid_setup_token(user: User, now: Optional[datetime] = None) -> bool:
    if not user.password_setup_token or not user.password_setup_expires:
        return False
    now = ensure_utc(now) if now else utcnow()
    return ensure_utc(user.password_setup_expires) > now


def build_setup_link(token: str, email: str, origin: Optional[str] = None) -> str:
    """<origin>/login?setup=<token>&email=<urlencoded-email>"""
    origin = (origin or settings.app_origin).rstrip("/")
    return f"{origin}/login?setup={token}&email={quote(email, safe=URI_COMPONENT_SAFE)}"


def send_setup_email(user: User, token: str) -> bool:
    """Email the setup link. Returns whether the provider accepted the message."""
    variables = {
        "to_name": user.name,
        "setup_link": build_setup_link(token, user.email),
        "message": SETUP_EMAIL_MESSAGE.format(name=user.name),
        "subject": SETUP_EMAIL_SUBJECT,
    }
    sent = emailjs.send_email(user.email, variables)
    if not sent:
        logger.error("Setup email to %s was not sent", user.email)
    return sent


def find_user_for_setup(db: Session, token: str, email: str) -> Optional[User]:
    return (
        db.query(User)
        .filter(
            User.password_setup_token == token,
            User.email == email.strip().lower(),
        )
        .first()
    )


def validate_setup_token(db: Session, token: str, email: str, now: Optional[datetime] = None) -> User:
    """
    Resolve a setup link to its account.

    Raises InvalidOrExpiredLink without telling apart a wrong token, a wrong
    email or an expired link.
    """
    if not token or not email:
        raise InvalidOrExpiredLink()

    user = find_user_for_setup(db, token, email)
    if user is None:
        logger.info("Setup link lookup failed for %s", email)
        raise InvalidOrExpiredLink()

    now = ensure_utc(now) if now else utcnow()
    expires_at = ensure_utc(user.password_setup_expires)
    if expires_at is None or expires_at <= now:
        logger.info("Expired setup link used for user %s", user.id)
        raise InvalidOrExpiredLink()

    return user


def consume_setup_token(
    db: Session,
    user: User,
    password: str,
    session: Optional[SessionContext] = None,
) -> User:
    """
    Set the account password and burn the setup link.

    The token columns are only cleared after the credential exists, so a
    failure here leaves the link usable until it expires.
    """
    password_hash = hash_password(password)

    user.password_hash = password_hash
    user.password_setup_token = None
    user.password_setup_expires = None

    if session is not None:
        session.publish(AuthEvent.SIGNED_IN, user, db)

    logger.info("Password setup completed for user %s", user.id)
    return user
