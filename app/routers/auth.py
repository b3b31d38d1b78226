from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.schemas.auth import (
    LoginRequest,
    TokenResponse,
    RefreshTokenRequest,
    SetupLinkInfo,
    PasswordSetupRequest,
)
from app.auth.security import (
    verify_password,
    check_new_password,
    create_access_token,
    create_refresh_token,
    verify_token,
)
from app.auth.dependencies import get_current_user
from app.auth.rate_limiter import rate_limiter
from app.auth.session import AuthEvent, SessionContext, get_session_context
from app.services.credentials import validate_setup_token, consume_setup_token

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _token_pair(user: User) -> TokenResponse:
    claims = {"sub": str(user.id), "role": user.role.value}
    return TokenResponse(
        access_token=create_access_token(claims),
        refresh_token=create_refresh_token(claims),
    )


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: LoginRequest,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_session_context),
):
    """Authenticate user and return JWT tokens"""
    if rate_limiter.is_blocked(credentials.email):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=f"Too many failed attempts. Please try again in {rate_limiter.window_minutes} minutes."
        )

    user = db.query(User).filter(User.email == credentials.email.lower()).first()

    if user is None or not verify_password(credentials.password, user.password_hash):
        attempts = rate_limiter.record_failed_attempt(credentials.email)
        remaining = rate_limiter.max_attempts - attempts
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"X-Remaining-Attempts": str(max(0, remaining))}
        )

    rate_limiter.reset(credentials.email)

    session.publish(AuthEvent.SIGNED_IN, user, db)
    db.commit()

    return _token_pair(user)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_session_context),
):
    """Sign out. Tokens are stateless; listeners are told the session ended."""
    session.publish(AuthEvent.SIGNED_OUT, current_user, db)
    db.commit()


@router.post("/refresh", response_model=TokenResponse)
async def refresh(request: RefreshTokenRequest, db: Session = Depends(get_db)):
    """Refresh access token using refresh token"""
    payload = verify_token(request.refresh_token, expected_type="refresh")

    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired refresh token"
        )

    user_id = payload.get("sub")
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload"
        )

    user = db.query(User).filter(User.id == int(user_id)).first()
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )

    return _token_pair(user)


@router.get("/setup", response_model=SetupLinkInfo)
def check_setup_link(
    setup: Optional[str] = Query(None, description="Setup token from the emailed link"),
    email: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """Validate a password setup link before showing the password form"""
    user = validate_setup_token(db, setup, email)
    return SetupLinkInfo(email=user.email, name=user.name or "")


@router.post("/setup", response_model=TokenResponse)
def complete_setup(
    data: PasswordSetupRequest,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_session_context),
):
    """Set the first password through a setup link and sign in"""
    error = check_new_password(data.password, data.confirm_password)
    if error:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)

    user = validate_setup_token(db, data.token, data.email)
    consume_setup_token(db, user, data.password, session=session)
    db.commit()

    return _token_pair(user)
