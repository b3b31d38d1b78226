from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.schemas.account import ProfileOut, ProfileUpdate, PasswordChangeRequest
from app.schemas.subscription import SubscriptionOut
from app.auth.dependencies import get_current_user
from app.auth.security import hash_password, verify_password, check_new_password
from app.auth.session import AuthEvent, SessionContext, get_session_context
from app.services.subscription import evaluate_user

router = APIRouter(prefix="/users/me", tags=["Account"])

PHONE_PREFIX = "+258"


def normalize_phone(phone: str | None) -> str | None:
    """Prefix local numbers with the Mozambican country code, dropping leading zeros."""
    if phone is None:
        return None
    phone = phone.strip()
    if not phone:
        return ""
    if phone.startswith(PHONE_PREFIX):
        return phone
    return f"{PHONE_PREFIX}{phone.lstrip('0')}"


def _profile(user: User) -> ProfileOut:
    return ProfileOut(
        id=user.id,
        name=user.name,
        email=user.email,
        phone=user.phone,
        role=user.role.value,
        subscription=SubscriptionOut.from_state(evaluate_user(user), user),
    )


@router.get("", response_model=ProfileOut)
def get_profile(current_user: User = Depends(get_current_user)):
    """Current account with its subscription state"""
    return _profile(current_user)


@router.patch("", response_model=ProfileOut)
def update_profile(
    data: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if data.email is not None:
        email = data.email.lower()
        if email != current_user.email:
            taken = db.query(User).filter(User.email == email, User.id != current_user.id).first()
            if taken:
                raise HTTPException(status_code=400, detail="Email already registered")
            current_user.email = email
    if data.name is not None:
        current_user.name = data.name.strip()
    if data.phone is not None:
        current_user.phone = normalize_phone(data.phone)

    db.commit()
    db.refresh(current_user)
    return _profile(current_user)


@router.post("/password", status_code=status.HTTP_204_NO_CONTENT)
def change_password(
    data: PasswordChangeRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    session: SessionContext = Depends(get_session_context),
):
    if not data.current_password:
        raise HTTPException(status_code=400, detail="Preencha todos os campos de senha.")
    error = check_new_password(data.new_password, data.confirm_new_password)
    if error:
        raise HTTPException(status_code=400, detail=error)
    if data.current_password == data.new_password:
        raise HTTPException(status_code=400, detail="A nova senha deve ser diferente da senha atual.")
    if not verify_password(data.current_password, current_user.password_hash):
        raise HTTPException(status_code=400, detail="Senha atual incorreta.")

    current_user.password_hash = hash_password(data.new_password)
    session.publish(AuthEvent.PASSWORD_UPDATED, current_user, db)
    db.commit()
